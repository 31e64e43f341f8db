"""Branch, category and product type administration."""

from stockledger.application.dto.requests import (
    CreateBranchRequest,
    CreateCategoryRequest,
    UpdateBranchRequest,
)
from stockledger.application.dto.responses import BranchResponse, CategoryResponse
from stockledger.application.use_cases.register_product import CatalogUseCase
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.catalog import Branch, Category, ProductType
from stockledger.core.exceptions import BranchNotFoundError, ValidationError
from stockledger.core.services.access import Permission, authorize


class CreateBranchUseCase(CatalogUseCase):
    async def execute(
        self,
        request: CreateBranchRequest,
        actor: Actor | None = None,
    ) -> Branch:
        if actor is not None:
            authorize(actor, Permission.MANAGE_CATALOG)
        store = await self._get_catalog_store()
        return await store.create_branch(
            Branch(name=request.name.strip(), location=request.location)
        )

    def to_response(self, branch: Branch) -> BranchResponse:
        return BranchResponse.model_validate(branch)


class UpdateBranchUseCase(CatalogUseCase):
    async def execute(
        self,
        branch_id: int,
        request: UpdateBranchRequest,
        actor: Actor | None = None,
    ) -> Branch:
        if actor is not None:
            authorize(actor, Permission.MANAGE_CATALOG)
        store = await self._get_catalog_store()
        branch = await store.get_branch(branch_id)
        if branch is None:
            raise BranchNotFoundError(branch_id)

        changes = request.model_dump(exclude_unset=True)
        if "name" in changes:
            if not changes["name"] or not changes["name"].strip():
                raise ValidationError("name", "branch name cannot be empty")
            branch.name = changes["name"].strip()
        if changes.get("location") is not None:
            branch.location = changes["location"]

        return await store.update_branch(branch)

    def to_response(self, branch: Branch) -> BranchResponse:
        return BranchResponse.model_validate(branch)


class CreateCategoryUseCase(CatalogUseCase):
    """Create a category, or a product type when ``product_type`` is set."""

    def __init__(self, catalog_store=None, product_type: bool = False):
        super().__init__(catalog_store)
        self._product_type = product_type

    async def execute(
        self,
        request: CreateCategoryRequest,
        actor: Actor | None = None,
    ) -> Category | ProductType:
        if actor is not None:
            authorize(actor, Permission.MANAGE_CATALOG)
        store = await self._get_catalog_store()
        name = request.name.strip()
        if not name:
            raise ValidationError("name", "name cannot be empty")
        if self._product_type:
            return await store.create_product_type(
                ProductType(name=name, description=request.description)
            )
        return await store.create_category(Category(name=name, description=request.description))

    def to_response(self, category: Category | ProductType) -> CategoryResponse:
        return CategoryResponse.model_validate(category)
