"""Abstract interface for catalog storage."""

from abc import ABC, abstractmethod

from stockledger.core.entities.catalog import Branch, Category, Product, ProductType


class ICatalogStore(ABC):
    """Interface for branches, categories, product types and products."""

    # Branches
    @abstractmethod
    async def create_branch(self, branch: Branch) -> Branch:
        """Create a branch."""
        pass

    @abstractmethod
    async def get_branch(self, branch_id: int) -> Branch | None:
        """Get branch by ID."""
        pass

    @abstractmethod
    async def list_branches(self) -> list[Branch]:
        """List all branches ordered by name."""
        pass

    @abstractmethod
    async def update_branch(self, branch: Branch) -> Branch:
        """Update branch name and location."""
        pass

    # Categories and product types
    @abstractmethod
    async def create_category(self, category: Category) -> Category:
        """Create a category."""
        pass

    @abstractmethod
    async def get_category(self, category_id: int) -> Category | None:
        """Get category by ID."""
        pass

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        """List categories ordered by name."""
        pass

    @abstractmethod
    async def create_product_type(self, product_type: ProductType) -> ProductType:
        """Create a product type."""
        pass

    @abstractmethod
    async def get_product_type(self, product_type_id: int) -> ProductType | None:
        """Get product type by ID."""
        pass

    @abstractmethod
    async def list_product_types(self) -> list[ProductType]:
        """List product types ordered by name."""
        pass

    # Products
    @abstractmethod
    async def create_product(self, product: Product) -> Product:
        """Create a product. Raises DuplicateSkuError if the SKU is taken."""
        pass

    @abstractmethod
    async def get_product(self, product_id: int) -> Product | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def get_product_by_sku(self, sku: str) -> Product | None:
        """Get product by SKU."""
        pass

    @abstractmethod
    async def get_product_by_barcode(self, barcode: str) -> Product | None:
        """Get product by barcode."""
        pass

    @abstractmethod
    async def list_products(
        self,
        category_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Product]:
        """List products ordered by name."""
        pass

    @abstractmethod
    async def update_product(self, product: Product) -> Product:
        """Update the descriptive fields of a product."""
        pass
