"""
Catalog endpoints: categories, product types and products.
"""

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import (
    get_actor,
    get_cat_store,
    get_create_category_use_case,
    get_create_product_type_use_case,
    get_register_product_use_case,
    get_update_product_use_case,
)
from stockledger.application.dto.requests import (
    CreateCategoryRequest,
    RegisterProductRequest,
    UpdateProductRequest,
)
from stockledger.application.dto.responses import (
    CategoryResponse,
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
)
from stockledger.application.use_cases import (
    CreateCategoryUseCase,
    RegisterProductUseCase,
    UpdateProductUseCase,
)
from stockledger.core.entities.actor import Actor
from stockledger.core.exceptions import ProductNotFoundError
from stockledger.infrastructure.storage.sqlite import SQLiteCatalogStore

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


# Categories


@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_category(
    request: CreateCategoryRequest,
    actor: Actor = Depends(get_actor),
    use_case: CreateCategoryUseCase = Depends(get_create_category_use_case),
) -> CategoryResponse:
    category = await use_case.execute(request, actor)
    return use_case.to_response(category)


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(
    actor: Actor = Depends(get_actor),
    store: SQLiteCatalogStore = Depends(get_cat_store),
) -> list[CategoryResponse]:
    return [CategoryResponse.model_validate(c) for c in await store.list_categories()]


# Product types


@router.post(
    "/product-types",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_product_type(
    request: CreateCategoryRequest,
    actor: Actor = Depends(get_actor),
    use_case: CreateCategoryUseCase = Depends(get_create_product_type_use_case),
) -> CategoryResponse:
    product_type = await use_case.execute(request, actor)
    return use_case.to_response(product_type)


@router.get("/product-types", response_model=list[CategoryResponse])
async def list_product_types(
    actor: Actor = Depends(get_actor),
    store: SQLiteCatalogStore = Depends(get_cat_store),
) -> list[CategoryResponse]:
    return [CategoryResponse.model_validate(t) for t in await store.list_product_types()]


# Products


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def register_product(
    request: RegisterProductRequest,
    actor: Actor = Depends(get_actor),
    use_case: RegisterProductUseCase = Depends(get_register_product_use_case),
) -> ProductResponse:
    """Register a product; the SKU is generated."""
    product = await use_case.execute(request, actor)
    return use_case.to_response(product)


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    category_id: int | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    actor: Actor = Depends(get_actor),
    store: SQLiteCatalogStore = Depends(get_cat_store),
) -> ProductListResponse:
    """List products with optional category filter."""
    products = await store.list_products(
        category_id=category_id, limit=limit + 1, offset=offset
    )
    has_more = len(products) > limit
    products = products[:limit]
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        total=len(products),
        limit=limit,
        offset=offset,
        has_more=has_more,
    )


@router.get(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: int,
    actor: Actor = Depends(get_actor),
    store: SQLiteCatalogStore = Depends(get_cat_store),
) -> ProductResponse:
    product = await store.get_product(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return ProductResponse.model_validate(product)


@router.patch(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_product(
    product_id: int,
    request: UpdateProductRequest,
    actor: Actor = Depends(get_actor),
    use_case: UpdateProductUseCase = Depends(get_update_product_use_case),
) -> ProductResponse:
    """Edit name, barcode, unit or description."""
    product = await use_case.execute(product_id, request, actor)
    return use_case.to_response(product)
