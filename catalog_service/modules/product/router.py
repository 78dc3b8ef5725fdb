"""Catalog API router — categories and products."""

from __future__ import annotations

import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request, Response

from catalog_service.modules.product.category_service import CategoryService
from catalog_service.modules.product.dependencies import get_category_service, get_product_service
from catalog_service.modules.product.schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    StockUpdate,
)
from catalog_service.modules.product.service import ProductService
from catalog_service.schemas.responses import ErrorResponse, ValidationErrorResponse
from catalog_service.validation import validated_body

_ERROR_RESPONSES = {
    400: {"model": ValidationErrorResponse},
    500: {"model": ErrorResponse},
}
_NOT_FOUND = {404: {"model": ErrorResponse}}
_CONFLICT = {409: {"model": ErrorResponse}}


# ====================================================================
# Category Router
# ====================================================================

category_router = APIRouter(prefix="/categories", tags=["categories"], responses=_ERROR_RESPONSES)


@category_router.post("", response_model=CategoryResponse, status_code=201, responses=_CONFLICT)
async def create_category(
    request: Request,
    response: Response,
    data: CategoryCreate = Depends(validated_body(CategoryCreate)),
    svc: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    category = await svc.create_category(data.name)
    response.headers["Location"] = str(request.url_for("get_category", category_id=str(category.id)))
    return category


@category_router.get("", response_model=list[CategoryResponse])
async def list_categories(
    svc: CategoryService = Depends(get_category_service),
) -> list[CategoryResponse]:
    return await svc.list_categories()


@category_router.get("/{category_id}", response_model=CategoryResponse, responses=_NOT_FOUND)
async def get_category(
    category_id: int,
    svc: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    return await svc.get_category(category_id)


@category_router.put(
    "/{category_id}", response_model=CategoryResponse, responses={**_NOT_FOUND, **_CONFLICT},
)
async def update_category(
    category_id: int,
    data: CategoryUpdate = Depends(validated_body(CategoryUpdate)),
    svc: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    return await svc.update_category(category_id, data.name)


@category_router.delete("/{category_id}", status_code=204, responses={404: {}})
async def delete_category(
    category_id: int,
    svc: CategoryService = Depends(get_category_service),
) -> Response:
    deleted = await svc.delete_category(category_id)
    return Response(status_code=204 if deleted else 404)


# ====================================================================
# Product Router
# ====================================================================

product_router = APIRouter(prefix="/products", tags=["products"], responses=_ERROR_RESPONSES)


@product_router.post(
    "", response_model=ProductResponse, status_code=201, responses={**_NOT_FOUND, **_CONFLICT},
)
async def create_product(
    request: Request,
    response: Response,
    data: ProductCreate = Depends(validated_body(ProductCreate)),
    svc: ProductService = Depends(get_product_service),
) -> ProductResponse:
    product = await svc.create_product(data)
    response.headers["Location"] = str(request.url_for("get_product", product_id=str(product.id)))
    return product


@product_router.get("", response_model=list[ProductResponse])
async def list_products(
    svc: ProductService = Depends(get_product_service),
) -> list[ProductResponse]:
    return await svc.list_products()


# Static product routes BEFORE /{product_id} to avoid shadowing
@product_router.get("/category/{category_id}", response_model=list[ProductResponse])
async def list_products_by_category(
    category_id: int,
    svc: ProductService = Depends(get_product_service),
) -> list[ProductResponse]:
    return await svc.list_products_by_category(category_id)


@product_router.get("/price-range", response_model=list[ProductResponse])
async def list_products_by_price_range(
    min_price: Decimal = Query(..., alias="minPrice"),
    max_price: Decimal = Query(..., alias="maxPrice"),
    svc: ProductService = Depends(get_product_service),
) -> list[ProductResponse]:
    return await svc.list_products_by_price_range(min_price, max_price)


@product_router.get("/search", response_model=list[ProductResponse])
async def search_products(
    search_term: str = Query(..., alias="searchTerm"),
    svc: ProductService = Depends(get_product_service),
) -> list[ProductResponse]:
    return await svc.search_products(search_term)


# Parameterized product routes
@product_router.get("/{product_id}", response_model=ProductResponse, responses=_NOT_FOUND)
async def get_product(
    product_id: uuid.UUID,
    svc: ProductService = Depends(get_product_service),
) -> ProductResponse:
    return await svc.get_product(product_id)


@product_router.put(
    "/{product_id}", response_model=ProductResponse, responses={**_NOT_FOUND, **_CONFLICT},
)
async def update_product(
    product_id: uuid.UUID,
    data: ProductUpdate = Depends(validated_body(ProductUpdate)),
    svc: ProductService = Depends(get_product_service),
) -> ProductResponse:
    return await svc.update_product(product_id, data)


@product_router.delete("/{product_id}", status_code=204, responses={404: {}})
async def delete_product(
    product_id: uuid.UUID,
    svc: ProductService = Depends(get_product_service),
) -> Response:
    deleted = await svc.delete_product(product_id)
    return Response(status_code=204 if deleted else 404)


@product_router.patch("/{product_id}/stock", status_code=204, responses={404: {}})
async def update_product_stock(
    product_id: uuid.UUID,
    data: StockUpdate = Depends(validated_body(StockUpdate)),
    svc: ProductService = Depends(get_product_service),
) -> Response:
    updated = await svc.update_stock(product_id, data.new_stock)
    return Response(status_code=204 if updated else 404)
