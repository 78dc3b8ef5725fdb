"""Centralized v1 API router — all module routers are included here."""

from fastapi import APIRouter

from catalog_service.modules.product.router import category_router, product_router

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(category_router)
v1_router.include_router(product_router)
