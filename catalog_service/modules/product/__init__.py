"""Catalog module — categories, products, their validators and repositories."""

from catalog_service.modules.product.category_service import CategoryService
from catalog_service.modules.product.service import ProductService

__all__ = [
    "CategoryService",
    "ProductService",
]
