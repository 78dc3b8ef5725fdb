"""FastAPI dependency functions wiring repositories and services per request."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.database.session import get_db
from catalog_service.modules.product.category_service import CategoryService
from catalog_service.modules.product.repositories import (
    ICategoryRepository,
    IProductRepository,
    SqlAlchemyCategoryRepository,
    SqlAlchemyProductRepository,
)
from catalog_service.modules.product.service import ProductService


def get_category_repository(
    db: AsyncSession = Depends(get_db, scope="function"),
) -> ICategoryRepository:
    return SqlAlchemyCategoryRepository(db)


def get_product_repository(
    db: AsyncSession = Depends(get_db, scope="function"),
) -> IProductRepository:
    return SqlAlchemyProductRepository(db)


def get_category_service(
    categories: ICategoryRepository = Depends(get_category_repository),
) -> CategoryService:
    return CategoryService(categories)


def get_product_service(
    products: IProductRepository = Depends(get_product_repository),
    categories: ICategoryRepository = Depends(get_category_repository),
) -> ProductService:
    return ProductService(products, categories)
