"""SQLAlchemy async repositories for categories and products."""

from __future__ import annotations

import re
import uuid
from decimal import Decimal

from sqlalchemy import delete, exists, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from catalog_service.database.guard import storage_guard
from catalog_service.models.category import Category
from catalog_service.models.product import Product
from catalog_service.modules.product.constants import CATEGORY_ENTITY, PRODUCT_ENTITY
from catalog_service.modules.product.repositories.interfaces import (
    ICategoryRepository,
    IProductRepository,
)


def _like_pattern(term: str) -> str:
    escaped = re.sub(r"([%_\\])", r"\\\1", term)
    return f"%{escaped}%"


class SqlAlchemyCategoryRepository(ICategoryRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, category_id: int) -> Category | None:
        with storage_guard("get category by id"):
            return await self._session.get(Category, category_id)

    async def get_by_name(self, name: str) -> Category | None:
        with storage_guard("get category by name"):
            result = await self._session.execute(select(Category).where(Category.name == name))
            return result.scalar_one_or_none()

    async def get_all(self) -> list[Category]:
        with storage_guard("list categories"):
            result = await self._session.execute(select(Category).order_by(Category.name))
            return list(result.scalars().all())

    async def add(self, name: str) -> Category:
        category = Category(name=name)
        with storage_guard("add category", entity_name=CATEGORY_ENTITY, key=name):
            self._session.add(category)
            await self._session.flush()
            await self._session.refresh(category)
        return category

    async def update(self, category_id: int, name: str) -> Category | None:
        stmt = (
            update(Category)
            .where(Category.id == category_id)
            .values(name=name, updated_at=func.now())
            .returning(Category)
            .execution_options(synchronize_session=False)
        )
        with storage_guard("update category", entity_name=CATEGORY_ENTITY, key=name):
            result = await self._session.execute(stmt)
            category = result.scalar_one_or_none()
            if category is not None:
                await self._session.refresh(category)
        return category

    async def delete(self, category_id: int) -> bool:
        stmt = (
            delete(Category)
            .where(Category.id == category_id)
            .execution_options(synchronize_session=False)
        )
        with storage_guard("delete category"):
            result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def exists_by_name(self, name: str) -> bool:
        with storage_guard("check category name"):
            result = await self._session.execute(select(exists().where(Category.name == name)))
            return bool(result.scalar())

    async def exists_by_id(self, category_id: int) -> bool:
        with storage_guard("check category id"):
            result = await self._session.execute(select(exists().where(Category.id == category_id)))
            return bool(result.scalar())


class SqlAlchemyProductRepository(IProductRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, product_id: uuid.UUID) -> Product | None:
        with storage_guard("get product by id"):
            return await self._session.get(Product, product_id)

    async def get_by_name(self, name: str) -> Product | None:
        with storage_guard("get product by name"):
            result = await self._session.execute(select(Product).where(Product.name == name))
            return result.scalar_one_or_none()

    async def get_all(self) -> list[Product]:
        with storage_guard("list products"):
            result = await self._session.execute(select(Product).order_by(Product.name))
            return list(result.scalars().all())

    async def get_by_category_id(self, category_id: int) -> list[Product]:
        stmt = select(Product).where(Product.category_id == category_id).order_by(Product.name)
        with storage_guard("list products by category"):
            result = await self._session.execute(stmt)
            return list(result.scalars().all())

    async def get_by_price_range(self, min_price: Decimal, max_price: Decimal) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.price.between(min_price, max_price))
            .order_by(Product.price)
        )
        with storage_guard("list products by price range"):
            result = await self._session.execute(stmt)
            return list(result.scalars().all())

    async def search(self, term: str) -> list[Product]:
        like_pattern = _like_pattern(term)
        stmt = (
            select(Product)
            .where(
                or_(
                    Product.name.ilike(like_pattern, escape="\\"),
                    Product.description.ilike(like_pattern, escape="\\"),
                )
            )
            .order_by(Product.name)
        )
        with storage_guard("search products"):
            result = await self._session.execute(stmt)
            return list(result.scalars().all())

    async def add(
        self,
        *,
        name: str,
        description: str | None,
        price: Decimal,
        stock: int,
        category_id: int,
    ) -> Product:
        product = Product(
            name=name,
            description=description,
            price=price,
            stock=stock,
            category_id=category_id,
        )
        with storage_guard("add product", entity_name=PRODUCT_ENTITY, key=name):
            self._session.add(product)
            await self._session.flush()
            await self._session.refresh(product)
        return product

    async def update(
        self,
        product_id: uuid.UUID,
        *,
        name: str,
        description: str | None,
        price: Decimal,
        stock: int,
        category_id: int,
    ) -> Product | None:
        other = aliased(Product)
        name_taken = exists().where(other.name == name, other.id != product_id)
        stmt = (
            update(Product)
            .where(Product.id == product_id, ~name_taken)
            .values(
                name=name,
                description=description,
                price=price,
                stock=stock,
                category_id=category_id,
                updated_at=func.now(),
            )
            .returning(Product)
            .execution_options(synchronize_session=False)
        )
        with storage_guard("update product", entity_name=PRODUCT_ENTITY, key=name):
            result = await self._session.execute(stmt)
            product = result.scalar_one_or_none()
            if product is not None:
                await self._session.refresh(product)
        return product

    async def delete(self, product_id: uuid.UUID) -> bool:
        stmt = (
            delete(Product)
            .where(Product.id == product_id)
            .execution_options(synchronize_session=False)
        )
        with storage_guard("delete product"):
            result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def update_stock(self, product_id: uuid.UUID, new_stock: int) -> bool:
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(stock=new_stock, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        with storage_guard("update product stock"):
            result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def exists_by_name(self, name: str) -> bool:
        with storage_guard("check product name"):
            result = await self._session.execute(select(exists().where(Product.name == name)))
            return bool(result.scalar())

    async def exists_by_id(self, product_id: uuid.UUID) -> bool:
        with storage_guard("check product id"):
            result = await self._session.execute(select(exists().where(Product.id == product_id)))
            return bool(result.scalar())
