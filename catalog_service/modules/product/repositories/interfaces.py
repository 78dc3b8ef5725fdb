"""Repository contracts consumed by the catalog services.

Implementations must convert every storage fault into
:class:`~catalog_service.exceptions.DatabaseException` (or
:class:`~catalog_service.exceptions.ConflictException` for a rejected unique
name) so services never see raw storage exceptions.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from decimal import Decimal

from catalog_service.models.category import Category
from catalog_service.models.product import Product


class ICategoryRepository(ABC):
    """Storage contract for categories."""

    @abstractmethod
    async def get_by_id(self, category_id: int) -> Category | None:
        """Return the category or ``None``."""

    @abstractmethod
    async def get_by_name(self, name: str) -> Category | None:
        """Return the category with exactly this name or ``None``."""

    @abstractmethod
    async def get_all(self) -> list[Category]:
        """Return all categories ordered by name."""

    @abstractmethod
    async def add(self, name: str) -> Category:
        """Insert a category and return the stored row."""

    @abstractmethod
    async def update(self, category_id: int, name: str) -> Category | None:
        """Rename a category; ``None`` when no row was affected."""

    @abstractmethod
    async def delete(self, category_id: int) -> bool:
        """Delete a category; ``True`` when a row was removed."""

    @abstractmethod
    async def exists_by_name(self, name: str) -> bool:
        ...

    @abstractmethod
    async def exists_by_id(self, category_id: int) -> bool:
        ...


class IProductRepository(ABC):
    """Storage contract for products."""

    @abstractmethod
    async def get_by_id(self, product_id: uuid.UUID) -> Product | None:
        ...

    @abstractmethod
    async def get_by_name(self, name: str) -> Product | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[Product]:
        """Return all products ordered by name."""

    @abstractmethod
    async def get_by_category_id(self, category_id: int) -> list[Product]:
        """Return the products of one category ordered by name."""

    @abstractmethod
    async def get_by_price_range(self, min_price: Decimal, max_price: Decimal) -> list[Product]:
        """Return products priced within ``[min_price, max_price]`` ordered by price."""

    @abstractmethod
    async def search(self, term: str) -> list[Product]:
        """Case-insensitive substring match against name or description."""

    @abstractmethod
    async def add(
        self,
        *,
        name: str,
        description: str | None,
        price: Decimal,
        stock: int,
        category_id: int,
    ) -> Product:
        ...

    @abstractmethod
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
        """Overwrite the mutable fields.

        The write is conditional on no *other* product holding ``name``;
        ``None`` means no row was affected.
        """

    @abstractmethod
    async def delete(self, product_id: uuid.UUID) -> bool:
        ...

    @abstractmethod
    async def update_stock(self, product_id: uuid.UUID, new_stock: int) -> bool:
        """Overwrite the stock level; ``True`` when a row was affected."""

    @abstractmethod
    async def exists_by_name(self, name: str) -> bool:
        ...

    @abstractmethod
    async def exists_by_id(self, product_id: uuid.UUID) -> bool:
        ...
