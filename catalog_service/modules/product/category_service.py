"""Category service — uniqueness-checked CRUD over the category repository."""

from __future__ import annotations

import logging

from catalog_service.exceptions import (
    ConflictException,
    NotFoundException,
    ServiceUnavailableException,
)
from catalog_service.modules.product.constants import CATEGORY_ENTITY
from catalog_service.modules.product.repositories.interfaces import ICategoryRepository
from catalog_service.modules.product.schemas import CategoryResponse

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, categories: ICategoryRepository) -> None:
        self._categories = categories

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_category(self, name: str) -> CategoryResponse:
        if await self._categories.exists_by_name(name):
            logger.warning("Category creation attempt with existing name: %s", name)
            raise ConflictException.for_entity(CATEGORY_ENTITY, name)

        category = await self._categories.add(name)
        logger.info("Category %s created", category.id)
        return CategoryResponse.model_validate(category)

    async def update_category(self, category_id: int, name: str) -> CategoryResponse:
        """Rename a category.

        Checks run in order: the category must exist, then no *other*
        category may hold ``name``.
        """
        existing = await self._categories.get_by_id(category_id)
        if existing is None:
            logger.warning("Category update attempt for non-existent category: %s", category_id)
            raise NotFoundException.for_entity(CATEGORY_ENTITY, category_id)

        holder = await self._categories.get_by_name(name)
        if holder is not None and holder.id != category_id:
            logger.warning("Category update attempt with conflicting name: %s", name)
            raise ConflictException.for_entity(CATEGORY_ENTITY, name)

        updated = await self._categories.update(category_id, name)
        if updated is None:
            raise ServiceUnavailableException(
                f"Unexpectedly failed updating Category with id '{category_id}'"
            )

        logger.info("Category %s renamed", category_id)
        return CategoryResponse.model_validate(updated)

    async def delete_category(self, category_id: int) -> bool:
        """Delete a category. Returns ``False`` when it does not exist.

        Products referencing the category are left untouched.
        """
        if not await self._categories.exists_by_id(category_id):
            logger.warning("Category deletion attempt for non-existent category: %s", category_id)
            return False

        deleted = await self._categories.delete(category_id)
        if deleted:
            logger.info("Category %s deleted", category_id)
        return deleted

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_category(self, category_id: int) -> CategoryResponse | None:
        category = await self._categories.get_by_id(category_id)
        return CategoryResponse.model_validate(category) if category is not None else None

    async def find_category_by_name(self, name: str) -> CategoryResponse | None:
        category = await self._categories.get_by_name(name)
        return CategoryResponse.model_validate(category) if category is not None else None

    async def get_category(self, category_id: int) -> CategoryResponse:
        category = await self.find_category(category_id)
        if category is None:
            raise NotFoundException.for_entity(CATEGORY_ENTITY, category_id)
        return category

    async def get_category_by_name(self, name: str) -> CategoryResponse:
        category = await self.find_category_by_name(name)
        if category is None:
            raise NotFoundException.for_entity(CATEGORY_ENTITY, name)
        return category

    async def list_categories(self) -> list[CategoryResponse]:
        categories = await self._categories.get_all()
        return [CategoryResponse.model_validate(c) for c in categories]
