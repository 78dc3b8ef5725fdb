"""Product service — CRUD with category checks, name uniqueness and stock updates."""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal

from catalog_service.exceptions import BadRequestException, ConflictException, NotFoundException
from catalog_service.models.product import Product
from catalog_service.modules.product.constants import CATEGORY_ENTITY, PRODUCT_ENTITY
from catalog_service.modules.product.repositories.interfaces import (
    ICategoryRepository,
    IProductRepository,
)
from catalog_service.modules.product.schemas import ProductCreate, ProductResponse, ProductUpdate

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(self, products: IProductRepository, categories: ICategoryRepository) -> None:
        self._products = products
        self._categories = categories

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_product(self, data: ProductCreate) -> ProductResponse:
        if not await self._categories.exists_by_id(data.category_id):
            logger.warning("Product creation attempt with non-existent category: %s", data.category_id)
            raise NotFoundException.for_entity(CATEGORY_ENTITY, data.category_id)

        if await self._products.exists_by_name(data.name):
            logger.warning("Product creation attempt with existing name: %s", data.name)
            raise ConflictException.for_entity(PRODUCT_ENTITY, data.name)

        product = await self._products.add(
            name=data.name,
            description=data.description,
            price=data.price,
            stock=data.stock,
            category_id=data.category_id,
        )
        logger.info("Product %s created", product.id)
        return await self._with_category_name(product)

    async def update_product(self, product_id: uuid.UUID, data: ProductUpdate) -> ProductResponse:
        """Overwrite every mutable field of a product.

        Checks run in order: product exists, target category exists, no other
        product holds the new name. The write itself only applies while the
        name is still free, so a rename that loses a race is a conflict.
        """
        if await self._products.get_by_id(product_id) is None:
            logger.warning("Product update attempt for non-existent product: %s", product_id)
            raise NotFoundException.for_entity(PRODUCT_ENTITY, product_id)

        if not await self._categories.exists_by_id(data.category_id):
            logger.warning("Product update attempt with non-existent category: %s", data.category_id)
            raise NotFoundException.for_entity(CATEGORY_ENTITY, data.category_id)

        holder = await self._products.get_by_name(data.name)
        if holder is not None and holder.id != product_id:
            logger.warning("Product update attempt with conflicting name: %s", data.name)
            raise ConflictException.for_entity(PRODUCT_ENTITY, data.name)

        updated = await self._products.update(
            product_id,
            name=data.name,
            description=data.description,
            price=data.price,
            stock=data.stock,
            category_id=data.category_id,
        )
        if updated is None:
            if not await self._products.exists_by_id(product_id):
                raise NotFoundException.for_entity(PRODUCT_ENTITY, product_id)
            logger.warning("Product %s rename lost to a concurrent write: %s", product_id, data.name)
            raise ConflictException.for_entity(PRODUCT_ENTITY, data.name)

        logger.info("Product %s updated", product_id)
        return await self._with_category_name(updated)

    async def delete_product(self, product_id: uuid.UUID) -> bool:
        if not await self._products.exists_by_id(product_id):
            logger.warning("Product deletion attempt for non-existent product: %s", product_id)
            return False

        deleted = await self._products.delete(product_id)
        if deleted:
            logger.info("Product %s deleted", product_id)
        return deleted

    async def update_stock(self, product_id: uuid.UUID, new_stock: int) -> bool:
        if not await self._products.exists_by_id(product_id):
            logger.warning("Product stock update attempt for non-existent product: %s", product_id)
            return False

        updated = await self._products.update_stock(product_id, new_stock)
        if updated:
            logger.info("Product %s stock set to %d", product_id, new_stock)
        return updated

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_product(self, product_id: uuid.UUID) -> ProductResponse | None:
        product = await self._products.get_by_id(product_id)
        return await self._with_category_name(product) if product is not None else None

    async def find_product_by_name(self, name: str) -> ProductResponse | None:
        product = await self._products.get_by_name(name)
        return await self._with_category_name(product) if product is not None else None

    async def get_product(self, product_id: uuid.UUID) -> ProductResponse:
        product = await self.find_product(product_id)
        if product is None:
            raise NotFoundException.for_entity(PRODUCT_ENTITY, product_id)
        return product

    async def get_product_by_name(self, name: str) -> ProductResponse:
        product = await self.find_product_by_name(name)
        if product is None:
            raise NotFoundException.for_entity(PRODUCT_ENTITY, name)
        return product

    async def list_products(self) -> list[ProductResponse]:
        return await self._with_category_names(await self._products.get_all())

    async def list_products_by_category(self, category_id: int) -> list[ProductResponse]:
        return await self._with_category_names(await self._products.get_by_category_id(category_id))

    async def list_products_by_price_range(
        self, min_price: Decimal, max_price: Decimal
    ) -> list[ProductResponse]:
        if min_price < 0 or max_price < 0 or min_price > max_price:
            raise BadRequestException("Invalid price range parameters.")
        products = await self._products.get_by_price_range(min_price, max_price)
        return await self._with_category_names(products)

    async def search_products(self, term: str) -> list[ProductResponse]:
        if not term or not term.strip():
            raise BadRequestException("Search term cannot be empty.")
        return await self._with_category_names(await self._products.search(term))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _with_category_name(self, product: Product) -> ProductResponse:
        # The category may have been deleted since the product was written.
        category = await self._categories.get_by_id(product.category_id)
        response = ProductResponse.model_validate(product)
        response.category_name = category.name if category is not None else None
        return response

    async def _with_category_names(self, products: list[Product]) -> list[ProductResponse]:
        return [await self._with_category_name(p) for p in products]
