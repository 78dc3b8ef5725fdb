"""Tests for the SQLAlchemy repositories — storage fault translation and row results."""

from __future__ import annotations

import uuid
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from catalog_service.database.guard import storage_guard
from catalog_service.exceptions import ConflictException, DatabaseException
from catalog_service.models.category import Category
from catalog_service.models.product import Product
from catalog_service.modules.product.repositories.sqlalchemy_repository import (
    SqlAlchemyCategoryRepository,
    SqlAlchemyProductRepository,
    _like_pattern,
)


def _mock_scalar_one_or_none(value):
    """Create a mock result whose .scalar_one_or_none() returns value."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _mock_scalars_all(values):
    """Create a mock result whose .scalars().all() returns values."""
    result = MagicMock()
    scalars = MagicMock()
    scalars.all.return_value = values
    result.scalars.return_value = scalars
    return result


def _mock_rowcount(count: int):
    result = MagicMock()
    result.rowcount = count
    return result


def _integrity_error() -> IntegrityError:
    return IntegrityError("INSERT ...", {}, Exception("duplicate key value violates unique constraint"))


class TestStorageGuard:
    def test_integrity_error_with_entity_becomes_conflict(self) -> None:
        with pytest.raises(ConflictException) as exc_info:
            with storage_guard("add category", entity_name="Category", key="Tools"):
                raise _integrity_error()

        assert exc_info.value.details == {"entityName": "Category", "key": "Tools"}
        assert isinstance(exc_info.value.__cause__, IntegrityError)

    def test_integrity_error_without_entity_becomes_database_error(self) -> None:
        with pytest.raises(DatabaseException):
            with storage_guard("delete category"):
                raise _integrity_error()

    def test_operational_error_becomes_database_error(self) -> None:
        with pytest.raises(DatabaseException) as exc_info:
            with storage_guard("list products"):
                raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        assert exc_info.value.message == "Database operation 'list products' failed."
        assert exc_info.value.details == {"operation": "list products"}

    def test_timeout_becomes_database_error(self) -> None:
        with pytest.raises(DatabaseException) as exc_info:
            with storage_guard("get product by id"):
                raise TimeoutError()

        assert isinstance(exc_info.value.__cause__, TimeoutError)

    def test_other_errors_pass_through(self) -> None:
        with pytest.raises(KeyError):
            with storage_guard("get product by id"):
                raise KeyError("id")


class TestLikePattern:
    def test_wildcards_are_escaped(self) -> None:
        assert _like_pattern("50%_off\\") == "%50\\%\\_off\\\\%"

    def test_plain_term(self) -> None:
        assert _like_pattern("hammer") == "%hammer%"


class TestCategoryRepository:
    @pytest.mark.asyncio
    async def test_get_by_name(self) -> None:
        db = AsyncMock()
        category = Category(id=1, name="Tools")
        db.execute.return_value = _mock_scalar_one_or_none(category)

        result = await SqlAlchemyCategoryRepository(db).get_by_name("Tools")

        assert result is category

    @pytest.mark.asyncio
    async def test_add_flushes_and_refreshes(self) -> None:
        db = AsyncMock()
        db.add = MagicMock()

        result = await SqlAlchemyCategoryRepository(db).add("Tools")

        assert result.name == "Tools"
        db.add.assert_called_once_with(result)
        db.flush.assert_awaited_once()
        db.refresh.assert_awaited_once_with(result)

    @pytest.mark.asyncio
    async def test_add_duplicate_raises_conflict(self) -> None:
        db = AsyncMock()
        db.add = MagicMock()
        db.flush.side_effect = _integrity_error()

        with pytest.raises(ConflictException) as exc_info:
            await SqlAlchemyCategoryRepository(db).add("Tools")

        assert exc_info.value.details["key"] == "Tools"

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _mock_scalar_one_or_none(None)

        result = await SqlAlchemyCategoryRepository(db).update(5, "Tools")

        assert result is None
        db.refresh.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_reports_affected_rows(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _mock_rowcount(0)
        assert await SqlAlchemyCategoryRepository(db).delete(5) is False

        db.execute.return_value = _mock_rowcount(1)
        assert await SqlAlchemyCategoryRepository(db).delete(5) is True

    @pytest.mark.asyncio
    async def test_exists_by_id(self) -> None:
        db = AsyncMock()
        result = MagicMock()
        result.scalar.return_value = True
        db.execute.return_value = result

        assert await SqlAlchemyCategoryRepository(db).exists_by_id(1) is True

    @pytest.mark.asyncio
    async def test_storage_fault_raises_database_exception(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = OperationalError("SELECT", {}, Exception("gone"))

        with pytest.raises(DatabaseException):
            await SqlAlchemyCategoryRepository(db).get_all()


class TestProductRepository:
    @pytest.mark.asyncio
    async def test_get_all(self) -> None:
        db = AsyncMock()
        rows = [Product(name="Hammer", price=Decimal("12.50"), stock=1, category_id=1)]
        db.execute.return_value = _mock_scalars_all(rows)

        assert await SqlAlchemyProductRepository(db).get_all() == rows

    @pytest.mark.asyncio
    async def test_update_conflict_returns_none(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _mock_scalar_one_or_none(None)

        result = await SqlAlchemyProductRepository(db).update(
            uuid.uuid4(),
            name="Hammer",
            description=None,
            price=Decimal("1.00"),
            stock=1,
            category_id=1,
        )

        assert result is None

    @pytest.mark.asyncio
    async def test_update_returns_refreshed_row(self) -> None:
        db = AsyncMock()
        product = Product(id=uuid.uuid4(), name="Hammer", price=Decimal("1.00"), stock=1, category_id=1)
        db.execute.return_value = _mock_scalar_one_or_none(product)

        result = await SqlAlchemyProductRepository(db).update(
            product.id,
            name="Hammer",
            description=None,
            price=Decimal("1.00"),
            stock=1,
            category_id=1,
        )

        assert result is product
        db.refresh.assert_awaited_once_with(product)

    @pytest.mark.asyncio
    async def test_update_unique_violation_raises_conflict(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = _integrity_error()

        with pytest.raises(ConflictException) as exc_info:
            await SqlAlchemyProductRepository(db).update(
                uuid.uuid4(),
                name="Hammer",
                description=None,
                price=Decimal("1.00"),
                stock=1,
                category_id=1,
            )

        assert exc_info.value.details == {"entityName": "Product", "key": "Hammer"}

    @pytest.mark.asyncio
    async def test_update_stock(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _mock_rowcount(1)

        assert await SqlAlchemyProductRepository(db).update_stock(uuid.uuid4(), 3) is True
