"""Pytest fixtures for catalog HTTP tests."""

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from catalog_service.app import create_app
from catalog_service.modules.product.dependencies import (
    get_category_repository,
    get_product_repository,
)
from catalog_service.modules.product.tests.fakes import (
    InMemoryCategoryRepository,
    InMemoryProductRepository,
)


@pytest.fixture
def categories() -> InMemoryCategoryRepository:
    return InMemoryCategoryRepository()


@pytest.fixture
def products() -> InMemoryProductRepository:
    return InMemoryProductRepository()


@pytest.fixture
def app(
    categories: InMemoryCategoryRepository,
    products: InMemoryProductRepository,
) -> Iterator[FastAPI]:
    """A fresh application whose repositories are in-memory fakes."""
    application = create_app()
    application.dependency_overrides[get_category_repository] = lambda: categories
    application.dependency_overrides[get_product_repository] = lambda: products
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
