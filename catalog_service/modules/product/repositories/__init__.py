from catalog_service.modules.product.repositories.interfaces import (
    ICategoryRepository,
    IProductRepository,
)
from catalog_service.modules.product.repositories.sqlalchemy_repository import (
    SqlAlchemyCategoryRepository,
    SqlAlchemyProductRepository,
)

__all__ = [
    "ICategoryRepository",
    "IProductRepository",
    "SqlAlchemyCategoryRepository",
    "SqlAlchemyProductRepository",
]
