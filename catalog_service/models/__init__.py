# Import all models so SQLAlchemy metadata is populated for create_all
from catalog_service.models.category import Category
from catalog_service.models.product import Product

__all__ = [
    "Category",
    "Product",
]
