"""Field validators for catalog request shapes.

Rules are declared per field in the order their messages are reported.
"""

from __future__ import annotations

from catalog_service.modules.product.constants import (
    CATEGORY_NAME_PATTERN,
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    PRICE_PRECISION,
    PRICE_SCALE,
    PRODUCT_NAME_PATTERN,
    STOCK_MAX,
    STOCK_MIN,
)
from catalog_service.modules.product.schemas import (
    CategoryCreate,
    CategoryUpdate,
    ProductCreate,
    ProductUpdate,
    StockUpdate,
)
from catalog_service.validation import (
    FieldRules,
    RequestValidator,
    ValidationStage,
    at_least,
    at_most,
    greater_than,
    length,
    matches,
    max_length,
    precision,
    required,
)


def _category_name_rules() -> FieldRules:
    return FieldRules(
        field="name",
        attribute="name",
        presence=required("Category name is required."),
        rules=(
            length(
                NAME_MIN_LENGTH,
                NAME_MAX_LENGTH,
                "Category name must be between 1 and 100 characters.",
            ),
            matches(
                CATEGORY_NAME_PATTERN,
                "Category name can only contain letters, numbers, spaces, ampersands, and hyphens.",
            ),
        ),
    )


def _product_rules() -> tuple[FieldRules, ...]:
    return (
        FieldRules(
            field="name",
            attribute="name",
            presence=required("Product name is required."),
            rules=(
                length(
                    NAME_MIN_LENGTH,
                    NAME_MAX_LENGTH,
                    "Product name must be between 1 and 100 characters.",
                ),
                matches(PRODUCT_NAME_PATTERN, "Product name contains invalid characters."),
            ),
        ),
        FieldRules(
            field="description",
            attribute="description",
            rules=(
                max_length(
                    DESCRIPTION_MAX_LENGTH,
                    "Product description cannot exceed 255 characters.",
                ),
            ),
        ),
        FieldRules(
            field="price",
            attribute="price",
            presence=required("Product price is required."),
            rules=(
                at_least(0, "Product price must be greater than or equal to 0."),
                precision(
                    PRICE_PRECISION,
                    PRICE_SCALE,
                    "Product price must not exceed 10 digits with 2 decimal places.",
                ),
            ),
        ),
        FieldRules(
            field="stock",
            attribute="stock",
            presence=required("Product stock is required."),
            rules=(
                at_least(STOCK_MIN, "Product stock must be greater than or equal to 0."),
                at_most(STOCK_MAX, "Product stock cannot exceed 1,000,000 units."),
            ),
        ),
        FieldRules(
            field="categoryId",
            attribute="category_id",
            presence=required("Category ID is required."),
            rules=(greater_than(0, "Category ID must be a positive integer."),),
        ),
    )


create_category_validator = RequestValidator(_category_name_rules())
update_category_validator = RequestValidator(_category_name_rules())
create_product_validator = RequestValidator(*_product_rules())
update_product_validator = RequestValidator(*_product_rules())
update_stock_validator = RequestValidator(
    FieldRules(
        field="newStock",
        attribute="new_stock",
        presence=required("Stock is required."),
        rules=(
            at_least(STOCK_MIN, "Stock must be greater than or equal to 0."),
            at_most(STOCK_MAX, "Stock cannot exceed 1,000,000 units."),
        ),
    )
)


def validate_category_request(request: CategoryCreate | CategoryUpdate) -> dict[str, list[str]]:
    validator = create_category_validator if isinstance(request, CategoryCreate) else update_category_validator
    return validator.validate(request)


def validate_product_request(request: ProductCreate | ProductUpdate) -> dict[str, list[str]]:
    validator = create_product_validator if isinstance(request, ProductCreate) else update_product_validator
    return validator.validate(request)


def validate_stock_request(request: StockUpdate) -> dict[str, list[str]]:
    return update_stock_validator.validate(request)


def build_validation_stage() -> ValidationStage:
    """Map every catalog request shape to its validator. Called once at startup."""
    return ValidationStage(
        {
            CategoryCreate: create_category_validator,
            CategoryUpdate: update_category_validator,
            ProductCreate: create_product_validator,
            ProductUpdate: update_product_validator,
            StockUpdate: update_stock_validator,
        }
    )
