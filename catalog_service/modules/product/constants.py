"""Catalog module constants — field limits and name patterns."""

NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 255

CATEGORY_NAME_PATTERN = r"^[a-zA-Z0-9\s&-]+$"
PRODUCT_NAME_PATTERN = r"^[a-zA-Z0-9\s&\-.,()]+$"

PRICE_PRECISION = 10
PRICE_SCALE = 2

STOCK_MIN = 0
STOCK_MAX = 1_000_000

CATEGORY_ENTITY = "Category"
PRODUCT_ENTITY = "Product"
