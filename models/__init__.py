"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
)
from models.product import (
    Category,
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
)
from models.product_import import (
    ProductImportRequest,
    ImportRowError,
    ImportResult,
)

__all__ = [
    # Base
    "BaseSchema",

    # Product
    "Category",
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductListResponse",

    # Import
    "ProductImportRequest",
    "ImportRowError",
    "ImportResult",
]
