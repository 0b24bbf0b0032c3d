"""
Business logic services.

Each service handles one domain area.
"""

from services.product_service import ProductService, get_product_service
from services.fixture_catalog import FixtureCatalog
from services.catalog import ProductCatalog, get_catalog
from services.product_validator import ValidationResult, validate_product_data
from services.duplicate_detector import check_for_duplicates
from services.refresh_events import (
    ProductRefreshEvent,
    ProductRefreshEvents,
    get_refresh_events,
)
from services.import_service import ProductImportService, get_import_service

__all__ = [
    "ProductService",
    "get_product_service",
    "FixtureCatalog",
    "ProductCatalog",
    "get_catalog",
    "ValidationResult",
    "validate_product_data",
    "check_for_duplicates",
    "ProductRefreshEvent",
    "ProductRefreshEvents",
    "get_refresh_events",
    "ProductImportService",
    "get_import_service",
]
