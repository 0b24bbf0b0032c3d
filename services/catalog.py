"""
Catalog data-source selection.

The application picks its catalog from settings (remote Supabase table or
the built-in fixture) instead of silently falling back when a call fails.
"""

from typing import Any, Mapping, Optional, Protocol
import structlog

from config.settings import settings
from models.product import Category, ProductResponse
from services.fixture_catalog import FixtureCatalog
from services.product_service import get_product_service

logger = structlog.get_logger(__name__)


class ProductCatalog(Protocol):
    """What the import pipeline and the read routes need from a catalog."""

    def list_products(self) -> list[ProductResponse]:
        ...

    def get_all(
        self,
        page: int = 1,
        page_size: int = 20,
        category: Optional[Category] = None,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None
    ) -> tuple[list[ProductResponse], int]:
        ...

    def get_by_id(self, product_id: str) -> ProductResponse:
        ...

    def create_product(self, record: Mapping[str, Any]) -> ProductResponse:
        ...


_fixture_catalog: Optional[FixtureCatalog] = None

def get_catalog() -> ProductCatalog:
    """
    Get the configured catalog.

    Returns:
        FixtureCatalog when CATALOG_SOURCE=fixture, else the Supabase-backed
        ProductService
    """
    global _fixture_catalog
    if settings.use_fixture_catalog:
        if _fixture_catalog is None:
            logger.info("using_fixture_catalog")
            _fixture_catalog = FixtureCatalog()
        return _fixture_catalog
    return get_product_service()
