"""
In-memory catalog seeded with built-in sample products.

Selected with CATALOG_SOURCE=fixture for local development and demos.
It is never swapped in automatically when Supabase is unreachable.
"""

from itertools import count
from typing import Any, Iterable, Mapping, Optional
import structlog

from models.product import Category, ProductResponse
from exceptions import ProductNotFoundError
from services.product_service import record_to_row

logger = structlog.get_logger(__name__)


SAMPLE_PRODUCTS: list[dict] = [
    {
        "id": "sample-1",
        "name": "Samsung Galaxy S23 AMOLED Display",
        "model": "Galaxy S23",
        "category": "AMOLED",
        "color": "Black",
        "description": "Original replacement AMOLED display for Samsung Galaxy S23.",
        "price": 199.99,
        "image": "/placeholder.svg?height=400&width=400",
        "part_number": "SM-S911B-AMOLED-BLK",
    },
    {
        "id": "sample-2",
        "name": "Samsung Galaxy S22 LCD Screen",
        "model": "Galaxy S22",
        "category": "LCD",
        "color": "White",
        "description": "Replacement LCD screen for Samsung Galaxy S22.",
        "price": 149.99,
        "image": None,
        "part_number": "SM-S901B-LCD-WHT",
    },
    {
        "id": "sample-3",
        "name": "Samsung Galaxy S21 OLED Panel",
        "model": "Galaxy S21",
        "category": "OLED",
        "color": "Phantom Gray",
        "description": "OLED panel with frame for Samsung Galaxy S21.",
        "price": 169.5,
        "image": None,
        "part_number": "SM-G991B-OLED-GRY",
    },
    {
        "id": "sample-4",
        "name": "Samsung Galaxy A54 TFT Display",
        "model": "Galaxy A54",
        "category": "TFT",
        "color": "Black",
        "description": "Budget TFT replacement display for Samsung Galaxy A54.",
        "price": 59.0,
        "image": None,
        "part_number": "SM-A546B-TFT-BLK",
    },
    {
        "id": "sample-5",
        "name": "E-Reader 6in E-Paper Panel",
        "model": "ED060XH2",
        "category": "E-Paper",
        "color": "White",
        "description": "6-inch E-Ink Carta panel for e-readers.",
        "price": 42.75,
        "image": None,
        "part_number": "ED060XH2-EPD-WHT",
    },
]


class FixtureCatalog:
    """
    Catalog kept in process memory.

    Created products get ids of the form ``fixture-<n>`` and are visible to
    later reads on the same instance.
    """

    def __init__(self, products: Optional[Iterable[Mapping[str, Any]]] = None):
        seed = SAMPLE_PRODUCTS if products is None else products
        self._products: list[ProductResponse] = [ProductResponse(**p) for p in seed]
        self._ids = count(1)

    def list_products(self) -> list[ProductResponse]:
        return list(self._products)

    def get_all(
        self,
        page: int = 1,
        page_size: int = 20,
        category: Optional[Category] = None,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None
    ) -> tuple[list[ProductResponse], int]:
        """Same filters and paging as ProductService.get_all."""
        matches = self._products
        if category:
            matches = [p for p in matches if p.category == category.value]
        if search:
            needle = search.strip().casefold()
            matches = [
                p for p in matches
                if needle in p.name.casefold()
                or needle in p.model.casefold()
                or needle in p.part_number.casefold()
            ]
        if min_price is not None:
            matches = [p for p in matches if p.price >= min_price]
        if max_price is not None:
            matches = [p for p in matches if p.price <= max_price]

        matches = sorted(matches, key=lambda p: p.name)
        offset = (page - 1) * page_size
        return matches[offset:offset + page_size], len(matches)

    def get_by_id(self, product_id: str) -> ProductResponse:
        for product in self._products:
            if product.id == product_id:
                return product
        raise ProductNotFoundError(product_id)

    def create_product(self, record: Mapping[str, Any]) -> ProductResponse:
        row = record_to_row(record)
        product = ProductResponse(id=f"fixture-{next(self._ids)}", **row)
        self._products.append(product)
        logger.info(
            "fixture_product_created",
            product_id=product.id,
            part_number=product.part_number
        )
        return product
