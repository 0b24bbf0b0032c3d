"""
Duplicate detection for candidate product records.

A candidate clashes with a known product when its part number matches, or
when its name+model pair matches a product filed under another part
number. Both checks always run, so one record can get both messages.
"""

from typing import Any, Iterable, Mapping, Optional
import structlog

from models.product import ProductResponse
from services.catalog import get_catalog
from utils.text_utils import normalize_key

logger = structlog.get_logger(__name__)

UNVERIFIED_DUPLICATE_MESSAGE = (
    "Unable to verify duplicates due to database connectivity issues. "
    "Product may be a duplicate."
)


def check_for_duplicates(
    record: Mapping[str, Any],
    known_products: Optional[Iterable[ProductResponse]] = None,
    catalog: Any = None
) -> list[str]:
    """
    Find conflicts between a candidate and the known products.

    Args:
        record: Candidate record (uses partNumber, name, model)
        known_products: Catalog plus records already accepted in this batch.
                        When None, the catalog is read instead.
        catalog: Object with list_products(), used only when
                 known_products is None

    Returns:
        Conflict messages, empty when the candidate is unique. A failed
        catalog read yields a single "unable to verify" message so the
        record is rejected rather than silently accepted.
    """
    if known_products is None:
        try:
            if catalog is None:
                catalog = get_catalog()
            known_products = catalog.list_products()
        except Exception as e:
            logger.error(
                "duplicate_check_failed",
                error=str(e),
                error_type=type(e).__name__
            )
            return [UNVERIFIED_DUPLICATE_MESSAGE]

    known = list(known_products)
    errors: list[str] = []

    part_number = record.get("partNumber", record.get("part_number"))
    part_key = normalize_key(part_number)
    if part_key is not None:
        match = next(
            (p for p in known if normalize_key(p.part_number) == part_key),
            None
        )
        if match is not None:
            errors.append(
                f'Duplicate part number detected: "{part_number}" already exists '
                f"in the database (Product ID: {match.id})"
            )

    name = record.get("name")
    model = record.get("model")
    name_key = normalize_key(name)
    model_key = normalize_key(model)
    if name_key is not None and model_key is not None:
        match = next(
            (
                p for p in known
                if normalize_key(p.name) == name_key
                and normalize_key(p.model) == model_key
            ),
            None
        )
        if match is not None and normalize_key(match.part_number) != part_key:
            errors.append(
                f'Duplicate product detected: A product with name "{name}" and model '
                f'"{model}" already exists (Part Number: {match.part_number})'
            )

    return errors
