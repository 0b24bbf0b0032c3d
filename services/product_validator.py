"""
Field validation for candidate product records.

Every rule is evaluated for every record so the caller gets the full list
of problems for a row at once. Message wording is part of the API contract:
admin tooling matches on these strings.
"""

import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping

from models.product import Category, MAX_PRICE

VALID_CATEGORIES = [c.value for c in Category]

_PART_NUMBER_RE = re.compile(r"[A-Za-z0-9_-]+")
_MISSING = object()


@dataclass
class ValidationResult:
    """Outcome of validating one candidate record."""
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def validate_product_data(record: Mapping[str, Any]) -> ValidationResult:
    """
    Validate a candidate product record.

    Args:
        record: Row-parsed candidate (name, model, category, color,
                description, price, image, partNumber). Fields may be
                missing or of the wrong type.

    Returns:
        ValidationResult with one message per violated rule
    """
    errors: list[str] = []

    name = record.get("name", _MISSING)
    if _check_required_text(name, "name", errors):
        if len(name) > 200:
            errors.append("Product name must be 200 characters or less")
        elif len(name) < 2:
            errors.append("Product name must be at least 2 characters long")

    model = record.get("model", _MISSING)
    if _check_required_text(model, "model", errors):
        if len(model) > 100:
            errors.append("Product model must be 100 characters or less")

    category = record.get("category", _MISSING)
    if _check_required_text(category, "category", errors):
        if category not in VALID_CATEGORIES:
            errors.append(
                f"Product category must be one of: {', '.join(VALID_CATEGORIES)}"
            )

    color = record.get("color", _MISSING)
    if _check_required_text(color, "color", errors):
        if len(color) > 50:
            errors.append("Product color must be 50 characters or less")

    part_number = _get_part_number(record)
    if _check_required_text(part_number, "part number", errors):
        if len(part_number) > 50:
            errors.append("Product part number must be 50 characters or less")
        elif not _PART_NUMBER_RE.fullmatch(part_number):
            errors.append(
                "Product part number can only contain letters, numbers, hyphens, and underscores"
            )

    _check_price(record.get("price", _MISSING), errors)

    # Optional fields
    description = record.get("description")
    if description is not None:
        if not isinstance(description, str):
            errors.append("Product description must be a text value")
        elif len(description) > 1000:
            errors.append("Product description must be 1000 characters or less")

    image = record.get("image")
    if image is not None:
        if not isinstance(image, str):
            errors.append("Product image must be a text value (URL)")
        elif len(image) > 500:
            errors.append("Product image URL must be 500 characters or less")

    return ValidationResult(is_valid=not errors, errors=errors)


def _get_part_number(record: Mapping[str, Any]) -> Any:
    """partNumber is canonical; part_number is accepted from snake_case callers."""
    if "partNumber" in record:
        return record["partNumber"]
    return record.get("part_number", _MISSING)


def _check_required_text(value: Any, label: str, errors: list[str]) -> bool:
    """
    Append the required/type message if needed.

    Returns True when the value is a non-blank string and the
    field-specific rules should run.
    """
    if value is _MISSING or value is None:
        errors.append(f"Product {label} is required and cannot be empty")
        return False
    if not isinstance(value, str):
        errors.append(f"Product {label} must be a text value")
        return False
    if value.strip() == "":
        errors.append(f"Product {label} is required and cannot be empty")
        return False
    return True


def _check_price(price: Any, errors: list[str]) -> None:
    if price is _MISSING or price is None:
        errors.append("Product price is required")
        return
    # bool is an int subclass; True is not a price
    if isinstance(price, bool) or not isinstance(price, (int, float, Decimal)):
        errors.append("Product price must be a numeric value")
        return

    try:
        value = float(price)
    except OverflowError:
        # Integers past float range
        if price > 0:
            errors.append("Product price cannot exceed $999,999.99")
        else:
            errors.append("Product price must be greater than zero")
        return
    except ValueError:
        # Decimal("sNaN")
        errors.append("Product price must be a valid number")
        return

    if math.isnan(value):
        errors.append("Product price must be a valid number")
    elif math.isinf(value):
        errors.append("Product price must be a finite number")
    elif value <= 0:
        errors.append("Product price must be greater than zero")
    elif value > MAX_PRICE:
        errors.append("Product price cannot exceed $999,999.99")
