"""
Text utilities for comparing and cleaning catalog values.

Used for duplicate detection keys and spreadsheet cell cleanup.
"""

from typing import Any, Optional


def normalize_key(value: Any) -> Optional[str]:
    """
    Normalize a natural-key value for comparison.

    - "  SM-S21-LCD-BLK " → "sm-s21-lcd-blk"
    - "Galaxy S23" → "galaxy s23"
    - None / "" / "   " / non-strings → None

    Args:
        value: Raw part number, name or model

    Returns:
        Trimmed, case-folded string, or None if there is nothing to compare
    """
    if not isinstance(value, str):
        return None

    value = value.strip()

    if not value:
        return None

    return value.casefold()


def clean_cell(value: Any) -> Any:
    """
    Clean a spreadsheet cell for use in a candidate record.

    - Strips whitespace from strings
    - Returns None for empty/whitespace-only strings
    - Leaves every other value untouched

    Args:
        value: Cell value as read by pandas

    Returns:
        Cleaned value or None
    """
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value
