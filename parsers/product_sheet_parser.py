"""
Product sheet parser for admin uploads.

Reads the first sheet of an Excel workbook (or a CSV file) into candidate
records for the import pipeline. Only shape is handled here; field rules
live in services.product_validator.
"""

from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any, Optional, Union
import numbers
import re
import structlog

import pandas as pd

from exceptions import ProductSheetParseError
from utils.text_utils import clean_cell

logger = structlog.get_logger(__name__)

SUPPORTED_EXTENSIONS = (".xlsx", ".xls", ".csv")

# Normalized header -> record key
COLUMN_ALIASES = {
    "name": "name",
    "product_name": "name",
    "model": "model",
    "category": "category",
    "color": "color",
    "colour": "color",
    "description": "description",
    "price": "price",
    "image": "image",
    "image_url": "image",
    "partnumber": "partNumber",
    "part_number": "partNumber",
    "part_no": "partNumber",
}

TEMPLATE_COLUMNS = [
    "name", "model", "category", "color", "partNumber", "description", "price", "image",
]

SAMPLE_ROWS: list[dict] = [
    {
        "name": "Samsung Galaxy S23 AMOLED Display",
        "model": "Galaxy S23",
        "category": "AMOLED",
        "color": "Black",
        "partNumber": "SM-S911B-AMOLED-BLK",
        "description": "Original replacement AMOLED display for Samsung Galaxy S23.",
        "price": 199.99,
        "image": "/placeholder.svg?height=400&width=400",
    },
    {
        "name": "Samsung Galaxy S22 LCD Screen",
        "model": "Galaxy S22",
        "category": "LCD",
        "color": "White",
        "partNumber": "SM-S901B-LCD-WHT",
        "description": "Replacement LCD screen for Samsung Galaxy S22.",
        "price": 149.99,
        "image": "",
    },
]


@dataclass
class ProductSheet:
    """Candidate records read from one uploaded file."""
    records: list[dict[str, Any]] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    ignored_columns: list[str] = field(default_factory=list)
    generated_part_numbers: int = 0

    @property
    def has_data(self) -> bool:
        return len(self.records) > 0


def parse_product_sheet(
    file: Union[str, Path, BytesIO],
    filename: Optional[str] = None,
    generate_part_numbers: bool = True
) -> ProductSheet:
    """
    Parse an uploaded product sheet.

    Args:
        file: File path (str/Path) or file-like object (BytesIO)
        filename: Original filename, used to pick Excel vs CSV for file objects
        generate_part_numbers: Fill empty part numbers from model/category/color

    Returns:
        ProductSheet with one record per non-blank row, in file order

    Raises:
        ProductSheetParseError: Unsupported extension or unreadable file
    """
    name = filename or (str(file) if isinstance(file, (str, Path)) else "")
    extension = Path(name).suffix.lower()

    if extension not in SUPPORTED_EXTENSIONS:
        raise ProductSheetParseError(
            message="Please upload an Excel or CSV file",
            details={"filename": name, "supported": list(SUPPORTED_EXTENSIONS)}
        )

    logger.info("parsing_product_sheet", filename=name, extension=extension)

    try:
        if extension == ".csv":
            df = pd.read_csv(file, dtype=object)
        else:
            df = pd.read_excel(file, sheet_name=0, dtype=object)
    except Exception as e:
        logger.error("product_sheet_read_failed", filename=name, error=str(e))
        raise ProductSheetParseError(
            message="Failed to parse the file. Please check the format.",
            details={"original_error": str(e)}
        )

    sheet = ProductSheet(columns=[str(c) for c in df.columns])

    column_map: dict[str, str] = {}
    for col in df.columns:
        key = COLUMN_ALIASES.get(_normalize_column(col))
        if key is None or key in column_map.values():
            sheet.ignored_columns.append(str(col))
            continue
        column_map[col] = key

    for _, raw in df.iterrows():
        if raw.isna().all():
            continue

        record: dict[str, Any] = {}
        for col, key in column_map.items():
            value = raw[col]
            if _is_blank(value):
                record[key] = None
            elif key == "price":
                record[key] = _coerce_price(value)
            else:
                record[key] = clean_cell(_text_cell(value))

        if generate_part_numbers and not record.get("partNumber"):
            generated = generate_part_number(
                record.get("model"), record.get("category"), record.get("color")
            )
            if generated:
                record["partNumber"] = generated
                sheet.generated_part_numbers += 1

        sheet.records.append(record)

    logger.info(
        "product_sheet_parsed",
        filename=name,
        record_count=len(sheet.records),
        ignored_columns=sheet.ignored_columns,
        generated_part_numbers=sheet.generated_part_numbers
    )

    return sheet


def generate_part_number(model: Any, category: Any, color: Any) -> Optional[str]:
    """
    Build a part number from model, category and color.

    "Galaxy S21", "LCD", "Black" → "SM-S21-LCD-BLA"

    Returns:
        Generated part number, or None if any input is missing
    """
    if not all(isinstance(v, str) and v.strip() for v in (model, category, color)):
        return None

    model_code = re.sub(r"galaxy ", "", model.strip(), flags=re.IGNORECASE).upper()
    model_code = re.sub(r"[^A-Z0-9_-]+", "-", model_code).strip("-")
    category_code = re.sub(r"[^A-Z0-9_-]+", "-", category.strip().upper()).strip("-")
    color_code = re.sub(r"[^A-Z0-9]", "", color.strip().upper())[:3]

    return f"SM-{model_code}-{category_code}-{color_code}"


def build_template_workbook() -> bytes:
    """
    Build the downloadable import template.

    Returns:
        .xlsx file content with a "Products" sheet holding the sample rows
    """
    output = BytesIO()
    df = pd.DataFrame(SAMPLE_ROWS, columns=TEMPLATE_COLUMNS)
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Products", index=False)
    return output.getvalue()


# ===================
# HELPER FUNCTIONS
# ===================

def _normalize_column(col: Any) -> str:
    """
    Normalize column name for consistent matching.

    "Part Number" -> "part_number"
    "partNumber"  -> "partnumber"
    " Image URL " -> "image_url"
    """
    col = str(col).strip().lower()
    col = re.sub(r"[\s\-]+", "_", col)
    return col


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _text_cell(value: Any) -> Any:
    """Spreadsheets type "350" or 2023 as numbers; text fields want strings."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return value
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return str(number)


def _coerce_price(value: Any) -> Any:
    """
    Turn numeric cells and numeric text into a float.

    Unparseable text is returned unchanged so validation reports it.
    """
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, str):
        return value
    cleaned = value.replace("$", "").replace(",", "").strip()
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return value.strip()
