"""
Excel and CSV parsers module.
"""

from parsers.product_sheet_parser import (
    parse_product_sheet,
    build_template_workbook,
    generate_part_number,
    ProductSheet,
)

__all__ = [
    "parse_product_sheet",
    "build_template_workbook",
    "generate_part_number",
    "ProductSheet",
]
