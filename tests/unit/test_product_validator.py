"""
Unit tests for candidate record validation.

Run: pytest tests/unit/test_product_validator.py -v
"""

import copy
import math
from decimal import Decimal
import pytest

from services.product_validator import validate_product_data, VALID_CATEGORIES


class TestValidRecords:
    """Records that should pass."""

    def test_complete_record_is_valid(self, valid_record):
        result = validate_product_data(valid_record)

        assert result.is_valid is True
        assert result.errors == []

    def test_optional_fields_may_be_absent(self, valid_record):
        del valid_record["description"]
        del valid_record["image"]

        result = validate_product_data(valid_record)

        assert result.is_valid is True

    def test_optional_fields_may_be_none(self, valid_record):
        valid_record["description"] = None
        valid_record["image"] = None

        assert validate_product_data(valid_record).is_valid is True

    @pytest.mark.parametrize("category", VALID_CATEGORIES)
    def test_every_category_accepted(self, valid_record, category):
        valid_record["category"] = category

        assert validate_product_data(valid_record).is_valid is True

    def test_snake_case_part_number_accepted(self, valid_record):
        valid_record["part_number"] = valid_record.pop("partNumber")

        assert validate_product_data(valid_record).is_valid is True

    def test_price_at_maximum_is_valid(self, valid_record):
        valid_record["price"] = 999999.99

        assert validate_product_data(valid_record).is_valid is True


class TestRequiredFields:
    """Missing, empty and wrongly typed required fields."""

    def test_empty_record_reports_every_required_field(self):
        result = validate_product_data({})

        assert result.is_valid is False
        assert result.errors == [
            "Product name is required and cannot be empty",
            "Product model is required and cannot be empty",
            "Product category is required and cannot be empty",
            "Product color is required and cannot be empty",
            "Product part number is required and cannot be empty",
            "Product price is required",
        ]

    def test_whitespace_only_counts_as_empty(self, valid_record):
        valid_record["name"] = "   "

        result = validate_product_data(valid_record)

        assert result.errors == ["Product name is required and cannot be empty"]

    def test_non_string_text_field(self, valid_record):
        valid_record["model"] = 42

        result = validate_product_data(valid_record)

        assert result.errors == ["Product model must be a text value"]


class TestFieldRules:
    """Length, pattern and enum rules."""

    def test_name_too_short(self, valid_record):
        valid_record["name"] = "A"

        assert validate_product_data(valid_record).errors == [
            "Product name must be at least 2 characters long"
        ]

    def test_name_too_long(self, valid_record):
        valid_record["name"] = "x" * 201

        assert validate_product_data(valid_record).errors == [
            "Product name must be 200 characters or less"
        ]

    def test_model_too_long(self, valid_record):
        valid_record["model"] = "m" * 101

        assert validate_product_data(valid_record).errors == [
            "Product model must be 100 characters or less"
        ]

    def test_color_too_long(self, valid_record):
        valid_record["color"] = "c" * 51

        assert validate_product_data(valid_record).errors == [
            "Product color must be 50 characters or less"
        ]

    def test_unknown_category(self, valid_record):
        valid_record["category"] = "Plasma"

        assert validate_product_data(valid_record).errors == [
            "Product category must be one of: LCD, AMOLED, OLED, E-Paper, TFT"
        ]

    def test_category_is_case_sensitive(self, valid_record):
        valid_record["category"] = "lcd"

        assert validate_product_data(valid_record).is_valid is False

    def test_part_number_with_spaces(self, valid_record):
        valid_record["partNumber"] = "SM S21"

        assert validate_product_data(valid_record).errors == [
            "Product part number can only contain letters, numbers, hyphens, and underscores"
        ]

    def test_part_number_too_long(self, valid_record):
        valid_record["partNumber"] = "P" * 51

        assert validate_product_data(valid_record).errors == [
            "Product part number must be 50 characters or less"
        ]

    def test_description_too_long(self, valid_record):
        valid_record["description"] = "d" * 1001

        assert validate_product_data(valid_record).errors == [
            "Product description must be 1000 characters or less"
        ]

    def test_description_wrong_type(self, valid_record):
        valid_record["description"] = ["not", "text"]

        assert validate_product_data(valid_record).errors == [
            "Product description must be a text value"
        ]

    def test_image_too_long(self, valid_record):
        valid_record["image"] = "https://x/" + "i" * 500

        assert validate_product_data(valid_record).errors == [
            "Product image URL must be 500 characters or less"
        ]

    def test_image_wrong_type(self, valid_record):
        valid_record["image"] = 12

        assert validate_product_data(valid_record).errors == [
            "Product image must be a text value (URL)"
        ]


class TestPrice:
    """Price rules."""

    @pytest.mark.parametrize("price,message", [
        (None, "Product price is required"),
        ("12.50", "Product price must be a numeric value"),
        (True, "Product price must be a numeric value"),
        (math.nan, "Product price must be a valid number"),
        (math.inf, "Product price must be a finite number"),
        (0, "Product price must be greater than zero"),
        (-5, "Product price must be greater than zero"),
        (1000000, "Product price cannot exceed $999,999.99"),
    ])
    def test_invalid_price(self, valid_record, price, message):
        valid_record["price"] = price

        result = validate_product_data(valid_record)

        assert result.is_valid is False
        assert result.errors == [message]

    def test_integer_price_is_valid(self, valid_record):
        valid_record["price"] = 15

        assert validate_product_data(valid_record).is_valid is True


class TestMultipleErrors:
    """All rules run, errors come back in field order."""

    def test_collects_all_errors(self, valid_record):
        valid_record["name"] = "A"
        valid_record["category"] = "CRT"
        valid_record["price"] = -1

        result = validate_product_data(valid_record)

        assert result.errors == [
            "Product name must be at least 2 characters long",
            "Product category must be one of: LCD, AMOLED, OLED, E-Paper, TFT",
            "Product price must be greater than zero",
        ]


class TestEdgeValues:
    """Inputs that slip past naive checks."""

    @pytest.mark.parametrize("part_number", ["PN-1\n", "PN-1\r\n", "\nPN-1", "PN-1\nPN-2"])
    def test_part_number_with_newline(self, valid_record, part_number):
        valid_record["partNumber"] = part_number

        assert validate_product_data(valid_record).errors == [
            "Product part number can only contain letters, numbers, hyphens, and underscores"
        ]

    def test_huge_integer_price(self, valid_record):
        valid_record["price"] = 10 ** 400

        assert validate_product_data(valid_record).errors == [
            "Product price cannot exceed $999,999.99"
        ]

    def test_huge_negative_integer_price(self, valid_record):
        valid_record["price"] = -(10 ** 400)

        assert validate_product_data(valid_record).errors == [
            "Product price must be greater than zero"
        ]

    def test_signaling_nan_decimal_price(self, valid_record):
        valid_record["price"] = Decimal("sNaN")

        assert validate_product_data(valid_record).errors == [
            "Product price must be a valid number"
        ]

    def test_decimal_price_is_valid(self, valid_record):
        valid_record["price"] = Decimal("19.99")

        assert validate_product_data(valid_record).is_valid is True


class TestIdempotence:

    def test_same_invalid_record_gives_same_errors(self):
        record = {
            "name": "A",
            "model": "",
            "category": "Plasma",
            "color": None,
            "partNumber": "bad part",
            "price": -3,
            "image": 7
        }
        snapshot = copy.deepcopy(record)

        first = validate_product_data(record)
        second = validate_product_data(record)

        assert first.errors == second.errors
        assert len(first.errors) == 7
        assert record == snapshot
