"""
Product schemas for validation and serialization.

Candidate records and API payloads use ``partNumber``; the products table
stores it as ``part_number``. Both spellings are accepted on input.
"""

from pydantic import Field, field_validator
from typing import Optional
from enum import Enum

from models.base import BaseSchema


# pydantic-core regex: `$` is end of text, never before a final newline
PART_NUMBER_PATTERN = r"^[A-Za-z0-9_-]+$"
MAX_PRICE = 999999.99


class Category(str, Enum):
    """Display technology categories."""
    LCD = "LCD"
    AMOLED = "AMOLED"
    OLED = "OLED"
    E_PAPER = "E-Paper"
    TFT = "TFT"


class ProductCreate(BaseSchema):
    """
    Create a new product.

    Required: name, model, category, color, price, partNumber
    Optional: description, image
    """

    name: str = Field(
        ...,
        min_length=2,
        max_length=200,
        description="Product display name",
        examples=["Samsung Galaxy S23 AMOLED Display"]
    )
    model: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Device model the part fits",
        examples=["Galaxy S23"]
    )
    category: Category = Field(
        ...,
        description="Display technology"
    )
    color: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Frame/panel color"
    )
    description: Optional[str] = Field(
        None,
        max_length=1000,
        description="Free-text description"
    )
    price: float = Field(
        ...,
        gt=0,
        le=MAX_PRICE,
        allow_inf_nan=False,
        description="Unit price"
    )
    image: Optional[str] = Field(
        None,
        max_length=500,
        description="Image URL"
    )
    part_number: str = Field(
        ...,
        alias="partNumber",
        min_length=1,
        max_length=50,
        pattern=PART_NUMBER_PATTERN,
        description="Vendor part number (unique natural key)",
        examples=["SM-S911B-AMOLED-BLK"]
    )

    def to_record(self) -> dict:
        """Row shape for the products table."""
        return {
            "name": self.name,
            "model": self.model,
            "category": self.category.value,
            "color": self.color,
            "description": self.description,
            "price": self.price,
            "image": self.image,
            "part_number": self.part_number,
        }


class ProductUpdate(BaseSchema):
    """
    Update existing product.

    All fields optional - only provided fields are updated.
    """

    name: Optional[str] = Field(None, min_length=2, max_length=200)
    model: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[Category] = None
    color: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)
    price: Optional[float] = Field(None, gt=0, le=MAX_PRICE, allow_inf_nan=False)
    image: Optional[str] = Field(None, max_length=500)
    part_number: Optional[str] = Field(
        None,
        alias="partNumber",
        min_length=1,
        max_length=50,
        pattern=PART_NUMBER_PATTERN
    )


class ProductResponse(BaseSchema):
    """
    Persisted product.

    Category stays a plain string so legacy rows outside the enum still load.
    """

    id: str = Field(..., description="Store-assigned identifier")
    name: str
    model: str
    category: str
    color: str
    description: Optional[str] = None
    price: float
    image: Optional[str] = None
    part_number: str = Field(..., alias="partNumber")

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v) -> str:
        """Stores may hand back integer or UUID ids."""
        return str(v)


class ProductListResponse(BaseSchema):
    """List of products with pagination."""

    data: list[ProductResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
