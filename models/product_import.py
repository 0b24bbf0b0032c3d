"""
Schemas for bulk product import.

Candidate records arrive as untrusted dicts; they are only checked by
services.product_validator, never by pydantic, so every rule violation
can be reported back per row.
"""

from pydantic import BaseModel, Field, model_validator
from typing import Any

from models.product import ProductResponse


class ProductImportRequest(BaseModel):
    """Already row-parsed candidate records, in source order."""

    products: list[dict[str, Any]] = Field(
        ...,
        description="Candidate records (name, model, category, color, description, price, image, partNumber)"
    )


class ImportRowError(BaseModel):
    """
    One rejected candidate.

    ``index`` is the position in the submitted list, not in any filtered
    subset, so callers can map it back to the source row.
    """

    record: dict[str, Any] = Field(..., description="The candidate as submitted")
    error: str = Field(..., description="All reasons, joined with '; '")
    index: int = Field(..., ge=0, description="Position in the original batch")


class ImportResult(BaseModel):
    """Outcome of one import batch."""

    successful: list[ProductResponse] = Field(default_factory=list)
    failed: list[ImportRowError] = Field(default_factory=list)
    total_processed: int = Field(0, ge=0)

    @model_validator(mode="after")
    def counts_add_up(self):
        """Every submitted record ends up in exactly one list."""
        if len(self.successful) + len(self.failed) != self.total_processed:
            raise ValueError(
                f"successful ({len(self.successful)}) + failed ({len(self.failed)}) "
                f"!= total_processed ({self.total_processed})"
            )
        return self

    @property
    def success_count(self) -> int:
        return len(self.successful)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @property
    def is_complete_success(self) -> bool:
        return not self.failed
