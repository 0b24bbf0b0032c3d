"""
Custom exception classes for the application.

Every API-facing error inherits from AppError and renders the same
{"error": {...}} envelope.
"""

from typing import Optional, Any
from datetime import datetime
from enum import Enum


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PRODUCT_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class DuplicateError(ConflictError):
    """Duplicate resource (409)."""

    def __init__(
        self,
        resource: str,
        field: str,
        value: str
    ):
        super().__init__(
            code=f"{resource.upper()}_{field.upper()}_EXISTS",
            message=f"{resource} with this {field} already exists",
            details={field: value}
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# PERSISTENCE ERRORS
# ===================

class ErrorKind(str, Enum):
    """Retry classification attached to store failures."""
    CLIENT = "client"         # Malformed request, will never succeed on retry
    TRANSIENT = "transient"   # Network blip, timeout, 5xx
    UNKNOWN = "unknown"


class PersistenceError(DatabaseError):
    """
    Store write/read failed with a known retry classification.

    Raised by catalog implementations so callers never have to inspect
    vendor-specific error shapes.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        details: Optional[dict] = None
    ):
        super().__init__(
            operation=operation,
            message=message,
            details={"kind": kind.value, **(details or {})}
        )
        self.kind = kind
        if kind == ErrorKind.CLIENT:
            self.status_code = 400
        elif kind == ErrorKind.TRANSIENT:
            self.status_code = 503


class ConfigurationError(AppError):
    """Application is not configured for the requested operation."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="CONFIGURATION_ERROR",
            message=message,
            status_code=500,
            details=details
        )


# ===================
# PRODUCT ERRORS
# ===================

class ProductNotFoundError(NotFoundError):
    """Product not found."""

    def __init__(self, product_id: str):
        super().__init__(
            resource="Product",
            identifier=product_id,
            code="PRODUCT_NOT_FOUND"
        )


class ProductPartNumberExistsError(DuplicateError):
    """Product part number already exists."""

    def __init__(self, part_number: str):
        super().__init__(
            resource="Product",
            field="part_number",
            value=part_number
        )


# ===================
# IMPORT ERRORS
# ===================

class ProductSheetParseError(ValidationError):
    """Uploaded product sheet could not be read."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="PRODUCT_SHEET_PARSE_ERROR",
            message=message,
            details=details
        )
