"""
Custom exceptions module.

Import from here rather than from exceptions.errors.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    DuplicateError,
    DatabaseError,
    ConfigurationError,

    # Persistence
    ErrorKind,
    PersistenceError,

    # Product-specific
    ProductNotFoundError,
    ProductPartNumberExistsError,

    # Import
    ProductSheetParseError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "DuplicateError",
    "DatabaseError",
    "ConfigurationError",

    # Persistence
    "ErrorKind",
    "PersistenceError",

    # Product
    "ProductNotFoundError",
    "ProductPartNumberExistsError",

    # Import
    "ProductSheetParseError",
]
