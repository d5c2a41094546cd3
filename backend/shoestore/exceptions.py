"""
Shoe Store Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the failure modes of the shoe API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return plain-text responses with the matching HTTP status code.
Who:   Raised by the service and route layers; caught by global handlers.

Exception Hierarchy:
    ShoeStoreError (base)
    ├── ValidationError   → 400 Bad Request (missing required parameter)
    ├── NotFoundError     → 404 Not Found
    ├── DecodeError       → 500 or 400 (settings.decode_error_status)
    └── DatabaseError     → 500 Internal Server Error
"""

from typing import Any, Dict, Iterable, Mapping, Optional

SHOE_NOT_FOUND = "Shoe not found."


class ShoeStoreError(Exception):
    """
    Base exception for all shoe store application errors.

    Attributes:
        message:  Response body text returned to the client
        context:  Additional debug info (logged, never returned)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ShoeStoreError):
    """
    Raised when a required request parameter is missing.

    When:    /getbyid, /update or /delete called without `id`.
    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(ShoeStoreError):
    """
    Raised when no shoe matches the requested id.

    HTTP:    404 Not Found, body "Shoe not found."
    """

    status_code = 404

    def __init__(
        self,
        shoe_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if shoe_id:
            ctx["shoe_id"] = shoe_id
        super().__init__(message=SHOE_NOT_FOUND, context=ctx)
        self.shoe_id = shoe_id


class DecodeError(ShoeStoreError):
    """
    Raised when a request body cannot be decoded into shoe fields.

    HTTP:    settings.decode_error_status (500 by default, optionally 400)
    Body:    The decode failure text, e.g. "body.size: Input should be a valid integer"
    """

    def __init__(
        self,
        message: str = "Request body could not be decoded",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(ShoeStoreError):
    """
    Raised when a MongoDB operation fails, or a stored document cannot be decoded.

    HTTP:    500 Internal Server Error
    Body:    The driver's error text, optionally prefixed by the operation
             (e.g. "Error updating shoe: connection refused").
    """

    def __init__(
        self,
        message: str = "A database error occurred.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


def describe_validation_errors(errors: Iterable[Mapping[str, Any]], prefix: str = "") -> str:
    """
    Flatten a Pydantic error list into one line of decode failure text.

    Example: "body.size: Input should be a valid integer"
    """
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in (prefix, *error.get("loc", ())) if part != "")
        message = error.get("msg", "invalid value")
        cause = (error.get("ctx") or {}).get("error")
        if cause and str(cause) not in message:
            message = f"{message} ({cause})"
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Request body could not be decoded"
