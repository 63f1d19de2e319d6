"""
Custom Exceptions for the School Assistant scheduling core

This module defines the exception classes raised by services and the
translation of SQLAlchemy errors into them.
"""

from typing import Any, Dict, List, Optional
from enum import Enum

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError


class ErrorCode(str, Enum):
    """Machine-readable code carried by every application error"""
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # bad input
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_STATUS = "INVALID_STATUS"

    # storage
    DATABASE_ERROR = "DATABASE_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    FOREIGN_KEY_VIOLATION = "FOREIGN_KEY_VIOLATION"


class BaseAppException(Exception):
    """
    Root of the scheduling core's exceptions.

    ``status_code`` is the HTTP status an outer API layer would answer with;
    the core itself never reads it.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Error payload in the shape an API layer would serialize"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ---------------------------------------------------------------------------
# Input and lookup errors
# ---------------------------------------------------------------------------

class ValidationError(BaseAppException):
    """Exception raised when an argument fails validation"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        status_code: int = 422
    ):
        self.field_errors = field_errors or {}
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details, status_code)


class InvalidStatusError(ValidationError):
    """Exception raised when a status value is not a member of its enum"""

    def __init__(self, value: Any, allowed: List[str], field: str = "status"):
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Invalid {field}: {value!r}. Must be one of: {', '.join(allowed)}",
            field_errors={field: [f"must be one of {allowed}"]},
            error_code=ErrorCode.INVALID_STATUS,
        )


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a referenced resource is missing mid-operation"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[Any] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id is not None:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details, 404)


# ---------------------------------------------------------------------------
# Storage errors
# ---------------------------------------------------------------------------

class DatabaseError(BaseAppException):
    """Exception raised when database operations fail"""

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        status_code: int = 500,
        original_code: Optional[Any] = None,
    ):
        self.operation = operation
        self.original_code = original_code
        details = {
            "operation": operation,
            "table": table,
            "original_code": original_code,
        }
        super().__init__(message, error_code, details, status_code)


class DatabaseConnectionError(DatabaseError):
    """Exception raised when the database cannot be reached or times out"""

    def __init__(
        self,
        message: str = "Database connection failed",
        operation: Optional[str] = None,
        original_code: Optional[Any] = None,
    ):
        super().__init__(
            message,
            operation=operation,
            error_code=ErrorCode.CONNECTION_ERROR,
            status_code=503,
            original_code=original_code,
        )


class DuplicateEntryError(DatabaseError):
    """Exception raised when trying to create a duplicate entry"""

    def __init__(
        self,
        message: str = "Duplicate entry",
        operation: Optional[str] = None,
        original_code: Optional[Any] = None,
    ):
        super().__init__(
            message,
            operation=operation,
            error_code=ErrorCode.DUPLICATE_ENTRY,
            status_code=409,
            original_code=original_code,
        )


class ForeignKeyViolationError(DatabaseError):
    """Exception raised when foreign key constraint is violated"""

    def __init__(
        self,
        message: str = "Foreign key constraint violation",
        operation: Optional[str] = None,
        original_code: Optional[Any] = None,
    ):
        super().__init__(
            message,
            operation=operation,
            error_code=ErrorCode.FOREIGN_KEY_VIOLATION,
            status_code=409,
            original_code=original_code,
        )


# MySQL server error numbers, as reported by PyMySQL in exc.orig.args[0]
_MYSQL_DUPLICATE_ENTRY = {1062}
_MYSQL_FOREIGN_KEY = {1216, 1217, 1451, 1452}
_MYSQL_CONNECTION = {2002, 2003, 2006, 2013}


def _driver_code(exc: SQLAlchemyError) -> Optional[Any]:
    orig = getattr(exc, "orig", None)
    if orig is not None and getattr(orig, "args", None):
        code = orig.args[0]
        if isinstance(code, int):
            return code
    return None


def handle_database_exception(exc: SQLAlchemyError, operation: str) -> DatabaseError:
    """
    Convert a SQLAlchemy exception into the matching application exception.

    The message is prefixed with ``Failed to <operation>``; the driver error
    number (when the driver reports one) is kept in ``details``. Callers are
    expected to ``raise ... from exc`` so the original stays chained.
    """
    cause = str(getattr(exc, "orig", None) or exc)
    message = f"Failed to {operation}: {cause}"
    code = _driver_code(exc)
    lowered = cause.lower()

    if isinstance(exc, PoolTimeoutError) or code in _MYSQL_CONNECTION:
        return DatabaseConnectionError(message, operation=operation, original_code=code)

    if isinstance(exc, IntegrityError):
        if code in _MYSQL_DUPLICATE_ENTRY or "duplicate" in lowered or "unique constraint" in lowered:
            return DuplicateEntryError(message, operation=operation, original_code=code)
        if code in _MYSQL_FOREIGN_KEY or "foreign key" in lowered:
            return ForeignKeyViolationError(message, operation=operation, original_code=code)

    if isinstance(exc, OperationalError) and (
        "connection refused" in lowered
        or "can't connect" in lowered
        or "timed out" in lowered
        or "timeout" in lowered
    ):
        return DatabaseConnectionError(message, operation=operation, original_code=code)

    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return DatabaseConnectionError(message, operation=operation, original_code=code)

    return DatabaseError(message, operation=operation, original_code=code)


__all__ = [
    'ErrorCode',
    'BaseAppException',
    'ValidationError',
    'InvalidStatusError',
    'ResourceNotFoundError',
    'DatabaseError',
    'DatabaseConnectionError',
    'DuplicateEntryError',
    'ForeignKeyViolationError',
    'handle_database_exception',
]
