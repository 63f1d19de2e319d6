"""
Base service class providing common functionality for all services.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel as PydanticModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from schoolassist.config import Settings, get_settings
from schoolassist.core.exceptions import ValidationError, handle_database_exception
from schoolassist.core.logging import get_logger
from schoolassist.core.pagination import normalize_pagination
from schoolassist.db.database import Database
from schoolassist.schemas.common import PaginationParams

T = TypeVar("T")
TSchema = TypeVar("TSchema", bound=PydanticModel)


class BaseService:
    """
    Base service with common behaviors:
    - Shared logger and database handle
    - Unit-of-work execution with storage errors translated
    - Input validation into schemas
    """

    def __init__(self, db: Database, settings: Optional[Settings] = None):
        """
        Args:
            db: Database handle shared by the services of one application
            settings: Page size limits and business defaults; read from the
                environment if omitted
        """
        self.db = db
        self.settings = settings or get_settings()
        name = self.__class__.__name__
        self._logger = get_logger(f"schoolassist.services.{name}").add_context(service=name)

    def _pagination(self, page: Optional[int], limit: Optional[int]) -> PaginationParams:
        return normalize_pagination(
            page,
            limit,
            default_limit=self.settings.DEFAULT_PAGE_SIZE,
            max_limit=self.settings.MAX_PAGE_SIZE,
        )

    # -------------------------------------------------------------------------
    # Unit of work
    # -------------------------------------------------------------------------

    def _run(
        self,
        operation: str,
        work: Callable[[Session], T],
        context: Optional[Dict[str, Any]] = None,
    ) -> T:
        """
        Run ``work`` in one transaction.

        SQLAlchemy errors are re-raised as ``DatabaseError`` subclasses with
        the message ``Failed to <operation>: <cause>`` and the original error
        chained. Application exceptions pass through unchanged.
        """
        try:
            return self.db.run_in_transaction(work)
        except SQLAlchemyError as e:
            self._logger.error(
                f"Failed to {operation}: {e}",
                exc_info=True,
                extra={"operation": operation, **(context or {})},
            )
            raise handle_database_exception(e, operation) from e

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate(schema: Type[TSchema], data: Union[TSchema, Mapping[str, Any]]) -> TSchema:
        """Coerce raw input into ``schema``, raising ``ValidationError`` on bad input."""
        if isinstance(data, schema):
            return data
        try:
            return schema.model_validate(data)
        except PydanticValidationError as e:
            field_errors: Dict[str, list] = {}
            for error in e.errors():
                field = ".".join(str(part) for part in error["loc"]) or "__root__"
                field_errors.setdefault(field, []).append(error["msg"])
            raise ValidationError(
                f"Invalid {schema.__name__} data",
                field_errors=field_errors,
            ) from e
