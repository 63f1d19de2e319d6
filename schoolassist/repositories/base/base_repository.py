"""
Base repository with the query helpers shared by every entity repository.

Repositories work inside a session owned by the caller: they add, flush and
query but never commit. The unit of work (see ``Database.session``) decides
when to commit or roll back.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from schoolassist.core.logging import get_logger
from schoolassist.models.base import BaseModel
from schoolassist.schemas.common import PaginationParams

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


@dataclass
class PageResult(Generic[ModelType]):
    """Rows of one page plus the total matching the same filter."""

    items: List[ModelType]
    total: int


class BaseRepository(Generic[ModelType]):
    """
    Repository base class.

    Args:
        model: SQLAlchemy model class
        session: Session of the surrounding unit of work
    """

    def __init__(self, model: Type[ModelType], session: Session):
        self.model = model
        self.session = session

    # ==================== Create Operations ====================

    def add(self, entity: ModelType) -> ModelType:
        """Add an entity and flush so its id is assigned."""
        self.session.add(entity)
        self.session.flush()
        self.session.refresh(entity)
        logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
        return entity

    # ==================== Read Operations ====================

    def query(self) -> Query:
        return self.session.query(self.model)

    def find_by_id(self, entity_id: int) -> Optional[ModelType]:
        return self.session.get(self.model, entity_id)

    def count(self, *criteria) -> int:
        return self.query().filter(*criteria).count()

    def count_grouped(self, column, *criteria) -> Dict[Any, int]:
        """Row counts keyed by the distinct values of ``column``."""
        rows = (
            self.session.query(column, func.count(self.model.id))
            .filter(*criteria)
            .group_by(column)
            .all()
        )
        return {value: count for value, count in rows}

    # ==================== Update Operations ====================

    def update_fields(self, entity: ModelType, values: Mapping[str, Any]) -> ModelType:
        """Assign attribute values on a loaded entity and flush."""
        for key, value in values.items():
            setattr(entity, key, value)
        self.session.flush()
        # reload so relationships follow changed foreign keys
        self.session.refresh(entity)
        return entity

    def update_by_id(self, entity_id: int, values: Mapping[str, Any]) -> int:
        """
        Issue a single UPDATE for the row with ``entity_id``.

        Returns:
            Number of rows affected (0 when the row does not exist)
        """
        return (
            self.query()
            .filter(self.model.id == entity_id)
            .update(dict(values), synchronize_session="fetch")
        )

    # ==================== Delete Operations ====================

    def delete_by_id(self, entity_id: int) -> bool:
        affected = (
            self.query()
            .filter(self.model.id == entity_id)
            .delete(synchronize_session="fetch")
        )
        return affected > 0

    # ==================== Pagination ====================

    def _paginate_query(self, query: Query, pagination: PaginationParams) -> PageResult[ModelType]:
        """
        Apply pagination to query.

        The total comes from a separate COUNT over the same filter; it is not
        read in the same snapshot as the page.
        """
        total = query.order_by(None).count()
        items = query.offset(pagination.offset).limit(pagination.limit).all()
        return PageResult(items=items, total=total)
