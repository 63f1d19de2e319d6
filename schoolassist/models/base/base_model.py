"""
Base model configuration for SQLAlchemy ORM.

Provides the declarative base and abstract base classes with the
primary key, timestamps and dictionary conversion shared by all models.
"""

from datetime import date, datetime
from enum import Enum as PyEnum
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import DateTime, Enum, Integer
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from schoolassist.core.utils import utc_now

# Create declarative base
Base = declarative_base()


def enum_column_type(enum_cls: Type[PyEnum], name: str) -> Enum:
    """
    SQL enum type storing each member's value (``"pending"``) rather than
    its Python name (``"PENDING"``).
    """
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


class BaseModel(Base):
    """
    Abstract base model with an integer primary key.
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Primary key"
    )

    def to_dict(self, exclude: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Convert model instance to dictionary.

        Dates become ISO-8601 strings and enums their values.
        """
        exclude = exclude or []
        result = {}

        for column in self.__table__.columns:
            if column.key in exclude:
                continue
            value = getattr(self, column.key)
            if isinstance(value, (datetime, date)):
                result[column.key] = value.isoformat()
            elif isinstance(value, PyEnum):
                result[column.key] = value.value
            else:
                result[column.key] = value

        return result

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


class TimestampModel(BaseModel):
    """
    Base model with timestamp tracking.

    Timestamps are set from Python so a freshly flushed row carries them
    without a refresh; updates that go through explicit UPDATE statements
    stamp ``updated_at`` themselves.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utc_now,
        comment="Record creation timestamp"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
        comment="Record last update timestamp"
    )
