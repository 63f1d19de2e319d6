"""
Date and time helpers shared by models and services.

Timestamps are stored as naive UTC datetimes (MySQL DATETIME).
"""

from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Optional, Type, TypeVar, Union

from schoolassist.core.exceptions import InvalidStatusError

E = TypeVar("E", bound=Enum)


def utc_now() -> datetime:
    """Current UTC time without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def start_of_next_day(day: date) -> datetime:
    return datetime.combine(day + timedelta(days=1), time.min)


def coerce_enum(enum_cls: Type[E], value: Union[E, str], field: str = "status") -> E:
    """
    Convert a raw value to a member of ``enum_cls``.

    Raises:
        InvalidStatusError: if the value is not one of the enum values
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as e:
        raise InvalidStatusError(value, [m.value for m in enum_cls], field=field) from e


def coerce_optional_enum(
    enum_cls: Type[E], value: Optional[Union[E, str]], field: str = "status"
) -> Optional[E]:
    if value is None:
        return None
    return coerce_enum(enum_cls, value, field)
