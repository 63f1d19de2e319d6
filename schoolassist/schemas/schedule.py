"""
Schedule schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field, field_validator, model_validator

from schoolassist.models.base.enums import PersonType, ScheduleStatus, ScheduleType
from schoolassist.models.base.types import AssignedTo
from schoolassist.schemas.common import BaseSchema, TimestampMixin

__all__ = [
    "ScheduleCreate",
    "ScheduleUpdate",
    "ScheduleResponse",
]


class ScheduleCreate(BaseSchema):
    """New class or shift."""

    schedule_type: ScheduleType
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    assigned_to: AssignedTo = Field(..., description="Admin or student the schedule belongs to")
    start_time: datetime
    end_time: datetime
    location: Optional[str] = Field(None, max_length=255)
    recurrence_pattern: Optional[Dict[str, Any]] = None
    status: ScheduleStatus = ScheduleStatus.ACTIVE
    created_by: int = Field(..., gt=0, description="Admin creating the schedule")

    @model_validator(mode="after")
    def validate_time_order(self) -> "ScheduleCreate":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ScheduleUpdate(BaseSchema):
    """Partial update; any field may change, including status."""

    schedule_type: Optional[ScheduleType] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    assigned_to: Optional[AssignedTo] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=255)
    recurrence_pattern: Optional[Dict[str, Any]] = None
    status: Optional[ScheduleStatus] = None

    @field_validator(
        "schedule_type", "title", "assigned_to", "start_time", "end_time", "status"
    )
    @classmethod
    def reject_null(cls, v):
        """Only description, location and recurrence_pattern may be cleared."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class ScheduleResponse(BaseSchema, TimestampMixin):
    """Schedule record."""

    id: int
    schedule_type: ScheduleType
    title: str
    description: Optional[str] = None
    assigned_to_type: PersonType
    assigned_to_id: int
    assigned_to_name: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None
    recurrence_pattern: Optional[Dict[str, Any]] = None
    status: ScheduleStatus
    created_by: int
    created_by_name: Optional[str] = None

    @property
    def assigned_to(self) -> AssignedTo:
        return AssignedTo(self.assigned_to_type, self.assigned_to_id)
