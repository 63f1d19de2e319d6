"""
Disruption schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from schoolassist.models.base.enums import DisruptionSeverity, DisruptionStatus, DisruptionType
from schoolassist.schemas.common import BaseSchema, TimestampMixin

__all__ = [
    "DisruptionCreate",
    "DisruptionUpdate",
    "DisruptionResponse",
]


class DisruptionCreate(BaseSchema):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    disruption_type: DisruptionType
    severity: DisruptionSeverity = DisruptionSeverity.MEDIUM
    start_time: datetime
    end_time: Optional[datetime] = None
    affected_schedules: Optional[List[int]] = None
    reported_by: int = Field(..., gt=0)

    @model_validator(mode="after")
    def validate_time_order(self) -> "DisruptionCreate":
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


class DisruptionUpdate(BaseSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    disruption_type: Optional[DisruptionType] = None
    severity: Optional[DisruptionSeverity] = None
    affected_schedules: Optional[List[int]] = None
    end_time: Optional[datetime] = None
    status: Optional[DisruptionStatus] = None
    resolution_notes: Optional[str] = None

    @field_validator("title", "description", "disruption_type", "severity", "status")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class DisruptionResponse(BaseSchema, TimestampMixin):
    id: int
    title: str
    description: str
    disruption_type: DisruptionType
    severity: DisruptionSeverity
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    affected_schedules: Optional[List[int]] = None
    reported_by: int
    reported_by_name: Optional[str] = None
    status: DisruptionStatus
    resolution_notes: Optional[str] = None
