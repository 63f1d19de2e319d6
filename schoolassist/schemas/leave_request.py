"""
Leave request schemas.
"""

from __future__ import annotations

from datetime import date as Date, datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from schoolassist.models.base.enums import LeaveStatus, LeaveType
from schoolassist.schemas.common import BaseSchema, TimestampMixin

__all__ = [
    "LeaveRequestCreate",
    "LeaveRequestUpdate",
    "LeaveRequestResponse",
]


class LeaveRequestCreate(BaseSchema):
    """Student-initiated leave request."""

    student_id: int = Field(..., gt=0, description="Student requesting leave")
    leave_type: LeaveType = Field(..., description="Type of leave being requested")
    start_date: Date = Field(..., description="First day of leave (inclusive)")
    end_date: Date = Field(..., description="Last day of leave (inclusive)")
    reason: str = Field(..., min_length=1, max_length=2000, description="Reason for leave")

    @model_validator(mode="after")
    def validate_date_order(self) -> "LeaveRequestCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class LeaveRequestUpdate(BaseSchema):
    """Partial update of the request details; status has its own operation."""

    leave_type: Optional[LeaveType] = None
    start_date: Optional[Date] = None
    end_date: Optional[Date] = None
    reason: Optional[str] = Field(None, min_length=1, max_length=2000)

    @field_validator("leave_type", "start_date", "end_date", "reason")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class LeaveRequestResponse(BaseSchema, TimestampMixin):
    """Leave request record."""

    id: int
    student_id: int
    student_name: Optional[str] = None
    student_number: Optional[str] = None
    leave_type: LeaveType
    start_date: Date
    end_date: Date
    duration_days: int
    reason: str
    status: LeaveStatus
    approved_by: Optional[int] = None
    approved_by_name: Optional[str] = None
    approval_date: Optional[datetime] = None
    admin_notes: Optional[str] = None
