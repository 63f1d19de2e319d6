"""
Shift exchange schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, model_validator

from schoolassist.models.base.enums import ExchangeStatus
from schoolassist.schemas.common import BaseSchema, TimestampMixin

__all__ = [
    "ShiftExchangeCreate",
    "ShiftExchangeResponse",
]


class ShiftExchangeCreate(BaseSchema):
    """Request to hand a schedule to another admin."""

    original_schedule_id: int = Field(..., gt=0)
    requesting_admin_id: int = Field(..., gt=0)
    target_admin_id: int = Field(..., gt=0)
    proposed_start_time: datetime
    proposed_end_time: datetime
    reason: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def validate_time_order(self) -> "ShiftExchangeCreate":
        if self.proposed_end_time <= self.proposed_start_time:
            raise ValueError("proposed_end_time must be after proposed_start_time")
        return self


class ShiftExchangeResponse(BaseSchema, TimestampMixin):
    """Shift exchange record with the original schedule's details."""

    id: int
    original_schedule_id: int
    original_title: Optional[str] = None
    original_start_time: Optional[datetime] = None
    original_end_time: Optional[datetime] = None
    requesting_admin_id: int
    requesting_admin_name: Optional[str] = None
    target_admin_id: int
    target_admin_name: Optional[str] = None
    proposed_start_time: datetime
    proposed_end_time: datetime
    reason: Optional[str] = None
    status: ExchangeStatus
    exchange_notes: Optional[str] = None
    admin_role: Optional[Literal["requesting", "target"]] = Field(
        None,
        description="Set when listing by admin: the admin's side of the exchange",
    )
