"""
Schedule database model.

A class or shift occupying a time range, assigned to exactly one admin or
student through the composite ``assigned_to`` attribute.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, composite, mapped_column, relationship

from schoolassist.models.base.base_model import TimestampModel, enum_column_type
from schoolassist.models.base.enums import PersonType, ScheduleStatus, ScheduleType
from schoolassist.models.base.types import AssignedTo

if TYPE_CHECKING:
    from schoolassist.models.admin import Admin
    from schoolassist.models.shift_exchange import ShiftExchange

__all__ = ["Schedule"]


class Schedule(TimestampModel):
    """
    Schedule entity.

    Ranges are half-open: a schedule ending at 12:00 and one starting at
    12:00 for the same person do not conflict.
    """

    __tablename__ = "schedules"
    __table_args__ = (
        Index("ix_schedule_assigned_to", "assigned_to_type", "assigned_to_id"),
        Index("ix_schedule_time_range", "start_time", "end_time"),
        Index("ix_schedule_status", "status"),
    )

    schedule_type: Mapped[ScheduleType] = mapped_column(
        enum_column_type(ScheduleType, "schedule_type"),
        nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    assigned_to_type: Mapped[PersonType] = mapped_column(
        enum_column_type(PersonType, "person_type"),
        nullable=False
    )
    assigned_to_id: Mapped[int] = mapped_column(Integer, nullable=False)
    assigned_to: Mapped[AssignedTo] = composite(AssignedTo, "assigned_to_type", "assigned_to_id")

    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    recurrence_pattern: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    status: Mapped[ScheduleStatus] = mapped_column(
        enum_column_type(ScheduleStatus, "schedule_status"),
        nullable=False,
        default=ScheduleStatus.ACTIVE
    )
    created_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("admins.id", ondelete="CASCADE"),
        nullable=False
    )

    creator: Mapped["Admin"] = relationship("Admin", lazy="joined")
    exchanges: Mapped[List["ShiftExchange"]] = relationship(
        "ShiftExchange",
        back_populates="original_schedule",
        passive_deletes=True,
    )

    @property
    def created_by_name(self) -> Optional[str]:
        return self.creator.full_name if self.creator else None

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)

    def __repr__(self) -> str:
        return (
            f"<Schedule(id={self.id}, assigned_to={self.assigned_to}, "
            f"{self.start_time}..{self.end_time}, status={self.status})>"
        )
