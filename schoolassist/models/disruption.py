"""
Disruption database model.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolassist.models.base.base_model import TimestampModel, enum_column_type
from schoolassist.models.base.enums import DisruptionSeverity, DisruptionStatus, DisruptionType

if TYPE_CHECKING:
    from schoolassist.models.admin import Admin

__all__ = ["Disruption"]


class Disruption(TimestampModel):
    """Logged outage, cancellation or emergency affecting schedules."""

    __tablename__ = "disruptions"
    __table_args__ = (
        Index("ix_disruption_status", "status"),
        Index("ix_disruption_start_time", "start_time"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    disruption_type: Mapped[DisruptionType] = mapped_column(
        enum_column_type(DisruptionType, "disruption_type"),
        nullable=False
    )
    severity: Mapped[DisruptionSeverity] = mapped_column(
        enum_column_type(DisruptionSeverity, "disruption_severity"),
        nullable=False,
        default=DisruptionSeverity.MEDIUM
    )
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    affected_schedules: Mapped[Optional[List[int]]] = mapped_column(
        JSON,
        nullable=True,
        comment="Ids of schedules affected by the disruption"
    )
    reported_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("admins.id", ondelete="CASCADE"),
        nullable=False
    )
    status: Mapped[DisruptionStatus] = mapped_column(
        enum_column_type(DisruptionStatus, "disruption_status"),
        nullable=False,
        default=DisruptionStatus.ACTIVE
    )
    resolution_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    reporter: Mapped["Admin"] = relationship("Admin", lazy="joined")

    @property
    def reported_by_name(self) -> Optional[str]:
        return self.reporter.full_name if self.reporter else None

    @property
    def duration_minutes(self) -> Optional[int]:
        if self.end_time is None:
            return None
        return int((self.end_time - self.start_time).total_seconds() // 60)

    def affects_schedule(self, schedule_id: int) -> bool:
        return schedule_id in (self.affected_schedules or [])
