"""
Shift exchange database model.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolassist.models.base.base_model import TimestampModel, enum_column_type
from schoolassist.models.base.enums import ExchangeStatus

if TYPE_CHECKING:
    from schoolassist.models.admin import Admin
    from schoolassist.models.schedule import Schedule

__all__ = ["ShiftExchange"]


class ShiftExchange(TimestampModel):
    """
    Request from one admin to hand a schedule over to another admin with a
    proposed time window.

    Nothing prevents ``requesting_admin_id == target_admin_id``.
    """

    __tablename__ = "shift_exchanges"
    __table_args__ = (
        Index("ix_shift_exchange_status", "status"),
        Index("ix_shift_exchange_requesting_admin", "requesting_admin_id"),
        Index("ix_shift_exchange_target_admin", "target_admin_id"),
    )

    original_schedule_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("schedules.id", ondelete="CASCADE"),
        nullable=False
    )
    requesting_admin_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("admins.id", ondelete="CASCADE"),
        nullable=False
    )
    target_admin_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("admins.id", ondelete="CASCADE"),
        nullable=False
    )
    proposed_start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    proposed_end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[ExchangeStatus] = mapped_column(
        enum_column_type(ExchangeStatus, "exchange_status"),
        nullable=False,
        default=ExchangeStatus.PENDING
    )
    exchange_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    original_schedule: Mapped[Optional["Schedule"]] = relationship(
        "Schedule",
        back_populates="exchanges",
        lazy="joined",
    )
    requesting_admin: Mapped["Admin"] = relationship(
        "Admin",
        foreign_keys=[requesting_admin_id],
        lazy="joined",
    )
    target_admin: Mapped["Admin"] = relationship(
        "Admin",
        foreign_keys=[target_admin_id],
        lazy="joined",
    )

    @property
    def original_title(self) -> Optional[str]:
        return self.original_schedule.title if self.original_schedule else None

    @property
    def original_start_time(self) -> Optional[datetime]:
        return self.original_schedule.start_time if self.original_schedule else None

    @property
    def original_end_time(self) -> Optional[datetime]:
        return self.original_schedule.end_time if self.original_schedule else None

    @property
    def requesting_admin_name(self) -> Optional[str]:
        return self.requesting_admin.full_name if self.requesting_admin else None

    @property
    def target_admin_name(self) -> Optional[str]:
        return self.target_admin.full_name if self.target_admin else None
