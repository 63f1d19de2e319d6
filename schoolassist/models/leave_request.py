"""
Leave request database model.

A student's request to be absent over an inclusive date range, decided
by an admin.
"""

from datetime import date as Date, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date as SQLDate, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolassist.models.base.base_model import TimestampModel, enum_column_type
from schoolassist.models.base.enums import LeaveStatus, LeaveType

if TYPE_CHECKING:
    from schoolassist.models.admin import Admin
    from schoolassist.models.student import Student

__all__ = ["LeaveRequest"]


class LeaveRequest(TimestampModel):
    """
    Leave request entity.

    ``start_date <= end_date`` is the caller's responsibility; storage does
    not enforce it.
    """

    __tablename__ = "leave_requests"
    __table_args__ = (
        Index("ix_leave_request_student_status", "student_id", "status"),
        Index("ix_leave_request_dates", "start_date", "end_date"),
        Index("ix_leave_request_created_at", "created_at"),
    )

    student_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        comment="Student requesting leave"
    )
    leave_type: Mapped[LeaveType] = mapped_column(
        enum_column_type(LeaveType, "leave_type"),
        nullable=False
    )
    start_date: Mapped[Date] = mapped_column(
        SQLDate,
        nullable=False,
        comment="Leave start date (inclusive)"
    )
    end_date: Mapped[Date] = mapped_column(
        SQLDate,
        nullable=False,
        comment="Leave end date (inclusive)"
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[LeaveStatus] = mapped_column(
        enum_column_type(LeaveStatus, "leave_status"),
        nullable=False,
        default=LeaveStatus.PENDING,
        index=True
    )
    approved_by: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("admins.id", ondelete="SET NULL"),
        nullable=True,
        comment="Admin who approved or rejected the request"
    )
    approval_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    student: Mapped["Student"] = relationship("Student", lazy="joined")
    approver: Mapped[Optional["Admin"]] = relationship("Admin", lazy="joined")

    @property
    def duration_days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.end_date - self.start_date).days + 1

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def student_name(self) -> Optional[str]:
        return self.student.full_name if self.student else None

    @property
    def student_number(self) -> Optional[str]:
        return self.student.student_number if self.student else None

    @property
    def approved_by_name(self) -> Optional[str]:
        return self.approver.full_name if self.approver else None

    def __repr__(self) -> str:
        return (
            f"<LeaveRequest(id={self.id}, student_id={self.student_id}, "
            f"{self.start_date}..{self.end_date}, status={self.status})>"
        )
