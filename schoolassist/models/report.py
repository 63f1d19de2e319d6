"""
Report database model.
"""

from datetime import date as Date
from typing import TYPE_CHECKING, Any, Dict, Optional

from sqlalchemy import JSON, Date as SQLDate, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolassist.models.base.base_model import TimestampModel, enum_column_type
from schoolassist.models.base.enums import ReportType

if TYPE_CHECKING:
    from schoolassist.models.admin import Admin

__all__ = ["Report"]


class Report(TimestampModel):
    """Stored report; ``data`` holds whatever payload the generator produced."""

    __tablename__ = "reports"
    __table_args__ = (
        Index("ix_report_type", "report_type"),
        Index("ix_report_created_at", "created_at"),
    )

    report_type: Mapped[ReportType] = mapped_column(
        enum_column_type(ReportType, "report_type"),
        nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    generated_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("admins.id", ondelete="CASCADE"),
        nullable=False
    )
    data: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    filters: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    date_range_start: Mapped[Optional[Date]] = mapped_column(SQLDate, nullable=True)
    date_range_end: Mapped[Optional[Date]] = mapped_column(SQLDate, nullable=True)
    file_path: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    generator: Mapped["Admin"] = relationship("Admin", lazy="joined")

    @property
    def generated_by_name(self) -> Optional[str]:
        return self.generator.full_name if self.generator else None
