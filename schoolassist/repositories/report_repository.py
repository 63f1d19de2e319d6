"""
Report repository.
"""

from datetime import date, datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from schoolassist.core.utils import start_of_day, start_of_next_day
from schoolassist.models.base.enums import ReportType
from schoolassist.models.report import Report
from schoolassist.repositories.base.base_repository import BaseRepository, PageResult
from schoolassist.schemas.common import PaginationParams


class ReportRepository(BaseRepository[Report]):
    """Repository for stored reports."""

    def __init__(self, session: Session):
        super().__init__(Report, session)

    def find_all(
        self,
        pagination: PaginationParams,
        report_type: Optional[ReportType] = None,
        generated_by: Optional[int] = None,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
    ) -> PageResult[Report]:
        """Find reports by creation date and author, newest first."""
        query = self.query()

        if report_type:
            query = query.filter(Report.report_type == report_type)

        if generated_by:
            query = query.filter(Report.generated_by == generated_by)

        if date_range_start:
            query = query.filter(Report.created_at >= start_of_day(date_range_start))

        if date_range_end:
            query = query.filter(Report.created_at < start_of_next_day(date_range_end))

        query = query.order_by(Report.created_at.desc(), Report.id.desc())

        return self._paginate_query(query, pagination)

    def get_statistics(
        self,
        week_since: datetime,
        month_since: datetime,
        recent_limit: int,
    ) -> Dict[str, Any]:
        """Counts by type, weekly and monthly volume, and the newest reports."""
        by_type = self.count_grouped(Report.report_type)
        recent = (
            self.query()
            .order_by(Report.created_at.desc(), Report.id.desc())
            .limit(recent_limit)
            .all()
        )

        return {
            "total": sum(by_type.values()),
            "by_type": {t.value: by_type.get(t, 0) for t in ReportType},
            "this_week": self.count(Report.created_at >= week_since),
            "this_month": self.count(Report.created_at >= month_since),
            "recent": [
                {
                    "id": report.id,
                    "title": report.title,
                    "report_type": report.report_type.value,
                    "created_at": report.created_at,
                }
                for report in recent
            ],
        }
