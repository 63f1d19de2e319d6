"""
Disruption repository.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from schoolassist.core.utils import start_of_day, start_of_next_day
from schoolassist.models.base.enums import DisruptionSeverity, DisruptionStatus, DisruptionType
from schoolassist.models.disruption import Disruption
from schoolassist.repositories.base.base_repository import BaseRepository, PageResult
from schoolassist.schemas.common import PaginationParams


class DisruptionRepository(BaseRepository[Disruption]):
    """Repository for disruptions."""

    def __init__(self, session: Session):
        super().__init__(Disruption, session)

    def find_all(
        self,
        pagination: PaginationParams,
        disruption_type: Optional[DisruptionType] = None,
        severity: Optional[DisruptionSeverity] = None,
        status: Optional[DisruptionStatus] = None,
        reported_by: Optional[int] = None,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
    ) -> PageResult[Disruption]:
        """Find disruptions matching the filters, latest start first."""
        query = self.query()

        if disruption_type:
            query = query.filter(Disruption.disruption_type == disruption_type)

        if severity:
            query = query.filter(Disruption.severity == severity)

        if status:
            query = query.filter(Disruption.status == status)

        if reported_by:
            query = query.filter(Disruption.reported_by == reported_by)

        if date_range_start:
            query = query.filter(Disruption.start_time >= start_of_day(date_range_start))

        if date_range_end:
            query = query.filter(Disruption.start_time < start_of_next_day(date_range_end))

        query = query.order_by(Disruption.start_time.desc(), Disruption.id.desc())

        return self._paginate_query(query, pagination)

    def find_active(self) -> List[Disruption]:
        """Unresolved disruptions, most severe first."""
        rows = (
            self.query()
            .filter(Disruption.status.in_([DisruptionStatus.ACTIVE, DisruptionStatus.INVESTIGATING]))
            .order_by(Disruption.start_time.desc(), Disruption.id.desc())
            .all()
        )
        # stable sort keeps the start_time order inside each severity
        return sorted(rows, key=lambda d: d.severity.rank, reverse=True)

    def find_by_schedule(self, schedule_id: int) -> List[Disruption]:
        """Disruptions whose ``affected_schedules`` list contains the id."""
        # JSON containment differs per backend, so the list is checked in Python
        rows = (
            self.query()
            .filter(Disruption.affected_schedules.isnot(None))
            .order_by(Disruption.start_time.desc(), Disruption.id.desc())
            .all()
        )
        return [d for d in rows if d.affects_schedule(schedule_id)]

    def find_in_window(self, start: datetime, end: datetime) -> List[Disruption]:
        """
        Disruptions overlapping ``[start, end)``; an open disruption (no end
        time) is treated as still running.
        """
        return (
            self.query()
            .filter(
                Disruption.start_time < end,
                or_(Disruption.end_time.is_(None), Disruption.end_time >= start),
            )
            .order_by(Disruption.start_time.desc(), Disruption.id.desc())
            .all()
        )

    def find_recent(self, limit: int) -> List[Disruption]:
        return (
            self.query()
            .order_by(Disruption.created_at.desc(), Disruption.id.desc())
            .limit(limit)
            .all()
        )

    def get_statistics(
        self,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
    ) -> Dict[str, Any]:
        criteria = []
        if date_range_start:
            criteria.append(Disruption.start_time >= start_of_day(date_range_start))
        if date_range_end:
            criteria.append(Disruption.start_time < start_of_next_day(date_range_end))

        by_type = self.count_grouped(Disruption.disruption_type, *criteria)
        by_severity = self.count_grouped(Disruption.severity, *criteria)
        by_status = self.count_grouped(Disruption.status, *criteria)

        resolved = (
            self.query()
            .filter(Disruption.end_time.isnot(None), *criteria)
            .all()
        )
        durations = [d.duration_minutes for d in resolved]
        average_duration = round(sum(durations) / len(durations), 2) if durations else None

        return {
            "total": sum(by_status.values()),
            "by_type": {t.value: by_type.get(t, 0) for t in DisruptionType},
            "by_severity": {s.value: by_severity.get(s, 0) for s in DisruptionSeverity},
            "by_status": {s.value: by_status.get(s, 0) for s in DisruptionStatus},
            "average_duration_minutes": average_duration,
        }
