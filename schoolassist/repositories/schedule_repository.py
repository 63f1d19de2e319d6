"""
Schedule repository: conflict detection, date-range queries and the
reassignment used when a shift exchange is accepted.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from schoolassist.core.utils import start_of_day, start_of_next_day
from schoolassist.models.base.enums import ScheduleStatus, ScheduleType
from schoolassist.models.base.types import AssignedTo
from schoolassist.models.schedule import Schedule
from schoolassist.repositories.base.base_repository import BaseRepository, PageResult
from schoolassist.schemas.common import PaginationParams


class ScheduleRepository(BaseRepository[Schedule]):
    """Repository for schedules."""

    def __init__(self, session: Session):
        super().__init__(Schedule, session)

    # ============================================================================
    # SEARCH AND FILTERING
    # ============================================================================

    def find_all(
        self,
        pagination: PaginationParams,
        schedule_type: Optional[ScheduleType] = None,
        assigned_to: Optional[AssignedTo] = None,
        status: Optional[ScheduleStatus] = None,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
    ) -> PageResult[Schedule]:
        """Find schedules matching the filters, earliest start first."""
        query = self.query()

        if schedule_type:
            query = query.filter(Schedule.schedule_type == schedule_type)

        if assigned_to:
            query = query.filter(Schedule.assigned_to == assigned_to)

        if status:
            query = query.filter(Schedule.status == status)

        if date_range_start:
            lower = start_of_day(date_range_start)
            query = query.filter(or_(
                Schedule.start_time >= lower,
                Schedule.end_time >= lower,
            ))

        if date_range_end:
            upper = start_of_next_day(date_range_end)
            query = query.filter(or_(
                Schedule.start_time < upper,
                Schedule.end_time < upper,
            ))

        query = query.order_by(Schedule.start_time.asc(), Schedule.id.asc())

        return self._paginate_query(query, pagination)

    def find_by_date_range(
        self,
        start_date: date,
        end_date: date,
        schedule_type: Optional[ScheduleType] = None,
        assigned_to: Optional[AssignedTo] = None,
    ) -> List[Schedule]:
        """
        Schedules whose calendar days intersect ``[start_date, end_date]``:
        starting on or before ``end_date`` and ending on or after
        ``start_date``.
        """
        query = self.query().filter(
            Schedule.start_time < start_of_next_day(end_date),
            Schedule.end_time >= start_of_day(start_date),
        )

        if schedule_type:
            query = query.filter(Schedule.schedule_type == schedule_type)

        if assigned_to:
            query = query.filter(Schedule.assigned_to == assigned_to)

        return query.order_by(Schedule.start_time.asc(), Schedule.id.asc()).all()

    def find_starting_on(self, day: date, assigned_to: Optional[AssignedTo] = None) -> List[Schedule]:
        """Active schedules that start on ``day``."""
        query = self.query().filter(
            Schedule.status == ScheduleStatus.ACTIVE,
            Schedule.start_time >= start_of_day(day),
            Schedule.start_time < start_of_next_day(day),
        )
        if assigned_to:
            query = query.filter(Schedule.assigned_to == assigned_to)
        return query.order_by(Schedule.start_time.asc(), Schedule.id.asc()).all()

    def find_starting_between(
        self,
        after: datetime,
        until: datetime,
        assigned_to: Optional[AssignedTo] = None,
    ) -> List[Schedule]:
        """Active schedules with ``after < start_time <= until``."""
        query = self.query().filter(
            Schedule.status == ScheduleStatus.ACTIVE,
            Schedule.start_time > after,
            Schedule.start_time <= until,
        )
        if assigned_to:
            query = query.filter(Schedule.assigned_to == assigned_to)
        return query.order_by(Schedule.start_time.asc(), Schedule.id.asc()).all()

    # ============================================================================
    # CONFLICT DETECTION
    # ============================================================================

    def check_conflicts(
        self,
        assigned_to: AssignedTo,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[int] = None,
    ) -> List[Schedule]:
        """
        Active schedules of the same person overlapping ``[start_time, end_time)``.

        Strict inequalities: a schedule ending exactly at ``start_time`` (or
        starting exactly at ``end_time``) is back-to-back, not a conflict.
        """
        query = self.query().filter(
            Schedule.assigned_to == assigned_to,
            Schedule.status == ScheduleStatus.ACTIVE,
            and_(
                Schedule.start_time < end_time,
                Schedule.end_time > start_time,
            ),
        )

        if exclude_id is not None:
            query = query.filter(Schedule.id != exclude_id)

        return query.order_by(Schedule.start_time.asc()).all()

    # ============================================================================
    # REASSIGNMENT
    # ============================================================================

    def reassign(
        self,
        schedule_id: int,
        assigned_to: AssignedTo,
        start_time: datetime,
        end_time: datetime,
        updated_at: datetime,
    ) -> int:
        """
        Move a schedule to another person and time window.

        Returns:
            Number of rows updated; 0 when the schedule no longer exists
        """
        return self.update_by_id(schedule_id, {
            Schedule.assigned_to_type: assigned_to.person_type,
            Schedule.assigned_to_id: assigned_to.person_id,
            Schedule.start_time: start_time,
            Schedule.end_time: end_time,
            Schedule.updated_at: updated_at,
        })

    # ============================================================================
    # STATISTICS
    # ============================================================================

    def get_statistics(
        self,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        criteria = []
        if date_range_start:
            criteria.append(Schedule.start_time >= start_of_day(date_range_start))
        if date_range_end:
            criteria.append(Schedule.start_time < start_of_next_day(date_range_end))

        by_type = self.count_grouped(Schedule.schedule_type, *criteria)
        by_status = self.count_grouped(Schedule.status, *criteria)

        today_count = 0
        if today is not None:
            today_count = self.count(
                Schedule.start_time >= start_of_day(today),
                Schedule.start_time < start_of_next_day(today),
                *criteria,
            )

        return {
            "total": sum(by_status.values()),
            "by_type": {t.value: by_type.get(t, 0) for t in ScheduleType},
            "by_status": {s.value: by_status.get(s, 0) for s in ScheduleStatus},
            "active_count": by_status.get(ScheduleStatus.ACTIVE, 0),
            "today_count": today_count,
        }
