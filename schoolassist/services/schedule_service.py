"""
Schedule service: CRUD, the conflict detector and date-based lookups.
"""

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from sqlalchemy.orm import Session

from schoolassist.core.exceptions import ValidationError
from schoolassist.core.pagination import paginate_items
from schoolassist.core.utils import coerce_optional_enum, utc_now
from schoolassist.models.base.enums import ScheduleStatus, ScheduleType
from schoolassist.models.base.types import AssignedTo
from schoolassist.models.schedule import Schedule
from schoolassist.repositories.person_repository import PersonRepository
from schoolassist.repositories.schedule_repository import ScheduleRepository
from schoolassist.schemas.common import PaginatedResponse
from schoolassist.schemas.schedule import ScheduleCreate, ScheduleResponse, ScheduleUpdate
from schoolassist.services.base.base_service import BaseService


def to_schedule_responses(session: Session, schedules: Sequence[Schedule]) -> List[ScheduleResponse]:
    """Map schedules to records, resolving assignee names in one pass."""
    names = PersonRepository(session).display_names(s.assigned_to for s in schedules)
    records = []
    for schedule in schedules:
        record = ScheduleResponse.model_validate(schedule)
        record.assigned_to_name = names.get(schedule.assigned_to)
        records.append(record)
    return records


def to_schedule_response(session: Session, schedule: Schedule) -> ScheduleResponse:
    return to_schedule_responses(session, [schedule])[0]


class ScheduleService(BaseService):
    """Classes and shifts assigned to admins or students."""

    def create(self, data: Union[ScheduleCreate, Mapping[str, Any]]) -> ScheduleResponse:
        """
        Create a schedule, active unless another status is given.

        Conflicts are not checked here; see ``check_conflicts``.
        """
        payload = self._validate(ScheduleCreate, data)

        def work(session):
            schedule = ScheduleRepository(session).add(Schedule(
                schedule_type=payload.schedule_type,
                title=payload.title,
                description=payload.description,
                assigned_to=payload.assigned_to,
                start_time=payload.start_time,
                end_time=payload.end_time,
                location=payload.location,
                recurrence_pattern=payload.recurrence_pattern,
                status=payload.status,
                created_by=payload.created_by,
            ))
            return to_schedule_response(session, schedule)

        record = self._run("create schedule", work)
        self._logger.info(
            "Schedule created",
            extra={"schedule_id": record.id, "assigned_to": str(payload.assigned_to)},
        )
        return record

    def find_by_id(self, schedule_id: int) -> Optional[ScheduleResponse]:
        def work(session):
            schedule = ScheduleRepository(session).find_by_id(schedule_id)
            return to_schedule_response(session, schedule) if schedule else None

        return self._run("find schedule", work)

    def find_all(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        schedule_type: Optional[Union[ScheduleType, str]] = None,
        assigned_to: Optional[AssignedTo] = None,
        status: Optional[Union[ScheduleStatus, str]] = None,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
    ) -> PaginatedResponse[ScheduleResponse]:
        params = self._pagination(page, limit)
        schedule_type = coerce_optional_enum(ScheduleType, schedule_type, field="schedule_type")
        status = coerce_optional_enum(ScheduleStatus, status)

        def work(session):
            result = ScheduleRepository(session).find_all(
                params,
                schedule_type=schedule_type,
                assigned_to=assigned_to,
                status=status,
                date_range_start=date_range_start,
                date_range_end=date_range_end,
            )
            records = to_schedule_responses(session, result.items)
            return paginate_items(items=records, total=result.total, params=params, mapper=lambda r: r)

        return self._run("fetch schedules", work)

    def update(
        self,
        schedule_id: int,
        data: Union[ScheduleUpdate, Mapping[str, Any]],
    ) -> Optional[ScheduleResponse]:
        """
        Change any provided field, status included. With no fields provided
        the current record is returned unchanged.
        """
        update = self._validate(ScheduleUpdate, data)
        changes = {name: getattr(update, name) for name in update.model_fields_set}

        def work(session):
            repo = ScheduleRepository(session)
            schedule = repo.find_by_id(schedule_id)
            if schedule is None:
                return None
            start = changes.get("start_time", schedule.start_time)
            end = changes.get("end_time", schedule.end_time)
            if end <= start:
                raise ValidationError(
                    "end_time must be after start_time",
                    field_errors={"end_time": [f"{end} is not after start_time {start}"]},
                )
            if changes:
                repo.update_fields(schedule, {**changes, "updated_at": utc_now()})
            return to_schedule_response(session, schedule)

        record = self._run("update schedule", work, {"schedule_id": schedule_id})
        if record is not None and changes:
            self._logger.info(
                "Schedule updated",
                extra={"schedule_id": schedule_id, "fields": sorted(changes)},
            )
        return record

    def delete(self, schedule_id: int) -> bool:
        return self._run(
            "delete schedule",
            lambda session: ScheduleRepository(session).delete_by_id(schedule_id),
        )

    def check_conflicts(
        self,
        assigned_to: AssignedTo,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[int] = None,
    ) -> List[ScheduleResponse]:
        """
        Active schedules of the same person that overlap the half-open range
        ``[start_time, end_time)``. Back-to-back schedules are not conflicts.
        """
        def work(session):
            conflicts = ScheduleRepository(session).check_conflicts(
                assigned_to, start_time, end_time, exclude_id
            )
            return to_schedule_responses(session, conflicts)

        conflicts = self._run("check schedule conflicts", work)
        if conflicts:
            self._logger.info(
                "Schedule conflict found",
                extra={"assigned_to": str(assigned_to), "conflict_ids": [c.id for c in conflicts]},
            )
        return conflicts

    def find_by_date_range(
        self,
        start_date: date,
        end_date: date,
        schedule_type: Optional[Union[ScheduleType, str]] = None,
        assigned_to: Optional[AssignedTo] = None,
    ) -> List[ScheduleResponse]:
        schedule_type = coerce_optional_enum(ScheduleType, schedule_type, field="schedule_type")

        def work(session):
            rows = ScheduleRepository(session).find_by_date_range(
                start_date, end_date, schedule_type, assigned_to
            )
            return to_schedule_responses(session, rows)

        return self._run("fetch schedules by date range", work)

    def find_by_person(
        self,
        assigned_to: AssignedTo,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        status: Optional[Union[ScheduleStatus, str]] = None,
    ) -> PaginatedResponse[ScheduleResponse]:
        return self.find_all(page=page, limit=limit, assigned_to=assigned_to, status=status)

    def get_today_schedules(
        self,
        assigned_to: Optional[AssignedTo] = None,
        today: Optional[date] = None,
    ) -> List[ScheduleResponse]:
        """Active schedules starting today, optionally for one person."""
        day = today or utc_now().date()

        def work(session):
            rows = ScheduleRepository(session).find_starting_on(day, assigned_to)
            return to_schedule_responses(session, rows)

        return self._run("fetch today's schedules", work)

    def get_upcoming_schedules(
        self,
        assigned_to: Optional[AssignedTo] = None,
        days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[ScheduleResponse]:
        """
        Active schedules starting after ``now`` and within ``days`` days.

        ``days`` defaults to ``UPCOMING_SCHEDULE_DAYS``.
        """
        if days is None:
            days = self.settings.UPCOMING_SCHEDULE_DAYS
        start = now or utc_now()
        until = start + timedelta(days=days)

        def work(session):
            rows = ScheduleRepository(session).find_starting_between(start, until, assigned_to)
            return to_schedule_responses(session, rows)

        return self._run("fetch upcoming schedules", work)

    def get_statistics(
        self,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        day = today or utc_now().date()
        return self._run(
            "fetch schedule statistics",
            lambda session: ScheduleRepository(session).get_statistics(
                date_range_start, date_range_end, day
            ),
        )
