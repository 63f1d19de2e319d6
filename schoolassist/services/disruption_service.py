"""
Disruption service.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from schoolassist.core.constants import DEFAULT_RECENT_DISRUPTIONS
from schoolassist.core.exceptions import ValidationError
from schoolassist.core.pagination import paginate_items
from schoolassist.core.utils import coerce_optional_enum, start_of_day, start_of_next_day, utc_now
from schoolassist.models.base.enums import DisruptionSeverity, DisruptionStatus, DisruptionType
from schoolassist.models.disruption import Disruption
from schoolassist.repositories.disruption_repository import DisruptionRepository
from schoolassist.schemas.common import PaginatedResponse
from schoolassist.schemas.disruption import DisruptionCreate, DisruptionResponse, DisruptionUpdate
from schoolassist.services.base.base_service import BaseService


def _to_response(disruption: Disruption) -> DisruptionResponse:
    return DisruptionResponse.model_validate(disruption)


class DisruptionService(BaseService):
    """Outages, cancellations and emergencies logged by admins."""

    def create(self, data: Union[DisruptionCreate, Mapping[str, Any]]) -> DisruptionResponse:
        payload = self._validate(DisruptionCreate, data)

        def work(session):
            disruption = DisruptionRepository(session).add(Disruption(
                **payload.model_dump(),
                status=DisruptionStatus.ACTIVE,
            ))
            return _to_response(disruption)

        record = self._run("create disruption", work)
        self._logger.info(
            "Disruption reported",
            extra={"disruption_id": record.id, "severity": record.severity.value},
        )
        return record

    def find_by_id(self, disruption_id: int) -> Optional[DisruptionResponse]:
        def work(session):
            disruption = DisruptionRepository(session).find_by_id(disruption_id)
            return _to_response(disruption) if disruption else None

        return self._run("find disruption", work)

    def find_all(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        disruption_type: Optional[Union[DisruptionType, str]] = None,
        severity: Optional[Union[DisruptionSeverity, str]] = None,
        status: Optional[Union[DisruptionStatus, str]] = None,
        reported_by: Optional[int] = None,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
    ) -> PaginatedResponse[DisruptionResponse]:
        params = self._pagination(page, limit)
        disruption_type = coerce_optional_enum(DisruptionType, disruption_type, field="disruption_type")
        severity = coerce_optional_enum(DisruptionSeverity, severity, field="severity")
        status = coerce_optional_enum(DisruptionStatus, status)

        def work(session):
            result = DisruptionRepository(session).find_all(
                params,
                disruption_type=disruption_type,
                severity=severity,
                status=status,
                reported_by=reported_by,
                date_range_start=date_range_start,
                date_range_end=date_range_end,
            )
            return paginate_items(
                items=result.items, total=result.total, params=params, mapper=_to_response
            )

        return self._run("fetch disruptions", work)

    def get_active(self) -> List[DisruptionResponse]:
        """Active and investigating disruptions, most severe first."""
        return self._run(
            "fetch active disruptions",
            lambda session: [_to_response(d) for d in DisruptionRepository(session).find_active()],
        )

    def update(
        self,
        disruption_id: int,
        data: Union[DisruptionUpdate, Mapping[str, Any]],
    ) -> Optional[DisruptionResponse]:
        changes = self._validate(DisruptionUpdate, data).model_dump(exclude_unset=True)

        def work(session):
            repo = DisruptionRepository(session)
            disruption = repo.find_by_id(disruption_id)
            if disruption is None:
                return None
            end = changes.get("end_time")
            if end is not None and end < disruption.start_time:
                raise ValidationError(
                    "end_time must not be before start_time",
                    field_errors={"end_time": [f"{end} is before start_time {disruption.start_time}"]},
                )
            if changes:
                repo.update_fields(disruption, {**changes, "updated_at": utc_now()})
            return _to_response(disruption)

        return self._run("update disruption", work, {"disruption_id": disruption_id})

    def resolve(
        self,
        disruption_id: int,
        resolution_notes: Optional[str] = None,
        resolved_at: Optional[datetime] = None,
    ) -> Optional[DisruptionResponse]:
        """Mark resolved, closing the disruption at ``resolved_at`` (default now)."""
        end_time = resolved_at or utc_now()
        record = self.update(disruption_id, {
            "status": DisruptionStatus.RESOLVED,
            "end_time": end_time,
            "resolution_notes": resolution_notes,
        })
        if record is not None:
            self._logger.info(
                "Disruption resolved",
                extra={"disruption_id": disruption_id, "duration_minutes": record.duration_minutes},
            )
        return record

    def set_investigating(self, disruption_id: int) -> Optional[DisruptionResponse]:
        return self.update(disruption_id, {"status": DisruptionStatus.INVESTIGATING})

    def delete(self, disruption_id: int) -> bool:
        return self._run(
            "delete disruption",
            lambda session: DisruptionRepository(session).delete_by_id(disruption_id),
        )

    def find_by_schedule(self, schedule_id: int) -> List[DisruptionResponse]:
        return self._run(
            "fetch disruptions for schedule",
            lambda session: [
                _to_response(d) for d in DisruptionRepository(session).find_by_schedule(schedule_id)
            ],
        )

    def find_by_date_range(self, start_date: date, end_date: date) -> List[DisruptionResponse]:
        """Disruptions running at any point between the two dates, inclusive."""
        start, end = start_of_day(start_date), start_of_next_day(end_date)
        return self._run(
            "fetch disruptions by date range",
            lambda session: [
                _to_response(d) for d in DisruptionRepository(session).find_in_window(start, end)
            ],
        )

    def get_recent(self, limit: int = DEFAULT_RECENT_DISRUPTIONS) -> List[DisruptionResponse]:
        return self._run(
            "fetch recent disruptions",
            lambda session: [_to_response(d) for d in DisruptionRepository(session).find_recent(limit)],
        )

    def get_statistics(
        self,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
    ) -> Dict[str, Any]:
        return self._run(
            "fetch disruption statistics",
            lambda session: DisruptionRepository(session).get_statistics(
                date_range_start, date_range_end
            ),
        )
