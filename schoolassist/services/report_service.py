"""
Report service. Stores reports produced elsewhere and counts them; it does
not build report contents.
"""

from datetime import date, datetime, timedelta
from typing import Any, Dict, Mapping, Optional, Union

from schoolassist.core.constants import MONTH_WINDOW_DAYS, RECENT_REPORTS, RECENT_WINDOW_DAYS
from schoolassist.core.pagination import paginate_items
from schoolassist.core.utils import coerce_optional_enum, utc_now
from schoolassist.models.base.enums import ReportType
from schoolassist.models.report import Report
from schoolassist.repositories.report_repository import ReportRepository
from schoolassist.schemas.common import PaginatedResponse
from schoolassist.schemas.report import ReportCreate, ReportResponse
from schoolassist.services.base.base_service import BaseService


def _to_response(report: Report) -> ReportResponse:
    return ReportResponse.model_validate(report)


class ReportService(BaseService):

    def create(self, data: Union[ReportCreate, Mapping[str, Any]]) -> ReportResponse:
        payload = self._validate(ReportCreate, data)

        def work(session):
            report = ReportRepository(session).add(Report(**payload.model_dump()))
            return _to_response(report)

        record = self._run("create report", work)
        self._logger.info(
            "Report stored",
            extra={"report_id": record.id, "report_type": record.report_type.value},
        )
        return record

    def find_by_id(self, report_id: int) -> Optional[ReportResponse]:
        def work(session):
            report = ReportRepository(session).find_by_id(report_id)
            return _to_response(report) if report else None

        return self._run("find report", work)

    def find_all(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        report_type: Optional[Union[ReportType, str]] = None,
        generated_by: Optional[int] = None,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
    ) -> PaginatedResponse[ReportResponse]:
        params = self._pagination(page, limit)
        report_type = coerce_optional_enum(ReportType, report_type, field="report_type")

        def work(session):
            result = ReportRepository(session).find_all(
                params,
                report_type=report_type,
                generated_by=generated_by,
                date_range_start=date_range_start,
                date_range_end=date_range_end,
            )
            return paginate_items(
                items=result.items, total=result.total, params=params, mapper=_to_response
            )

        return self._run("fetch reports", work)

    def delete(self, report_id: int) -> bool:
        return self._run(
            "delete report",
            lambda session: ReportRepository(session).delete_by_id(report_id),
        )

    def get_statistics(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or utc_now()
        return self._run(
            "fetch report statistics",
            lambda session: ReportRepository(session).get_statistics(
                week_since=now - timedelta(days=RECENT_WINDOW_DAYS),
                month_since=now - timedelta(days=MONTH_WINDOW_DAYS),
                recent_limit=RECENT_REPORTS,
            ),
        )
