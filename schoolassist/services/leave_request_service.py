"""
Leave request service.

Creation, listing, the status state machine and the advisory overlap check.
Status transitions are permissive: any status may follow any other, including
leaving approved, rejected or cancelled. Callers that need terminal states
enforce that themselves (``LeaveRequestResponse.status.is_terminal``).
"""

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Union

from schoolassist.core.constants import RECENT_WINDOW_DAYS
from schoolassist.core.exceptions import ValidationError
from schoolassist.core.logging import log_execution_time
from schoolassist.core.pagination import paginate_items
from schoolassist.core.utils import coerce_enum, coerce_optional_enum, utc_now
from schoolassist.models.base.enums import LeaveStatus, LeaveType
from schoolassist.models.leave_request import LeaveRequest
from schoolassist.repositories.leave_request_repository import LeaveRequestRepository
from schoolassist.schemas.common import PaginatedResponse
from schoolassist.schemas.leave_request import (
    LeaveRequestCreate,
    LeaveRequestResponse,
    LeaveRequestUpdate,
)
from schoolassist.services.base.base_service import BaseService


def _to_response(leave: LeaveRequest) -> LeaveRequestResponse:
    return LeaveRequestResponse.model_validate(leave)


class LeaveRequestService(BaseService):
    """Leave requests for students, decided by admins."""

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def create(self, data: Union[LeaveRequestCreate, Mapping[str, Any]]) -> LeaveRequestResponse:
        """
        Create a pending leave request.

        Overlap with existing leave is not checked here; call
        ``check_overlapping`` first if the caller wants to refuse overlaps.
        """
        payload = self._validate(LeaveRequestCreate, data)

        def work(session):
            repo = LeaveRequestRepository(session)
            leave = repo.add(LeaveRequest(
                student_id=payload.student_id,
                leave_type=payload.leave_type,
                start_date=payload.start_date,
                end_date=payload.end_date,
                reason=payload.reason,
                status=LeaveStatus.PENDING,
            ))
            return _to_response(leave)

        record = self._run("create leave request", work, {"student_id": payload.student_id})
        self._logger.info(
            "Leave request created",
            extra={"leave_request_id": record.id, "student_id": record.student_id},
        )
        return record

    def find_by_id(self, leave_id: int) -> Optional[LeaveRequestResponse]:
        def work(session):
            leave = LeaveRequestRepository(session).find_by_id(leave_id)
            return _to_response(leave) if leave else None

        return self._run("find leave request", work)

    def find_all(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        status: Optional[Union[LeaveStatus, str]] = None,
        leave_type: Optional[Union[LeaveType, str]] = None,
        student_id: Optional[int] = None,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
    ) -> PaginatedResponse[LeaveRequestResponse]:
        params = self._pagination(page, limit)
        status = coerce_optional_enum(LeaveStatus, status)
        leave_type = coerce_optional_enum(LeaveType, leave_type, field="leave_type")

        def work(session):
            result = LeaveRequestRepository(session).find_all(
                params,
                status=status,
                leave_type=leave_type,
                student_id=student_id,
                date_range_start=date_range_start,
                date_range_end=date_range_end,
            )
            return paginate_items(
                items=result.items,
                total=result.total,
                params=params,
                mapper=_to_response,
            )

        return self._run("fetch leave requests", work)

    def update(
        self,
        leave_id: int,
        data: Union[LeaveRequestUpdate, Mapping[str, Any]],
    ) -> Optional[LeaveRequestResponse]:
        """
        Change the request details. Only fields that were provided are
        written; with none provided the current record is returned.
        """
        changes = self._validate(LeaveRequestUpdate, data).model_dump(exclude_unset=True)

        def work(session):
            repo = LeaveRequestRepository(session)
            leave = repo.find_by_id(leave_id)
            if leave is None:
                return None
            start = changes.get("start_date", leave.start_date)
            end = changes.get("end_date", leave.end_date)
            if end < start:
                raise ValidationError(
                    "end_date must be on or after start_date",
                    field_errors={"end_date": [f"{end} is before start_date {start}"]},
                )
            if changes:
                repo.update_fields(leave, {**changes, "updated_at": utc_now()})
            return _to_response(leave)

        return self._run("update leave request", work, {"leave_request_id": leave_id})

    def delete(self, leave_id: int) -> bool:
        deleted = self._run(
            "delete leave request",
            lambda session: LeaveRequestRepository(session).delete_by_id(leave_id),
        )
        if deleted:
            self._logger.info("Leave request deleted", extra={"leave_request_id": leave_id})
        return deleted

    # -------------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------------

    def update_status(
        self,
        leave_id: int,
        status: Union[LeaveStatus, str],
        approved_by: Optional[int] = None,
        admin_notes: Optional[str] = None,
    ) -> Optional[LeaveRequestResponse]:
        """
        Set the status of a leave request.

        ``approved_by`` and ``approval_date`` are stamped only for approved or
        rejected, and only when an approver is given. ``updated_at`` is
        always stamped.

        Returns:
            The updated record, or None if the request does not exist

        Raises:
            InvalidStatusError: if ``status`` is not a leave status
        """
        new_status = coerce_enum(LeaveStatus, status)

        def work(session):
            repo = LeaveRequestRepository(session)
            leave = repo.find_by_id(leave_id)
            if leave is None:
                return None

            now = utc_now()
            values: Dict[str, Any] = {"status": new_status, "updated_at": now}
            if new_status.is_decision and approved_by is not None:
                values["approved_by"] = approved_by
                values["approval_date"] = now
            if admin_notes is not None:
                values["admin_notes"] = admin_notes

            previous = leave.status
            repo.update_fields(leave, values)
            self._logger.info(
                "Leave request status changed",
                extra={
                    "leave_request_id": leave_id,
                    "from_status": previous.value,
                    "to_status": new_status.value,
                },
            )
            return _to_response(leave)

        return self._run("update leave request status", work, {"leave_request_id": leave_id})

    def approve(
        self,
        leave_id: int,
        approved_by: int,
        admin_notes: Optional[str] = None,
    ) -> Optional[LeaveRequestResponse]:
        return self.update_status(leave_id, LeaveStatus.APPROVED, approved_by, admin_notes)

    def reject(
        self,
        leave_id: int,
        approved_by: int,
        admin_notes: Optional[str] = None,
    ) -> Optional[LeaveRequestResponse]:
        return self.update_status(leave_id, LeaveStatus.REJECTED, approved_by, admin_notes)

    def cancel(self, leave_id: int) -> Optional[LeaveRequestResponse]:
        return self.update_status(leave_id, LeaveStatus.CANCELLED)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def check_overlapping(
        self,
        student_id: int,
        start_date: date,
        end_date: date,
        exclude_id: Optional[int] = None,
    ) -> List[LeaveRequestResponse]:
        """
        Pending or approved leave of the student intersecting the inclusive
        range. Advisory: nothing is blocked by a non-empty result.
        """
        def work(session):
            overlapping = LeaveRequestRepository(session).check_overlapping_leaves(
                student_id, start_date, end_date, exclude_id
            )
            return [_to_response(leave) for leave in overlapping]

        overlapping = self._run("check leave overlap", work, {"student_id": student_id})
        if overlapping:
            self._logger.info(
                "Overlapping leave found",
                extra={"student_id": student_id, "overlap_ids": [leave.id for leave in overlapping]},
            )
        return overlapping

    def find_by_student(
        self,
        student_id: int,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        status: Optional[Union[LeaveStatus, str]] = None,
    ) -> PaginatedResponse[LeaveRequestResponse]:
        return self.find_all(page=page, limit=limit, status=status, student_id=student_id)

    def get_pending(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> PaginatedResponse[LeaveRequestResponse]:
        return self.find_all(page=page, limit=limit, status=LeaveStatus.PENDING)

    def get_needing_attention(
        self,
        days_threshold: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[LeaveRequestResponse]:
        """
        Pending requests that have waited at least ``days_threshold`` days.

        The threshold defaults to ``LEAVE_ATTENTION_THRESHOLD_DAYS``.
        """
        if days_threshold is None:
            days_threshold = self.settings.LEAVE_ATTENTION_THRESHOLD_DAYS
        cutoff = (now or utc_now()) - timedelta(days=days_threshold)

        def work(session):
            rows = LeaveRequestRepository(session).find_pending_older_than(cutoff)
            return [_to_response(leave) for leave in rows]

        return self._run("fetch leave requests needing attention", work)

    @log_execution_time()
    def get_statistics(
        self,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        recent_since = (now or utc_now()) - timedelta(days=RECENT_WINDOW_DAYS)
        return self._run(
            "fetch leave statistics",
            lambda session: LeaveRequestRepository(session).get_statistics(
                date_range_start, date_range_end, recent_since
            ),
        )
