"""
Leave request repository with the overlap detector, filtered listing and
statistics.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from schoolassist.models.base.enums import LeaveStatus, LeaveType
from schoolassist.models.leave_request import LeaveRequest
from schoolassist.repositories.base.base_repository import BaseRepository, PageResult
from schoolassist.schemas.common import PaginationParams


class LeaveRequestRepository(BaseRepository[LeaveRequest]):
    """Repository for leave requests."""

    def __init__(self, session: Session):
        super().__init__(LeaveRequest, session)

    # ============================================================================
    # SEARCH AND FILTERING
    # ============================================================================

    def find_all(
        self,
        pagination: PaginationParams,
        status: Optional[LeaveStatus] = None,
        leave_type: Optional[LeaveType] = None,
        student_id: Optional[int] = None,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
    ) -> PageResult[LeaveRequest]:
        """
        Find leave requests matching the filters, newest first.

        ``date_range_start`` keeps requests that start or end on or after it;
        ``date_range_end`` keeps requests that start or end on or before it.
        """
        query = self.query()

        if status:
            query = query.filter(LeaveRequest.status == status)

        if leave_type:
            query = query.filter(LeaveRequest.leave_type == leave_type)

        if student_id:
            query = query.filter(LeaveRequest.student_id == student_id)

        if date_range_start:
            query = query.filter(or_(
                LeaveRequest.start_date >= date_range_start,
                LeaveRequest.end_date >= date_range_start,
            ))

        if date_range_end:
            query = query.filter(or_(
                LeaveRequest.start_date <= date_range_end,
                LeaveRequest.end_date <= date_range_end,
            ))

        query = query.order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())

        return self._paginate_query(query, pagination)

    def find_pending_older_than(self, cutoff: datetime) -> List[LeaveRequest]:
        """Pending requests created on or before ``cutoff``, oldest first."""
        return (
            self.query()
            .filter(
                LeaveRequest.status == LeaveStatus.PENDING,
                LeaveRequest.created_at <= cutoff,
            )
            .order_by(LeaveRequest.created_at.asc(), LeaveRequest.id.asc())
            .all()
        )

    # ============================================================================
    # VALIDATION AND CONFLICT CHECKING
    # ============================================================================

    def check_overlapping_leaves(
        self,
        student_id: int,
        start_date: date,
        end_date: date,
        exclude_id: Optional[int] = None
    ) -> List[LeaveRequest]:
        """
        Pending or approved leave of the student whose inclusive date range
        intersects ``[start_date, end_date]``.

        Shared boundary days count as overlap. Rejected and cancelled
        requests never block.
        """
        query = self.query().filter(
            LeaveRequest.student_id == student_id,
            LeaveRequest.status.in_([
                status for status in LeaveStatus if status.blocks_overlap
            ]),
            and_(
                LeaveRequest.start_date <= end_date,
                LeaveRequest.end_date >= start_date,
            ),
        )

        if exclude_id is not None:
            query = query.filter(LeaveRequest.id != exclude_id)

        return query.order_by(LeaveRequest.start_date.asc()).all()

    # ============================================================================
    # STATISTICS
    # ============================================================================

    def get_statistics(
        self,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
        recent_since: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Counts by status and type, approved day total and recent volume.

        The date range applies to the leave dates, not the creation time.
        """
        criteria = []
        if date_range_start:
            criteria.append(LeaveRequest.end_date >= date_range_start)
        if date_range_end:
            criteria.append(LeaveRequest.start_date <= date_range_end)

        by_status = self.count_grouped(LeaveRequest.status, *criteria)
        by_type = self.count_grouped(LeaveRequest.leave_type, *criteria)

        approved = (
            self.query()
            .filter(LeaveRequest.status == LeaveStatus.APPROVED, *criteria)
            .all()
        )
        total_approved_days = sum(leave.duration_days for leave in approved)

        recently_created = 0
        if recent_since is not None:
            recently_created = self.count(LeaveRequest.created_at >= recent_since, *criteria)

        return {
            "total": sum(by_status.values()),
            "by_status": {status.value: by_status.get(status, 0) for status in LeaveStatus},
            "by_type": {leave_type.value: by_type.get(leave_type, 0) for leave_type in LeaveType},
            "pending_count": by_status.get(LeaveStatus.PENDING, 0),
            "approved_count": by_status.get(LeaveStatus.APPROVED, 0),
            "rejected_count": by_status.get(LeaveStatus.REJECTED, 0),
            "cancelled_count": by_status.get(LeaveStatus.CANCELLED, 0),
            "total_approved_days": total_approved_days,
            "recently_created": recently_created,
        }
