"""
Shift exchange repository.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from schoolassist.models.base.enums import ExchangeStatus
from schoolassist.models.shift_exchange import ShiftExchange
from schoolassist.repositories.base.base_repository import BaseRepository, PageResult
from schoolassist.schemas.common import PaginationParams


class ShiftExchangeRepository(BaseRepository[ShiftExchange]):
    """Repository for shift exchanges."""

    def __init__(self, session: Session):
        super().__init__(ShiftExchange, session)

    def find_all(
        self,
        pagination: PaginationParams,
        status: Optional[ExchangeStatus] = None,
        requesting_admin_id: Optional[int] = None,
        target_admin_id: Optional[int] = None,
    ) -> PageResult[ShiftExchange]:
        """Find exchanges matching the filters, newest first."""
        query = self.query()

        if status:
            query = query.filter(ShiftExchange.status == status)

        if requesting_admin_id:
            query = query.filter(ShiftExchange.requesting_admin_id == requesting_admin_id)

        if target_admin_id:
            query = query.filter(ShiftExchange.target_admin_id == target_admin_id)

        query = query.order_by(ShiftExchange.created_at.desc(), ShiftExchange.id.desc())

        return self._paginate_query(query, pagination)

    def find_by_admin(
        self,
        admin_id: int,
        pagination: PaginationParams,
        status: Optional[ExchangeStatus] = None,
    ) -> PageResult[ShiftExchange]:
        """Exchanges where the admin is either the requester or the target."""
        query = self.query().filter(or_(
            ShiftExchange.requesting_admin_id == admin_id,
            ShiftExchange.target_admin_id == admin_id,
        ))

        if status:
            query = query.filter(ShiftExchange.status == status)

        query = query.order_by(ShiftExchange.created_at.desc(), ShiftExchange.id.desc())

        return self._paginate_query(query, pagination)

    def find_pending_for_admin(self, admin_id: int) -> List[ShiftExchange]:
        """Pending exchanges the admin requested or must answer, newest first."""
        return (
            self.query()
            .filter(
                or_(
                    ShiftExchange.requesting_admin_id == admin_id,
                    ShiftExchange.target_admin_id == admin_id,
                ),
                ShiftExchange.status == ExchangeStatus.PENDING,
            )
            .order_by(ShiftExchange.created_at.desc(), ShiftExchange.id.desc())
            .all()
        )

    def get_statistics(
        self,
        admin_id: Optional[int] = None,
        week_since: Optional[datetime] = None,
        month_since: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Counts by status plus exchanges created since ``week_since`` and
        ``month_since``, optionally limited to one admin's exchanges.
        """
        criteria = []
        if admin_id:
            criteria.append(or_(
                ShiftExchange.requesting_admin_id == admin_id,
                ShiftExchange.target_admin_id == admin_id,
            ))

        by_status = self.count_grouped(ShiftExchange.status, *criteria)

        return {
            "total": sum(by_status.values()),
            "by_status": {s.value: by_status.get(s, 0) for s in ExchangeStatus},
            "pending_count": by_status.get(ExchangeStatus.PENDING, 0),
            "accepted_count": by_status.get(ExchangeStatus.ACCEPTED, 0),
            "rejected_count": by_status.get(ExchangeStatus.REJECTED, 0),
            "cancelled_count": by_status.get(ExchangeStatus.CANCELLED, 0),
            "this_week": self._created_since(week_since, *criteria),
            "this_month": self._created_since(month_since, *criteria),
        }

    def _created_since(self, since: Optional[datetime], *criteria) -> int:
        if since is None:
            return self.count(*criteria)
        return self.count(ShiftExchange.created_at >= since, *criteria)
