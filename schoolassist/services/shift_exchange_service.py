"""
Shift exchange service.

``accept`` is the one operation that writes two tables: the exchange row and
the schedule it hands over. Both writes share a transaction, so an accepted
exchange always has its schedule reassigned, and a failed accept leaves both
rows as they were.

Neither self-targeted exchanges nor double-booking of the target admin are
rejected.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Union

from schoolassist.core.constants import MONTH_WINDOW_DAYS, RECENT_WINDOW_DAYS
from schoolassist.core.exceptions import ResourceNotFoundError
from schoolassist.core.logging import log_execution_time
from schoolassist.core.pagination import paginate_items
from schoolassist.core.utils import coerce_enum, coerce_optional_enum, utc_now
from schoolassist.models.base.enums import ExchangeStatus
from schoolassist.models.base.types import AssignedTo
from schoolassist.models.shift_exchange import ShiftExchange
from schoolassist.repositories.schedule_repository import ScheduleRepository
from schoolassist.repositories.shift_exchange_repository import ShiftExchangeRepository
from schoolassist.schemas.common import PaginatedResponse
from schoolassist.schemas.shift_exchange import ShiftExchangeCreate, ShiftExchangeResponse
from schoolassist.services.base.base_service import BaseService


def _to_response(exchange: ShiftExchange, admin_id: Optional[int] = None) -> ShiftExchangeResponse:
    record = ShiftExchangeResponse.model_validate(exchange)
    if admin_id is not None:
        record.admin_role = "requesting" if exchange.requesting_admin_id == admin_id else "target"
    return record


class ShiftExchangeService(BaseService):
    """Shift hand-overs between admins."""

    def create(self, data: Union[ShiftExchangeCreate, Mapping[str, Any]]) -> ShiftExchangeResponse:
        payload = self._validate(ShiftExchangeCreate, data)

        def work(session):
            exchange = ShiftExchangeRepository(session).add(ShiftExchange(
                original_schedule_id=payload.original_schedule_id,
                requesting_admin_id=payload.requesting_admin_id,
                target_admin_id=payload.target_admin_id,
                proposed_start_time=payload.proposed_start_time,
                proposed_end_time=payload.proposed_end_time,
                reason=payload.reason,
                status=ExchangeStatus.PENDING,
            ))
            return _to_response(exchange)

        record = self._run("create shift exchange", work)
        self._logger.info(
            "Shift exchange created",
            extra={
                "exchange_id": record.id,
                "schedule_id": record.original_schedule_id,
                "requesting_admin_id": record.requesting_admin_id,
                "target_admin_id": record.target_admin_id,
            },
        )
        return record

    def find_by_id(self, exchange_id: int) -> Optional[ShiftExchangeResponse]:
        def work(session):
            exchange = ShiftExchangeRepository(session).find_by_id(exchange_id)
            return _to_response(exchange) if exchange else None

        return self._run("find shift exchange", work)

    def find_all(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        status: Optional[Union[ExchangeStatus, str]] = None,
        requesting_admin_id: Optional[int] = None,
        target_admin_id: Optional[int] = None,
    ) -> PaginatedResponse[ShiftExchangeResponse]:
        params = self._pagination(page, limit)
        status = coerce_optional_enum(ExchangeStatus, status)

        def work(session):
            result = ShiftExchangeRepository(session).find_all(
                params,
                status=status,
                requesting_admin_id=requesting_admin_id,
                target_admin_id=target_admin_id,
            )
            return paginate_items(
                items=result.items, total=result.total, params=params, mapper=_to_response
            )

        return self._run("fetch shift exchanges", work)

    def find_by_admin(
        self,
        admin_id: int,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        status: Optional[Union[ExchangeStatus, str]] = None,
    ) -> PaginatedResponse[ShiftExchangeResponse]:
        """Exchanges the admin requested or was asked to take, tagged with ``admin_role``."""
        params = self._pagination(page, limit)
        status = coerce_optional_enum(ExchangeStatus, status)

        def work(session):
            result = ShiftExchangeRepository(session).find_by_admin(admin_id, params, status)
            return paginate_items(
                items=result.items,
                total=result.total,
                params=params,
                mapper=lambda exchange: _to_response(exchange, admin_id),
            )

        return self._run("fetch shift exchanges for admin", work, {"admin_id": admin_id})

    def get_pending_for_admin(self, admin_id: int) -> List[ShiftExchangeResponse]:
        """Pending exchanges on either side of the admin, newest first, tagged with ``admin_role``."""
        def work(session):
            rows = ShiftExchangeRepository(session).find_pending_for_admin(admin_id)
            return [_to_response(exchange, admin_id) for exchange in rows]

        return self._run("fetch pending shift exchanges", work, {"admin_id": admin_id})

    def delete(self, exchange_id: int) -> bool:
        return self._run(
            "delete shift exchange",
            lambda session: ShiftExchangeRepository(session).delete_by_id(exchange_id),
        )

    def get_statistics(
        self,
        admin_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        now = now or utc_now()
        return self._run(
            "fetch shift exchange statistics",
            lambda session: ShiftExchangeRepository(session).get_statistics(
                admin_id,
                week_since=now - timedelta(days=RECENT_WINDOW_DAYS),
                month_since=now - timedelta(days=MONTH_WINDOW_DAYS),
            ),
        )

    # -------------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------------

    def update_status(
        self,
        exchange_id: int,
        status: Union[ExchangeStatus, str],
        exchange_notes: Optional[str] = None,
    ) -> Optional[ShiftExchangeResponse]:
        """
        Set the status of the exchange row only.

        Returns:
            The updated record, or None if the exchange does not exist

        Raises:
            InvalidStatusError: if ``status`` is not an exchange status
        """
        new_status = coerce_enum(ExchangeStatus, status)

        def work(session):
            repo = ShiftExchangeRepository(session)
            exchange = repo.find_by_id(exchange_id)
            if exchange is None:
                return None

            values: Dict[str, Any] = {"status": new_status, "updated_at": utc_now()}
            if exchange_notes is not None:
                values["exchange_notes"] = exchange_notes
            repo.update_fields(exchange, values)
            return _to_response(exchange)

        record = self._run("update shift exchange status", work, {"exchange_id": exchange_id})
        if record is not None:
            self._logger.info(
                "Shift exchange status changed",
                extra={"exchange_id": exchange_id, "to_status": new_status.value},
            )
        return record

    def reject(self, exchange_id: int, notes: Optional[str] = None) -> Optional[ShiftExchangeResponse]:
        return self.update_status(exchange_id, ExchangeStatus.REJECTED, notes)

    def cancel(self, exchange_id: int, notes: Optional[str] = None) -> Optional[ShiftExchangeResponse]:
        return self.update_status(exchange_id, ExchangeStatus.CANCELLED, notes)

    @log_execution_time()
    def accept(self, exchange_id: int, notes: Optional[str] = None) -> Optional[ShiftExchangeResponse]:
        """
        Accept the exchange and hand its schedule to the target admin.

        In one transaction:

        1. mark the exchange accepted with ``notes`` and a fresh ``updated_at``;
        2. re-read it for the schedule id, target admin and proposed window;
        3. reassign the schedule to ``AssignedTo.admin(target_admin_id)`` with
           the proposed window.

        The target admin's existing schedules are not checked, so accepting
        can double-book them.

        Returns:
            The accepted exchange, or None if it does not exist (no schedule
            is touched)

        Raises:
            ResourceNotFoundError: the schedule is gone; the exchange update
                is rolled back and it stays in its previous status
            DatabaseError: any storage failure; both writes are rolled back
        """
        def work(session):
            exchanges = ShiftExchangeRepository(session)
            now = utc_now()

            values: Dict[str, Any] = {
                ShiftExchange.status: ExchangeStatus.ACCEPTED,
                ShiftExchange.updated_at: now,
            }
            if notes is not None:
                values[ShiftExchange.exchange_notes] = notes
            if exchanges.update_by_id(exchange_id, values) == 0:
                return None

            exchange = exchanges.find_by_id(exchange_id)

            reassigned = ScheduleRepository(session).reassign(
                exchange.original_schedule_id,
                AssignedTo.admin(exchange.target_admin_id),
                exchange.proposed_start_time,
                exchange.proposed_end_time,
                now,
            )
            if reassigned == 0:
                raise ResourceNotFoundError("Schedule", exchange.original_schedule_id)

            session.refresh(exchange)
            return _to_response(exchange)

        record = self._run("accept shift exchange", work, {"exchange_id": exchange_id})
        if record is not None:
            self._logger.info(
                "Shift exchange accepted",
                extra={
                    "exchange_id": exchange_id,
                    "schedule_id": record.original_schedule_id,
                    "target_admin_id": record.target_admin_id,
                },
            )
        return record
