from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from schoolassist.core.exceptions import DatabaseError, InvalidStatusError, ResourceNotFoundError
from schoolassist.core.utils import utc_now
from schoolassist.models.base import AssignedTo, ExchangeStatus
from schoolassist.repositories.schedule_repository import ScheduleRepository


def at(day: int, hour: int) -> datetime:
    return datetime(2024, 3, day, hour)


@pytest.fixture
def alice_shift(make_schedule, people):
    return make_schedule(at(4, 9), at(4, 12), assigned_to=AssignedTo.admin(people.alice))


@pytest.fixture
def make_exchange(exchange_service, people):
    def _make(schedule_id, requesting=None, target=None, start=None, end=None, reason="Doctor"):
        return exchange_service.create({
            "original_schedule_id": schedule_id,
            "requesting_admin_id": requesting or people.alice,
            "target_admin_id": target or people.bob,
            "proposed_start_time": start or at(4, 13),
            "proposed_end_time": end or at(4, 16),
            "reason": reason,
        })
    return _make


def test_create_is_pending_with_details(make_exchange, alice_shift):
    exchange = make_exchange(alice_shift.id)

    assert exchange.status is ExchangeStatus.PENDING
    assert exchange.original_title == "Front desk"
    assert exchange.original_start_time == at(4, 9)
    assert exchange.requesting_admin_name == "Alice Nguyen"
    assert exchange.target_admin_name == "Bob Okafor"
    assert exchange.admin_role is None


def test_accept_reassigns_schedule(exchange_service, schedule_service, make_exchange, alice_shift, people):
    exchange = make_exchange(alice_shift.id)

    accepted = exchange_service.accept(exchange.id, "Covered")

    assert accepted.status is ExchangeStatus.ACCEPTED
    assert accepted.exchange_notes == "Covered"
    schedule = schedule_service.find_by_id(alice_shift.id)
    assert schedule.assigned_to == AssignedTo.admin(people.bob)
    assert schedule.start_time == at(4, 13)
    assert schedule.end_time == at(4, 16)
    assert accepted.original_start_time == at(4, 13)


def test_accept_missing_exchange_returns_none(exchange_service, schedule_service, alice_shift):
    assert exchange_service.accept(999) is None
    assert schedule_service.find_by_id(alice_shift.id) == alice_shift


def test_accept_with_deleted_schedule_leaves_exchange_pending(
    db, exchange_service, make_exchange, alice_shift
):
    exchange = make_exchange(alice_shift.id)
    db.execute("DELETE FROM schedules WHERE id = :id", {"id": alice_shift.id})

    with pytest.raises(ResourceNotFoundError):
        exchange_service.accept(exchange.id)

    assert exchange_service.find_by_id(exchange.id).status is ExchangeStatus.PENDING


def test_failed_reassignment_rolls_back_exchange(
    monkeypatch, exchange_service, schedule_service, make_exchange, alice_shift
):
    exchange = make_exchange(alice_shift.id)

    def fail(self, *args, **kwargs):
        raise OperationalError("UPDATE schedules", {}, Exception("lost connection"))

    monkeypatch.setattr(ScheduleRepository, "reassign", fail)

    with pytest.raises(DatabaseError) as excinfo:
        exchange_service.accept(exchange.id)

    assert excinfo.value.message.startswith("Failed to accept shift exchange")
    assert isinstance(excinfo.value.__cause__, OperationalError)
    assert exchange_service.find_by_id(exchange.id).status is ExchangeStatus.PENDING
    assert schedule_service.find_by_id(alice_shift.id).assigned_to == alice_shift.assigned_to


def test_accept_can_double_book_target(
    exchange_service, schedule_service, make_schedule, make_exchange, alice_shift, people
):
    make_schedule(at(4, 13), at(4, 16), assigned_to=AssignedTo.admin(people.bob))
    exchange = make_exchange(alice_shift.id)

    exchange_service.accept(exchange.id)

    conflicts = schedule_service.check_conflicts(AssignedTo.admin(people.bob), at(4, 13), at(4, 16))
    assert len(conflicts) == 2


def test_self_targeted_exchange_is_allowed(exchange_service, make_exchange, alice_shift, people):
    exchange = make_exchange(alice_shift.id, requesting=people.alice, target=people.alice)

    accepted = exchange_service.accept(exchange.id)

    assert accepted.status is ExchangeStatus.ACCEPTED


def test_reject_and_cancel_leave_schedule_alone(
    exchange_service, schedule_service, make_exchange, alice_shift
):
    rejected = exchange_service.reject(make_exchange(alice_shift.id).id, "No cover")
    cancelled = exchange_service.cancel(make_exchange(alice_shift.id).id)

    assert rejected.status is ExchangeStatus.REJECTED
    assert rejected.exchange_notes == "No cover"
    assert cancelled.status is ExchangeStatus.CANCELLED
    assert schedule_service.find_by_id(alice_shift.id) == alice_shift


def test_update_status_validates(exchange_service, make_exchange, alice_shift):
    exchange = make_exchange(alice_shift.id)

    with pytest.raises(InvalidStatusError):
        exchange_service.update_status(exchange.id, "done")

    assert exchange_service.update_status(404, "rejected") is None


def test_find_by_admin_tags_role(exchange_service, make_exchange, alice_shift, people):
    asked = make_exchange(alice_shift.id, requesting=people.alice, target=people.bob)
    offered = make_exchange(alice_shift.id, requesting=people.carol, target=people.alice)
    make_exchange(alice_shift.id, requesting=people.bob, target=people.carol)

    page = exchange_service.find_by_admin(people.alice)

    roles = {record.id: record.admin_role for record in page.items}
    assert roles == {asked.id: "requesting", offered.id: "target"}
    assert page.pagination.total == 2


def test_pending_for_admin_covers_both_sides(exchange_service, make_exchange, alice_shift, people):
    asked_of_bob = make_exchange(alice_shift.id, requesting=people.alice, target=people.bob)
    answered = make_exchange(alice_shift.id, requesting=people.alice, target=people.bob)
    exchange_service.reject(answered.id)
    asked_by_bob = make_exchange(alice_shift.id, requesting=people.bob, target=people.carol)

    pending = exchange_service.get_pending_for_admin(people.bob)

    assert [(r.id, r.admin_role) for r in pending] == [
        (asked_by_bob.id, "requesting"),
        (asked_of_bob.id, "target"),
    ]
    assert [r.id for r in exchange_service.get_pending_for_admin(people.alice)] == [asked_of_bob.id]
    assert [r.id for r in exchange_service.get_pending_for_admin(people.carol)] == [asked_by_bob.id]


def test_find_all_and_statistics(exchange_service, make_exchange, alice_shift, people):
    first = make_exchange(alice_shift.id)
    second = make_exchange(alice_shift.id, requesting=people.carol, target=people.bob)
    exchange_service.reject(second.id)

    assert [r.id for r in exchange_service.find_all(status="pending").items] == [first.id]
    assert [r.id for r in exchange_service.find_all(requesting_admin_id=people.carol).items] == [
        second.id
    ]

    stats = exchange_service.get_statistics()
    assert stats["total"] == 2
    assert stats["pending_count"] == 1
    assert stats["rejected_count"] == 1
    assert exchange_service.get_statistics(admin_id=people.alice)["total"] == 1

    assert (stats["this_week"], stats["this_month"]) == (2, 2)
    later = exchange_service.get_statistics(now=utc_now() + timedelta(days=10))
    assert (later["this_week"], later["this_month"]) == (0, 2)


def test_delete(exchange_service, make_exchange, alice_shift):
    exchange = make_exchange(alice_shift.id)

    assert exchange_service.delete(exchange.id) is True
    assert exchange_service.find_by_id(exchange.id) is None
