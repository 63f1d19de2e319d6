from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from schoolassist.core.exceptions import ValidationError
from schoolassist.models.base import AssignedTo, PersonType, ScheduleStatus, ScheduleType


def at(day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 3, day, hour, minute)


def test_create_resolves_names(make_schedule, people):
    schedule = make_schedule(at(4, 9), at(4, 12))

    assert schedule.status is ScheduleStatus.ACTIVE
    assert schedule.assigned_to_type is PersonType.ADMIN
    assert schedule.assigned_to_id == people.alice
    assert schedule.assigned_to_name == "Alice Nguyen"
    assert schedule.created_by_name == "Alice Nguyen"
    assert schedule.assigned_to == AssignedTo.admin(people.alice)


def test_student_assignee_name(make_schedule, people):
    schedule = make_schedule(
        at(4, 9), at(4, 10),
        assigned_to=AssignedTo.student(people.tina),
        title="Algebra",
        schedule_type=ScheduleType.CLASS,
    )

    assert schedule.assigned_to_type is PersonType.STUDENT
    assert schedule.assigned_to_name == "Tina Park"


def test_assigned_to_accepts_mapping(schedule_service, people):
    schedule = schedule_service.create({
        "schedule_type": "class",
        "title": "Biology",
        "assigned_to": {"person_type": "student", "person_id": people.sam},
        "start_time": at(5, 9),
        "end_time": at(5, 10),
        "created_by": people.bob,
    })

    assert schedule.assigned_to == AssignedTo.student(people.sam)


def test_create_rejects_empty_range(make_schedule):
    with pytest.raises(ValidationError):
        make_schedule(at(4, 9), at(4, 9))


def test_find_by_id_missing_returns_none(schedule_service):
    assert schedule_service.find_by_id(42) is None


# ---------------------------------------------------------------------------
# conflict detection
# ---------------------------------------------------------------------------

def test_back_to_back_is_not_a_conflict(schedule_service, make_schedule, people):
    make_schedule(at(4, 9), at(4, 12))

    conflicts = schedule_service.check_conflicts(
        AssignedTo.admin(people.alice), at(4, 12), at(4, 14)
    )
    assert conflicts == []

    conflicts = schedule_service.check_conflicts(
        AssignedTo.admin(people.alice), at(4, 7), at(4, 9)
    )
    assert conflicts == []


def test_overlap_is_a_conflict(schedule_service, make_schedule, people):
    existing = make_schedule(at(4, 9), at(4, 12))

    conflicts = schedule_service.check_conflicts(
        AssignedTo.admin(people.alice), at(4, 11), at(4, 13)
    )

    assert [c.id for c in conflicts] == [existing.id]


def test_conflict_requires_same_person_and_kind(schedule_service, make_schedule, people):
    make_schedule(at(4, 9), at(4, 12), assigned_to=AssignedTo.admin(people.alice))
    make_schedule(at(4, 9), at(4, 12), assigned_to=AssignedTo.student(people.bob))

    # student with the same numeric id as bob is someone else
    assert schedule_service.check_conflicts(
        AssignedTo.admin(people.bob), at(4, 10), at(4, 11)
    ) == []


def test_inactive_schedules_do_not_conflict(schedule_service, make_schedule, people):
    cancelled = make_schedule(at(4, 9), at(4, 12))
    schedule_service.update(cancelled.id, {"status": "cancelled"})

    assert schedule_service.check_conflicts(
        AssignedTo.admin(people.alice), at(4, 10), at(4, 11)
    ) == []


def test_exclude_id(schedule_service, make_schedule, people):
    existing = make_schedule(at(4, 9), at(4, 12))

    assert schedule_service.check_conflicts(
        AssignedTo.admin(people.alice), at(4, 9), at(4, 12), exclude_id=existing.id
    ) == []


def test_create_does_not_refuse_conflicts(make_schedule):
    make_schedule(at(4, 9), at(4, 12))
    second = make_schedule(at(4, 10), at(4, 11))

    assert second.id > 0


# ---------------------------------------------------------------------------
# update / delete
# ---------------------------------------------------------------------------

def test_update_reassigns_and_moves(schedule_service, make_schedule, people):
    schedule = make_schedule(at(4, 9), at(4, 12))

    updated = schedule_service.update(schedule.id, {
        "assigned_to": AssignedTo.admin(people.bob),
        "start_time": at(4, 13),
        "end_time": at(4, 15),
        "location": "Room 2",
    })

    assert updated.assigned_to == AssignedTo.admin(people.bob)
    assert updated.assigned_to_name == "Bob Okafor"
    assert updated.start_time == at(4, 13)
    assert updated.location == "Room 2"
    assert updated.title == schedule.title


def test_update_with_no_fields_returns_current(schedule_service, make_schedule):
    schedule = make_schedule(at(4, 9), at(4, 12))

    unchanged = schedule_service.update(schedule.id, {})

    assert unchanged == schedule


def test_update_missing_returns_none(schedule_service):
    assert schedule_service.update(999, {"title": "x"}) is None


def test_update_rejects_end_moved_before_start(schedule_service, make_schedule):
    schedule = make_schedule(at(4, 9), at(4, 12))

    with pytest.raises(ValidationError) as excinfo:
        schedule_service.update(schedule.id, {"end_time": at(4, 8)})

    assert "end_time" in excinfo.value.field_errors
    assert schedule_service.find_by_id(schedule.id).end_time == at(4, 12)


@pytest.mark.parametrize(
    "changes",
    [
        {"start_time": at(4, 12)},
        {"start_time": at(5, 10), "end_time": at(5, 9)},
    ],
)
def test_update_rejects_empty_or_inverted_range(schedule_service, make_schedule, changes):
    schedule = make_schedule(at(4, 9), at(4, 12))

    with pytest.raises(ValidationError):
        schedule_service.update(schedule.id, changes)


@pytest.mark.parametrize("field", ["title", "status", "start_time", "assigned_to"])
def test_update_rejects_null_required_field(schedule_service, make_schedule, field):
    schedule = make_schedule(at(4, 9), at(4, 12))

    with pytest.raises(ValidationError) as excinfo:
        schedule_service.update(schedule.id, {field: None})

    assert field in excinfo.value.field_errors
    assert schedule_service.find_by_id(schedule.id) == schedule


def test_update_clears_optional_field(schedule_service, make_schedule):
    schedule = make_schedule(at(4, 9), at(4, 12), location="Room 1")

    updated = schedule_service.update(schedule.id, {"location": None})

    assert updated.location is None


def test_delete(schedule_service, make_schedule):
    schedule = make_schedule(at(4, 9), at(4, 12))

    assert schedule_service.delete(schedule.id) is True
    assert schedule_service.delete(schedule.id) is False


# ---------------------------------------------------------------------------
# date queries
# ---------------------------------------------------------------------------

def test_find_by_date_range_is_inclusive_of_end_day(schedule_service, make_schedule):
    inside = make_schedule(at(5, 9), at(5, 10))
    last_day = make_schedule(at(7, 22), at(7, 23))
    after = make_schedule(at(8, 0), at(8, 1))

    rows = schedule_service.find_by_date_range(date(2024, 3, 5), date(2024, 3, 7))

    assert [r.id for r in rows] == [inside.id, last_day.id]
    assert after.id not in [r.id for r in rows]


def test_find_by_date_range_filters(schedule_service, make_schedule, people):
    shift = make_schedule(at(5, 9), at(5, 10))
    make_schedule(
        at(5, 11), at(5, 12),
        assigned_to=AssignedTo.student(people.sam),
        schedule_type=ScheduleType.CLASS,
    )

    rows = schedule_service.find_by_date_range(
        date(2024, 3, 5), date(2024, 3, 5), schedule_type="shift"
    )

    assert [r.id for r in rows] == [shift.id]


def test_find_all_and_find_by_person(schedule_service, make_schedule, people):
    first = make_schedule(at(6, 9), at(6, 10))
    second = make_schedule(at(5, 9), at(5, 10))
    bobs = make_schedule(at(5, 11), at(5, 12), assigned_to=AssignedTo.admin(people.bob))

    page = schedule_service.find_all()
    assert [r.id for r in page.items] == [second.id, bobs.id, first.id]
    assert all(r.assigned_to_name for r in page.items)

    mine = schedule_service.find_by_person(AssignedTo.admin(people.alice))
    assert [r.id for r in mine.items] == [second.id, first.id]

    ranged = schedule_service.find_all(
        date_range_start=date(2024, 3, 6), date_range_end=date(2024, 3, 6)
    )
    assert [r.id for r in ranged.items] == [first.id]


def test_today_schedules(schedule_service, make_schedule, people):
    today = make_schedule(at(4, 9), at(4, 10))
    make_schedule(at(5, 9), at(5, 10))
    cancelled = make_schedule(at(4, 11), at(4, 12))
    schedule_service.update(cancelled.id, {"status": ScheduleStatus.CANCELLED})

    rows = schedule_service.get_today_schedules(today=date(2024, 3, 4))

    assert [r.id for r in rows] == [today.id]
    assert schedule_service.get_today_schedules(
        AssignedTo.admin(people.bob), today=date(2024, 3, 4)
    ) == []


def test_upcoming_schedules(schedule_service, make_schedule):
    now = at(4, 8)
    soon = make_schedule(at(4, 9), at(4, 10))
    edge = make_schedule(now + timedelta(days=7), now + timedelta(days=7, hours=1))
    make_schedule(at(4, 7), at(4, 8))
    make_schedule(now + timedelta(days=8), now + timedelta(days=8, hours=1))

    rows = schedule_service.get_upcoming_schedules(days=7, now=now)

    assert [r.id for r in rows] == [soon.id, edge.id]


def test_statistics(schedule_service, make_schedule, people):
    make_schedule(at(4, 9), at(4, 10))
    make_schedule(
        at(4, 11), at(4, 12),
        assigned_to=AssignedTo.student(people.sam),
        schedule_type=ScheduleType.CLASS,
    )
    done = make_schedule(at(5, 9), at(5, 10))
    schedule_service.update(done.id, {"status": "completed"})

    stats = schedule_service.get_statistics(today=date(2024, 3, 4))

    assert stats["total"] == 3
    assert stats["by_type"] == {"class": 1, "shift": 2}
    assert stats["by_status"] == {"active": 2, "cancelled": 0, "completed": 1}
    assert stats["active_count"] == 2
    assert stats["today_count"] == 2
