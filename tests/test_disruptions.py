from __future__ import annotations

from datetime import date, datetime

import pytest

from schoolassist.core.exceptions import InvalidStatusError, ValidationError
from schoolassist.models.base import DisruptionSeverity, DisruptionStatus, DisruptionType


def at(day: int, hour: int) -> datetime:
    return datetime(2024, 3, day, hour)


@pytest.fixture
def make_disruption(disruption_service, people):
    def _make(start, severity="medium", disruption_type="system_outage", **extra):
        return disruption_service.create({
            "title": "Portal down",
            "description": "Student portal unreachable",
            "disruption_type": disruption_type,
            "severity": severity,
            "start_time": start,
            "reported_by": people.alice,
            **extra,
        })
    return _make


def test_create_defaults(disruption_service, people):
    disruption = disruption_service.create({
        "title": "Fire drill",
        "description": "Building evacuated",
        "disruption_type": "emergency",
        "start_time": at(4, 10),
        "reported_by": people.bob,
    })

    assert disruption.status is DisruptionStatus.ACTIVE
    assert disruption.severity is DisruptionSeverity.MEDIUM
    assert disruption.reported_by_name == "Bob Okafor"
    assert disruption.end_time is None
    assert disruption.duration_minutes is None


def test_create_rejects_end_before_start(make_disruption):
    with pytest.raises(ValidationError):
        make_disruption(at(4, 10), end_time=at(4, 9))


def test_active_sorted_by_severity(disruption_service, make_disruption):
    low = make_disruption(at(4, 8), severity="low")
    critical = make_disruption(at(4, 9), severity="critical")
    high_old = make_disruption(at(3, 9), severity="high")
    high_new = make_disruption(at(4, 11), severity="high")
    resolved = make_disruption(at(4, 12), severity="critical")
    disruption_service.resolve(resolved.id, "Fixed")
    investigating = make_disruption(at(4, 7), severity="medium")
    disruption_service.set_investigating(investigating.id)

    active = disruption_service.get_active()

    assert [d.id for d in active] == [
        critical.id, high_new.id, high_old.id, investigating.id, low.id,
    ]


def test_resolve_closes_disruption(disruption_service, make_disruption):
    disruption = make_disruption(at(4, 8))

    resolved = disruption_service.resolve(disruption.id, "Router replaced", resolved_at=at(4, 10))

    assert resolved.status is DisruptionStatus.RESOLVED
    assert resolved.end_time == at(4, 10)
    assert resolved.duration_minutes == 120
    assert resolved.resolution_notes == "Router replaced"


def test_resolve_missing_returns_none(disruption_service):
    assert disruption_service.resolve(77) is None


def test_update(disruption_service, make_disruption):
    disruption = make_disruption(at(4, 8))

    updated = disruption_service.update(disruption.id, {"severity": "high", "affected_schedules": [3]})

    assert updated.severity is DisruptionSeverity.HIGH
    assert updated.affected_schedules == [3]
    assert disruption_service.update(disruption.id, {}) == updated


def test_update_rejects_null_title_and_early_end(disruption_service, make_disruption):
    disruption = make_disruption(at(4, 8))

    with pytest.raises(ValidationError) as excinfo:
        disruption_service.update(disruption.id, {"title": None})
    assert "title" in excinfo.value.field_errors

    with pytest.raises(ValidationError):
        disruption_service.resolve(disruption.id, resolved_at=at(4, 7))

    assert disruption_service.find_by_id(disruption.id).status is DisruptionStatus.ACTIVE


def test_find_by_schedule(disruption_service, make_disruption):
    hits = make_disruption(at(4, 8), affected_schedules=[1, 5])
    make_disruption(at(4, 9), affected_schedules=[2])
    make_disruption(at(4, 10))

    assert [d.id for d in disruption_service.find_by_schedule(5)] == [hits.id]
    assert disruption_service.find_by_schedule(9) == []


def test_find_by_date_range_includes_open_disruptions(disruption_service, make_disruption):
    still_open = make_disruption(at(1, 8))
    closed_early = make_disruption(at(1, 8), end_time=at(2, 8))
    inside = make_disruption(at(5, 8), end_time=at(5, 9))
    make_disruption(at(9, 0))

    rows = disruption_service.find_by_date_range(date(2024, 3, 4), date(2024, 3, 8))

    ids = {d.id for d in rows}
    assert ids == {still_open.id, inside.id}
    assert closed_early.id not in ids


def test_find_all_filters(disruption_service, make_disruption, people):
    outage = make_disruption(at(4, 8))
    cancellation = make_disruption(at(5, 8), disruption_type="class_cancellation", severity="low")

    assert [d.id for d in disruption_service.find_all().items] == [cancellation.id, outage.id]
    assert [d.id for d in disruption_service.find_all(severity="low").items] == [cancellation.id]
    assert [
        d.id for d in disruption_service.find_all(disruption_type=DisruptionType.SYSTEM_OUTAGE).items
    ] == [outage.id]
    assert disruption_service.find_all(reported_by=people.bob).pagination.total == 0
    assert [
        d.id for d in disruption_service.find_all(
            date_range_start=date(2024, 3, 5), date_range_end=date(2024, 3, 5)
        ).items
    ] == [cancellation.id]

    with pytest.raises(InvalidStatusError):
        disruption_service.find_all(severity="apocalyptic")


def test_recent_and_delete(disruption_service, make_disruption):
    created = [make_disruption(at(4, hour)) for hour in range(8, 12)]

    recent = disruption_service.get_recent(limit=2)
    assert [d.id for d in recent] == [created[-1].id, created[-2].id]

    assert disruption_service.delete(created[0].id) is True
    assert disruption_service.find_by_id(created[0].id) is None


def test_statistics(disruption_service, make_disruption):
    make_disruption(at(4, 8), end_time=at(4, 9))
    make_disruption(at(4, 8), end_time=at(4, 11), severity="high")
    make_disruption(at(4, 8), disruption_type="maintenance")

    stats = disruption_service.get_statistics()

    assert stats["total"] == 3
    assert stats["by_type"]["system_outage"] == 2
    assert stats["by_type"]["maintenance"] == 1
    assert stats["by_severity"] == {"low": 0, "medium": 2, "high": 1, "critical": 0}
    assert stats["by_status"]["active"] == 3
    assert stats["average_duration_minutes"] == 120
