from __future__ import annotations

from datetime import date, timedelta

import pytest

from schoolassist.core.exceptions import ValidationError
from schoolassist.core.utils import utc_now
from schoolassist.models.base import ReportType


@pytest.fixture
def make_report(report_service, people):
    def _make(report_type="leave_summary", generated_by=None, **extra):
        return report_service.create({
            "report_type": report_type,
            "title": "March leave",
            "generated_by": generated_by or people.alice,
            **extra,
        })
    return _make


def test_create_and_find(report_service, make_report):
    report = make_report(
        data={"approved": 4, "pending": 1},
        filters={"class_section": "7B"},
        date_range_start=date(2024, 3, 1),
        date_range_end=date(2024, 3, 31),
    )

    found = report_service.find_by_id(report.id)

    assert found.report_type is ReportType.LEAVE_SUMMARY
    assert found.data == {"approved": 4, "pending": 1}
    assert found.filters == {"class_section": "7B"}
    assert found.generated_by_name == "Alice Nguyen"
    assert found.date_range_end == date(2024, 3, 31)


def test_create_requires_known_type(make_report):
    with pytest.raises(ValidationError):
        make_report(report_type="finance")


def test_find_all_filters(report_service, make_report, people):
    leave = make_report()
    attendance = make_report(report_type="attendance", generated_by=people.bob)

    assert [r.id for r in report_service.find_all().items] == [attendance.id, leave.id]
    assert [r.id for r in report_service.find_all(report_type="attendance").items] == [attendance.id]
    assert [r.id for r in report_service.find_all(generated_by=people.alice).items] == [leave.id]

    today = utc_now().date()
    assert report_service.find_all(date_range_start=today, date_range_end=today).pagination.total == 2
    assert report_service.find_all(date_range_end=date(2000, 1, 1)).items == []


def test_delete(report_service, make_report):
    report = make_report()

    assert report_service.delete(report.id) is True
    assert report_service.delete(report.id) is False
    assert report_service.find_by_id(report.id) is None


def test_statistics(report_service, make_report, people):
    first = make_report()
    second = make_report(report_type="attendance", generated_by=people.bob)

    stats = report_service.get_statistics()

    assert stats["total"] == 2
    assert stats["by_type"]["leave_summary"] == 1
    assert stats["by_type"]["attendance"] == 1
    assert stats["by_type"]["student_performance"] == 0
    assert (stats["this_week"], stats["this_month"]) == (2, 2)
    assert [r["id"] for r in stats["recent"]] == [second.id, first.id]

    later = report_service.get_statistics(now=utc_now() + timedelta(days=10))
    assert (later["this_week"], later["this_month"]) == (0, 2)


def test_statistics_keeps_five_newest(report_service, make_report):
    reports = [make_report() for _ in range(7)]

    recent = report_service.get_statistics()["recent"]

    assert [r["id"] for r in recent] == [r.id for r in reversed(reports[2:])]
