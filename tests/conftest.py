# tests/conftest.py
"""
Shared fixtures: a fresh in-memory SQLite database per test, seeded with a
few admins and students, and the services built on top of it.

SQLite does not enforce foreign keys unless asked to, which lets tests
delete rows out from under a pending operation.
"""

from __future__ import annotations

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from schoolassist.db import Database
from schoolassist.db.init_db import init_db
from schoolassist.models import Admin, Student
from schoolassist.models.base import AssignedTo, ScheduleType
from schoolassist.services import (
    DisruptionService,
    LeaveRequestService,
    ReportService,
    ScheduleService,
    ShiftExchangeService,
)


@pytest.fixture
def db():
    database = Database("sqlite://")
    init_db(database)
    yield database
    database.dispose()


@pytest.fixture
def people(db):
    """Two admins and two students; ids are read back after commit."""
    with db.session() as session:
        alice = Admin(first_name="Alice", last_name="Nguyen", email="alice@school.test")
        bob = Admin(first_name="Bob", last_name="Okafor", email="bob@school.test")
        carol = Admin(first_name="Carol", last_name="Silva", department="Science")
        sam = Student(student_number="S-1001", first_name="Sam", last_name="Lee")
        tina = Student(student_number="S-1002", first_name="Tina", last_name="Park")
        session.add_all([alice, bob, carol, sam, tina])
        session.flush()
        ids = SimpleNamespace(
            alice=alice.id, bob=bob.id, carol=carol.id, sam=sam.id, tina=tina.id
        )
    return ids


@pytest.fixture
def leave_service(db):
    return LeaveRequestService(db)


@pytest.fixture
def schedule_service(db):
    return ScheduleService(db)


@pytest.fixture
def exchange_service(db):
    return ShiftExchangeService(db)


@pytest.fixture
def disruption_service(db):
    return DisruptionService(db)


@pytest.fixture
def report_service(db):
    return ReportService(db)


@pytest.fixture
def make_leave(leave_service, people):
    def _make(start: date, end: date, student_id=None, leave_type="sick", reason="Unwell"):
        return leave_service.create({
            "student_id": student_id or people.sam,
            "leave_type": leave_type,
            "start_date": start,
            "end_date": end,
            "reason": reason,
        })
    return _make


@pytest.fixture
def make_schedule(schedule_service, people):
    def _make(
        start: datetime,
        end: datetime,
        assigned_to: AssignedTo | None = None,
        title: str = "Front desk",
        schedule_type: ScheduleType = ScheduleType.SHIFT,
        **extra,
    ):
        return schedule_service.create({
            "schedule_type": schedule_type,
            "title": title,
            "assigned_to": assigned_to or AssignedTo.admin(people.alice),
            "start_time": start,
            "end_time": end,
            "created_by": people.alice,
            **extra,
        })
    return _make
