"""
Database models.

Importing this package registers every table on ``Base.metadata``.
"""

from schoolassist.models.base import (
    AssignedTo,
    Base,
    BaseModel,
    DisruptionSeverity,
    DisruptionStatus,
    DisruptionType,
    ExchangeStatus,
    LeaveStatus,
    LeaveType,
    PersonType,
    ReportType,
    ScheduleStatus,
    ScheduleType,
    TimestampModel,
)
from schoolassist.models.admin import Admin
from schoolassist.models.student import Student
from schoolassist.models.leave_request import LeaveRequest
from schoolassist.models.schedule import Schedule
from schoolassist.models.shift_exchange import ShiftExchange
from schoolassist.models.disruption import Disruption
from schoolassist.models.report import Report

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "AssignedTo",
    "Admin",
    "Student",
    "LeaveRequest",
    "Schedule",
    "ShiftExchange",
    "Disruption",
    "Report",
    "DisruptionSeverity",
    "DisruptionStatus",
    "DisruptionType",
    "ExchangeStatus",
    "LeaveStatus",
    "LeaveType",
    "PersonType",
    "ReportType",
    "ScheduleStatus",
    "ScheduleType",
]
