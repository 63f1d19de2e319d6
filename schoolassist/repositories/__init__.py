"""
Repositories: query construction over a caller-owned session.
"""

from schoolassist.repositories.base import BaseRepository, PageResult
from schoolassist.repositories.disruption_repository import DisruptionRepository
from schoolassist.repositories.leave_request_repository import LeaveRequestRepository
from schoolassist.repositories.person_repository import PersonRepository
from schoolassist.repositories.report_repository import ReportRepository
from schoolassist.repositories.schedule_repository import ScheduleRepository
from schoolassist.repositories.shift_exchange_repository import ShiftExchangeRepository

__all__ = [
    "BaseRepository",
    "PageResult",
    "DisruptionRepository",
    "LeaveRequestRepository",
    "PersonRepository",
    "ReportRepository",
    "ScheduleRepository",
    "ShiftExchangeRepository",
]
