"""
Service layer.

Each service takes the shared ``Database`` handle and runs every operation
as one unit of work: repositories build the queries, schemas validate input
and shape the returned records.
"""

from schoolassist.services.base import BaseService
from schoolassist.services.disruption_service import DisruptionService
from schoolassist.services.leave_request_service import LeaveRequestService
from schoolassist.services.report_service import ReportService
from schoolassist.services.schedule_service import ScheduleService
from schoolassist.services.shift_exchange_service import ShiftExchangeService

__all__ = [
    "BaseService",
    "DisruptionService",
    "LeaveRequestService",
    "ReportService",
    "ScheduleService",
    "ShiftExchangeService",
]
