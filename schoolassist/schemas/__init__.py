"""
Pydantic schemas for service inputs and returned records.
"""

from schoolassist.schemas.common import (
    BaseSchema,
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
)
from schoolassist.schemas.disruption import DisruptionCreate, DisruptionResponse, DisruptionUpdate
from schoolassist.schemas.leave_request import (
    LeaveRequestCreate,
    LeaveRequestResponse,
    LeaveRequestUpdate,
)
from schoolassist.schemas.report import ReportCreate, ReportResponse
from schoolassist.schemas.schedule import ScheduleCreate, ScheduleResponse, ScheduleUpdate
from schoolassist.schemas.shift_exchange import ShiftExchangeCreate, ShiftExchangeResponse

__all__ = [
    "BaseSchema",
    "PaginatedResponse",
    "PaginationMeta",
    "PaginationParams",
    "DisruptionCreate",
    "DisruptionResponse",
    "DisruptionUpdate",
    "LeaveRequestCreate",
    "LeaveRequestResponse",
    "LeaveRequestUpdate",
    "ReportCreate",
    "ReportResponse",
    "ScheduleCreate",
    "ScheduleResponse",
    "ScheduleUpdate",
    "ShiftExchangeCreate",
    "ShiftExchangeResponse",
]
