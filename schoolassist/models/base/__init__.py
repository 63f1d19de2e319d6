from schoolassist.models.base.base_model import Base, BaseModel, TimestampModel, enum_column_type
from schoolassist.models.base.enums import (
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
)
from schoolassist.models.base.types import AssignedTo

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "enum_column_type",
    "AssignedTo",
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
