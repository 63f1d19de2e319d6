"""
Database enums.

Each status or type column is backed by one of these closed enums; the
stored value is the lowercase member value.
"""

import enum


class PersonType(str, enum.Enum):
    """Kind of person a schedule can be assigned to."""
    ADMIN = "admin"
    STUDENT = "student"


class LeaveType(str, enum.Enum):
    """Leave request type."""
    SICK = "sick"
    PERSONAL = "personal"
    EMERGENCY = "emergency"
    VACATION = "vacation"


class LeaveStatus(str, enum.Enum):
    """Leave request status."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not LeaveStatus.PENDING

    @property
    def is_decision(self) -> bool:
        """Statuses set by an approving admin."""
        return self in (LeaveStatus.APPROVED, LeaveStatus.REJECTED)

    @property
    def blocks_overlap(self) -> bool:
        """Statuses that count when checking for overlapping leave."""
        return self in (LeaveStatus.PENDING, LeaveStatus.APPROVED)


class ScheduleType(str, enum.Enum):
    """Schedule type."""
    CLASS = "class"
    SHIFT = "shift"


class ScheduleStatus(str, enum.Enum):
    """Schedule status."""
    ACTIVE = "active"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class ExchangeStatus(str, enum.Enum):
    """Shift exchange status."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not ExchangeStatus.PENDING


class DisruptionType(str, enum.Enum):
    """Disruption category."""
    SYSTEM_OUTAGE = "system_outage"
    CLASS_CANCELLATION = "class_cancellation"
    EMERGENCY = "emergency"
    MAINTENANCE = "maintenance"


class DisruptionSeverity(str, enum.Enum):
    """Disruption severity, lowest first."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    DisruptionSeverity.LOW: 1,
    DisruptionSeverity.MEDIUM: 2,
    DisruptionSeverity.HIGH: 3,
    DisruptionSeverity.CRITICAL: 4,
}


class DisruptionStatus(str, enum.Enum):
    """Disruption status."""
    ACTIVE = "active"
    RESOLVED = "resolved"
    INVESTIGATING = "investigating"


class ReportType(str, enum.Enum):
    """Report category."""
    ATTENDANCE = "attendance"
    LEAVE_SUMMARY = "leave_summary"
    SCHEDULE_CONFLICTS = "schedule_conflicts"
    STUDENT_PERFORMANCE = "student_performance"
