"""
Application wiring.

``create_services`` builds the database handle and every service around it,
the way an outer HTTP or CLI layer would at startup.
"""

from dataclasses import dataclass
from typing import Optional

from schoolassist.config import Settings, configure_logging, get_settings
from schoolassist.db.database import Database
from schoolassist.services import (
    DisruptionService,
    LeaveRequestService,
    ReportService,
    ScheduleService,
    ShiftExchangeService,
)


@dataclass
class ServiceContainer:
    """Services sharing one database handle."""

    database: Database
    leave_requests: LeaveRequestService
    schedules: ScheduleService
    shift_exchanges: ShiftExchangeService
    disruptions: DisruptionService
    reports: ReportService

    def close(self) -> None:
        self.database.dispose()

    def __enter__(self) -> "ServiceContainer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def create_services(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> ServiceContainer:
    """
    Configure logging and build the services.

    Args:
        settings: Application settings; read from the environment if omitted
        database: Existing handle to share; built from ``settings`` if omitted
    """
    settings = settings or get_settings()
    logger = configure_logging(settings)

    db = database or Database.from_settings(settings)
    logger.info(
        "Services initialized",
        extra={"app_name": settings.APP_NAME, "environment": settings.ENVIRONMENT},
    )
    return ServiceContainer(
        database=db,
        leave_requests=LeaveRequestService(db, settings),
        schedules=ScheduleService(db, settings),
        shift_exchanges=ShiftExchangeService(db, settings),
        disruptions=DisruptionService(db, settings),
        reports=ReportService(db, settings),
    )
