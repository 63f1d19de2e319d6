from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from schoolassist.config import Settings
from schoolassist.config.logging import build_logging_config
from schoolassist.main import create_services
from schoolassist.services import ReportService


def test_database_url_built_from_parts():
    settings = Settings(DB_USER="app", DB_PASSWORD="p@ss word", DB_HOST="db", DB_NAME="school")

    assert settings.get_database_url() == (
        "mysql+pymysql://app:p%40ss+word@db:3306/school?charset=utf8mb4"
    )


def test_log_level_is_normalized():
    assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="loud")


def test_json_logging_config(tmp_path):
    settings = Settings(LOG_FORMAT="json", LOG_FILE=str(tmp_path / "logs" / "app.log"))

    config = build_logging_config(settings)

    assert config["handlers"]["console"]["formatter"] == "json"
    assert config["handlers"]["file"]["class"] == "logging.handlers.RotatingFileHandler"
    assert (tmp_path / "logs").is_dir()


def test_create_services_shares_database():
    settings = Settings(DATABASE_URL="sqlite://", ENVIRONMENT="test", LOG_FORMAT="text")

    with create_services(settings) as services:
        assert services.leave_requests.db is services.database
        assert services.reports.db is services.database
        assert services.database.check_connection() is True

    assert logging.getLogger("schoolassist").handlers


def test_services_read_page_limits_from_settings(db):
    settings = Settings(DATABASE_URL="sqlite://", DEFAULT_PAGE_SIZE=5, MAX_PAGE_SIZE=10)
    service = ReportService(db, settings)

    assert service.find_all().pagination.limit == 5
    assert service.find_all(limit=500).pagination.limit == 10
