from __future__ import annotations

import logging

import pytest

from schoolassist.core.logging import get_logger


class Collector(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def capture():
    def _capture(name):
        logger = logging.getLogger(name)
        handler = Collector()
        attached.append((logger, handler, logger.level))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        return handler

    attached = []
    yield _capture
    for logger, handler, previous in attached:
        logger.removeHandler(handler)
        logger.setLevel(previous)


def test_bound_context_wins_over_call_extra(capture):
    records = capture("schoolassist.tests.adapter")
    logger = get_logger("schoolassist.tests.adapter").add_context(request_id="r-1")

    logger.info("handled", extra={"request_id": "other", "attempt": 2})

    record = records.records[-1]
    assert record.getMessage() == "handled"
    assert record.request_id == "r-1"
    assert record.attempt == 2


def test_records_below_level_are_skipped(capture):
    records = capture("schoolassist.tests.quiet")
    logging.getLogger("schoolassist.tests.quiet").setLevel(logging.WARNING)

    get_logger("schoolassist.tests.quiet").info("ignored")

    assert records.records == []


def test_service_records_carry_service_name(capture, report_service, people):
    records = capture("schoolassist.services.ReportService")

    report = report_service.create({
        "report_type": "attendance",
        "title": "Week 10",
        "generated_by": people.alice,
    })

    stored = [r for r in records.records if r.getMessage() == "Report stored"]
    assert len(stored) == 1
    assert stored[0].service == "ReportService"
    assert stored[0].report_id == report.id
