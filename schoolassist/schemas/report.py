"""
Report schemas.
"""

from __future__ import annotations

from datetime import date as Date
from typing import Any, Dict, Optional

from pydantic import Field

from schoolassist.models.base.enums import ReportType
from schoolassist.schemas.common import BaseSchema, TimestampMixin

__all__ = [
    "ReportCreate",
    "ReportResponse",
]


class ReportCreate(BaseSchema):
    report_type: ReportType
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    generated_by: int = Field(..., gt=0)
    data: Optional[Dict[str, Any]] = None
    filters: Optional[Dict[str, Any]] = None
    date_range_start: Optional[Date] = None
    date_range_end: Optional[Date] = None
    file_path: Optional[str] = Field(None, max_length=500)


class ReportResponse(BaseSchema, TimestampMixin):
    id: int
    report_type: ReportType
    title: str
    description: Optional[str] = None
    generated_by: int
    generated_by_name: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    filters: Optional[Dict[str, Any]] = None
    date_range_start: Optional[Date] = None
    date_range_end: Optional[Date] = None
    file_path: Optional[str] = None
