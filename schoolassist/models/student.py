"""
Student model.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from schoolassist.models.base.base_model import TimestampModel

__all__ = ["Student"]


class Student(TimestampModel):
    """Student who requests leave and attends classes."""

    __tablename__ = "students"

    student_number: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        comment="School-issued student identifier"
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    class_section: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
