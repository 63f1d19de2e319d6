"""
Admin model.

Only the fields the scheduling core references are mapped; accounts and
authentication live outside this package.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from schoolassist.models.base.base_model import TimestampModel

__all__ = ["Admin"]


class Admin(TimestampModel):
    """Administrator who approves leave and works shifts."""

    __tablename__ = "admins"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    department: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
