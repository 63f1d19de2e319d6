"""Database handle and schema initialization."""

from schoolassist.db.database import Database, DatabaseStats, ExecuteResult

__all__ = ["Database", "DatabaseStats", "ExecuteResult"]
