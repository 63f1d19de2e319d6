"""
Database initialization utilities.

Tables are created from the model metadata. Suitable for development and
tests; a deployed database is expected to be migrated separately.

Run as a module to create the schema configured in the environment::

    python -m schoolassist.db.init_db [--reset]
"""

import sys

from sqlalchemy import inspect

from schoolassist.core.logging import get_logger
from schoolassist.db.database import Database
from schoolassist.models import Base

logger = get_logger(__name__)


def init_db(database: Database) -> None:
    """Create every table that does not exist yet."""
    existing_tables = set(inspect(database.engine).get_table_names())
    missing = [t.name for t in Base.metadata.sorted_tables if t.name not in existing_tables]

    if not missing:
        logger.info(f"Database already initialized with {len(existing_tables)} tables")
        return

    database.create_all()
    logger.info("Database tables created", extra={"tables": missing})


def drop_db(database: Database) -> None:
    """
    Drop all tables.

    WARNING: This deletes all data.
    """
    database.drop_all()
    logger.warning("All database tables dropped")


def reset_db(database: Database) -> None:
    logger.warning("Resetting database...")
    drop_db(database)
    init_db(database)
    logger.info("Database reset complete")


if __name__ == "__main__":
    from schoolassist.config import configure_logging, get_settings

    settings = get_settings()
    configure_logging(settings)

    with Database.from_settings(settings) as db:
        if "--reset" in sys.argv[1:]:
            reset_db(db)
        else:
            init_db(db)
