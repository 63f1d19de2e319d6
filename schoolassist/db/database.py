"""
Database handle for the school assistant scheduling core.

`Database` owns the SQLAlchemy engine, its connection pool and the session
factory. It is constructed explicitly, passed to every service, and disposed
on shutdown; there is no module-level engine.
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generator, List, Mapping, Optional, TypeVar, Union

from sqlalchemy import create_engine, event, exc, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from schoolassist.config.settings import Settings
from schoolassist.core.logging import get_logger
from schoolassist.models import Base

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ExecuteResult:
    """Outcome of a statement that returns no rows."""

    insert_id: Optional[int]
    affected_rows: int


class DatabaseStats:
    """Query counters collected from engine events"""

    def __init__(self):
        self.query_count = 0
        self.slow_query_count = 0
        self.connection_errors = 0
        self.total_query_time = 0.0

    def reset_stats(self):
        self.query_count = 0
        self.slow_query_count = 0
        self.connection_errors = 0
        self.total_query_time = 0.0

    @property
    def average_query_time(self) -> float:
        return self.total_query_time / self.query_count if self.query_count else 0.0

    def get_stats(self) -> Dict[str, Any]:
        return {
            "query_count": self.query_count,
            "slow_query_count": self.slow_query_count,
            "connection_errors": self.connection_errors,
            "average_query_time": self.average_query_time,
        }


class Database:
    """
    Pooled database handle.

    Args:
        url: SQLAlchemy database URL
        echo: Log every statement through ``sqlalchemy.engine``
        pool_size: Connections kept in the pool
        max_overflow: Extra connections allowed beyond ``pool_size``
        pool_timeout: Seconds to wait for a free connection
        pool_recycle: Seconds after which a connection is replaced
        slow_query_threshold: Statements slower than this many seconds are
            logged as warnings
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 5,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        slow_query_threshold: float = 0.5,
        connect_args: Optional[Dict[str, Any]] = None,
    ):
        self.url = make_url(url)
        self.slow_query_threshold = slow_query_threshold
        self.stats = DatabaseStats()

        engine_kwargs: Dict[str, Any] = {
            "echo": echo,
            "pool_pre_ping": True,
            "connect_args": dict(connect_args or {}),
        }
        if self.url.get_backend_name() == "sqlite":
            engine_kwargs["connect_args"].setdefault("check_same_thread", False)
            if self.url.database in (None, "", ":memory:"):
                # One shared connection, otherwise every checkout sees an empty database
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
            )

        self.engine: Engine = create_engine(self.url, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

        event.listen(self.engine, "before_cursor_execute", self._before_cursor_execute)
        event.listen(self.engine, "after_cursor_execute", self._after_cursor_execute)
        event.listen(self.engine, "handle_error", self._handle_error)

        logger.info(
            "Database engine created",
            extra={"backend": self.url.get_backend_name(), "database": self.url.database},
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a database handle from application settings"""
        return cls(
            settings.get_database_url(),
            echo=settings.DB_ECHO,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            slow_query_threshold=settings.DB_SLOW_QUERY_THRESHOLD,
        )

    # ==================== Engine events ====================

    def _before_cursor_execute(self, conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault('query_start_time', []).append(time.perf_counter())

    def _after_cursor_execute(self, conn, cursor, statement, parameters, context, executemany):
        total_time = time.perf_counter() - conn.info['query_start_time'].pop()
        self.stats.query_count += 1
        self.stats.total_query_time += total_time

        if total_time > self.slow_query_threshold:
            self.stats.slow_query_count += 1
            logger.warning(
                "Slow query detected (%.4fs): %s",
                total_time,
                statement[:100],
            )

    def _handle_error(self, context):
        if context.is_disconnect:
            self.stats.connection_errors += 1
        # the timer pushed by before_cursor_execute is never popped on failure
        if context.connection is not None:
            timers = context.connection.info.get('query_start_time')
            if timers:
                timers.pop()

    # ==================== Sessions and transactions ====================

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Session scoped to one unit of work.

        Commits when the block exits normally; rolls back and re-raises on
        any exception.
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception as e:
            logger.debug("Rolling back session: %s", e)
            session.rollback()
            raise
        finally:
            session.close()

    def run_in_transaction(self, unit_of_work: Callable[[Session], T]) -> T:
        """
        Run ``unit_of_work(session)`` inside a single transaction.

        Every statement the unit of work issues commits together, or none
        does; the unit of work raises to force a rollback.
        """
        with self.session() as session:
            try:
                return unit_of_work(session)
            except Exception:
                logger.warning("Transaction rolled back", exc_info=True)
                raise

    def execute(
        self,
        statement: Union[str, Any],
        params: Optional[Mapping[str, Any]] = None,
    ) -> Union[List[Dict[str, Any]], ExecuteResult]:
        """
        Execute a single parameterized statement in its own transaction.

        Returns:
            A list of row mappings for statements that return rows, otherwise
            an ``ExecuteResult`` with the generated id and affected row count.
        """
        if isinstance(statement, str):
            statement = text(statement)

        with self.engine.begin() as conn:
            result = conn.execute(statement, dict(params or {}))
            if result.returns_rows:
                return [dict(row) for row in result.mappings()]
            return ExecuteResult(
                insert_id=result.lastrowid or None,
                affected_rows=result.rowcount,
            )

    # ==================== Schema ====================

    def create_all(self) -> None:
        """Create every mapped table that does not exist yet"""
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    # ==================== Lifecycle ====================

    def check_connection(self) -> bool:
        """Return True if the database answers ``SELECT 1``"""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except exc.DBAPIError as e:
            logger.error("Database connection check failed: %s", e)
            return False

    def health_check(self) -> Dict[str, Any]:
        """Connection status, response time and pool statistics"""
        start_time = time.perf_counter()
        is_connected = self.check_connection()
        response_time = (time.perf_counter() - start_time) * 1000

        pool = self.engine.pool
        return {
            "is_connected": is_connected,
            "response_time_ms": response_time,
            "database": self.url.database,
            "host": self.url.host,
            "pool": {
                "class": type(pool).__name__,
                "status": pool.status(),
            },
            "query_stats": self.stats.get_stats(),
        }

    def dispose(self) -> None:
        """Close every pooled connection"""
        self.engine.dispose()
        logger.info("Database engine disposed")

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()
