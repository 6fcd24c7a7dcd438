"""Cassandra-backed learning store.

Reads the tables declared in ``course_users.store.models``. All statements
are prepared once; queries run synchronously on the shared session. Driver
faults surface as ``StoreError`` so the routes can answer 503 or 500.
"""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from cassandra import DriverException, OperationTimedOut, Timeout, Unavailable
from cassandra.cluster import NoHostAvailable, Session

from .base import StoreQueryError, StoreUnavailableError
from .models import Course, ProgressRecord, UserRecord


logger = structlog.get_logger(__name__)

# Faults meaning the cluster cannot serve right now, as opposed to a bad query
UNAVAILABLE_ERRORS = (NoHostAvailable, OperationTimedOut, Unavailable, Timeout)


@contextmanager
def translate_driver_errors(query: str) -> Iterator[None]:
    """Re-raise driver faults as store errors.

    Raises:
        StoreUnavailableError: Cluster unreachable, overloaded or timing out
        StoreQueryError: Any other driver failure
    """
    try:
        yield
    except UNAVAILABLE_ERRORS as e:
        logger.error(
            "learning_store_unavailable",
            query=query,
            error_type=type(e).__name__,
            error=str(e),
        )
        raise StoreUnavailableError() from e
    except DriverException as e:
        logger.error(
            "learning_store_query_failed",
            query=query,
            error_type=type(e).__name__,
            error=str(e),
        )
        raise StoreQueryError() from e


class CassandraLearningStore:
    """Learning store reading from a Cassandra keyspace."""

    def __init__(self, session: Session, keyspace: str):
        """Initialize with Cassandra session."""
        self.session = session
        self.keyspace = keyspace
        with translate_driver_errors("prepare"):
            self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient execution."""
        self._list_courses = self.session.prepare(f"""
            SELECT id, title, status, kind FROM {self.keyspace}.courses
        """)

        self._get_course = self.session.prepare(f"""
            SELECT id, title, status, kind FROM {self.keyspace}.courses
            WHERE id = ?
        """)

        self._list_enrolled_user_ids = self.session.prepare(f"""
            SELECT user_id FROM {self.keyspace}.course_enrollments
            WHERE course_id = ?
        """)

        self._get_user = self.session.prepare(f"""
            SELECT id, login, email FROM {self.keyspace}.users
            WHERE id = ?
        """)

        self._get_progress = self.session.prepare(f"""
            SELECT completed, total, status FROM {self.keyspace}.course_progress
            WHERE user_id = ? AND course_id = ?
        """)

    # Result sets page lazily, so rows are consumed inside the translation block

    def list_courses(self) -> list[Course]:
        with translate_driver_errors("list_courses"):
            rows = self.session.execute(self._list_courses)
            return [Course.from_row(row) for row in rows]

    def get_course(self, course_id: int) -> Course | None:
        with translate_driver_errors("get_course"):
            row = self.session.execute(self._get_course, [course_id]).one()
        return Course.from_row(row) if row else None

    def list_enrolled_user_ids(self, course_id: int) -> list[int]:
        # Rows come back in clustering (enrollment position) order
        with translate_driver_errors("list_enrolled_user_ids"):
            rows = self.session.execute(self._list_enrolled_user_ids, [course_id])
            return [row.user_id for row in rows]

    def get_user(self, user_id: int) -> UserRecord | None:
        with translate_driver_errors("get_user"):
            row = self.session.execute(self._get_user, [user_id]).one()
        return UserRecord.from_row(row) if row else None

    def get_progress(self, user_id: int, course_id: int) -> ProgressRecord | None:
        with translate_driver_errors("get_progress"):
            row = self.session.execute(
                self._get_progress, [user_id, course_id]
            ).one()
        return ProgressRecord.from_row(row) if row else None
