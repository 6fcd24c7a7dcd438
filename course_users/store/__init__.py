"""Learning store: the read-only data source behind the reports.

Provides:
- The ``LearningStore`` protocol
- An in-memory implementation (tests, local development)
- A Cassandra implementation (``course_users.store.cassandra``, imported on
  demand so the driver only loads for that backend)
"""

from .base import LearningStore, StoreError, StoreQueryError, StoreUnavailableError
from .memory import InMemoryLearningStore
from .models import (
    STORE_TABLES_CQL,
    Course,
    CourseKind,
    CourseStatus,
    ProgressRecord,
    UserRecord,
)


__all__ = [
    "STORE_TABLES_CQL",
    "Course",
    "CourseKind",
    "CourseStatus",
    "InMemoryLearningStore",
    "LearningStore",
    "ProgressRecord",
    "StoreError",
    "StoreQueryError",
    "StoreUnavailableError",
    "UserRecord",
]
