"""Data-access capability the reports are built on.

The store is read-only from this service's point of view. Implementations
return ``None`` for records they do not hold and raise ``StoreError`` when the
backend itself fails.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from .models import Course, ProgressRecord, UserRecord


class StoreError(Exception):
    """Base learning store error."""

    def __init__(self, message: str, code: str = "store_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class StoreUnavailableError(StoreError):
    """Configured backend could not be reached."""

    def __init__(self, message: str = "Learning store not available"):
        super().__init__(message, "store_unavailable")


class StoreQueryError(StoreError):
    """Backend answered but the query failed."""

    def __init__(self, message: str = "Learning store query failed"):
        super().__init__(message, "store_query_failed")


@runtime_checkable
class LearningStore(Protocol):
    """Queries the course users report needs."""

    def list_courses(self) -> Iterable[Course]:
        """Every course entry, in no particular order."""
        ...

    def get_course(self, course_id: int) -> Course | None:
        """A single course entry, or None."""
        ...

    def list_enrolled_user_ids(self, course_id: int) -> Sequence[int]:
        """Enrolled user ids in enrollment-iteration order."""
        ...

    def get_user(self, user_id: int) -> UserRecord | None:
        """A user record, or None when deleted or unknown."""
        ...

    def get_progress(self, user_id: int, course_id: int) -> ProgressRecord | None:
        """Progress counters for (user, course), or None when never started."""
        ...
