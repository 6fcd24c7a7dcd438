"""Entities read from the learning store.

Cassandra table definitions for:
- Courses: id, title and the publication/type flags the directory filters on
- Course enrollments: enrolled user ids per course, in enrollment order
- Users: login and email shown in the report
- Course progress: completed/total step counters per (user, course)

This service only reads these tables. The schema is created by
``scripts/init_schema.py`` for development setups.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any


class CourseStatus(str, Enum):
    """Course publication status."""

    PUBLISH = "publish"
    DRAFT = "draft"
    PRIVATE = "private"
    TRASH = "trash"


class CourseKind(str, Enum):
    """Type of entry stored in the courses table."""

    COURSE = "course"
    LESSON = "lesson"
    TOPIC = "topic"
    QUIZ = "quiz"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

COURSES_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.courses (
    id INT PRIMARY KEY,
    title TEXT,
    status TEXT,
    kind TEXT
)
"""

# Clustering by position keeps the enrollment-iteration order stable
COURSE_ENROLLMENTS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.course_enrollments (
    course_id INT,
    position INT,
    user_id INT,
    enrolled_at TIMESTAMP,
    PRIMARY KEY (course_id, position)
) WITH CLUSTERING ORDER BY (position ASC)
"""

USERS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.users (
    id INT PRIMARY KEY,
    login TEXT,
    email TEXT
)
"""

COURSE_PROGRESS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.course_progress (
    user_id INT,
    course_id INT,
    completed INT,
    total INT,
    status TEXT,
    PRIMARY KEY ((user_id, course_id))
)
"""

# Ids are CQL INT columns (signed 32-bit)
MAX_STORE_ID = 2_147_483_647

STORE_TABLES_CQL = [
    COURSES_TABLE_CQL,
    COURSE_ENROLLMENTS_TABLE_CQL,
    USERS_TABLE_CQL,
    COURSE_PROGRESS_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


class Course:
    """Course entry as stored.

    Attributes:
        id: Course id
        title: Display title
        status: Publication status (publish, draft, ...)
        kind: Entry type; only ``course`` entries are listed
    """

    def __init__(
        self,
        id: int,
        title: str,
        status: str = CourseStatus.PUBLISH.value,
        kind: str = CourseKind.COURSE.value,
    ):
        self.id = id
        self.title = title
        self.status = status
        self.kind = kind

    @property
    def is_listable(self) -> bool:
        """Published course-type entries are the only ones offered for reports."""
        return (
            self.status == CourseStatus.PUBLISH.value
            and self.kind == CourseKind.COURSE.value
        )

    @classmethod
    def from_row(cls, row: Any) -> "Course":
        """Create Course instance from Cassandra row."""
        return cls(
            id=row.id,
            title=row.title or "",
            status=row.status or CourseStatus.DRAFT.value,
            kind=row.kind or CourseKind.COURSE.value,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Course":
        """Create Course instance from a plain mapping (seed files)."""
        return cls(
            id=int(data["id"]),
            title=str(data.get("title") or ""),
            status=data.get("status") or CourseStatus.PUBLISH.value,
            kind=data.get("kind") or CourseKind.COURSE.value,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "kind": self.kind,
        }

    def __repr__(self) -> str:
        return f"<Course {self.id} {self.title!r} {self.status}/{self.kind}>"


class UserRecord:
    """User account as stored.

    Attributes:
        id: User id
        login: Login name, shown as the report's Name column
        email: Email address
    """

    def __init__(self, id: int, login: str, email: str):
        self.id = id
        self.login = login
        self.email = email

    @classmethod
    def from_row(cls, row: Any) -> "UserRecord":
        """Create UserRecord instance from Cassandra row."""
        return cls(id=row.id, login=row.login or "", email=row.email or "")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "UserRecord":
        """Create UserRecord instance from a plain mapping (seed files)."""
        return cls(
            id=int(data["id"]),
            login=str(data.get("login") or ""),
            email=str(data.get("email") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"id": self.id, "login": self.login, "email": self.email}

    def __repr__(self) -> str:
        return f"<UserRecord {self.id} {self.login!r}>"


class ProgressRecord:
    """Raw progress counters for one (user, course).

    Values are kept exactly as the store returned them; ``completed`` and
    ``total`` may be missing or malformed. Normalization happens in
    ``course_users.reports.progress.compute_progress``.

    Attributes:
        completed: Completed steps
        total: Total steps
        status: Status label (not_started, in_progress, completed, ...) or None
    """

    def __init__(
        self,
        completed: Any = 0,
        total: Any = 0,
        status: str | None = None,
    ):
        self.completed = completed
        self.total = total
        self.status = status

    @classmethod
    def from_row(cls, row: Any) -> "ProgressRecord":
        """Create ProgressRecord instance from Cassandra row."""
        return cls(completed=row.completed, total=row.total, status=row.status)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ProgressRecord":
        """Create ProgressRecord from a raw mapping; missing keys become None."""
        return cls(
            completed=data.get("completed"),
            total=data.get("total"),
            status=data.get("status"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "completed": self.completed,
            "total": self.total,
            "status": self.status,
        }

    def __repr__(self) -> str:
        return f"<ProgressRecord {self.completed}/{self.total} {self.status}>"
