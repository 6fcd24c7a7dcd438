"""In-memory learning store.

Used by the tests and for local development without Cassandra. A seed file
has the shape::

    {
      "courses": [{"id": 5, "title": "Intro", "status": "publish", "kind": "course"}],
      "users": [{"id": 1, "login": "ana", "email": "ana@example.com"}],
      "enrollments": {"5": [1, 2]},
      "progress": [{"user_id": 1, "course_id": 5, "completed": 3, "total": 4}]
    }
"""

from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

import orjson
import structlog

from .models import Course, ProgressRecord, UserRecord


logger = structlog.get_logger(__name__)


class InMemoryLearningStore:
    """Learning store backed by plain dicts. Never mutated after construction."""

    def __init__(
        self,
        courses: Iterable[Course] = (),
        users: Iterable[UserRecord] = (),
        enrollments: Mapping[int, Sequence[int]] | None = None,
        progress: Mapping[tuple[int, int], ProgressRecord] | None = None,
    ):
        self._courses = list(courses)
        self._courses_by_id: dict[int, Course] = {}
        for course in self._courses:
            self._courses_by_id.setdefault(course.id, course)
        self._users = {user.id: user for user in users}
        self._enrollments = {
            int(course_id): list(user_ids)
            for course_id, user_ids in (enrollments or {}).items()
        }
        self._progress = dict(progress or {})

    def list_courses(self) -> list[Course]:
        return list(self._courses)

    def get_course(self, course_id: int) -> Course | None:
        return self._courses_by_id.get(course_id)

    def list_enrolled_user_ids(self, course_id: int) -> list[int]:
        return list(self._enrollments.get(course_id, []))

    def get_user(self, user_id: int) -> UserRecord | None:
        return self._users.get(user_id)

    def get_progress(self, user_id: int, course_id: int) -> ProgressRecord | None:
        return self._progress.get((user_id, course_id))

    @classmethod
    def from_seed(cls, data: Mapping[str, Any]) -> "InMemoryLearningStore":
        """Build a store from a decoded seed document."""
        progress = {
            (int(item["user_id"]), int(item["course_id"])): ProgressRecord.from_mapping(
                item
            )
            for item in data.get("progress", [])
        }
        return cls(
            courses=[Course.from_mapping(item) for item in data.get("courses", [])],
            users=[UserRecord.from_mapping(item) for item in data.get("users", [])],
            enrollments={
                int(course_id): [int(user_id) for user_id in user_ids]
                for course_id, user_ids in data.get("enrollments", {}).items()
            },
            progress=progress,
        )

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryLearningStore":
        """Load a seed document from disk."""
        path = Path(path)
        store = cls.from_seed(orjson.loads(path.read_bytes()))
        logger.info(
            "memory_store_seeded",
            path=str(path),
            courses=len(store._courses),
            users=len(store._users),
        )
        return store
