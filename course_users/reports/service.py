"""Enrollment report service layer.

Business logic for:
- Parsing the course selection carried by a request
- Joining enrolled user ids with user records and computed progress
"""

from typing import Any, TypeGuard

import structlog

from course_users.core.context import set_course_id
from course_users.store.base import LearningStore
from course_users.store.models import MAX_STORE_ID

from .models import NotFoundReason
from .progress import compute_progress
from .schemas import EnrollmentReport, ReportNotFound, ReportResult, UserRow


logger = structlog.get_logger(__name__)


def parse_course_id(value: Any) -> int | None:
    """Read a course selection from a query or form value.

    Returns None when nothing was selected (absent or blank). Any other value
    that is not a whole number the store can hold reads as 0, which is never a
    valid course.
    """
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        course_id = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            course_id = int(text)
        except ValueError:
            return 0
    return course_id if abs(course_id) <= MAX_STORE_ID else 0


def is_found(result: ReportResult) -> TypeGuard[EnrollmentReport]:
    """Check whether a build produced rows."""
    return isinstance(result, EnrollmentReport)


class EnrollmentReportService:
    """Builds the per-course list of enrolled users with their progress."""

    def __init__(self, store: LearningStore):
        self.store = store

    def build(self, course_id: int | None) -> ReportResult:
        """Build the report for a course.

        Args:
            course_id: Selected course; None, <= 0 or above MAX_STORE_ID is
                invalid

        Returns:
            EnrollmentReport with rows in enrollment order, or ReportNotFound
        """
        if course_id is None or not 0 < course_id <= MAX_STORE_ID:
            return ReportNotFound(
                course_id=course_id or 0, reason=NotFoundReason.INVALID_COURSE
            )

        set_course_id(course_id)

        user_ids = self.store.list_enrolled_user_ids(course_id)
        if not user_ids:
            logger.info(
                "course_report_empty", reason=NotFoundReason.NO_ENROLLMENTS.value
            )
            return ReportNotFound(
                course_id=course_id, reason=NotFoundReason.NO_ENROLLMENTS
            )

        rows: list[UserRow] = []
        skipped = 0
        for user_id in user_ids:
            user = self.store.get_user(user_id)
            if user is None:
                skipped += 1
                logger.debug("enrolled_user_missing", user_id=user_id)
                continue

            progress = compute_progress(self.store.get_progress(user_id, course_id))
            rows.append(
                UserRow(
                    id=user_id,
                    name=user.login,
                    email=user.email,
                    course_status=progress.status,
                    percentage=progress.percentage,
                )
            )

        logger.info(
            "course_report_built",
            enrolled=len(user_ids),
            rows=len(rows),
            skipped=skipped,
        )

        if not rows:
            return ReportNotFound(
                course_id=course_id, reason=NotFoundReason.NO_RESOLVED_USERS
            )

        return EnrollmentReport(course_id=course_id, rows=rows)
