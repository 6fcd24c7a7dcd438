"""Enumerations shared by the report components."""

from enum import Enum


class ProgressStatus(str, Enum):
    """Course progress status labels written by the learning platform."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class NotFoundReason(str, Enum):
    """Why a course report has no rows."""

    INVALID_COURSE = "invalid_course"  # id missing, unparsable or <= 0
    NO_ENROLLMENTS = "no_enrollments"  # store lists nobody for the course
    NO_RESOLVED_USERS = "no_resolved_users"  # every enrolled user was missing


# Column headers, in UserRow field order
REPORT_COLUMNS = ("User ID", "Name", "Email", "Course Status", "Progress (%)")
