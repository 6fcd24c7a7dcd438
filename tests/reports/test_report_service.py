"""Tests for the enrollment report service."""

import pytest

from course_users.core.context import clear_context, get_course_id
from course_users.reports.models import NotFoundReason
from course_users.reports.schemas import EnrollmentReport, ReportNotFound, UserRow
from course_users.reports.service import (
    EnrollmentReportService,
    is_found,
    parse_course_id,
)
from course_users.store import InMemoryLearningStore, ProgressRecord, UserRecord


class TestParseCourseId:
    """Tests for parse_course_id."""

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_no_selection(self, value: object) -> None:
        """Absent or blank values mean nothing was selected."""
        assert parse_course_id(value) is None

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("5", 5),
            (" 12 ", 12),
            (7, 7),
            ("-3", -3),
            ("abc", 0),
            ("5.5", 0),
            ("2147483647", 2147483647),
            ("3000000000", 0),
            ("-3000000000", 0),
            (3_000_000_000, 0),
        ],
    )
    def test_values(self, value: object, expected: int) -> None:
        """Whole numbers within the store id range parse; anything else is 0."""
        assert parse_course_id(value) == expected


class TestBuild:
    """Tests for EnrollmentReportService.build."""

    def test_rows_in_enrollment_order(self, store: InMemoryLearningStore) -> None:
        """One row per enrolled user with computed progress."""
        report = EnrollmentReportService(store).build(5)

        assert is_found(report)
        assert report == EnrollmentReport(
            course_id=5,
            rows=(
                UserRow(
                    id=1,
                    name="alice",
                    email="alice@example.com",
                    course_status="not_started",
                    percentage="75%",
                ),
                UserRow(
                    id=2,
                    name="bob",
                    email="bob@example.com",
                    course_status="completed",
                    percentage="0%",
                ),
            ),
        )

    def test_enrollment_order_is_kept(self) -> None:
        """Rows follow the store's enrollment order, not the user id."""
        store = InMemoryLearningStore(
            users=[
                UserRecord(id=1, login="a", email="a@example.com"),
                UserRecord(id=2, login="b", email="b@example.com"),
                UserRecord(id=3, login="c", email="c@example.com"),
            ],
            enrollments={10: [3, 1, 2]},
        )

        report = EnrollmentReportService(store).build(10)

        assert is_found(report)
        assert [row.id for row in report.rows] == [3, 1, 2]

    def test_user_without_progress_not_started(self) -> None:
        """Enrolled users with no progress record show 0%."""
        store = InMemoryLearningStore(
            users=[UserRecord(id=1, login="a", email="a@example.com")],
            enrollments={10: [1]},
        )

        report = EnrollmentReportService(store).build(10)

        assert is_found(report)
        assert report.rows[0].course_status == "not_started"
        assert report.rows[0].percentage == "0%"

    def test_missing_users_skipped(self) -> None:
        """Enrolled ids without a user record produce no row."""
        store = InMemoryLearningStore(
            users=[UserRecord(id=2, login="b", email="b@example.com")],
            enrollments={10: [1, 2, 3]},
            progress={(2, 10): ProgressRecord(completed=1, total=2)},
        )

        report = EnrollmentReportService(store).build(10)

        assert is_found(report)
        assert [row.id for row in report.rows] == [2]
        assert report.rows[0].percentage == "50%"

    def test_progress_is_per_course(self) -> None:
        """Progress from another course never leaks into the report."""
        store = InMemoryLearningStore(
            users=[UserRecord(id=1, login="a", email="a@example.com")],
            enrollments={10: [1]},
            progress={(1, 11): ProgressRecord(completed=4, total=4)},
        )

        report = EnrollmentReportService(store).build(10)

        assert is_found(report)
        assert report.rows[0].percentage == "0%"

    @pytest.mark.parametrize("course_id", [None, 0, -1, 3_000_000_000])
    def test_invalid_course(
        self, store: InMemoryLearningStore, course_id: int | None
    ) -> None:
        """Missing, non-positive or out of range ids are not found."""
        report = EnrollmentReportService(store).build(course_id)

        assert isinstance(report, ReportNotFound)
        assert report.reason == NotFoundReason.INVALID_COURSE
        assert not is_found(report)

    def test_no_enrollments(self, store: InMemoryLearningStore) -> None:
        """A course nobody is enrolled in is not found."""
        report = EnrollmentReportService(store).build(7)

        assert report == ReportNotFound(
            course_id=7, reason=NotFoundReason.NO_ENROLLMENTS
        )

    def test_unknown_course(self, store: InMemoryLearningStore) -> None:
        """A course the store does not know has no enrollments."""
        report = EnrollmentReportService(store).build(404)

        assert isinstance(report, ReportNotFound)
        assert report.reason == NotFoundReason.NO_ENROLLMENTS

    def test_all_users_missing(self, store: InMemoryLearningStore) -> None:
        """Enrollments pointing only at deleted users are not found."""
        report = EnrollmentReportService(store).build(8)

        assert report == ReportNotFound(
            course_id=8, reason=NotFoundReason.NO_RESOLVED_USERS
        )

    def test_binds_course_to_log_context(self, store: InMemoryLearningStore) -> None:
        """The course being built is available to log processors."""
        try:
            EnrollmentReportService(store).build(5)
            assert get_course_id() == 5
        finally:
            clear_context()
