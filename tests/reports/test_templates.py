"""Tests for the admin page templates."""

from course_users.reports.models import NotFoundReason
from course_users.reports.schemas import (
    CourseOption,
    EnrollmentReport,
    ReportNotFound,
    UserRow,
)
from course_users.reports.templates import (
    NO_USERS_MESSAGE,
    SELECT_PLACEHOLDER,
    render_course_selector,
    render_export_form,
    render_report_page,
    render_report_table,
)


COURSES = [
    CourseOption(id=7, title="Advanced Dosage"),
    CourseOption(id=5, title="Pharmacology Basics"),
]

REPORT = EnrollmentReport(
    course_id=5,
    rows=(
        UserRow(
            id=1,
            name="alice",
            email="alice@example.com",
            course_status="not_started",
            percentage="75%",
        ),
    ),
)


class TestCourseSelector:
    """Tests for render_course_selector."""

    def test_lists_courses_after_placeholder(self) -> None:
        """Placeholder first, then courses in the given order."""
        html = render_course_selector(COURSES, None, "ld-course-users")

        placeholder = html.index(SELECT_PLACEHOLDER)
        advanced = html.index('<option value="7">Advanced Dosage</option>')
        pharma = html.index('<option value="5">Pharmacology Basics</option>')
        assert placeholder < advanced < pharma
        assert '<select id="course" name="course">' in html
        assert '<input type="hidden" name="page" value="ld-course-users" />' in html
        assert 'value="View Users"' in html
        assert 'method="get"' in html

    def test_selected_course(self) -> None:
        """The current selection is preselected."""
        html = render_course_selector(COURSES, 5, "ld-course-users")

        assert '<option value="5" selected>Pharmacology Basics</option>' in html
        assert '<option value="7">Advanced Dosage</option>' in html

    def test_titles_are_escaped(self) -> None:
        """Course titles cannot inject markup."""
        html = render_course_selector(
            [CourseOption(id=1, title="<b>Bold</b> & Co")], None, "slug"
        )

        assert "&lt;b&gt;Bold&lt;/b&gt; &amp; Co" in html
        assert "<b>" not in html


class TestReportSection:
    """Tests for the export form and table."""

    def test_export_form(self) -> None:
        """The POST form carries the course id and a required file name."""
        html = render_export_form(5, "course_users.csv")

        assert 'method="post"' in html
        assert '<input type="hidden" name="ld_course_id" value="5" />' in html
        assert 'name="csv_filename"' in html
        assert 'placeholder="course_users.csv" required' in html
        assert 'name="ld_export_csv" value="Export as CSV"' in html

    def test_table_columns_and_rows(self) -> None:
        """Header cells follow the report columns; one row per user."""
        html = render_report_table(REPORT.rows)

        assert '<table class="widefat fixed striped">' in html
        for column in ("User ID", "Name", "Email", "Course Status", "Progress (%)"):
            assert f"<th>{column}</th>" in html
        assert (
            "<tr><td>1</td><td>alice</td><td>alice@example.com</td>"
            "<td>not_started</td><td>75%</td></tr>"
        ) in html

    def test_cells_are_escaped(self) -> None:
        """User data cannot inject markup."""
        row = UserRow(
            id=3,
            name="<script>alert(1)</script>",
            email='"evil"@example.com',
            course_status="in_progress",
            percentage="33%",
        )

        html = render_report_table([row])

        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "&quot;evil&quot;@example.com" in html


class TestReportPage:
    """Tests for render_report_page."""

    def test_no_selection_shows_selector_only(self) -> None:
        """Without a course only the selector is rendered."""
        html = render_report_page(COURSES)

        assert html.startswith("<!DOCTYPE html>")
        assert "<h1>Course Users</h1>" in html
        assert "Users Enrolled in" not in html
        assert NO_USERS_MESSAGE not in html
        assert "ld_export_csv" not in html

    def test_found_report(self) -> None:
        """A found report shows heading, export form and table."""
        html = render_report_page(
            COURSES,
            selected_course_id=5,
            report=REPORT,
            course_title="Pharmacology Basics",
        )

        assert "<h2>Users Enrolled in: Pharmacology Basics</h2>" in html
        assert "ld_export_csv" in html
        assert "<td>alice</td>" in html
        assert NO_USERS_MESSAGE not in html

    def test_not_found_report(self) -> None:
        """A selected course without rows shows the message and no table."""
        html = render_report_page(
            COURSES,
            selected_course_id=7,
            report=ReportNotFound(course_id=7, reason=NotFoundReason.NO_ENROLLMENTS),
            course_title="Advanced Dosage",
        )

        assert NO_USERS_MESSAGE in html
        assert "<table" not in html
        assert "ld_export_csv" not in html

    def test_heading_title_is_escaped(self) -> None:
        """The report heading escapes the course title."""
        html = render_report_page(
            COURSES,
            selected_course_id=5,
            report=REPORT,
            course_title="<i>x</i>",
        )

        assert "Users Enrolled in: &lt;i&gt;x&lt;/i&gt;" in html

    def test_custom_slug_and_default_name(self) -> None:
        """Page slug and file name placeholder come from the caller."""
        html = render_report_page(
            COURSES,
            selected_course_id=5,
            report=REPORT,
            page_slug="my-report",
            default_file_name="enrolled.csv",
        )

        assert 'name="page" value="my-report"' in html
        assert 'placeholder="enrolled.csv"' in html
