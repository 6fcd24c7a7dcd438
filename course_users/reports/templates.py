"""HTML templates for the Course Users admin page.

Every dynamic value goes through ``html.escape`` before it is formatted into
a template, attributes included.
"""

import html
from collections.abc import Sequence

from .models import REPORT_COLUMNS
from .schemas import CourseOption, EnrollmentReport, ReportResult, UserRow
from .service import is_found


PAGE_TITLE = "Course Users"
SELECT_PLACEHOLDER = "-- Select Course --"
NO_USERS_MESSAGE = "No users found for this course."


def _e(value: object) -> str:
    return html.escape(str(value), quote=True)


# ==============================================================================
# Base Template
# ==============================================================================

BASE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>
    body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; margin: 24px; color: #1A1D23; }}
    form {{ margin: 16px 0; }}
    table.widefat {{ border-collapse: collapse; width: 100%; }}
    table.widefat th, table.widefat td {{ border: 1px solid #E5E7EB; padding: 6px 10px; text-align: left; }}
    table.striped tbody tr:nth-child(odd) {{ background-color: #F9FAFB; }}
  </style>
</head>
<body>
  <div class="wrap">
    <h1>{title}</h1>
{content}
  </div>
</body>
</html>
"""


# ==============================================================================
# Course Selector
# ==============================================================================

SELECTOR_TEMPLATE = """    <form method="get" action="">
      <input type="hidden" name="page" value="{page_slug}" />
      <label for="course">Select Course:</label>
      <select id="course" name="course">
        <option value="">{placeholder}</option>
{options}
      </select>
      <input type="submit" value="View Users" class="button button-primary" />
    </form>"""


def render_course_selector(
    courses: Sequence[CourseOption],
    selected_course_id: int | None,
    page_slug: str,
) -> str:
    """Render the GET form listing every course, preselecting the current one.

    Args:
        courses: Courses in display order
        selected_course_id: Course to preselect, if any
        page_slug: Value of the hidden ``page`` field

    Returns:
        HTML fragment
    """
    options = "\n".join(
        '        <option value="{id}"{selected}>{title}</option>'.format(
            id=_e(course.id),
            selected=" selected" if course.id == selected_course_id else "",
            title=_e(course.title),
        )
        for course in courses
    )
    return SELECTOR_TEMPLATE.format(
        page_slug=_e(page_slug),
        placeholder=_e(SELECT_PLACEHOLDER),
        options=options,
    )


# ==============================================================================
# Report Section
# ==============================================================================

EXPORT_FORM_TEMPLATE = """    <form method="post" action="">
      <input type="hidden" name="ld_course_id" value="{course_id}" />
      <label for="csv_filename">Enter CSV File Name:</label>
      <input type="text" name="csv_filename" id="csv_filename" placeholder="{placeholder}" required />
      <input type="submit" name="ld_export_csv" value="Export as CSV" class="button button-secondary" />
    </form>"""

TABLE_TEMPLATE = """    <table class="widefat fixed striped">
      <thead>
        <tr>
{header}
        </tr>
      </thead>
      <tbody>
{body}
      </tbody>
    </table>"""


def render_export_form(course_id: int, default_file_name: str) -> str:
    """Render the POST form that triggers the CSV export."""
    return EXPORT_FORM_TEMPLATE.format(
        course_id=_e(course_id), placeholder=_e(default_file_name)
    )


def render_report_table(rows: Sequence[UserRow]) -> str:
    """Render one table row per report row, columns in report order."""
    header = "\n".join(f"          <th>{_e(column)}</th>" for column in REPORT_COLUMNS)
    body = "\n".join(
        "        <tr>"
        + "".join(f"<td>{_e(value)}</td>" for value in row.as_csv_row())
        + "</tr>"
        for row in rows
    )
    return TABLE_TEMPLATE.format(header=header, body=body)


def render_report_section(
    report: EnrollmentReport,
    course_title: str,
    default_file_name: str,
) -> str:
    """Heading, export form and table for a found report."""
    return "\n".join(
        [
            f"    <h2>Users Enrolled in: {_e(course_title)}</h2>",
            render_export_form(report.course_id, default_file_name),
            render_report_table(report.rows),
        ]
    )


def render_not_found() -> str:
    return f"    <p>{_e(NO_USERS_MESSAGE)}</p>"


# ==============================================================================
# Page
# ==============================================================================


def render_report_page(
    courses: Sequence[CourseOption],
    selected_course_id: int | None = None,
    report: ReportResult | None = None,
    course_title: str = "",
    page_slug: str = "ld-course-users",
    default_file_name: str = "course_users.csv",
) -> str:
    """Render the full admin page.

    With no selection only the selector is shown. With a selection the page
    shows either the report section or the "no users found" message.

    Args:
        courses: Courses offered in the selector
        selected_course_id: Parsed course selection (None when absent)
        report: Result of building the selected course's report
        course_title: Title for the report heading
        page_slug: Value of the selector's hidden ``page`` field
        default_file_name: Placeholder of the CSV file name input

    Returns:
        Complete HTML document
    """
    parts = [render_course_selector(courses, selected_course_id, page_slug)]

    if selected_course_id is not None:
        if report is not None and is_found(report):
            parts.append(
                render_report_section(report, course_title, default_file_name)
            )
        else:
            parts.append(render_not_found())

    return BASE_TEMPLATE.format(title=_e(PAGE_TITLE), content="\n".join(parts))
