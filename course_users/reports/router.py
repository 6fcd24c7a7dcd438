"""Course users admin page endpoints.

Provides routes for:
- The report page (course selector, report table)
- The CSV export, posted from the same page
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Form, Query, Response
from fastapi.responses import HTMLResponse

from course_users.auth.dependencies import verify_admin_api_key
from course_users.config.settings import Settings
from course_users.store.base import StoreError
from course_users.store.dependencies import handle_store_error

from .dependencies import (
    CourseDirectoryDep,
    CsvExporterDep,
    ReportServiceDep,
    SettingsDep,
)
from .directory import CourseDirectory
from .export import build_csv_response
from .service import EnrollmentReportService, parse_course_id
from .templates import render_report_page


logger = structlog.get_logger(__name__)

REPORT_PAGE_PATH = "/admin/course-users"

router = APIRouter(
    prefix=REPORT_PAGE_PATH,
    tags=["course-users"],
    dependencies=[Depends(verify_admin_api_key)],
)


def render_page_response(
    course: str | None,
    directory: CourseDirectory,
    report_service: EnrollmentReportService,
    settings: Settings,
) -> HTMLResponse:
    """Render the admin page for a raw ``course`` query value."""
    selected_course_id = parse_course_id(course)

    report = None
    course_title = ""
    if selected_course_id is not None:
        report = report_service.build(selected_course_id)
        if selected_course_id > 0:
            course_title = directory.get_title(selected_course_id)

    content = render_report_page(
        courses=directory.list_courses(),
        selected_course_id=selected_course_id,
        report=report,
        course_title=course_title,
        page_slug=settings.report_page_slug,
        default_file_name=settings.default_export_filename,
    )
    return HTMLResponse(content=content)


@router.get(
    "",
    response_class=HTMLResponse,
    summary="Course users report page",
)
def course_users_page(
    directory: CourseDirectoryDep,
    report_service: ReportServiceDep,
    settings: SettingsDep,
    course: Annotated[str | None, Query(description="Selected course id")] = None,
) -> HTMLResponse:
    """Show the course selector and, for a selected course, its users."""
    try:
        return render_page_response(course, directory, report_service, settings)
    except StoreError as e:
        raise handle_store_error(e) from e


@router.post(
    "",
    response_class=HTMLResponse,
    summary="Export course users as CSV",
)
def export_course_users(
    directory: CourseDirectoryDep,
    report_service: ReportServiceDep,
    exporter: CsvExporterDep,
    settings: SettingsDep,
    course: Annotated[str | None, Query(description="Selected course id")] = None,
    ld_course_id: Annotated[str | None, Form()] = None,
    csv_filename: Annotated[str | None, Form()] = None,
    ld_export_csv: Annotated[str | None, Form()] = None,
) -> Response:
    """Send the CSV attachment, or fall through to the page when nothing exports.

    The export only runs when the form carries both the export flag and a
    course id. Nothing else is written after the CSV body.
    """
    try:
        if ld_export_csv is not None and ld_course_id is not None:
            course_id = parse_course_id(ld_course_id) or 0
            export = exporter.export(course_id, csv_filename)
            if export is not None:
                logger.info("csv_export_sent", file_name=export.file_name)
                return build_csv_response(export)

        return render_page_response(course, directory, report_service, settings)
    except StoreError as e:
        raise handle_store_error(e) from e
