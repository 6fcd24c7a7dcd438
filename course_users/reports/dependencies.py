"""FastAPI dependencies for the course users report.

Report components are cheap wrappers around the learning store, so they are
built per request from the store held in app state.
"""

from typing import Annotated

from fastapi import Depends

from course_users.config.settings import Settings, get_settings
from course_users.store.dependencies import LearningStoreDep

from .directory import CourseDirectory
from .export import CsvExporter
from .service import EnrollmentReportService


def get_course_directory(store: LearningStoreDep) -> CourseDirectory:
    return CourseDirectory(store)


def get_report_service(store: LearningStoreDep) -> EnrollmentReportService:
    return EnrollmentReportService(store)


def get_csv_exporter(
    report_service: Annotated[EnrollmentReportService, Depends(get_report_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CsvExporter:
    return CsvExporter(
        report_service, default_file_name=settings.default_export_filename
    )


# Type aliases for dependency injection
CourseDirectoryDep = Annotated[CourseDirectory, Depends(get_course_directory)]
ReportServiceDep = Annotated[EnrollmentReportService, Depends(get_report_service)]
CsvExporterDep = Annotated[CsvExporter, Depends(get_csv_exporter)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
