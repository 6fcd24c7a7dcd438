"""Course users report module.

Provides:
- Progress normalization per enrolled user
- The published course directory
- Report building with explicit not-found results
- HTML rendering of the admin page
- CSV export with a user-chosen file name
"""

from .directory import CourseDirectory
from .export import CsvExport, CsvExporter, normalize_export_file_name, render_csv
from .models import REPORT_COLUMNS, NotFoundReason, ProgressStatus
from .progress import compute_progress
from .schemas import (
    CourseOption,
    EnrollmentReport,
    ProgressResult,
    ReportNotFound,
    UserRow,
)
from .service import EnrollmentReportService, is_found, parse_course_id


__all__ = [
    "REPORT_COLUMNS",
    "CourseDirectory",
    "CourseOption",
    "CsvExport",
    "CsvExporter",
    "EnrollmentReport",
    "EnrollmentReportService",
    "NotFoundReason",
    "ProgressResult",
    "ProgressStatus",
    "ReportNotFound",
    "UserRow",
    "compute_progress",
    "is_found",
    "normalize_export_file_name",
    "parse_course_id",
    "render_csv",
]
