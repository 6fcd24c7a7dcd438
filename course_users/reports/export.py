"""CSV export of course reports.

Provides:
- File name sanitizing and ``.csv`` normalization
- CSV serialization with the fixed report header
- The attachment response
"""

import csv
import io
import re
import unicodedata
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from urllib.parse import quote

import structlog
from fastapi.responses import StreamingResponse

from .models import REPORT_COLUMNS
from .schemas import UserRow
from .service import EnrollmentReportService, is_found


logger = structlog.get_logger(__name__)

DEFAULT_EXPORT_FILENAME = "course_users.csv"
CSV_SUFFIX = ".csv"
CSV_MEDIA_TYPE = "text/csv"

_UNSAFE_CHARS = frozenset("?[]/\\=<>:;,'\"&$#*()|~`!{}%+’«»”“")
_WHITESPACE_RE = re.compile(r"\s+")
_DASHES_RE = re.compile(r"-{2,}")


def sanitize_file_name(name: str) -> str:
    """Strip path separators and characters unsafe in a download name.

    Whitespace runs become a single dash; leading and trailing dots, dashes
    and underscores are removed.
    """
    cleaned = "".join(
        char
        for char in name
        if char not in _UNSAFE_CHARS and unicodedata.category(char) != "Cc"
    )
    cleaned = _WHITESPACE_RE.sub("-", cleaned)
    cleaned = _DASHES_RE.sub("-", cleaned)
    return cleaned.strip(".-_")


def normalize_export_file_name(
    requested: str | None, default: str = DEFAULT_EXPORT_FILENAME
) -> str:
    """Effective download name for a requested export name."""
    name = sanitize_file_name(requested or default) or sanitize_file_name(default)
    if not name.endswith(CSV_SUFFIX):
        name += CSV_SUFFIX
    return name


def render_csv(rows: Iterable[UserRow]) -> Iterator[str]:
    """Yield the header line, then one CSV line per row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\r\n")

    def flush() -> str:
        line = buffer.getvalue()
        buffer.seek(0)
        buffer.truncate(0)
        return line

    writer.writerow(REPORT_COLUMNS)
    yield flush()

    for row in rows:
        writer.writerow(row.as_csv_row())
        yield flush()


@dataclass(frozen=True)
class CsvExport:
    """A report ready to be sent as a CSV attachment."""

    course_id: int
    file_name: str
    rows: tuple[UserRow, ...]

    @property
    def content_disposition(self) -> str:
        quoted = quote(self.file_name)
        if quoted == self.file_name:
            return f'attachment; filename="{self.file_name}"'
        # Header values must be latin-1; keep an ASCII fallback plus RFC 5987 form
        fallback = (
            unicodedata.normalize("NFKD", self.file_name)
            .encode("ascii", "ignore")
            .decode("ascii")
        )
        if not fallback.strip(".-_") or fallback == CSV_SUFFIX:
            fallback = DEFAULT_EXPORT_FILENAME
        return f"attachment; filename=\"{fallback}\"; filename*=utf-8''{quoted}"


class CsvExporter:
    """Builds CSV exports of course reports."""

    def __init__(
        self,
        report_service: EnrollmentReportService,
        default_file_name: str = DEFAULT_EXPORT_FILENAME,
    ):
        self.report_service = report_service
        self.default_file_name = default_file_name

    def export(
        self, course_id: int | None, requested_file_name: str | None
    ) -> CsvExport | None:
        """Prepare the export, or None when the course has nothing to export."""
        file_name = normalize_export_file_name(
            requested_file_name, default=self.default_file_name
        )

        report = self.report_service.build(course_id)
        if not is_found(report):
            logger.info(
                "csv_export_skipped",
                requested_course_id=course_id,
                reason=report.reason.value,
            )
            return None

        logger.info(
            "csv_export_prepared",
            file_name=file_name,
            rows=len(report.rows),
        )
        return CsvExport(
            course_id=report.course_id, file_name=file_name, rows=report.rows
        )


def build_csv_response(export: CsvExport) -> StreamingResponse:
    """Attachment response streaming the export as UTF-8 CSV."""
    return StreamingResponse(
        (line.encode("utf-8") for line in render_csv(export.rows)),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": export.content_disposition},
    )
