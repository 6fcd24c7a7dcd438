"""Pydantic schemas for the course users report.

Value objects passed between the report components:
- Course options for the selector
- Computed progress and report rows
- The built report, or the explicit not-found result
"""

from pydantic import BaseModel, ConfigDict, Field

from .models import NotFoundReason, ProgressStatus


class CourseOption(BaseModel):
    """Course offered in the selector."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Course id")
    title: str = Field(..., description="Course title")


class ProgressResult(BaseModel):
    """Normalized progress of one user in one course."""

    model_config = ConfigDict(frozen=True)

    status: str = Field(
        default=ProgressStatus.NOT_STARTED.value, description="Status label"
    )
    percentage: str = Field(default="0%", description='Whole percent with "%"')


class UserRow(BaseModel):
    """One report line. Field order is the CSV column order."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="User id")
    name: str = Field(..., description="Login name")
    email: str = Field(..., description="Email address")
    course_status: str = Field(..., description="Progress status label")
    percentage: str = Field(..., description='Progress as "<n>%"')

    def as_csv_row(self) -> list[str]:
        """Field values as strings, in column order."""
        return [str(value) for value in self.model_dump().values()]


class EnrollmentReport(BaseModel):
    """Rows for every resolvable enrolled user, in enrollment order."""

    model_config = ConfigDict(frozen=True)

    course_id: int
    rows: tuple[UserRow, ...]


class ReportNotFound(BaseModel):
    """Explicit "nothing to show" result."""

    model_config = ConfigDict(frozen=True)

    course_id: int
    reason: NotFoundReason


ReportResult = EnrollmentReport | ReportNotFound
