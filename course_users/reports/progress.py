"""Course progress normalization.

Turns the raw counters a store returns into the status label and percentage
string shown in the report.
"""

from typing import Any

from course_users.store.models import ProgressRecord

from .models import ProgressStatus
from .schemas import ProgressResult


def coerce_count(value: Any) -> int:
    """Read a step counter, treating anything unreadable as 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # NaN and infinities have no integer value
        return int(value) if value == value and abs(value) != float("inf") else 0
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return coerce_count(float(text))
        except ValueError:
            return 0
    return 0


def format_percentage(completed: int, total: int) -> str:
    """Whole percentage floor(completed * 100 / total) with a "%" suffix."""
    if total <= 0:
        return "0%"
    return f"{completed * 100 // total}%"


def compute_progress(progress: ProgressRecord | None) -> ProgressResult:
    """Normalize a raw progress record.

    A missing record means the user never started. When the record is present
    its own status label wins, even with zero total steps.
    """
    if progress is None:
        return ProgressResult()

    status = progress.status or ProgressStatus.NOT_STARTED.value
    total = coerce_count(progress.total)
    completed = coerce_count(progress.completed)

    return ProgressResult(status=status, percentage=format_percentage(completed, total))
