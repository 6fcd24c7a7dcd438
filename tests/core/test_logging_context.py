"""Tests for request context and log processors."""

from course_users.core.context import (
    RequestContext,
    clear_context,
    get_context,
    get_request_id,
    set_correlation_id,
    set_course_id,
)
from course_users.core.logging import add_context_processor, filter_sensitive_data


class TestRequestContext:
    """Tests for the request context helpers."""

    def test_context_manager_sets_and_restores(self) -> None:
        """Values are visible inside the block and reset after it."""
        clear_context()

        with RequestContext(request_id="req-1", trace_id="trace-1", course_id=5):
            assert get_context() == {
                "request_id": "req-1",
                "trace_id": "trace-1",
                "course_id": 5,
            }

        assert get_context() == {}

    def test_generates_request_id(self) -> None:
        """A request ID is generated when none is given."""
        with RequestContext():
            assert get_request_id()

    def test_clear_context(self) -> None:
        """Clearing removes every value."""
        set_course_id(7)
        set_correlation_id("corr")

        clear_context()

        assert get_context() == {}


class TestProcessors:
    """Tests for the structlog processors."""

    def test_context_is_added(self) -> None:
        """Events carry the current request context."""
        clear_context()

        with RequestContext(request_id="req-2", course_id=9):
            event = add_context_processor(None, "info", {"event": "x"})

        assert event == {"event": "x", "request_id": "req-2", "course_id": 9}

    def test_sensitive_values_masked(self) -> None:
        """Keys and passwords never reach log output in clear text."""
        event = filter_sensitive_data(
            None,
            "info",
            {
                "event": "x",
                "admin_api_key": "s3cret-value",
                "cassandra_password": "pw",
                "headers": {"X-API-Key": "abcdefgh"},
                "course_id": 5,
            },
        )

        assert event["admin_api_key"] == "s3********ue"
        assert event["cassandra_password"] == "***"
        assert event["headers"] == {"X-API-Key": "ab****gh"}
        assert event["course_id"] == 5
        assert event["event"] == "x"
