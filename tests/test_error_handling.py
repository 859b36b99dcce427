"""
Tests for structured error recording.
"""

from barberpro.utils.error_handling import (
    ComponentError,
    ErrorHandler,
    ErrorKind,
    ErrorSeverity,
)


class TestComponentError:

    def test_default_severity_follows_kind(self):
        assert ComponentError("backup", ErrorKind.TRANSIENT_IO, "x").severity == ErrorSeverity.RECOVERABLE
        assert ComponentError("reminders", ErrorKind.PERMISSION_DENIED, "x").severity == ErrorSeverity.WARNING
        assert ComponentError("audio", ErrorKind.AUDIO_UNAVAILABLE, "x").severity == ErrorSeverity.WARNING

    def test_traceback_captured(self):
        try:
            raise ConnectionError("offline")
        except ConnectionError as e:
            error = ComponentError("backup", ErrorKind.TRANSIENT_IO, "push failed", exception=e)
        assert "ConnectionError: offline" in error.traceback_str


class TestErrorHandler:

    def test_record_returns_error_with_context(self):
        handler = ErrorHandler()
        error = handler.record("backup", ErrorKind.MALFORMED_PAYLOAD, "bad column", column="cuts")
        assert error.context == {"column": "cuts"}
        assert handler.get_error_history() == [error]

    def test_fatal_stops_component(self):
        handler = ErrorHandler()
        fatal = ComponentError("orchestrator", ErrorKind.UNEXPECTED, "boom", severity=ErrorSeverity.FATAL)
        assert handler.handle_error(fatal) is False
        assert handler.handle_error(ComponentError("backup", ErrorKind.TRANSIENT_IO, "x")) is True

    def test_history_is_bounded(self):
        handler = ErrorHandler(max_history=3)
        for i in range(5):
            handler.record("backup", ErrorKind.TRANSIENT_IO, f"failure {i}")
        messages = [e.message for e in handler.get_error_history()]
        assert messages == ["failure 2", "failure 3", "failure 4"]

    def test_history_filter_and_summary(self):
        handler = ErrorHandler()
        handler.record("backup", ErrorKind.TRANSIENT_IO, "a")
        handler.record("backup", ErrorKind.MALFORMED_PAYLOAD, "b")
        handler.record("reminders", ErrorKind.PERMISSION_DENIED, "c")

        assert len(handler.get_error_history("backup")) == 2
        summary = handler.get_error_summary()
        assert summary["total_errors"] == 3
        assert summary["by_component"] == {"backup": 2, "reminders": 1}
        assert summary["by_kind"]["transient_io"] == 1
        assert summary["by_severity"] == {"recoverable": 1, "warning": 2}

        handler.clear()
        assert handler.get_error_history() == []
