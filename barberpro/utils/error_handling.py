"""
Structured error handling for the reminder and backup components.

Nothing in these components is fatal: every failure is classified, logged
and recorded, and the caller carries on.
"""

import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List
from datetime import datetime

from .logging_config import get_logger


logger = get_logger("errors")


class ErrorSeverity(Enum):
    """Error severity levels."""
    WARNING = "warning"          # Log and continue
    RECOVERABLE = "recoverable"  # Skip, next trigger retries
    FATAL = "fatal"              # Must stop component


class ErrorKind(Enum):
    """What went wrong, independent of which component saw it."""
    PERMISSION_DENIED = "permission_denied"
    TRANSIENT_IO = "transient_io"
    MALFORMED_PAYLOAD = "malformed_payload"
    AUDIO_UNAVAILABLE = "audio_unavailable"
    UNEXPECTED = "unexpected"


DEFAULT_SEVERITY = {
    ErrorKind.PERMISSION_DENIED: ErrorSeverity.WARNING,
    ErrorKind.TRANSIENT_IO: ErrorSeverity.RECOVERABLE,
    ErrorKind.MALFORMED_PAYLOAD: ErrorSeverity.WARNING,
    ErrorKind.AUDIO_UNAVAILABLE: ErrorSeverity.WARNING,
    ErrorKind.UNEXPECTED: ErrorSeverity.RECOVERABLE,
}


@dataclass
class ComponentError:
    """Structured error information."""
    component: str
    kind: ErrorKind
    message: str
    severity: Optional[ErrorSeverity] = None
    exception: Optional[Exception] = None
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=lambda: datetime.now().timestamp())
    traceback_str: Optional[str] = None

    def __post_init__(self):
        """Fill in severity and capture traceback if exception provided."""
        if self.severity is None:
            self.severity = DEFAULT_SEVERITY[self.kind]
        if self.exception and not self.traceback_str:
            self.traceback_str = ''.join(
                traceback.format_exception(
                    type(self.exception),
                    self.exception,
                    self.exception.__traceback__
                )
            )


class ErrorHandler:
    """
    Centralized error recording.

    Features:
    - Severity-based log levels
    - Bounded error history
    - Per-component and per-kind summaries
    """

    def __init__(self, max_history: int = 100):
        self._error_log: List[ComponentError] = []
        self._max_history = max_history

    def handle_error(self, error: ComponentError) -> bool:
        """
        Log and record an error.

        Args:
            error: Error to handle

        Returns:
            True if the component may continue, False if fatal
        """
        self._error_log.append(error)
        if len(self._error_log) > self._max_history:
            self._error_log.pop(0)

        detail = f"{error.component}: {error.message}"
        if error.exception:
            detail += f" ({type(error.exception).__name__}: {error.exception})"

        if error.severity == ErrorSeverity.WARNING:
            logger.warning(detail, **error.context)
            return True
        elif error.severity == ErrorSeverity.RECOVERABLE:
            logger.error(detail, **error.context)
            return True
        else:  # FATAL
            logger.error(f"FATAL {detail}", **error.context)
            if error.traceback_str:
                logger.error(error.traceback_str)
            return False

    def record(
        self,
        component: str,
        kind: ErrorKind,
        message: str,
        exception: Optional[Exception] = None,
        **context: Any
    ) -> ComponentError:
        """Build, handle and return a ComponentError in one call."""
        error = ComponentError(
            component=component,
            kind=kind,
            message=message,
            exception=exception,
            context=context,
        )
        self.handle_error(error)
        return error

    def get_error_history(self, component: Optional[str] = None) -> List[ComponentError]:
        """
        Get error history, optionally filtered by component.

        Args:
            component: Optional component name to filter by

        Returns:
            List of errors
        """
        if component:
            return [e for e in self._error_log if e.component == component]
        return self._error_log.copy()

    def get_error_summary(self) -> Dict[str, Any]:
        """Get summary of errors."""
        summary = {
            'total_errors': len(self._error_log),
            'by_severity': {},
            'by_kind': {},
            'by_component': {}
        }

        for error in self._error_log:
            severity = error.severity.value
            summary['by_severity'][severity] = summary['by_severity'].get(severity, 0) + 1

            kind = error.kind.value
            summary['by_kind'][kind] = summary['by_kind'].get(kind, 0) + 1

            component = error.component
            summary['by_component'][component] = summary['by_component'].get(component, 0) + 1

        return summary

    def clear(self) -> None:
        self._error_log.clear()
