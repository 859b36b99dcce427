# Utils package

from .logging_config import setup_logging, get_logger, ComponentLogger
from .error_handling import ErrorHandler, ErrorKind, ErrorSeverity, ComponentError

__all__ = [
    "setup_logging",
    "get_logger",
    "ComponentLogger",
    "ErrorHandler",
    "ErrorKind",
    "ErrorSeverity",
    "ComponentError",
]
