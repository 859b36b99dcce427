"""
Logging for the barbershop framework.

Every record carries the component that emitted it (``reminders``,
``backup``, ``state``...) and, optionally, a few key=value context fields
such as the owner or appointment id:

    logger = get_logger("backup")
    logger.info("Push finished", owner_id="abc")
    # [10:00:00.123] [ℹ️  INFO] [backup      ] Push finished (owner_id=abc)
"""

import logging
import sys
from typing import Optional, Dict, Any
from pathlib import Path
from datetime import datetime


ROOT_LOGGER_NAME = 'barberpro'

# Libraries pulled in by the Supabase client that log every HTTP request
NOISY_LOGGERS = ('httpx', 'httpcore', 'hpack', 'postgrest', 'supabase')

# Keyword arguments understood by logging.Logger.log itself
_LOGGING_KWARGS = {'exc_info', 'stack_info', 'stacklevel', 'extra'}


class StructuredFormatter(logging.Formatter):
    """One line per record: time, level, component, message, context."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m'
    }

    EMOJIS = {
        'DEBUG': '🔍',
        'INFO': 'ℹ️ ',
        'WARNING': '⚠️ ',
        'ERROR': '❌',
        'CRITICAL': '💀'
    }

    def __init__(self, use_colors: bool = True, use_emojis: bool = True, include_date: bool = False):
        super().__init__()
        self.use_colors = use_colors
        self.use_emojis = use_emojis
        # File logs span days (the backup interval is 24h), the console does not
        self.include_date = include_date

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created)
        pattern = '%Y-%m-%d %H:%M:%S.%f' if self.include_date else '%H:%M:%S.%f'
        timestamp = created.strftime(pattern)[:-3]

        level = record.levelname
        level_str = f"{self.EMOJIS.get(level, '')} {level}" if self.use_emojis else level
        if self.use_colors and sys.stdout.isatty():
            level_str = f"{self.COLORS.get(level, '')}{level_str}{self.COLORS['RESET']}"

        component = getattr(record, 'component', record.name)
        message = record.getMessage()

        context: Dict[str, Any] = getattr(record, 'context', None) or {}
        if context:
            message += " (" + ", ".join(f"{k}={v}" for k, v in context.items()) + ")"

        line = f"[{timestamp}] [{level_str:15}] [{component:12}] {message}"
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


class ComponentLogger:
    """
    Logger wrapper that stamps every record with its component.

    Extra keyword arguments become context fields on the record instead of
    being rejected by ``logging``.
    """

    def __init__(self, logger: logging.Logger, component: str, context: Optional[Dict[str, Any]] = None):
        self.logger = logger
        self.component = component
        self.context = dict(context or {})

    def bind(self, **context) -> "ComponentLogger":
        """Child logger that adds ``context`` to every record."""
        return ComponentLogger(self.logger, self.component, {**self.context, **context})

    def _log(self, level: int, msg: str, *args, **kwargs):
        if not self.logger.isEnabledFor(level):
            return
        fields = {k: kwargs.pop(k) for k in list(kwargs) if k not in _LOGGING_KWARGS}
        extra = kwargs.get('extra', {})
        extra['component'] = self.component
        extra['context'] = {**self.context, **fields}
        kwargs['extra'] = extra
        self.logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._log(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        """Log exception with traceback."""
        kwargs['exc_info'] = True
        self._log(logging.ERROR, msg, *args, **kwargs)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    use_colors: bool = True,
    use_emojis: bool = True
) -> logging.Logger:
    """
    Configure the ``barberpro`` logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file that also receives every record, dated
        use_colors: ANSI colors on the console (ignored when not a tty)
        use_emojis: Emoji level markers on the console

    Returns:
        The configured framework logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers = []
    logger.propagate = False

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        StructuredFormatter(use_colors=use_colors, use_emojis=use_emojis)
    )
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(
            StructuredFormatter(use_colors=False, use_emojis=False, include_date=True)
        )
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger(component: str) -> ComponentLogger:
    """
    Get a component-specific logger.

    Args:
        component: Component name (e.g., "reminders", "backup")
    """
    return ComponentLogger(logging.getLogger(ROOT_LOGGER_NAME), component)
