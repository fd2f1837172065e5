"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` once at application start, before any
other logging is done.

Every record is written to stdout as JSON and kept in an in-memory log sink
that can be read back in insertion order:
{
    "timestamp": "2026-01-01T12:00:00.000Z",
    "level": "INFO",
    "logger": "batchshortener.dao.memory.short_url_memory_dao",
    "message": "URL shortened successfully.",
    "shortcode": "abc123",
    "target": "https://example.com"
}

Structured metadata is passed through `extra`:

    >>> logger.info('Click recorded.', extra={'shortcode': 'abc123', 'click_id': 'f00'})
"""

import os
import json
import logging
import logging.config
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any

from batchshortener.utils.constants import ENV, Defaults


STANDARD_ATTRS = frozenset(
    {
        'args',
        'asctime',
        'created',
        'exc_info',
        'exc_text',
        'filename',
        'funcName',
        'levelname',
        'levelno',
        'lineno',
        'message',
        'module',
        'msecs',
        'msg',
        'name',
        'pathname',
        'process',
        'processName',
        'relativeCreated',
        'stack_info',
        'thread',
        'threadName',
        'taskName',
    }
)


def record_metadata(record: logging.LogRecord) -> dict[str, Any]:
    """Return the `extra` fields attached to a LogRecord."""
    return {key: value for key, value in record.__dict__.items() if key not in STANDARD_ATTRS}


def record_timestamp(record: logging.LogRecord) -> str:
    # fmt: off
    return datetime.fromtimestamp(record.created, tz=UTC) \
                   .isoformat(timespec='milliseconds') \
                   .replace('+00:00', 'Z')
    # fmt: on


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': record_timestamp(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Attach `extra` fields
        log.update(record_metadata(record))

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


# fmt: off
@dataclass(frozen=True)
class LogEntry:
    level: str                                               # 'debug', 'info', 'warn' or 'error'
    message: str                                             # Rendered log message
    timestamp: str                                           # ISO-8601 UTC timestamp
    metadata: dict[str, Any] = field(default_factory=dict)  # `extra` payload of the record
# fmt: on


LEVEL_NAMES = {
    logging.DEBUG: 'debug',
    logging.INFO: 'info',
    logging.WARNING: 'warn',
    logging.ERROR: 'error',
    logging.CRITICAL: 'error',
}


class LogSinkHandler(logging.Handler):
    """Logging handler keeping emitted records in memory.

    With `maxlen` set, only the most recent `maxlen` entries are kept.

    Methods:
        entries() -> list[LogEntry]:
            Stored entries in insertion order (a copy).
        clear() -> None:
            Forget all stored entries.
    """

    def __init__(self, level: int = logging.NOTSET, maxlen: int | None = None):
        super().__init__(level)
        self._entries: deque[LogEntry] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        entry = LogEntry(
            level=LEVEL_NAMES.get(record.levelno, record.levelname.lower()),
            message=record.getMessage(),
            timestamp=record_timestamp(record),
            metadata=record_metadata(record),
        )
        self._entries.append(entry)

    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()


_log_sink = LogSinkHandler(maxlen=Defaults.LOG_SINK_MAXLEN)


def get_log_sink() -> LogSinkHandler:
    """Return the process-wide in-memory log sink."""
    return _log_sink


def initialize_logging() -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                },
                'sink': {
                    '()': get_log_sink,
                },
            },
            'root': {
                'level': log_level,
                'handlers': ['stdout', 'sink'],
            },
        }
    )
