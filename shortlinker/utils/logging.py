"""JSON logging for the lambda handlers

Each handler package calls `initialize_logging()` on import, so the root
logger is configured before the handler module creates its own logger.

One JSON object per line, `extra` fields inlined next to the base keys:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "shortlinker.lambdas.redirect_url.app",
    "message": "Redirecting client to target URL. Responding with 302.",
    "shortcode": "abc12",
    "event": "REDIRECT_SUCCESS"
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from shortlinker.constants import ENV


# Attributes every LogRecord carries; anything else came in through `extra`
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {'message', 'asctime', 'taskName'}

# AWS SDK chatter stays at WARNING whatever LOG_LEVEL says
QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3')


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds')
        log = {
            'timestamp': timestamp.replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in record.__dict__.items() if key not in _RECORD_ATTRS)

        if record.exc_info:
            log['exception_type'] = record.exc_info[0].__name__
            log['exception'] = self.formatException(record.exc_info)

        # datetimes and other non-JSON extras are logged via their str()
        return json.dumps(log, default=str)


def log_level() -> str:
    """LOG_LEVEL if it names a logging level, INFO otherwise"""
    level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    return level if level in logging.getLevelNamesMapping() else 'INFO'


def initialize_logging() -> None:
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {'level': log_level(), 'handlers': ['stdout']},
        }
    )
