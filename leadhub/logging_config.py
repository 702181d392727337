"""
Structured logging configuration.

Called once from create_app() and from the RQ worker entry point. LOG_FORMAT
picks text (human-readable) or JSON output; LOG_LEVEL defaults to INFO.

JSON lines carry request context (method, path, user uid) when emitted inside
a Flask request, and the import job id when a log call passes
``extra={'import_id': ...}``, so a single import or request can be followed
across web and worker logs.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import has_request_context, request, session

# LogRecord attributes copied into JSON output when present
CONTEXT_FIELDS = ('import_id', 'order_id', 'lead_id')


class JSONFormatter(logging.Formatter):
    """Single-line JSON log formatter for production log aggregators."""

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if has_request_context():
            entry['method'] = request.method
            entry['path'] = request.path
            if session.get('uid'):
                entry['uid'] = session['uid']
        if record.exc_info and record.exc_info[0] is not None:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry)


class ImportIdFilter(logging.Filter):
    """Prefix text-format messages with the import job id when one is attached."""

    def filter(self, record):
        import_id = getattr(record, 'import_id', None)
        record.import_tag = f'[import {import_id[:8]}] ' if import_id else ''
        return True


# Third-party loggers that are noisy at INFO
_NOISY_LOGGERS = [
    'urllib3',
    'rq.worker',
    'sqlalchemy.engine',
    'openpyxl',
]


def configure_logging(app=None):
    """
    Set up root logger with format/level from env vars.

    Environment variables:
        LOG_LEVEL:  Python log level name (default: INFO)
        LOG_FORMAT: "text" (default) or "json"

    When a Flask app is given its own logger follows the root level and
    propagates to the root handler instead of keeping Flask's default one.
    """
    level_name = os.getenv('LOG_LEVEL', 'INFO').upper()
    level = getattr(logging, level_name, logging.INFO)

    log_format = os.getenv('LOG_FORMAT', 'text').lower()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(ImportIdFilter())

    if log_format == 'json':
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '[%(asctime)s] %(levelname)s %(name)s: %(import_tag)s%(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        ))

    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if app is not None:
        app.logger.handlers.clear()
        app.logger.setLevel(level)
        app.logger.propagate = True
