"""
Logging setup for the loyalty platform.

Configures the root logger once with a stdout handler. Modules obtain their
logger with ``logging.getLogger(__name__)`` (or ``get_logger``); request
handlers may also use ``current_app.logger``, which propagates here.
"""
import logging
import os
import sys
import uuid

from flask import Flask, g, request

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
REQUEST_ID_HEADER = 'X-Request-ID'

_configured = False


def setup_logging(level: str = None) -> None:
    """Configure root logging. Safe to call more than once."""
    global _configured
    if _configured:
        return

    log_level = (level or os.getenv('LOG_LEVEL', 'INFO')).upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level, logging.INFO))
    root.addHandler(handler)

    # Quiet noisy libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def init_request_id_tracking(app: Flask) -> None:
    """Attach a request ID to every request and echo it on the response."""

    @app.before_request
    def assign_request_id():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

    @app.after_request
    def add_request_id_header(response):
        request_id = getattr(g, 'request_id', None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response
