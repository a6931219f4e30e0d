# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import uuid

from flask import g, has_request_context, request

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s [req=%(request_id)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"


class RequestContextFilter(logging.Filter):
    """Attaches the current request id (or "-") to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        rid = "-"
        if has_request_context():
            rid = getattr(g, "request_id", None) or "-"
        record.request_id = rid
        return True


def _assign_request_id():
    g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]


def configure_logging(app) -> None:
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handler.addFilter(RequestContextFilter())

    pkg_logger = logging.getLogger("kincal")
    # create_app() may be called many times (tests): don't stack handlers
    for h in list(pkg_logger.handlers):
        if isinstance(h, logging.StreamHandler) and any(
            isinstance(f, RequestContextFilter) for f in h.filters
        ):
            pkg_logger.removeHandler(h)
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(level)
    # свой handler: не дублировать записи через root
    pkg_logger.propagate = False

    app.before_request(_assign_request_id)
