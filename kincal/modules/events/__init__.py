# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import re

from flask import Blueprint, Response, jsonify, url_for

from ...errors import FeedError
from ...event_filter import get_public_event
from ...ics import serialize_event
from ...links import google_calendar_url, outlook_calendar_url, yahoo_calendar_url

logger = logging.getLogger(__name__)

bp = Blueprint("events", __name__, url_prefix="/events")


def _download_name(title: str) -> str:
    return f"{re.sub(r'[^A-Za-z0-9]', '_', title).lower()}.ics"


def _error(exc: FeedError, event_id: str):
    log = logger.warning if exc.status < 500 else logger.error
    log("event export failed id=%s stage=%s: %s", event_id, exc.stage or "-", exc.detail or exc.message)
    return jsonify({"error": exc.message}), exc.status


@bp.get("/<event_id>/ics")
def event_ics(event_id: str):
    try:
        ev = get_public_event(event_id)
        body = serialize_event(ev)
    except FeedError as exc:
        return _error(exc, event_id)
    except Exception:
        logger.exception("event export crashed id=%s", event_id)
        return jsonify({"error": "Failed to export event"}), 500

    resp = Response(body, status=200)
    resp.headers["Content-Type"] = "text/calendar; charset=utf-8"
    resp.headers["Content-Disposition"] = f'attachment; filename="{_download_name(ev.title)}"'
    return resp


@bp.get("/<event_id>/links")
def event_links(event_id: str):
    try:
        ev = get_public_event(event_id)
        links = {
            "google": google_calendar_url(ev),
            "outlook": outlook_calendar_url(ev),
            "yahoo": yahoo_calendar_url(ev),
            "ics": url_for("events.event_ics", event_id=ev.id, _external=True),
        }
    except FeedError as exc:
        return _error(exc, event_id)
    except (AttributeError, TypeError, ValueError):
        # битые даты в базе
        logger.exception("event links failed id=%s", event_id)
        return jsonify({"error": "Failed to build calendar links"}), 500
    return jsonify(links)
