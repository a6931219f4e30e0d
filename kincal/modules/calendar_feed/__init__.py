# -*- coding: utf-8 -*-
from __future__ import annotations

import logging

from flask import Blueprint, Response, current_app, jsonify, request

from ...entities import resolve_entity
from ...errors import FeedError
from ...feed import build_feed, feed_filename, render_feed
from ...links import subscription_urls

logger = logging.getLogger(__name__)

bp = Blueprint("calendar_feed", __name__, url_prefix="/calendar")

CALENDAR_MIMETYPE = "text/calendar; charset=utf-8"


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _feed_error(exc: FeedError, entity_type: str, entity_id: str):
    log = logger.warning if exc.status < 500 else logger.error
    log(
        "calendar feed failed type=%s id=%s stage=%s status=%d: %s",
        entity_type, entity_id, exc.stage or "-", exc.status, exc.detail or exc.message,
    )
    return _error(exc.message, exc.status)


def _feed_headers(entity_name: str) -> dict:
    max_age = int(current_app.config.get("FEED_CACHE_MAX_AGE", 60))
    return {
        # inline лучше работает с webcal и Google "add by URL"
        "Content-Disposition": f'inline; filename="{feed_filename(entity_name)}"',
        "Cache-Control": f"public, max-age={max_age}",
        "Pragma": "public",
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET",
        "Access-Control-Allow-Headers": "Content-Type",
    }


@bp.get("/<entity_type>/<entity_id>/feed")
def feed(entity_type: str, entity_id: str):
    try:
        resolved = build_feed(entity_type, entity_id)
        body = render_feed(resolved)
    except FeedError as exc:
        return _feed_error(exc, entity_type, entity_id)
    except Exception:
        logger.exception("calendar feed crashed type=%s id=%s", entity_type, entity_id)
        return _error("Failed to generate calendar feed", 500)

    logger.info(
        "calendar feed served type=%s id=%s tz=%s events=%d",
        entity_type, entity_id, resolved.timezone or "UTC", len(resolved.events),
    )
    resp = Response(body, status=200, headers=_feed_headers(resolved.entity_name))
    resp.headers["Content-Type"] = CALENDAR_MIMETYPE
    return resp


@bp.get("/<entity_type>/<entity_id>/subscribe")
def subscribe(entity_type: str, entity_id: str):
    try:
        entity = resolve_entity(entity_type, entity_id)
    except FeedError as exc:
        return _feed_error(exc, entity_type, entity_id)
    except Exception:
        logger.exception("subscribe links crashed type=%s id=%s", entity_type, entity_id)
        return _error("Failed to generate calendar feed", 500)

    urls = subscription_urls(
        entity_type,
        entity_id,
        local_base=request.host_url,
        public_base=current_app.config.get("PUBLIC_APP_URL", ""),
    )
    resp = jsonify({"entity": {"type": entity.type, "id": entity.id, "name": entity.name}, **urls})
    resp.headers["Access-Control-Allow-Origin"] = "*"
    return resp
