# -*- coding: utf-8 -*-
"""Subscription URLs for feeds and "add to calendar" links for events."""
from __future__ import annotations

from datetime import datetime
from typing import Dict
from urllib.parse import urlencode

from .event_filter import FeedEvent, as_utc

GOOGLE_SETTINGS_URL = "https://calendar.google.com/calendar/r/settings/addbyurl"


def feed_path(entity_type: str, entity_id: str) -> str:
    return f"/calendar/{entity_type}/{entity_id}/feed"


def subscription_urls(entity_type: str, entity_id: str, local_base: str, public_base: str = "") -> Dict[str, str]:
    """
    ``local_base`` is where the request came from, ``public_base`` the
    configured public address. Calendar apps need the public one over https.
    """
    local_base = (local_base or "http://localhost:5000").rstrip("/")
    public_base = (public_base or local_base).rstrip("/")
    if public_base.startswith("http://"):
        public_base = "https://" + public_base[len("http://"):]

    path = feed_path(entity_type, entity_id)
    public_url = public_base + path
    webcal_url = "webcal://" + public_url.split("://", 1)[1]
    return {
        "http_url": local_base + path,
        "public_url": public_url,
        "webcal_url": webcal_url,
        "google_settings_url": GOOGLE_SETTINGS_URL,
    }


def _compact_utc(value: datetime) -> str:
    return as_utc(value).strftime("%Y%m%dT%H%M%SZ")


def _iso_utc(value: datetime) -> str:
    return as_utc(value).strftime("%Y-%m-%dT%H:%M:%S")


def google_calendar_url(ev: FeedEvent) -> str:
    params = {
        "action": "TEMPLATE",
        "text": ev.title,
        "dates": f"{_compact_utc(ev.start_utc)}/{_compact_utc(ev.end_utc)}",
        "details": ev.description,
        "location": ev.location,
        "trp": "false",
    }
    return "https://calendar.google.com/calendar/render?" + urlencode(params)


def outlook_calendar_url(ev: FeedEvent) -> str:
    params = {
        "path": "/calendar/action/compose",
        "rru": "addevent",
        "subject": ev.title,
        "startdt": _iso_utc(ev.start_utc),
        "enddt": _iso_utc(ev.end_utc),
        "body": ev.description,
        "location": ev.location,
    }
    return "https://outlook.live.com/calendar/0/deeplink/compose?" + urlencode(params)


def yahoo_calendar_url(ev: FeedEvent) -> str:
    params = {
        "v": "60",
        "view": "d",
        "type": "20",
        "title": ev.title,
        "st": _compact_utc(ev.start_utc),
        "et": _compact_utc(ev.end_utc),
        "desc": ev.description,
        "in_loc": ev.location,
    }
    return "https://calendar.yahoo.com/?" + urlencode(params)
