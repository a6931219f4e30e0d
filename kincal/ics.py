# -*- coding: utf-8 -*-
"""
RFC 5545 documents for entity feeds and single-event exports.

The icalendar package does the text work: TEXT values are escaped
(backslash, comma, semicolon, newline as ``\\n``), content lines end with
CRLF and are folded at 75 octets with a leading space on continuation
lines.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from icalendar import Calendar, vText
from icalendar import Event as VEvent

from .errors import SerializationError
from .event_filter import FeedEvent, as_utc

logger = logging.getLogger(__name__)

FEED_PRODID = "-//Kin Canada Calendar//Entity Feed//EN"
EXPORT_PRODID = "-//Kin Canada Calendar//Event Export//EN"
UID_DOMAIN = "kincal.com"


def event_uid(event_id: str) -> str:
    # стабильный UID: клиенты по нему убирают дубли
    return f"{event_id}@{UID_DOMAIN}"


def _when(value, tz: Optional[ZoneInfo], field: str, event_id: str) -> datetime:
    if not isinstance(value, datetime):
        raise SerializationError(f"event {event_id}: {field} is not a timestamp ({value!r})")
    value = as_utc(value)
    return value.astimezone(tz) if tz is not None else value


def _vevent(ev: FeedEvent, tz: Optional[ZoneInfo], stamp: datetime) -> VEvent:
    vev = VEvent()
    vev.add("uid", event_uid(ev.id))
    vev.add("dtstamp", stamp)
    vev.add("dtstart", _when(ev.start_utc, tz, "start", ev.id))
    vev.add("dtend", _when(ev.end_utc, tz, "end", ev.id))
    vev.add("summary", ev.title)
    if ev.description:
        vev.add("description", ev.description)
    if ev.location:
        vev.add("location", ev.location)
    if ev.url:
        vev.add("url", ev.url)
    vev.add("status", "CONFIRMED")
    vev.add("transp", "OPAQUE")
    return vev


def _stamp(now: Optional[datetime]) -> datetime:
    return as_utc(now) if now is not None else datetime.now(timezone.utc).replace(microsecond=0)


def serialize_feed(
    entity_name: str,
    tz_name: Optional[str],
    events: Iterable[FeedEvent],
    now: Optional[datetime] = None,
) -> str:
    """
    Whole feed as text. With ``tz_name`` start/end are local times with a
    TZID and a VTIMEZONE is included; without it they are UTC (``Z``).
    """
    try:
        tz = ZoneInfo(tz_name) if tz_name else None
        stamp = _stamp(now)

        cal = Calendar()
        cal.add("prodid", FEED_PRODID)
        cal.add("version", "2.0")
        cal.add("calscale", "GREGORIAN")
        cal.add("method", "PUBLISH")
        # X- свойства без типа: экранируем как TEXT явно
        cal.add("x-wr-calname", vText(entity_name))
        cal.add("x-wr-timezone", vText(tz_name or "UTC"))
        cal.add("x-wr-caldesc", vText(f"Events from {entity_name}"))

        count = 0
        for ev in events:
            cal.add_component(_vevent(ev, tz, stamp))
            count += 1
        if tz is not None:
            cal.add_missing_timezones()

        body = cal.to_ical().decode("utf-8")
    except SerializationError:
        raise
    except (ZoneInfoNotFoundError, ValueError, TypeError) as exc:
        raise SerializationError(f"cannot encode feed for {entity_name!r}: {exc}") from exc

    logger.debug("feed serialized name=%r tz=%s events=%d bytes=%d", entity_name, tz_name, count, len(body))
    return body


def serialize_event(ev: FeedEvent, now: Optional[datetime] = None) -> str:
    """One event, always in UTC, for "download .ics" buttons."""
    try:
        cal = Calendar()
        cal.add("prodid", EXPORT_PRODID)
        cal.add("version", "2.0")
        cal.add_component(_vevent(ev, None, _stamp(now)))
        return cal.to_ical().decode("utf-8")
    except SerializationError:
        raise
    except (ValueError, TypeError) as exc:
        raise SerializationError(f"cannot encode event {ev.id}: {exc}") from exc
