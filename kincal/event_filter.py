# -*- coding: utf-8 -*-
"""Public events attached directly to one entity."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from .entities import check_entity_type
from .errors import EventNotFound, UpstreamFetchError
from .extensions import db
from .models import Event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Association:
    type: str
    id: str
    province: Optional[str] = None


@dataclass(frozen=True)
class FeedEvent:
    id: str
    title: str
    start_utc: Optional[datetime]
    end_utc: Optional[datetime]
    description: str = ""
    location: str = ""
    url: str = ""
    # club, zone, district, в этом порядке, только заданные
    associations: Tuple[Association, ...] = ()


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # в базе naive UTC; aware приводим к UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def feed_event_from_row(row: Event) -> FeedEvent:
    associations = []
    for kind in ("club", "zone", "district"):
        tagged = getattr(row, kind)
        if tagged is not None:
            associations.append(Association(kind, tagged.id, tagged.province))
    return FeedEvent(
        id=row.id,
        title=row.title or "",
        start_utc=as_utc(row.start_date),
        end_utc=as_utc(row.end_date),
        description=row.description or "",
        location=row.location or "",
        url=row.event_url or "",
        associations=tuple(associations),
    )


def list_public_events(entity_type: str, entity_id: str) -> List[FeedEvent]:
    """
    Public events whose own entity is exactly (entity_type, entity_id).

    Events of child entities are not included: a district feed lists only
    events created for the district itself.
    """
    check_entity_type(entity_type)
    try:
        rows = (
            db.session.query(Event)
            .filter(
                Event.entity_type == entity_type,
                Event.entity_id == entity_id,
                Event.visibility == "public",
            )
            .order_by(Event.start_date.asc(), Event.id.asc())
            .all()
        )
        events = [feed_event_from_row(r) for r in rows]
    except SQLAlchemyError as exc:
        raise UpstreamFetchError(f"event lookup failed: {exc}", stage="events") from exc

    logger.debug("events fetched type=%s id=%s count=%d", entity_type, entity_id, len(events))
    return events


def get_public_event(event_id: str) -> FeedEvent:
    """Single public event by id; private events are reported as missing."""
    try:
        row = db.session.get(Event, event_id)
        ev = feed_event_from_row(row) if row is not None and row.visibility == "public" else None
    except SQLAlchemyError as exc:
        raise UpstreamFetchError(f"event lookup failed: {exc}", stage="events") from exc
    if ev is None:
        raise EventNotFound(event_id)
    return ev
