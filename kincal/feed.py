# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .entities import resolve_entity
from .event_filter import FeedEvent, list_public_events
from .ics import serialize_feed
from .timezones import resolve_timezone

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


@dataclass(frozen=True)
class ResolvedFeed:
    entity_name: str
    timezone: Optional[str]
    events: Tuple[FeedEvent, ...] = field(default_factory=tuple)


def feed_filename(entity_name: str) -> str:
    """'Kin Club of Saint-John's' -> 'Kin_Club_of_Saint_John_s_calendar.ics'"""
    return f"{_NON_ALNUM.sub('_', entity_name)}_calendar.ics"


def build_feed(entity_type: str, entity_id: str) -> ResolvedFeed:
    # resolve_entity проверяет тип до запроса
    entity = resolve_entity(entity_type, entity_id)
    events = tuple(list_public_events(entity_type, entity_id))
    tz = resolve_timezone(entity_type, entity, events)
    return ResolvedFeed(entity_name=entity.name, timezone=tz, events=events)


def render_feed(feed: ResolvedFeed) -> str:
    return serialize_feed(feed.entity_name, feed.timezone, feed.events)
