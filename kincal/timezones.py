# -*- coding: utf-8 -*-
"""
Display timezone for an entity feed.

The directory only knows provinces, so the timezone is derived from the
first province we can find. The policy is an ordered list of strategies;
each is a plain function ``(entity_type, entity, events) -> tz | None`` and
the first one returning a value wins. Later strategies are not called.

Districts and the national body span several provinces and are always
rendered in UTC.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Iterable, Optional, Sequence

from .entities import MULTI_PROVINCE_TYPES, Entity
from .event_filter import FeedEvent

logger = logging.getLogger(__name__)

# провинция/территория -> основная зона IANA
PROVINCE_TIMEZONES = MappingProxyType({
    "ONTARIO": "America/Toronto",
    "QUEBEC": "America/Toronto",
    "NEW BRUNSWICK": "America/Moncton",
    "NOVA SCOTIA": "America/Halifax",
    "PRINCE EDWARD ISLAND": "America/Halifax",
    "NEWFOUNDLAND AND LABRADOR": "America/St_Johns",
    "YUKON": "America/Whitehorse",
    "NORTHWEST TERRITORIES": "America/Yellowknife",
    "NUNAVUT": "America/Iqaluit",  # spans several zones, Iqaluit is Eastern
    "BRITISH COLUMBIA": "America/Vancouver",
    "ALBERTA": "America/Edmonton",
    "SASKATCHEWAN": "America/Regina",  # no DST
    "MANITOBA": "America/Winnipeg",
})

# most clubs are in Ontario/Quebec
DEFAULT_TIMEZONE = "America/Toronto"

# strategy result meaning "stop here, render in UTC"
UTC = "UTC"

TimezoneStrategy = Callable[[str, Entity, Iterable[FeedEvent]], Optional[str]]


def timezone_for_province(province: Optional[str]) -> Optional[str]:
    if not province:
        return None
    return PROVINCE_TIMEZONES.get(" ".join(province.split()).upper())


# ---------- strategies ----------

def multi_province_span(entity_type: str, entity: Entity, events) -> Optional[str]:
    if entity_type in MULTI_PROVINCE_TYPES:
        return UTC
    return None


def ancestor_province(entity_type: str, entity: Entity, events) -> Optional[str]:
    if entity.ancestor is None:
        return None
    return timezone_for_province(entity.ancestor.province)


def event_province(entity_type: str, entity: Entity, events) -> Optional[str]:
    for ev in events:
        for assoc in ev.associations:
            tz = timezone_for_province(assoc.province)
            if tz:
                return tz
    return None


def single_location_default(entity_type: str, entity: Entity, events) -> Optional[str]:
    if entity_type in ("club", "zone"):
        return DEFAULT_TIMEZONE
    return None


DEFAULT_STRATEGIES: Sequence[TimezoneStrategy] = (
    multi_province_span,
    ancestor_province,
    event_province,
    single_location_default,
)


def resolve_timezone(
    entity_type: str,
    entity: Entity,
    events: Iterable[FeedEvent],
    strategies: Sequence[TimezoneStrategy] = DEFAULT_STRATEGIES,
) -> Optional[str]:
    """IANA timezone id for the feed, or None for UTC."""
    for strategy in strategies:
        tz = strategy(entity_type, entity, events)
        if tz is not None:
            logger.debug(
                "timezone resolved type=%s id=%s tz=%s via=%s",
                entity_type, entity.id, tz, strategy.__name__,
            )
            return None if tz == UTC else tz
    logger.debug("timezone unresolved type=%s id=%s, using UTC", entity_type, entity.id)
    return None
