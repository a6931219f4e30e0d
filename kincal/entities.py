# -*- coding: utf-8 -*-
"""Lookup of organisational entities (club, zone, district, national body)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from .errors import EntityNotFound, InvalidEntityType, UpstreamFetchError
from .extensions import db
from .models import Club, District, NationalBody, Zone

logger = logging.getLogger(__name__)

ENTITY_TYPES = ("club", "zone", "district", "national")

# типы, которые могут охватывать несколько провинций
MULTI_PROVINCE_TYPES = frozenset({"district", "national"})

_MODELS = {
    "club": Club,
    "zone": Zone,
    "district": District,
    "national": NationalBody,
}


@dataclass(frozen=True)
class Entity:
    id: str
    name: str
    type: str
    province: Optional[str] = None
    ancestor: Optional["Entity"] = None


def check_entity_type(entity_type: str) -> str:
    if entity_type not in ENTITY_TYPES:
        raise InvalidEntityType(entity_type)
    return entity_type


def _district_entity(district: Optional[District]) -> Optional[Entity]:
    if district is None:
        return None
    return Entity(id=district.id, name=district.name, type="district", province=district.province)


def entity_from_row(entity_type: str, row) -> Entity:
    if entity_type == "club":
        return Entity(row.id, row.name, "club", ancestor=_district_entity(row.parent_district))
    if entity_type == "zone":
        return Entity(row.id, row.name, "zone", ancestor=_district_entity(row.district))
    if entity_type == "district":
        return _district_entity(row)
    return Entity(row.id, row.name, "national")


def resolve_entity(entity_type: str, entity_id: str) -> Entity:
    """
    Fetch the entity and its district.

    The type is checked before any query; the id goes to the database as is.
    """
    check_entity_type(entity_type)
    model = _MODELS[entity_type]
    try:
        row = db.session.get(model, entity_id)
        entity = entity_from_row(entity_type, row) if row is not None else None
    except SQLAlchemyError as exc:
        raise UpstreamFetchError(f"directory lookup failed: {exc}", stage="entity") from exc

    if entity is None:
        raise EntityNotFound(entity_type, entity_id)

    logger.debug(
        "entity resolved type=%s id=%s ancestor=%s province=%s",
        entity_type, entity_id,
        entity.ancestor.id if entity.ancestor else None,
        entity.ancestor.province if entity.ancestor else entity.province,
    )
    return entity
