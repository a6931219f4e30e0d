# -*- coding: utf-8 -*-
"""
Outcomes of the calendar feed pipeline.

Each failure is its own type so the HTTP layer can map it to a status code
without inspecting messages. ``message`` is safe to show to clients,
``stage`` names the pipeline step that failed and is only logged.
"""
from __future__ import annotations


class FeedError(Exception):
    status = 500
    message = "Failed to generate calendar feed"

    def __init__(self, detail: str = "", stage: str = ""):
        super().__init__(detail or self.message)
        self.detail = detail
        self.stage = stage


class InvalidEntityType(FeedError):
    status = 400
    message = "Invalid entity type"

    def __init__(self, entity_type: str):
        super().__init__(f"unknown entity type {entity_type!r}", stage="validate")
        self.entity_type = entity_type


class EntityNotFound(FeedError):
    status = 404
    message = "Entity not found"

    def __init__(self, entity_type: str, entity_id: str):
        super().__init__(f"{entity_type} {entity_id!r} does not exist", stage="entity")
        self.entity_type = entity_type
        self.entity_id = entity_id


class EventNotFound(FeedError):
    status = 404
    message = "Event not found"

    def __init__(self, event_id: str):
        super().__init__(f"public event {event_id!r} does not exist", stage="events")
        self.event_id = event_id


class UpstreamFetchError(FeedError):
    """Directory or event store unavailable. Never retried."""


class SerializationError(FeedError):
    """Stored data could not be encoded as iCalendar."""

    def __init__(self, detail: str = ""):
        super().__init__(detail, stage="serialize")
