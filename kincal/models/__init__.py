from .directory import NationalBody, District, Zone, Club
from .event import Event, VISIBILITIES

__all__ = ["NationalBody", "District", "Zone", "Club", "Event", "VISIBILITIES"]
