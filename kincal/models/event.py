from datetime import datetime
from sqlalchemy.orm import validates
from ..extensions import db
from .directory import new_id

VISIBILITIES = ("public", "private")


class Event(db.Model):
    __tablename__ = "event"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    # UTC, без tzinfo
    start_date = db.Column(db.DateTime, nullable=False, index=True)
    end_date = db.Column(db.DateTime, nullable=False)
    location = db.Column(db.String(255))
    visibility = db.Column(db.String(16), nullable=False, default="public")  # public|private

    # прямая привязка: по ней строится лента
    entity_type = db.Column(db.String(16), nullable=False)  # club|zone|district|national
    entity_id = db.Column(db.String(36), nullable=False)

    # теги иерархии: по ним ищем провинцию
    club_id = db.Column(db.String(36), db.ForeignKey("club.id"), index=True)
    zone_id = db.Column(db.String(36), db.ForeignKey("zone.id"), index=True)
    district_id = db.Column(db.String(36), db.ForeignKey("district.id"), index=True)

    event_url = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    club = db.relationship("Club", lazy="joined")
    zone = db.relationship("Zone", lazy="joined")
    district = db.relationship("District", lazy="joined")

    __table_args__ = (
        db.Index("ix_event_entity", "entity_type", "entity_id", "visibility"),
    )

    @validates("visibility")
    def _check_visibility(self, key, value):
        if value not in VISIBILITIES:
            raise ValueError(f"visibility must be one of {VISIBILITIES}, got {value!r}")
        return value
