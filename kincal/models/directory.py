import uuid
from datetime import datetime
from ..extensions import db


def new_id() -> str:
    return str(uuid.uuid4())


class NationalBody(db.Model):
    __tablename__ = "national_body"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(160), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class District(db.Model):
    __tablename__ = "district"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(160), nullable=False)
    province = db.Column(db.String(64))  # Ontario|Quebec|... (см. timezones.PROVINCE_TIMEZONES)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class Zone(db.Model):
    __tablename__ = "zone"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(160), nullable=False)
    zone_letter = db.Column(db.String(4), default="")
    district_id = db.Column(db.String(36), db.ForeignKey("district.id"), index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    district = db.relationship("District", lazy="joined")

    @property
    def province(self):
        return self.district.province if self.district else None


class Club(db.Model):
    __tablename__ = "club"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(160), nullable=False)
    city = db.Column(db.String(120), default="")
    club_type = db.Column(db.String(16), default="Kin")  # Kinsmen|Kinette|Kin
    zone_id = db.Column(db.String(36), db.ForeignKey("zone.id"), index=True)
    district_id = db.Column(db.String(36), db.ForeignKey("district.id"), index=True)
    website = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    zone = db.relationship("Zone", lazy="joined")
    district = db.relationship("District", lazy="joined")

    @property
    def parent_district(self):
        """District of the club, via the zone when not set directly."""
        if self.district is not None:
            return self.district
        return self.zone.district if self.zone else None

    @property
    def province(self):
        d = self.parent_district
        return d.province if d else None
