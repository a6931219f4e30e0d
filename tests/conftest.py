"""
Pytest configuration and shared fixtures.
"""
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from kincal import create_app
from kincal.config import TestingConfig
from kincal.extensions import db as _db
from kincal.models import Club, District, Event, NationalBody, Zone


@pytest.fixture
def app():
    """Application with an in-memory SQLite database."""
    app = create_app(TestingConfig)
    with app.app_context():
        yield app


@pytest.fixture
def db(app):
    """Fresh schema for each test."""
    _db.create_all()
    yield _db
    _db.session.remove()
    _db.drop_all()


@pytest.fixture
def client(app, db):
    return app.test_client()


@pytest.fixture
def directory(db):
    """
    Small organisation tree:

    - national body
    - district Ontario (zone D, club Guelph, club Fergus tied via zone only)
    - district British Columbia (club Kelowna)
    - district without province (zone X, club Nowhere)
    - club without zone or district
    """
    national = NationalBody(name="Kin Canada")
    d_on = District(name="District 4", province="Ontario")
    d_bc = District(name="District 7", province="British Columbia")
    d_blank = District(name="District 0", province=None)
    db.session.add_all([national, d_on, d_bc, d_blank])
    db.session.flush()

    z_on = Zone(name="Zone D", zone_letter="D", district_id=d_on.id)
    z_blank = Zone(name="Zone X", zone_letter="X", district_id=d_blank.id)
    db.session.add_all([z_on, z_blank])
    db.session.flush()

    c_on = Club(name="Kinsmen Club of Guelph", city="Guelph", zone_id=z_on.id, district_id=d_on.id)
    c_via_zone = Club(name="Kinette Club of Fergus", city="Fergus", zone_id=z_on.id)
    c_bc = Club(name="Kin Club of Kelowna", city="Kelowna", district_id=d_bc.id)
    c_blank = Club(name="Kin Club of Nowhere", city="", zone_id=z_blank.id, district_id=d_blank.id)
    c_orphan = Club(name="Kin Club of Elsewhere", city="")
    db.session.add_all([c_on, c_via_zone, c_bc, c_blank, c_orphan])
    db.session.commit()

    return SimpleNamespace(
        national=national,
        d_on=d_on, d_bc=d_bc, d_blank=d_blank,
        z_on=z_on, z_blank=z_blank,
        c_on=c_on, c_via_zone=c_via_zone, c_bc=c_bc, c_blank=c_blank, c_orphan=c_orphan,
    )


@pytest.fixture
def add_event(db):
    """Factory: add_event(entity, "club", title=..., start=..., **columns)."""

    def _add(entity, entity_type, title="Event", start=datetime(2025, 6, 1, 23, 0),
             end=None, visibility="public", **columns):
        ev = Event(
            title=title,
            start_date=start,
            end_date=end or start + timedelta(hours=2),
            entity_type=entity_type,
            entity_id=entity.id,
            visibility=visibility,
            **columns,
        )
        db.session.add(ev)
        db.session.commit()
        return ev

    return _add
