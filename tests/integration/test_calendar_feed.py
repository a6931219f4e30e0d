"""
GET /calendar/<entity_type>/<entity_id>/feed and /subscribe.
"""
import logging
from datetime import datetime
from unittest.mock import patch

import pytest
from icalendar import Calendar

from kincal.errors import SerializationError, UpstreamFetchError

pytestmark = pytest.mark.integration


def _feed(client, kind, eid):
    return client.get(f"/calendar/{kind}/{eid}/feed")


class TestFeedStatusCodes:

    def test_invalid_entity_type(self, client):
        resp = _feed(client, "foo", "123")
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Invalid entity type"}

    def test_missing_entity(self, client, directory):
        resp = _feed(client, "club", "does-not-exist")
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Entity not found"}
        assert not resp.content_type.startswith("text/calendar")

    def test_district_without_events(self, client, directory):
        resp = _feed(client, "district", directory.d_on.id)
        assert resp.status_code == 200
        body = resp.get_data(as_text=True)
        assert body.startswith("BEGIN:VCALENDAR")
        assert "BEGIN:VEVENT" not in body
        assert "X-WR-TIMEZONE:UTC" in body
        assert len(Calendar.from_ical(body).walk("VEVENT")) == 0

    def test_ontario_club_uses_eastern_time(self, client, directory, add_event):
        c = directory.c_on
        add_event(c, "club", title="Fish fry", start=datetime(2025, 1, 15, 0, 0))
        body = _feed(client, "club", c.id).get_data(as_text=True)
        assert "X-WR-TIMEZONE:America/Toronto" in body
        assert "DTSTART;TZID=America/Toronto:20250114T190000" in body

    def test_entity_name_with_newline(self, client, db, directory):
        directory.d_on.name = "District 4, Ontario\nEast"
        db.session.commit()
        resp = _feed(client, "district", directory.d_on.id)
        assert resp.status_code == 200
        assert r"X-WR-CALNAME:District 4\, Ontario\nEast" in resp.get_data(as_text=True)
        assert resp.headers["Content-Disposition"] == \
            'inline; filename="District_4__Ontario_East_calendar.ics"'

    def test_national_feed(self, client, directory, add_event):
        add_event(directory.national, "national", title="National Convention", start=datetime(2025, 8, 15, 14, 0))
        body = _feed(client, "national", directory.national.id).get_data(as_text=True)
        assert "DTSTART:20250815T140000Z" in body

    def test_serialization_failure(self, client, directory):
        with patch("kincal.modules.calendar_feed.render_feed", side_effect=SerializationError("bad ts")):
            resp = _feed(client, "club", directory.c_on.id)
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to generate calendar feed"}

    def test_upstream_failure(self, client, directory):
        err = UpstreamFetchError("event lookup failed: db down", stage="events")
        with patch("kincal.modules.calendar_feed.build_feed", side_effect=err):
            resp = _feed(client, "club", directory.c_on.id)
        assert resp.status_code == 500
        # no internals in the body
        assert resp.get_json() == {"error": "Failed to generate calendar feed"}

    def test_unexpected_failure(self, client, directory):
        with patch("kincal.modules.calendar_feed.build_feed", side_effect=RuntimeError("boom")):
            resp = _feed(client, "club", directory.c_on.id)
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to generate calendar feed"}


class TestFeedContent:

    def test_only_public_events_of_this_entity(self, client, directory, add_event):
        c = directory.c_on
        add_event(c, "club", title="Public thing")
        add_event(c, "club", title="Secret thing", visibility="private")
        add_event(directory.z_on, "zone", title="Zone thing", club_id=c.id)
        body = _feed(client, "club", c.id).get_data(as_text=True)
        assert "Public thing" in body
        assert "Secret thing" not in body
        assert "Zone thing" not in body

    def test_district_feed_excludes_child_events(self, client, directory, add_event):
        d = directory.d_on
        add_event(d, "district", title="District convention", district_id=d.id)
        add_event(directory.c_on, "club", title="Club bbq", district_id=d.id)
        cal = Calendar.from_ical(_feed(client, "district", d.id).get_data(as_text=True))
        assert [str(e["SUMMARY"]) for e in cal.walk("VEVENT")] == ["District convention"]

    def test_repeated_fetch_keeps_uids(self, client, directory, add_event):
        ev = add_event(directory.c_on, "club")
        first = _feed(client, "club", directory.c_on.id).get_data(as_text=True)
        second = _feed(client, "club", directory.c_on.id).get_data(as_text=True)
        assert f"UID:{ev.id}@kincal.com" in first
        assert f"UID:{ev.id}@kincal.com" in second


class TestFeedHeaders:

    def test_success_headers(self, client, directory):
        resp = _feed(client, "club", directory.c_on.id)
        assert resp.headers["Content-Type"] == "text/calendar; charset=utf-8"
        assert resp.headers["Content-Disposition"] == \
            'inline; filename="Kinsmen_Club_of_Guelph_calendar.ics"'
        assert resp.headers["Cache-Control"] == "public, max-age=60"
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert resp.headers["Access-Control-Allow-Methods"] == "GET"

    def test_cache_lifetime_is_configurable(self, app, client, directory):
        app.config["FEED_CACHE_MAX_AGE"] = 120
        resp = _feed(client, "district", directory.d_bc.id)
        assert resp.headers["Cache-Control"] == "public, max-age=120"

    def test_logs_carry_request_id(self, client, directory, caplog):
        pkg_logger = logging.getLogger("kincal")
        assert pkg_logger.propagate is False
        caplog.set_level("INFO", logger="kincal")
        pkg_logger.addHandler(caplog.handler)
        try:
            client.get("/calendar/foo/1/feed", headers={"X-Request-ID": "req-42"})
        finally:
            pkg_logger.removeHandler(caplog.handler)
        failed = [r for r in caplog.records if "stage=validate" in r.getMessage()]
        assert failed
        assert failed[0].request_id == "req-42"
        assert failed[0].levelname == "WARNING"


class TestSubscribe:

    def test_subscription_links(self, client, directory):
        resp = client.get(f"/calendar/zone/{directory.z_on.id}/subscribe")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["entity"]["name"] == "Zone D"
        assert data["public_url"] == f"https://kincal.example.org/calendar/zone/{directory.z_on.id}/feed"
        assert data["webcal_url"].startswith("webcal://kincal.example.org/")
        assert data["http_url"].startswith("http://localhost/calendar/zone/")

    def test_subscription_errors(self, client, directory):
        assert client.get("/calendar/foo/1/subscribe").status_code == 400
        assert client.get("/calendar/club/nope/subscribe").status_code == 404
