# -*- coding: utf-8 -*-
"""
Full reset of the SQLite database plus a small demo directory, with logs.

Run from the project root:
  python scripts/recreate_db.py
"""

from __future__ import annotations
import sys, traceback
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional
from sqlalchemy import text

# --- путь к проекту ---
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

print(f"[recreate] ROOT={ROOT}")
if not (ROOT / "kincal" / "__init__.py").exists():
    raise SystemExit("[recreate] error: kincal/__init__.py not found next to scripts/")

print("[recreate] importing app…")
from kincal import create_app  # type: ignore
from kincal.extensions import db  # type: ignore
from kincal.models import NationalBody, District, Zone, Club, Event  # type: ignore


def _db_path_from_uri(uri: str) -> Optional[Path]:
    if uri.startswith("sqlite:///") and ":memory:" not in uri:
        return Path(uri.replace("sqlite:///", "")).resolve()
    return None


def _cnt(table: str) -> int:
    try:
        return int(db.session.execute(text(f'SELECT COUNT(*) FROM "{table}"')).scalar() or 0)
    except Exception:
        return -1


def _event(title: str, days: int, hours: int, entity, kind: str, **tags) -> Event:
    # время в UTC, naive
    start = datetime.utcnow().replace(hour=23, minute=0, second=0, microsecond=0) + timedelta(days=days)
    return Event(
        title=title,
        start_date=start,
        end_date=start + timedelta(hours=hours),
        entity_type=kind,
        entity_id=entity.id,
        visibility=tags.pop("visibility", "public"),
        **tags,
    )


def main() -> int:
    print("[recreate] create_app()…")
    app = create_app()
    with app.app_context():
        uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
        print(f"[recreate] SQLALCHEMY_DATABASE_URI = {uri}")

        db_path = _db_path_from_uri(uri)
        if db_path:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            if db_path.exists():
                print(f"[recreate] removing DB file: {db_path}")
                db.engine.dispose()
                db_path.unlink()
            else:
                print(f"[recreate] DB file does not exist yet: {db_path}")
        else:
            print("[recreate] not a sqlite file, dropping tables instead")
            db.drop_all()

        print("[recreate] creating tables from models…")
        db.create_all()

        # --- справочник ---
        print("[recreate] adding directory…")
        kin_canada = NationalBody(name="Kin Canada")
        d1 = District(name="District 4", province="Ontario")
        d2 = District(name="District 7", province="British Columbia")
        db.session.add_all([kin_canada, d1, d2])
        db.session.flush()

        z1 = Zone(name="Zone D", zone_letter="D", district_id=d1.id)
        z2 = Zone(name="Zone B", zone_letter="B", district_id=d2.id)
        db.session.add_all([z1, z2])
        db.session.flush()

        c1 = Club(name="Kinsmen Club of Guelph", city="Guelph", club_type="Kinsmen", zone_id=z1.id, district_id=d1.id)
        c2 = Club(name="Kinette Club of Kelowna", city="Kelowna", club_type="Kinette", zone_id=z2.id, district_id=d2.id)
        db.session.add_all([c1, c2])
        db.session.commit()
        print(f"[recreate] district rows={_cnt('district')} zone rows={_cnt('zone')} club rows={_cnt('club')}")

        # --- события ---
        print("[recreate] adding events…")
        db.session.add_all([
            _event("Spring Fish Fry", 7, 3, c1, "club", club_id=c1.id, zone_id=z1.id, district_id=d1.id,
                   location="Guelph Legion, 57 Watson Pkwy", description="All you can eat; proceeds to CF."),
            _event("Executive meeting", 10, 2, c1, "club", club_id=c1.id, visibility="private"),
            _event("Lakeside Cleanup", 14, 4, c2, "club", club_id=c2.id, district_id=d2.id,
                   location="City Park, Kelowna", event_url="https://kinclubs.ca/kelowna"),
            _event("Zone D Fall Council", 21, 6, z1, "zone", zone_id=z1.id, district_id=d1.id),
            _event("District 4 Convention", 30, 8, d1, "district", district_id=d1.id),
            _event("National Convention", 60, 8, kin_canada, "national"),
        ])
        db.session.commit()
        print(f"[recreate] event rows={_cnt('event')}")

        print("\n[recreate] Done. Feeds:")
        for kind, ent in (("club", c1), ("club", c2), ("zone", z1), ("district", d1), ("national", kin_canada)):
            print(f"  /calendar/{kind}/{ent.id}/feed   ({ent.name})")
        if db_path:
            print(f"\nDB file: {db_path}")
        return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except Exception:
        print("\n[recreate] ERROR:")
        traceback.print_exc()
        sys.exit(1)
