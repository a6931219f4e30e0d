"""
Bring the database schema up to date without dropping data.

Creates the directory and event tables declared in the models if they are
missing; existing tables are left alone.

Run:
  python scripts/ensure_schema.py
"""

from __future__ import annotations

import sys
from pathlib import Path

from sqlalchemy import inspect

# project root on sys.path so `kincal` imports without installing
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

print("[ensure] loading app...")
from kincal import create_app  # type: ignore
from kincal.extensions import db  # type: ignore

EXPECTED = ["national_body", "district", "zone", "club", "event"]


def _tables() -> set[str]:
    return set(inspect(db.engine).get_table_names())


def main() -> int:
    app = create_app()
    with app.app_context():
        uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
        print(f"[ensure] SQLALCHEMY_DATABASE_URI = {uri}")

        before = _tables()
        print(f"[ensure] tables before: {len(before)}")

        print("[ensure] creating missing tables (if any)...")
        db.create_all()

        after = _tables()
        created = sorted(after - before)
        if created:
            print(f"[ensure] created: {', '.join(created)}")
        else:
            print("[ensure] nothing to create.")

        missing = [t for t in EXPECTED if t not in after]
        if missing:
            print(f"[ensure] still missing: {', '.join(missing)}")
            return 1
        print("[ensure] done.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
