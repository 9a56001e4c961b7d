# src/campus_forum/scripts/reconcile_counters.py
"""Recompute denormalized counters from their fact tables.

Usage:
    python -m campus_forum.scripts.reconcile_counters          # report drift
    python -m campus_forum.scripts.reconcile_counters --fix    # report and repair
"""
from __future__ import annotations

import argparse
import logging
import sys

from campus_forum.core.settings import settings
from campus_forum.db.session import SessionLocal
from campus_forum.services.reconcile import reconcile_counters


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check (and optionally repair) cached counters.")
    parser.add_argument("--fix", action="store_true", help="overwrite drifted counters with the fact counts")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s [%(name)s] %(message)s")

    db = SessionLocal()
    try:
        drifts = reconcile_counters(db, fix=args.fix)
    finally:
        db.close()

    for drift in drifts:
        print(f"{drift.counter} id={drift.entity_id}: stored={drift.stored} actual={drift.actual}")
    if not drifts:
        print("All counters consistent.")
    elif args.fix:
        print(f"Repaired {len(drifts)} counters.")
    else:
        print(f"{len(drifts)} counters drifted; rerun with --fix to repair.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
