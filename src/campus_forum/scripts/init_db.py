# src/campus_forum/scripts/init_db.py
"""Create (or recreate) every table directly from the ORM metadata.

Intended for local development against SQLite; deployed databases go
through ``campus_forum.scripts.migrate``.
"""
from __future__ import annotations

import argparse

from campus_forum.core.settings import settings
from campus_forum.db.session import create_tables, drop_tables


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Initialize the Campus Forum database schema.")
    parser.add_argument("--drop", action="store_true", help="drop all tables before creating them")
    args = parser.parse_args(argv)

    if args.drop:
        drop_tables()
        print("Dropped all tables.")
    create_tables()
    print(f"Database initialized at {settings.effective_database_url}.")


if __name__ == "__main__":
    main()
