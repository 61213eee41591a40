"""Create (or recreate) the users/messages schema.

Usage:
  python -m messagely.db.create_tables [--drop]
"""
from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # registers users/messages on Base.metadata


def create_all(*, drop_first: bool = False) -> None:
    engine = get_engine()
    if drop_first:
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def main() -> None:
    ap = argparse.ArgumentParser(description="Create the Messagely tables")
    ap.add_argument("--drop", action="store_true", help="drop existing tables first")
    args = ap.parse_args()
    try:
        create_all(drop_first=args.drop)
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
    print("users/messages tables ready.")


if __name__ == "__main__":
    main()
