#!/usr/bin/env python3
"""Load a JSON export (current or legacy format) of habits and routines into the database."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from sqlmodel import select

from habit_planner.core import db as db_module
from habit_planner.core.config import get_log_level
from habit_planner.models import HabitRecord, RoutineRecord
from habit_planner.services import (
    DecodeError,
    PlannerStore,
    decode_collection,
    upgrade_collection_payload,
)

logger = logging.getLogger("habit_planner.import")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import habits and routines from a JSON export")
    parser.add_argument("json_path", help="Path to the exported JSON file")
    parser.add_argument(
        "--database-url",
        default=os.environ.get("DATABASE_URL", ""),
        help="Target DATABASE_URL (defaults to the environment)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--merge",
        action="store_true",
        help="Keep stored habits/routines and overwrite only those with matching ids",
    )
    mode.add_argument(
        "--force",
        action="store_true",
        help="Replace a non-empty collection with the file contents",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=get_log_level())
    json_path = os.path.abspath(args.json_path)

    if not os.path.exists(json_path):
        print(f"JSON export not found: {json_path}", file=sys.stderr)
        return 1

    if args.database_url:
        os.environ["DATABASE_URL"] = args.database_url
        db_module.refresh_engine_from_env()

    with open(json_path, encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            print(f"Invalid JSON: {exc}", file=sys.stderr)
            return 1

    try:
        habits, routines = decode_collection(upgrade_collection_payload(payload))
    except DecodeError as exc:
        print(f"Could not decode export: {exc}", file=sys.stderr)
        return 1

    db = db_module.create_session()
    try:
        store = PlannerStore(db)
        if args.merge:
            store.merge_collection(habits, routines)
        else:
            # 日本語: 空判定は行の有無だけを見る / English: The emptiness check only looks for rows, it does not decode them
            has_data = db.exec(select(HabitRecord.id)).first() or db.exec(select(RoutineRecord.id)).first()
            if has_data and not args.force:
                print("Target database already has data. Use --merge or --force.", file=sys.stderr)
                return 1
            store.replace_collection(habits, routines)
    finally:
        db.close()

    logger.info("Imported %d habits and %d routines from %s", len(habits), len(routines), json_path)
    print("Import completed successfully.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
