"""Import time records that were kept on a device into the database.

Usage: python scripts/import_legacy_records.py records.json

The file holds a JSON list of objects with ``employee``, ``project``,
``startISO`` and ``endISO``. Durations are recomputed with the lunch rule.
"""
from __future__ import annotations

import argparse
import importlib
import json
import sys
from pathlib import Path

from timekeeping.config import get_settings_module
from timekeeping.container import build_container


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", type=Path, help="JSON file with the records to import")
    args = parser.parse_args(argv)

    try:
        entries = json.loads(args.path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Cannot read {args.path}: {exc}", file=sys.stderr)
        return 1
    if not isinstance(entries, list) or not entries:
        print("No records found.")
        return 0

    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)
    summary = container.record_service.import_legacy_records(e for e in entries if isinstance(e, dict))
    skipped = summary.skipped + sum(1 for e in entries if not isinstance(e, dict))
    print(f"Import finished: {summary.imported} imported, {skipped} skipped.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
