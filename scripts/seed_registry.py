"""Import server descriptors from a JSON file into the registry database."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from registry_api.config import get_settings
from registry_api.db.migrations import upgrade_database
from registry_api.db.seed_data import DEFAULT_SEED_FILE, SeedError, seed_from_file


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the registry from a JSON array of servers.")
    parser.add_argument(
        "file",
        nargs="?",
        default=DEFAULT_SEED_FILE,
        help=f"Path to the seed file (default: {DEFAULT_SEED_FILE}).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    if get_settings().run_migrations:
        upgrade_database()
    try:
        seed_from_file(Path(args.file).resolve())
    except SeedError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
