"""Seed the registry from a JSON file of server descriptors."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from registry_api.errors import RegistryError
from registry_api.models.server import ServerDetail
from registry_api.services.registry_service import RegistryService

LOGGER = logging.getLogger(__name__)

DEFAULT_SEED_FILE = "registry.json"


class SeedError(Exception):
    """Raised when the seed file itself cannot be used."""


def load_seed_entries(path: Path) -> list[Any]:
    if not path.is_file():
        raise SeedError(f"Seed file not found at {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SeedError(f"Failed to parse JSON from {path}: {exc}") from exc
    if not isinstance(payload, list):
        raise SeedError("Seed file must contain an array of server entries")
    return payload


def seed_from_file(path: Path, service: Optional[RegistryService] = None) -> tuple[int, int]:
    """Publish every valid entry of ``path``; returns (imported, total)."""

    entries = load_seed_entries(path)
    registry = service or RegistryService()
    imported = 0
    for index, entry in enumerate(entries):
        try:
            ServerDetail.model_validate(entry)
            registry.publish(entry)
        except ValidationError as exc:
            LOGGER.error(
                "Seed item at index %d failed schema validation: %s",
                index,
                exc.errors(include_url=False, include_context=False),
            )
            continue
        except RegistryError as exc:
            LOGGER.error("Failed to import seed item at index %d: %s", index, exc)
            continue
        imported += 1
        LOGGER.info("Imported %s@%s", entry["name"], entry["version"])

    LOGGER.info("Imported %d of %d server entries", imported, len(entries))
    return imported, len(entries)


__all__ = ["DEFAULT_SEED_FILE", "SeedError", "load_seed_entries", "seed_from_file"]
