"""Lifecycle metadata attached to every stored server version.

The metadata is an open mapping keyed by namespace. The registry owns the
``official`` key only; anything else a prior write left in the mapping is
passed through untouched so new namespaces need no migration.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Any, Mapping

from registry_api.repo.common import _isoformat

OFFICIAL_METADATA_KEY = "official"

STATUS_ACTIVE = "active"


def _timestamp(value: datetime | str) -> str:
    return _isoformat(value) if isinstance(value, datetime) else value


def hydrate_metadata(
    existing: Mapping[str, Any] | None,
    *,
    published_at_fallback: datetime | str,
    updated_at: datetime | str,
    is_latest: bool,
) -> dict[str, Any]:
    """Return the metadata mapping for a version being written.

    ``status`` and ``publishedAt`` are carried forward from ``existing`` when
    present, otherwise they default to ``active`` and the fallback.
    ``updatedAt`` and ``isLatest`` always take the values passed in. The input
    mapping is not modified.
    """

    metadata: dict[str, Any] = copy.deepcopy(dict(existing)) if existing else {}
    prior = metadata.get(OFFICIAL_METADATA_KEY)
    if not isinstance(prior, Mapping):
        prior = {}

    status = prior.get("status")
    published_at = prior.get("publishedAt")
    metadata[OFFICIAL_METADATA_KEY] = {
        "status": status if status is not None else STATUS_ACTIVE,
        "publishedAt": (
            published_at if published_at is not None else _timestamp(published_at_fallback)
        ),
        "updatedAt": _timestamp(updated_at),
        "isLatest": is_latest,
    }
    return metadata
