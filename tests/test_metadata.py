from __future__ import annotations

import copy
from datetime import datetime, timezone

from registry_api.services.metadata import (
    OFFICIAL_METADATA_KEY,
    STATUS_ACTIVE,
    hydrate_metadata,
)

PUBLISHED = datetime(2026, 10, 1, 8, 30, 0, 250000, tzinfo=timezone.utc)
UPDATED = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)


def test_fresh_metadata_defaults():
    metadata = hydrate_metadata(
        None,
        published_at_fallback=PUBLISHED,
        updated_at=UPDATED,
        is_latest=True,
    )

    assert metadata == {
        OFFICIAL_METADATA_KEY: {
            "status": STATUS_ACTIVE,
            "publishedAt": "2026-10-01T08:30:00.250Z",
            "updatedAt": "2026-10-17T12:00:00.000Z",
            "isLatest": True,
        }
    }


def test_naive_datetimes_are_treated_as_utc():
    metadata = hydrate_metadata(
        None,
        published_at_fallback=datetime(2026, 1, 2, 3, 4, 5),
        updated_at="2026-01-02T03:04:05.000Z",
        is_latest=False,
    )

    official = metadata[OFFICIAL_METADATA_KEY]
    assert official["publishedAt"] == "2026-01-02T03:04:05.000Z"
    assert official["updatedAt"] == "2026-01-02T03:04:05.000Z"


def test_existing_status_and_published_at_are_carried_forward():
    existing = {
        OFFICIAL_METADATA_KEY: {
            "status": "deprecated",
            "publishedAt": "2025-01-01T00:00:00.000Z",
            "updatedAt": "2025-06-01T00:00:00.000Z",
            "isLatest": True,
        }
    }

    metadata = hydrate_metadata(
        existing,
        published_at_fallback=PUBLISHED,
        updated_at=UPDATED,
        is_latest=False,
    )

    assert metadata[OFFICIAL_METADATA_KEY] == {
        "status": "deprecated",
        "publishedAt": "2025-01-01T00:00:00.000Z",
        "updatedAt": "2026-10-17T12:00:00.000Z",
        "isLatest": False,
    }


def test_missing_fields_in_existing_entry_fall_back():
    existing = {OFFICIAL_METADATA_KEY: {"status": None}}

    metadata = hydrate_metadata(existing, published_at_fallback=PUBLISHED, updated_at=UPDATED, is_latest=True)
    official = metadata[OFFICIAL_METADATA_KEY]

    assert official["status"] == STATUS_ACTIVE
    assert official["publishedAt"] == "2026-10-01T08:30:00.250Z"


def test_other_namespaces_pass_through_and_input_is_untouched():
    existing = {
        "com.example/audit": {"reviewedBy": "ops", "tags": ["a", "b"]},
        OFFICIAL_METADATA_KEY: {
            "status": STATUS_ACTIVE,
            "publishedAt": "2025-01-01T00:00:00.000Z",
            "updatedAt": "2025-01-01T00:00:00.000Z",
            "isLatest": True,
        },
    }
    snapshot = copy.deepcopy(existing)

    metadata = hydrate_metadata(existing, published_at_fallback=PUBLISHED, updated_at=UPDATED, is_latest=False)

    assert metadata["com.example/audit"] == {"reviewedBy": "ops", "tags": ["a", "b"]}
    assert metadata["com.example/audit"] is not existing["com.example/audit"]
    assert existing == snapshot


def test_malformed_official_entry_is_rebuilt():
    metadata = hydrate_metadata(
        {OFFICIAL_METADATA_KEY: "corrupt"},
        published_at_fallback=PUBLISHED,
        updated_at=UPDATED,
        is_latest=True,
    )

    assert metadata[OFFICIAL_METADATA_KEY]["status"] == STATUS_ACTIVE
    assert metadata[OFFICIAL_METADATA_KEY]["publishedAt"] == "2026-10-01T08:30:00.250Z"
