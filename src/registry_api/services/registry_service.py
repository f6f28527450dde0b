"""Registry service: publish and query versioned server descriptors."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from urllib.parse import unquote

from sqlalchemy.orm import Session, sessionmaker

from registry_api.db.models import ServerVersionRecord
from registry_api.db.session import WRITE_EXECUTION_OPTIONS, get_session_factory
from registry_api.errors import InvalidArgumentError, NotFoundError
from registry_api.repo.common import _now
from registry_api.repo.server_versions import ServerVersionFilter, ServerVersionRepository
from registry_api.services.cursor import decode_cursor, encode_cursor
from registry_api.services.metadata import hydrate_metadata

LOGGER = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 30
MAX_PAGE_SIZE = 100
LATEST_VERSION = "latest"


@dataclass(frozen=True)
class PublishResult:
    response: dict[str, Any]
    created: bool


def compute_search_text(descriptor: Mapping[str, Any]) -> str:
    tokens = [descriptor.get("name"), descriptor.get("description"), descriptor.get("title")]
    return " ".join(str(token).lower() for token in tokens if token)


def resolve_limit(limit: Optional[int]) -> int:
    if limit is None:
        return DEFAULT_PAGE_SIZE
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise InvalidArgumentError("limit must be a positive integer")
    return min(limit, MAX_PAGE_SIZE)


def parse_timestamp(value: datetime | str) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(value.strip())
        except (AttributeError, ValueError) as exc:
            raise InvalidArgumentError(
                "updated_since must be a valid ISO-8601 timestamp"
            ) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _normalize_search(search: Optional[str]) -> Optional[str]:
    if search is None:
        return None
    term = search.strip().lower()
    return term or None


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _descriptor_identity(descriptor: Mapping[str, Any]) -> tuple[str, str]:
    if not isinstance(descriptor, Mapping):
        raise InvalidArgumentError("Server descriptor must be an object.")
    name = descriptor.get("name")
    version = descriptor.get("version")
    if not isinstance(name, str) or not name:
        raise InvalidArgumentError("Server descriptor requires a non-empty name.")
    if not isinstance(version, str) or not version:
        raise InvalidArgumentError("Server descriptor requires a non-empty version.")
    return name, version


def _to_response(record: ServerVersionRecord) -> dict[str, Any]:
    return {
        "server": record.server_json,
        "_meta": record.meta_json,
    }


class RegistryService:
    """Publishes server versions and answers list/get queries.

    ``publish`` is the only write. It runs in one transaction that demotes the
    name's previous latest version and inserts the new one, so no reader ever
    sees zero or two latest versions for a published name.
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker[Session]] = None,
        repo: Optional[ServerVersionRepository] = None,
    ) -> None:
        self._session_factory = session_factory
        self._repo = repo or ServerVersionRepository()

    def _sessions(self) -> sessionmaker[Session]:
        return self._session_factory or get_session_factory()

    def publish(self, descriptor: Mapping[str, Any]) -> PublishResult:
        name, version = _descriptor_identity(descriptor)
        with self._sessions()() as session:
            with session.begin():
                session.connection(execution_options=WRITE_EXECUTION_OPTIONS)
                result = self._publish(session, descriptor, name=name, version=version)
        LOGGER.info(
            "Published %s@%s (%s)",
            name,
            version,
            "created" if result.created else "updated",
        )
        return result

    def _publish(
        self,
        session: Session,
        descriptor: Mapping[str, Any],
        *,
        name: str,
        version: str,
    ) -> PublishResult:
        now = _now()
        payload = copy.deepcopy(dict(descriptor))
        search_text = compute_search_text(payload)
        description = _optional_text(payload.get("description"))
        title = _optional_text(payload.get("title"))

        existing = self._repo.find_by_name_version(name=name, version=version, session=session)
        if existing is not None:
            metadata = hydrate_metadata(
                existing.meta_json,
                published_at_fallback=existing.published_at,
                updated_at=now,
                is_latest=existing.is_latest,
            )
            self._repo.update_by_id(
                existing.id,
                session=session,
                description=description,
                title=title,
                server_json=payload,
                meta_json=metadata,
                updated_at=now,
                search_text=search_text,
            )
            return PublishResult(response={"server": payload, "_meta": metadata}, created=False)

        self._demote_latest(session, name=name, now=now)

        metadata = hydrate_metadata(
            None,
            published_at_fallback=now,
            updated_at=now,
            is_latest=True,
        )
        record = ServerVersionRecord(
            server_name=name,
            description=description,
            title=title,
            version=version,
            server_json=payload,
            meta_json=metadata,
            published_at=now,
            updated_at=now,
            is_latest=True,
            search_text=search_text,
        )
        self._repo.insert(record, session=session)
        return PublishResult(response={"server": payload, "_meta": metadata}, created=True)

    def _demote_latest(self, session: Session, *, name: str, now: datetime) -> None:
        latest_records = self._repo.list_latest_by_name(name=name, session=session)
        if len(latest_records) > 1:
            LOGGER.warning(
                "Found %d latest versions for %s; demoting all of them",
                len(latest_records),
                name,
            )
        for record in latest_records:
            metadata = hydrate_metadata(
                record.meta_json,
                published_at_fallback=record.published_at,
                updated_at=now,
                is_latest=False,
            )
            self._repo.update_by_id(
                record.id,
                session=session,
                meta_json=metadata,
                updated_at=now,
                is_latest=False,
            )
            LOGGER.debug("Demoted %s@%s from latest", name, record.version)

    def list_servers(
        self,
        *,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        search: Optional[str] = None,
        updated_since: datetime | str | None = None,
        version: Optional[str] = None,
    ) -> dict[str, Any]:
        page_size = resolve_limit(limit)
        after_id = decode_cursor(cursor) if cursor else None
        requested_version = (version or "").strip() or None
        if requested_version == LATEST_VERSION:
            requested_version = None
        filters = ServerVersionFilter(
            latest_only=requested_version is None,
            version=requested_version,
            search=_normalize_search(search),
            updated_since=parse_timestamp(updated_since) if updated_since else None,
        )

        with self._sessions()() as session:
            records = self._repo.query_page(
                filters=filters,
                after_id=after_id,
                limit=page_size + 1,
                session=session,
            )
            # one extra row tells whether anything follows this page
            has_more = len(records) > page_size
            records = records[:page_size]
            servers = [_to_response(record) for record in records]

        metadata: dict[str, Any] = {"count": len(servers)}
        if has_more:
            metadata["nextCursor"] = encode_cursor(records[-1].id)
        return {"servers": servers, "metadata": metadata}

    def list_server_versions(self, server_name: str) -> dict[str, Any]:
        name = unquote(server_name)
        with self._sessions()() as session:
            records = self._repo.find_all_by_name(name=name, session=session)
            servers = [_to_response(record) for record in records]

        if not servers:
            raise NotFoundError("Server not found")
        return {"servers": servers, "metadata": {"count": len(servers)}}

    def get_server_version(self, server_name: str, version: str) -> dict[str, Any]:
        name = unquote(server_name)
        requested = unquote(version)
        with self._sessions()() as session:
            if requested == LATEST_VERSION:
                record = self._repo.find_latest_by_name(name=name, session=session)
            else:
                record = self._repo.find_by_name_version(
                    name=name,
                    version=requested,
                    session=session,
                )
            if record is None:
                raise NotFoundError("Server version not found")
            return _to_response(record)


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "LATEST_VERSION",
    "MAX_PAGE_SIZE",
    "PublishResult",
    "RegistryService",
    "compute_search_text",
    "parse_timestamp",
    "resolve_limit",
]
