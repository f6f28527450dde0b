"""Repository for published server versions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from registry_api.db.models import ServerVersionRecord
from registry_api.errors import ConstraintError, NotFoundError

_UPDATABLE_FIELDS = frozenset(
    {
        "description",
        "title",
        "server_json",
        "meta_json",
        "updated_at",
        "is_latest",
        "search_text",
    }
)


@dataclass(frozen=True)
class ServerVersionFilter:
    """Predicates for a page query; all set predicates are AND-combined.

    An explicit ``version`` overrides ``latest_only``.
    """

    latest_only: bool = True
    version: str | None = None
    search: str | None = None
    updated_since: datetime | None = None


class ServerVersionRepository:
    def insert(self, record: ServerVersionRecord, *, session: Session) -> int:
        session.add(record)
        try:
            session.flush()
        except IntegrityError as exc:
            raise ConstraintError(
                f"Server '{record.server_name}' already has version '{record.version}'."
            ) from exc
        return record.id

    def update_by_id(
        self,
        record_id: int,
        *,
        session: Session,
        **fields: object,
    ) -> ServerVersionRecord:
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Cannot update server version fields: {sorted(unknown)}")
        record = session.get(ServerVersionRecord, record_id)
        if record is None:
            raise NotFoundError(f"Server version row {record_id} no longer exists.")
        for key, value in fields.items():
            setattr(record, key, value)
        session.flush()
        return record

    def find_by_name_version(
        self,
        *,
        name: str,
        version: str,
        session: Session,
    ) -> ServerVersionRecord | None:
        stmt = select(ServerVersionRecord).where(
            ServerVersionRecord.server_name == name,
            ServerVersionRecord.version == version,
        )
        return session.execute(stmt).scalars().first()

    def find_latest_by_name(self, *, name: str, session: Session) -> ServerVersionRecord | None:
        stmt = (
            select(ServerVersionRecord)
            .where(
                ServerVersionRecord.server_name == name,
                ServerVersionRecord.is_latest.is_(True),
            )
            .order_by(ServerVersionRecord.id.desc())
        )
        return session.execute(stmt).scalars().first()

    def list_latest_by_name(self, *, name: str, session: Session) -> list[ServerVersionRecord]:
        stmt = (
            select(ServerVersionRecord)
            .where(
                ServerVersionRecord.server_name == name,
                ServerVersionRecord.is_latest.is_(True),
            )
            .order_by(ServerVersionRecord.id.asc())
        )
        return list(session.execute(stmt).scalars().all())

    def find_all_by_name(self, *, name: str, session: Session) -> list[ServerVersionRecord]:
        stmt = (
            select(ServerVersionRecord)
            .where(ServerVersionRecord.server_name == name)
            .order_by(
                ServerVersionRecord.published_at.desc(),
                ServerVersionRecord.version.desc(),
            )
        )
        return list(session.execute(stmt).scalars().all())

    def query_page(
        self,
        *,
        filters: ServerVersionFilter,
        after_id: int | None,
        limit: int,
        session: Session,
    ) -> list[ServerVersionRecord]:
        stmt = select(ServerVersionRecord)
        if filters.version:
            stmt = stmt.where(ServerVersionRecord.version == filters.version)
        elif filters.latest_only:
            stmt = stmt.where(ServerVersionRecord.is_latest.is_(True))
        if after_id is not None:
            stmt = stmt.where(ServerVersionRecord.id > after_id)
        if filters.search:
            stmt = stmt.where(
                ServerVersionRecord.search_text.contains(filters.search.lower(), autoescape=True)
            )
        if filters.updated_since is not None:
            stmt = stmt.where(ServerVersionRecord.updated_at >= filters.updated_since)
        stmt = stmt.order_by(ServerVersionRecord.id.asc()).limit(limit)
        return list(session.execute(stmt).scalars().all())
