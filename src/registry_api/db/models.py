"""SQLAlchemy models for registry persistence."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ServerVersionRecord(Base):
    """One published version of a named server descriptor."""

    __tablename__ = "server_versions"
    __table_args__ = (
        UniqueConstraint("server_name", "version", name="uq_server_versions_name_version"),
        Index("ix_server_versions_name", "server_name"),
        Index("ix_server_versions_latest", "is_latest"),
        Index("ix_server_versions_updated_at", "updated_at"),
        Index("ix_server_versions_search", "search_text"),
        # ids are never reused, so cursors stay forward-only
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    server_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    version: Mapped[str] = mapped_column(String(255), nullable=False)
    server_json: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    meta_json: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    published_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_latest: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    search_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
