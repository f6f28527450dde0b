"""Persistence repositories for the registry."""

from .server_versions import ServerVersionFilter, ServerVersionRepository

__all__ = ["ServerVersionFilter", "ServerVersionRepository"]
