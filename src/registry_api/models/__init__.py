"""Request/response models for the registry HTTP surface."""

from .server import (
    Repository,
    ServerDetail,
    ServerList,
    ServerListMetadata,
    ServerResponse,
)

__all__ = [
    "Repository",
    "ServerDetail",
    "ServerList",
    "ServerListMetadata",
    "ServerResponse",
]
