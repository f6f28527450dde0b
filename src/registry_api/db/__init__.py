"""Registry database helpers."""

from .base import Base
from .models import ServerVersionRecord
from .session import (
    WRITE_EXECUTION_OPTIONS,
    create_registry_engine,
    create_session_factory,
    get_engine,
    get_session_factory,
)

__all__ = [
    "Base",
    "ServerVersionRecord",
    "WRITE_EXECUTION_OPTIONS",
    "create_registry_engine",
    "create_session_factory",
    "get_engine",
    "get_session_factory",
]
