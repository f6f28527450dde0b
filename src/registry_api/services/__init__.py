"""Registry services."""

from .registry_service import PublishResult, RegistryService

__all__ = ["PublishResult", "RegistryService"]
