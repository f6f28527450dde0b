"""Registry configuration."""

from .settings import RegistryApiSettings, RegistrySettings, get_api_settings, get_settings

__all__ = ["RegistrySettings", "RegistryApiSettings", "get_settings", "get_api_settings"]
