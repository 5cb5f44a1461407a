"""Client settings loaded from the environment or a YAML file."""

from .settings import CloudSettings, get_settings

__all__ = ["CloudSettings", "get_settings"]
