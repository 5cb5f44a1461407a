"""Client settings using Pydantic.

Values come from ``SEETEST_*`` environment variables, an optional
``.env`` file, or a YAML file loaded with ``CloudSettings.from_yaml``::

    # seetest.yml
    server_url: https://cloud.example.com
    access_token: eyJ...
    timeout: 60
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..client.cloud_client import CloudAPIClient
from ..transport.http_transport import DEFAULT_TIMEOUT

DEFAULT_CONFIG_FILE = Path("seetest.yml")


class CloudSettings(BaseSettings):
    """Connection and logging settings for the cloud client."""

    model_config = SettingsConfigDict(
        env_prefix="SEETEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    server_url: str = ""
    access_token: SecretStr | None = None
    username: str | None = None
    password: SecretStr | None = None
    timeout: float | None = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    log_level: str = "INFO"

    @field_validator("server_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_yaml(cls, path: Path = DEFAULT_CONFIG_FILE) -> CloudSettings:
        """Load settings from a YAML file.

        Raises:
            FileNotFoundError: If *path* does not exist.
            ValueError: If the file does not hold a mapping.

        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")
        with path.open("r", encoding="utf-8") as fh:
            raw: Any = yaml.safe_load(fh) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Settings file must contain a mapping: {path}")
        return cls(**raw)

    @property
    def has_credentials(self) -> bool:
        """Return ``True`` if a token or a username/password pair is set."""
        return bool(self.access_token or (self.username and self.password))

    def create_client(self) -> CloudAPIClient:
        """Build a ``CloudAPIClient`` from these settings."""
        return CloudAPIClient(
            self.server_url,
            access_token=self.access_token.get_secret_value() if self.access_token else None,
            username=self.username,
            password=self.password.get_secret_value() if self.password else None,
            timeout=self.timeout,
            verify_ssl=self.verify_ssl,
        )


@lru_cache
def get_settings() -> CloudSettings:
    """Get cached settings instance."""
    return CloudSettings()
