"""Configuration loaded from environment variables and CLI flags."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gistify.exceptions import PreconditionError

DEFAULT_STORE_PATH = Path(".gistify")
ENV_FILE = Path(".env")
_LOCALHOST_HOSTS = {"localhost", "127.0.0.1", "::1"}


def validate_api_url(api_url: str) -> str:
    """Validate the API base URL and enforce HTTPS for non-localhost hosts."""
    normalized = api_url.strip().rstrip("/")
    parsed = urlparse(normalized)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError("API URL must include scheme and host (e.g. https://api.github.com)")
    if parsed.scheme == "http" and parsed.hostname not in _LOCALHOST_HOSTS:
        raise ValueError("HTTPS is required for non-localhost API URLs")
    return normalized


class Settings(BaseSettings):
    """Gistify settings, read from ``GISTIFY_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GISTIFY_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Credential
    token: str = ""

    # State
    store_path: Path = DEFAULT_STORE_PATH

    # Remote
    api_url: str = "https://api.github.com"
    timeout: float = Field(default=30.0, gt=0)

    # Behavior
    public: bool = False
    debug: bool = False

    @field_validator("api_url")
    @classmethod
    def api_url_must_be_safe(cls, v: str) -> str:
        """Reject malformed URLs and plain HTTP to remote hosts."""
        _ = cls
        return validate_api_url(v)

    def require_token(self) -> str:
        """Return the access token, raising PreconditionError when it is not set."""
        token = self.token.strip()
        if not token:
            msg = "could not find GISTIFY_TOKEN environment variable set"
            raise PreconditionError(msg)
        return token


@dataclass(frozen=True)
class SyncConfig:
    """Everything the reconciliation engine needs besides its collaborators."""

    store_path: Path
    is_public: bool
    credential: str

    @classmethod
    def from_settings(cls, settings: Settings, public: bool | None = None) -> SyncConfig:
        """Build a config from settings; ``public`` overrides ``settings.public`` when given."""
        return cls(
            store_path=settings.store_path,
            is_public=settings.public if public is None else public,
            credential=settings.require_token(),
        )
