"""
Configuration module for the development server.
Loads settings from environment variables with sensible defaults.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class ConfigError(Exception):
    """Fatal startup condition: bad root directory or unusable port."""


@dataclass(frozen=True)
class TLSCredentials:
    """Certificate material selecting the secure transport."""
    certfile: str
    keyfile: str
    password: Optional[str] = None


class ServerConfig(BaseSettings):
    """Server settings, built once at startup and never mutated."""

    # Content
    root: Path = Field(default=Path("."), alias="SPASERVE_ROOT")
    module: bool = Field(default=False, alias="SPASERVE_MODULE")
    fallback: Optional[str] = Field(default=None, alias="SPASERVE_FALLBACK")
    static: bool = Field(default=False, alias="SPASERVE_STATIC")
    inject: str = Field(default="", alias="SPASERVE_INJECT")

    # Live reload
    reload: bool = Field(default=True, alias="SPASERVE_RELOAD")
    heartbeat_interval: float = Field(default=60.0, alias="SPASERVE_HEARTBEAT_INTERVAL")  # seconds

    # Transport
    host: str = Field(default="0.0.0.0", alias="SPASERVE_HOST")
    port: Optional[int] = Field(default=None, alias="PORT")
    ssl_certfile: Optional[str] = Field(default=None, alias="SPASERVE_SSL_CERTFILE")
    ssl_keyfile: Optional[str] = Field(default=None, alias="SPASERVE_SSL_KEYFILE")
    ssl_keyfile_password: Optional[str] = Field(default=None, alias="SPASERVE_SSL_KEYFILE_PASSWORD")

    # Access log enrichment
    geolocate: bool = Field(default=False, alias="SPASERVE_GEOLOCATE")
    geolocate_url: str = Field(default="http://ip-api.com/json/", alias="SPASERVE_GEOLOCATE_URL")
    geolocate_timeout: float = Field(default=2.0, alias="SPASERVE_GEOLOCATE_TIMEOUT")

    # Logging
    log_level: str = Field(default="info", alias="SPASERVE_LOG_LEVEL")
    log_time_format: str = Field(default="%Y-%m-%d %H:%M:%S", alias="SPASERVE_LOG_TIME_FORMAT")

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True
        frozen = True
        extra = "ignore"

    @field_validator("root")
    @classmethod
    def _absolute_root(cls, value: Path) -> Path:
        return (Path.cwd() / Path(value).expanduser()).resolve()

    @property
    def fallback_name(self) -> str:
        """Fallback document name; depends on module mode when unset."""
        if self.fallback:
            return self.fallback
        return "index.js" if self.module else "index.html"

    @property
    def credentials(self) -> Optional[TLSCredentials]:
        """TLS material, or None for plain HTTP."""
        if self.ssl_certfile and self.ssl_keyfile:
            return TLSCredentials(self.ssl_certfile, self.ssl_keyfile, self.ssl_keyfile_password)
        return None

    @property
    def protocol(self) -> str:
        return "https" if self.credentials else "http"


@lru_cache()
def get_settings() -> ServerConfig:
    """Get cached settings instance."""
    return ServerConfig()


def check_root(root: Path) -> None:
    """Raise ConfigError unless root is an existing directory."""
    if not root.exists():
        raise ConfigError(f"Root directory {root} does not exist!")
    if not root.is_dir():
        raise ConfigError(f'Root directory "{root}" is not directory!')


def prepare_config(settings: ServerConfig) -> ServerConfig:
    """
    Validate settings and resolve the listening port.

    Returns a copy of the settings carrying the concrete port number.
    Raises ConfigError for an unusable root or an explicitly requested
    port that is already bound.
    """
    from spaserve.support.network import resolve_port

    check_root(settings.root)
    port = resolve_port(settings.port, settings.host)
    return settings.model_copy(update={"port": port})
