"""Runtime settings for the product API.

Values come from the process environment, after a ``.env`` file in the
working directory has been loaded. Settings are read once at startup and
passed to the components that need them.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv


class ConfigurationError(Exception):
    """Raised when a configuration value is present but invalid."""
    pass


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"Environment variable '{key}' must be an integer, got {raw!r}")


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Environment variable '{key}' must be a boolean, got {raw!r}")


def _get_log_level(env: Mapping[str, str]) -> str:
    level = env.get("LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"Unknown LOG_LEVEL {level!r}")
    return level


@dataclass(frozen=True)
class CloudinaryConfig:
    """Credentials for the media-hosting account."""
    cloud_name: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


@dataclass(frozen=True)
class Settings:
    port: int = 5000
    host: str = "0.0.0.0"
    cloudinary: CloudinaryConfig = field(default_factory=CloudinaryConfig)
    mongodb_uri: Optional[str] = None
    mongodb_database: str = "products"
    upload_dir: str = "uploads"
    log_level: str = "INFO"
    discard_orphaned_media: bool = False


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``env`` (defaults to ``os.environ`` plus ``.env``)."""
    if env is None:
        load_dotenv()
        env = os.environ

    return Settings(
        port=_get_int(env, "PORT", 5000),
        host=env.get("HOST") or "0.0.0.0",
        cloudinary=CloudinaryConfig(
            cloud_name=env.get("CLOUD_NAME") or None,
            api_key=env.get("API_KEY") or None,
            api_secret=env.get("API_SECRET") or None,
        ),
        mongodb_uri=env.get("MONGODB_URI") or None,
        mongodb_database=env.get("MONGODB_DATABASE") or "products",
        upload_dir=env.get("UPLOAD_DIR") or "uploads",
        log_level=_get_log_level(env),
        discard_orphaned_media=_get_bool(env, "DISCARD_ORPHANED_MEDIA", False),
    )
