"""
Environment configuration, read once at process start.

`load_settings()` builds an immutable `Settings` object in the FastAPI
lifespan; components receive the part they need through their constructors
instead of reading `os.environ` on every request.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"
DEFAULT_UPLOAD_TIMEOUT_S = 30.0
DEFAULT_UPLOAD_RETRIES = 2
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = _env_str(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str) -> list[str]:
    raw = _env_str(name)
    return [item.strip().rstrip("/") for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class CloudinarySettings:
    cloud_name: str = ""
    upload_preset: str = ""
    api_base: str = DEFAULT_CLOUDINARY_API_BASE
    timeout_s: float = DEFAULT_UPLOAD_TIMEOUT_S
    retries: int = DEFAULT_UPLOAD_RETRIES

    def missing(self) -> list[str]:
        """
        Names of the required environment variables that are blank.
        """
        names: list[str] = []
        if not (self.cloud_name or "").strip():
            names.append("CLOUDINARY_CLOUD_NAME")
        if not (self.upload_preset or "").strip():
            names.append("CLOUDINARY_UPLOAD_PRESET")
        return names

    @property
    def upload_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/{self.cloud_name}/image/upload"


@dataclass(frozen=True)
class Settings:
    database_url: str
    cloudinary: CloudinarySettings = field(default_factory=CloudinarySettings)
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    cors_origins: list[str] = field(default_factory=list)
    log_level: str = "INFO"


def load_settings() -> Settings:
    max_upload_bytes = _env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
    if max_upload_bytes <= 0:
        max_upload_bytes = DEFAULT_MAX_UPLOAD_BYTES

    return Settings(
        database_url=_env_str("DATABASE_URL"),
        cloudinary=CloudinarySettings(
            cloud_name=_env_str("CLOUDINARY_CLOUD_NAME"),
            upload_preset=_env_str("CLOUDINARY_UPLOAD_PRESET"),
            api_base=_env_str("CLOUDINARY_API_BASE") or DEFAULT_CLOUDINARY_API_BASE,
            timeout_s=_env_float("CLOUDINARY_TIMEOUT_S", DEFAULT_UPLOAD_TIMEOUT_S),
            retries=max(0, _env_int("CLOUDINARY_RETRIES", DEFAULT_UPLOAD_RETRIES)),
        ),
        max_upload_bytes=max_upload_bytes,
        cors_origins=_env_list("CORS_ORIGINS") or ["http://localhost:5173"],
        log_level=_env_str("LOG_LEVEL") or "INFO",
    )
