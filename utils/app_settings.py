"""Runtime configuration read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

DEFAULT_SESSION_DURATION_MS = 60 * 60 * 1000
DEFAULT_MAX_IMAGE_BYTES = 50 * 1024 * 1024


def _int_env(env: Mapping[str, str], name: str, default: int, minimum: int = 1) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise RuntimeError(f"{name}={raw!r} is not an integer") from exc
    if value < minimum:
        raise RuntimeError(f"{name} must be at least {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class AppSettings:
    pin_length: int = 6
    session_duration_ms: int = DEFAULT_SESSION_DURATION_MS
    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES
    allowed_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    host: str = "0.0.0.0"
    port: int = 3001

    @property
    def session_duration_s(self) -> float:
        return self.session_duration_ms / 1000.0

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AppSettings":
        """Build settings from ``env`` (defaults to ``os.environ``).

        Raises:
            RuntimeError: if a numeric variable is malformed or out of range.
        """
        env = os.environ if env is None else env
        origins = tuple(o.strip() for o in env.get("ALLOWED_ORIGINS", "*").split(",") if o.strip())
        return cls(
            pin_length=_int_env(env, "PIN_LENGTH", cls.pin_length),
            session_duration_ms=_int_env(env, "SESSION_DURATION_MS", cls.session_duration_ms),
            max_image_bytes=_int_env(env, "MAX_IMAGE_BYTES", cls.max_image_bytes),
            allowed_origins=origins or ("*",),
            log_level=(env.get("LOG_LEVEL") or cls.log_level).strip().upper(),
            log_format=env.get("LOG_FORMAT") or cls.log_format,
            host=env.get("HOST") or cls.host,
            port=_int_env(env, "PORT", cls.port),
        )
