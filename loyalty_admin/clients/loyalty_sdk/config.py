from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_BASE_URL = "http://localhost:3001"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_PAGE_SIZE = 20


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class SDKConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    verify_ssl: bool = True
    token_path: str | None = None
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_env(cls, env_file: str | None = ".env") -> "SDKConfig":
        """Load config from the environment, letting ``env_file`` fill unset keys."""
        if env_file:
            load_dotenv(env_file, override=False)
        config = cls(
            base_url=_normalize_base_url(os.getenv("LOYALTY_API_URL", DEFAULT_BASE_URL)),
            timeout_seconds=_read_float("LOYALTY_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)),
            verify_ssl=parse_bool(os.getenv("LOYALTY_VERIFY_SSL"), default=True),
            token_path=(os.getenv("LOYALTY_TOKEN_PATH") or "").strip() or None,
            page_size=_read_int("LOYALTY_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if not self.base_url:
            raise ConfigError("LOYALTY_API_URL cannot be empty")
        if self.timeout_seconds <= 0:
            raise ConfigError(f"Invalid LOYALTY_TIMEOUT_SECONDS: expected > 0, got {self.timeout_seconds}")
        if self.page_size < 1:
            raise ConfigError(f"Invalid LOYALTY_PAGE_SIZE: expected >= 1, got {self.page_size}")


def _normalize_base_url(value: str) -> str:
    normalized = value.strip()
    if not normalized:
        return DEFAULT_BASE_URL
    return normalized.rstrip("/")


def parse_bool(value: str | bool | None, default: bool = True) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default

    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc
