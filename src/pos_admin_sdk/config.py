from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from dotenv import load_dotenv

PREFIX = "POS_ADMIN_"

NumberT = TypeVar("NumberT", int, float)


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    retries: int = 3
    retry_backoff_seconds: float = 0.3
    max_connections: int = 20
    verify_ssl: bool = True
    cache_ttl_seconds: float = 30.0
    log_level: str = "INFO"

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()


def _env(name: str) -> str:
    return (os.getenv(PREFIX + name) or "").strip()


def _number(
    name: str,
    default: NumberT,
    cast: Callable[[str], NumberT],
    *,
    minimum: NumberT,
    strict: bool = False,
) -> NumberT:
    raw = _env(name)
    if not raw:
        value = default
    else:
        try:
            value = cast(raw)
        except ValueError as exc:
            kind = "an integer" if cast is int else "a number"
            raise ConfigError(f"Invalid {PREFIX}{name}: expected {kind}, got {raw!r}") from exc
    if value < minimum or (strict and value == minimum):
        bound = ">" if strict else ">="
        raise ConfigError(f"Invalid {PREFIX}{name}: expected {bound} {minimum}, got {value}")
    return value


def _flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if not raw:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def load_config(env_file: str | None = None) -> ClientConfig:
    """Read ``POS_ADMIN_*`` settings from the environment, after an optional .env file.

    ``POS_ADMIN_API_BASE_URL_<ENV>`` wins over ``POS_ADMIN_API_BASE_URL`` so one
    .env can hold several backends.
    """
    load_dotenv(env_file)

    env_name = _env("ENV") or "dev"
    api_base_url = _env(f"API_BASE_URL_{env_name.upper()}") or _env("API_BASE_URL")
    if not api_base_url:
        raise ConfigError(f"Missing required config values: {PREFIX}API_BASE_URL")

    timeout = _number("TIMEOUT_SECONDS", 10.0, float, minimum=0.0, strict=True)
    connect_timeout = _number("CONNECT_TIMEOUT_SECONDS", min(timeout, 5.0), float, minimum=0.0, strict=True)

    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        connect_timeout_seconds=connect_timeout,
        read_timeout_seconds=_number(
            "READ_TIMEOUT_SECONDS", max(timeout, connect_timeout), float, minimum=0.0, strict=True
        ),
        retries=_number("RETRIES", 3, int, minimum=0),
        retry_backoff_seconds=_number("RETRY_BACKOFF_SECONDS", 0.3, float, minimum=0.0),
        max_connections=_number("MAX_CONNECTIONS", 20, int, minimum=1),
        verify_ssl=_flag("VERIFY_SSL", True),
        cache_ttl_seconds=_number("CACHE_TTL_SECONDS", 30.0, float, minimum=0.0),
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
    )
