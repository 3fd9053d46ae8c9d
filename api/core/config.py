"""
Process settings, read once from the environment.

Only `port` (lower-case, as the service always used) is expected to vary
between deployments; everything else has a working local default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import quote_plus


def _env_str(name: str, default: str | None = None) -> str | None:
    raw = os.environ.get(name, "").strip()
    return raw or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    host: str = "0.0.0.0"
    port: int = 3000
    mongo_uri: str | None = None
    mongo_host: str = "localhost"
    mongo_port: int = 27017
    mongo_db: str = "myApp"
    mongo_user: str | None = None
    mongo_pass: str | None = None
    pool_min: int = 1
    pool_max: int = 5
    pool_timeout_ms: int = 30000
    pool_acquire_timeout_ms: int = 0
    subdomain_offset: int = 2
    log_level: str = "INFO"

    def mongo_url(self) -> str:
        if self.mongo_uri:
            return self.mongo_uri
        if self.mongo_user and self.mongo_pass:
            user = quote_plus(self.mongo_user)
            password = quote_plus(self.mongo_pass)
            return f"mongodb://{user}:{password}@{self.mongo_host}:{self.mongo_port}/{self.mongo_db}"
        return f"mongodb://{self.mongo_host}:{self.mongo_port}/{self.mongo_db}"


def load_settings() -> Settings:
    port = _env_int("port", 0) or _env_int("PORT", Settings.port)
    return Settings(
        env=_env_str("APP_ENV", Settings.env),
        host=_env_str("HOST", Settings.host),
        port=port,
        mongo_uri=_env_str("MONGO_URI") or _env_str("MONGO_URL"),
        mongo_host=_env_str("MONGO_HOST", Settings.mongo_host),
        mongo_port=_env_int("MONGO_PORT", Settings.mongo_port),
        mongo_db=_env_str("MONGO_DB", Settings.mongo_db),
        mongo_user=_env_str("MONGO_USER"),
        mongo_pass=_env_str("MONGO_PASS"),
        pool_min=_env_int("MONGO_POOL_MIN", Settings.pool_min),
        pool_max=_env_int("MONGO_POOL_MAX", Settings.pool_max),
        pool_timeout_ms=_env_int("MONGO_TIMEOUT_MS", Settings.pool_timeout_ms),
        pool_acquire_timeout_ms=_env_int("MONGO_ACQUIRE_TIMEOUT_MS", Settings.pool_acquire_timeout_ms),
        subdomain_offset=_env_int("SUBDOMAIN_OFFSET", Settings.subdomain_offset),
        log_level=(_env_str("LOG_LEVEL", Settings.log_level) or Settings.log_level).upper(),
    )
