from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - MONGO_URI: MongoDB connection string. Default 'mongodb://localhost:27017'
    - MONGO_DB_NAME: database name. Default 'demo_todo'
    - MONGO_COLLECTION: collection holding todo documents. Default 'todo'
    - HOST / PORT: listen address. Defaults '0.0.0.0' and 9000
    - STORE_TIMEOUT_SECONDS: upper bound for a single store call (default: 10)
    - SHUTDOWN_GRACE_SECONDS: how long in-flight requests may run after an interrupt (default: 5)
    - LOG_LEVEL: root logging level (default: INFO)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    """

    mongo_uri: str
    db_name: str
    collection_name: str
    host: str
    port: int
    store_timeout: float
    shutdown_grace: float
    log_level: str
    cors_allow_origins: List[str]


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_seconds(value: str, default: float) -> float:
    try:
        seconds = float(value.strip())
    except ValueError:
        return default
    return seconds if seconds > 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    return Settings(
        mongo_uri=_get_env("MONGO_URI", "mongodb://localhost:27017").strip(),
        db_name=_get_env("MONGO_DB_NAME", "demo_todo").strip(),
        collection_name=_get_env("MONGO_COLLECTION", "todo").strip(),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "9000"), 9000),
        store_timeout=_parse_seconds(_get_env("STORE_TIMEOUT_SECONDS", "10"), 10.0),
        shutdown_grace=_parse_seconds(_get_env("SHUTDOWN_GRACE_SECONDS", "5"), 5.0),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
    )
