"""Application configuration loader.

Required settings come from the environment; operational tunables are
read from data/config/app_config_v1.yaml when present, with defaults
otherwise.

Usage:
    from verbario.config.app_config import load_app_config

    config = load_app_config()
    print(config.store_path, config.port)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

from verbario.core.errors import ConfigError

logger = structlog.get_logger(__name__)

# Tunables file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

SQLITE_SCHEME = "sqlite:///"

REQUIRED_ENV = ("STORE_URI", "ADMIN_PASSWORD", "APP_URL")


@dataclass
class RateLimitConfig:
    """Fixed-window request budget per client."""

    max_requests: int = 100
    window_seconds: int = 60


@dataclass
class SeederConfig:
    """Where the seeder reads verb files and keeps its ledger."""

    verbs_dir: Path = Path("data/verbs")
    ledger_path: Path = Path("data/state/seeded_files.json")


@dataclass
class AppConfig:
    """Application-wide configuration."""

    store_uri: str
    admin_password: str
    app_url: str
    port: int = 3001
    app_env: str = "development"
    connect_timeout: float = 5.0
    static_dir: Path = Path("frontend/dist")
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    seeder: SeederConfig = field(default_factory=SeederConfig)

    @property
    def store_path(self) -> Path:
        """Filesystem path of the SQLite store named by store_uri."""
        return store_path_from_uri(self.store_uri)

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


# Module-level cache
_cached_config: AppConfig | None = None


def store_path_from_uri(uri: str) -> Path:
    """Convert 'sqlite:///path/to.db' (or a bare path) to a Path."""
    if uri.startswith(SQLITE_SCHEME):
        uri = uri[len(SQLITE_SCHEME):]
    elif "://" in uri:
        raise ConfigError(f"Unsupported store URI scheme: {uri.split('://')[0]}")
    if not uri:
        raise ConfigError("STORE_URI does not name a database file")
    return Path(uri)


def _load_tunables(path: Path) -> dict[str, Any]:
    if not path.exists():
        logger.debug("using_default_tunables")
        return {}
    logger.debug("loading_tunables", source=str(path))
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return data


def _parse_port(raw: str | None) -> int:
    if raw is None or raw == "":
        return 3001
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"PORT must be an integer, got '{raw}'") from e


def build_config(env: dict[str, str], tunables: dict[str, Any] | None = None) -> AppConfig:
    """Build AppConfig from an environment mapping and tunables dict.

    Raises:
        ConfigError: If a required variable is missing or malformed
    """
    missing = [name for name in REQUIRED_ENV if not env.get(name, "").strip()]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    tunables = tunables or {}
    store = tunables.get("store", {})
    rate = tunables.get("rate_limit", {})
    seeder = tunables.get("seeder", {})
    web = tunables.get("web", {})

    config = AppConfig(
        store_uri=env["STORE_URI"].strip(),
        admin_password=env["ADMIN_PASSWORD"],
        app_url=env["APP_URL"].strip(),
        port=_parse_port(env.get("PORT")),
        app_env=env.get("APP_ENV", "").strip() or "development",
        connect_timeout=float(store.get("connect_timeout", 5.0)),
        static_dir=Path(web.get("static_dir", "frontend/dist")),
        rate_limit=RateLimitConfig(
            max_requests=int(rate.get("max_requests", 100)),
            window_seconds=int(rate.get("window_seconds", 60)),
        ),
        seeder=SeederConfig(
            verbs_dir=Path(seeder.get("verbs_dir", "data/verbs")),
            ledger_path=Path(seeder.get("ledger_path", "data/state/seeded_files.json")),
        ),
    )
    # Fail fast on an unusable URI
    store_path_from_uri(config.store_uri)
    return config


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config from the environment and tunables file.

    Args:
        force_reload: If True, ignore cached config and reload.

    Returns:
        AppConfig object with all settings.

    Raises:
        ConfigError: If required settings are missing
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    _cached_config = build_config(dict(os.environ), _load_tunables(CONFIG_FILE))
    logger.info(
        "config_loaded",
        app_env=_cached_config.app_env,
        port=_cached_config.port,
        store=str(_cached_config.store_path),
    )
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when the environment changes at runtime.
    """
    global _cached_config
    _cached_config = None
