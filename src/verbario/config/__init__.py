"""Configuration package for verbario."""

from verbario.config.app_config import (
    AppConfig,
    RateLimitConfig,
    SeederConfig,
    build_config,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "RateLimitConfig",
    "SeederConfig",
    "build_config",
    "clear_config_cache",
    "load_app_config",
]
