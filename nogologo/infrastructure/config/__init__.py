"""Configuration Infrastructure"""

from .settings import (
    GenerationConfig,
    HttpConfig,
    LoggingConfig,
    Settings,
    StorageConfig,
    load_settings,
)

__all__ = [
    "Settings",
    "LoggingConfig",
    "HttpConfig",
    "StorageConfig",
    "GenerationConfig",
    "load_settings",
]
