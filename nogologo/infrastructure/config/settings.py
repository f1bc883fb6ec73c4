"""Configuration Management - Infrastructure Layer"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_DATA_DIR = Path("~/.nogologo")
CONFIG_ENV_VAR = "NOGOLOGO_CONFIG"


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "text"


@dataclass
class HttpConfig:
    """Provider HTTP configuration"""
    timeout: float = 60.0


@dataclass
class StorageConfig:
    """Local storage locations"""
    data_dir: Path = DEFAULT_DATA_DIR
    photo_library: Path = Path("~/Pictures/NoGoLogo")
    album: str = "NoGoLogo"

    @property
    def credentials_path(self) -> Path:
        return self.data_dir.expanduser() / "credentials.yaml"

    @property
    def providers_path(self) -> Path:
        return self.data_dir.expanduser() / "providers.yaml"


@dataclass
class GenerationConfig:
    """Generation defaults"""
    default_count: int = 1
    best_effort_decode: bool = True


@dataclass
class Settings:
    """Application settings"""
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings

        Args:
            config_path: Config file path (optional)

        Returns:
            Settings object

        Raises:
            ValueError: the file holds an invalid value
        """
        # 1. Resolve the config file path
        if config_path is None:
            config_path = Path(
                os.getenv(CONFIG_ENV_VAR, str(DEFAULT_DATA_DIR / "config.yaml"))
            )
        config_path = Path(config_path).expanduser()

        # 2. Load YAML
        config_data = {}
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}

        # 3. Logging (LOG_LEVEL overrides the file)
        logging_data = config_data.get("logging") or {}
        logging_config = LoggingConfig(
            level=os.getenv("LOG_LEVEL", logging_data.get("level", "INFO")),
            format=logging_data.get("format", "text"),
        )

        # 4. HTTP
        http_data = config_data.get("http") or {}
        timeout = float(http_data.get("timeout", 60.0))
        if timeout <= 0:
            raise ValueError("HTTP timeout must be positive")
        http = HttpConfig(timeout=timeout)

        # 5. Storage
        storage_data = config_data.get("storage") or {}
        storage = StorageConfig(
            data_dir=Path(storage_data.get("data_dir", str(DEFAULT_DATA_DIR))),
            photo_library=Path(storage_data.get("photo_library", "~/Pictures/NoGoLogo")),
            album=storage_data.get("album", "NoGoLogo"),
        )

        # 6. Generation
        generation_data = config_data.get("generation") or {}
        generation = GenerationConfig(
            default_count=int(generation_data.get("default_count", 1)),
            best_effort_decode=bool(generation_data.get("best_effort_decode", True)),
        )

        return cls(
            logging=logging_config,
            http=http,
            storage=storage,
            generation=generation,
        )


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Convenience wrapper for Settings.load

    Args:
        config_path: Config file path (optional)

    Returns:
        Settings object
    """
    return Settings.load(config_path)
