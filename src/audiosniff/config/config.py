"""Configuration management for audiosniff."""

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, ClassVar

from audiosniff.config.paths import default_config_path
from audiosniff.platform.logging import logger

SNIFF_LENGTH_DEFAULT = 64
DETECTION_CACHE_SIZE_DEFAULT = 100
METADATA_CACHE_SIZE_DEFAULT = 1000
MAX_WORKERS_DEFAULT = 4
FAST_PATH_THRESHOLD_DEFAULT = 0.7


@dataclass
class Config:
    """Runtime configuration."""

    # Number of leading bytes handed to the magic-byte sniffer
    sniff_length: int = SNIFF_LENGTH_DEFAULT

    # Bounded cache capacities
    detection_cache_size: int = DETECTION_CACHE_SIZE_DEFAULT
    metadata_cache_size: int = METADATA_CACHE_SIZE_DEFAULT

    # Worker pool size for batch operations
    max_workers: int = MAX_WORKERS_DEFAULT

    # Minimum extension confidence before trying the extension+magic fast path
    fast_path_threshold: float = FAST_PATH_THRESHOLD_DEFAULT

    # Singleton instance
    _instance: ClassVar["Config | None"] = None
    _loaded_from: ClassVar[Path | None] = None

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> "Config":
        """Build a config from a parsed TOML table, ignoring unknown keys.

        Args:
            values: Parsed TOML document.

        Returns:
            Config: Instance populated with the recognised keys.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))
        return cls(**{key: value for key, value in values.items() if key in known})

    @classmethod
    def load(cls, config_file: Path | None = None) -> "Config":
        """Load configuration from file.

        Args:
            config_file: Explicit TOML file. Defaults to ``default_config_path()``.

        Returns:
            Config: Loaded configuration object, or defaults when no file exists.
        """
        target = config_file or default_config_path()
        if cls._instance is not None and cls._loaded_from == target:
            return cls._instance

        try:
            if target.exists():
                with open(target, "rb") as f:
                    config_dict = tomllib.load(f)
                instance = cls.from_mapping(config_dict)
                logger.debug("Configuration loaded from %s", target)
            else:
                instance = cls()
                logger.debug("No configuration file at %s; using defaults", target)
        except (OSError, tomllib.TOMLDecodeError, TypeError) as e:
            logger.error("Failed to load configuration: %s", e)
            raise

        cls._instance = instance
        cls._loaded_from = target
        return instance


# Global configuration instance
config = Config.load()
