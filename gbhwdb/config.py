"""
Build configuration module.

Manages pipeline configuration including the submission data root, the
build output directory, worker pool sizes and the unit-name policy.
Configuration can be loaded from a YAML file or environment variables.
"""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from platformdirs import user_config_dir

from gbhwdb.exceptions import ConfigError, ConfigValidationError


# ============================================================================
# Constants
# ============================================================================

APP_NAME = "gbhwdb"
APP_AUTHOR = "gbhwdb"
CONFIG_FILENAME = "gbhwdb-config.yaml"

# Environment variable names
ENV_CONFIG_PATH = "GBHWDB_CONFIG_PATH"
ENV_DATA_DIR = "GBHWDB_DATA_DIR"
ENV_BUILD_DIR = "GBHWDB_BUILD_DIR"
ENV_LOG_LEVEL = "GBHWDB_LOG_LEVEL"

# Default values
DEFAULT_DATA_DIR = "data"
DEFAULT_BUILD_DIR = "build"
DEFAULT_CRAWL_WORKERS = 16
DEFAULT_PHOTO_WORKERS = 4
DEFAULT_THUMBNAIL_SIZES = [80, 50]
DEFAULT_LOG_LEVEL = "INFO"
VALID_LOG_LEVELS = frozenset(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


# ============================================================================
# Helper Functions
# ============================================================================


def get_default_config_dir() -> Path:
    """
    Get the default configuration directory for the current platform.

    Returns:
        Path to the platform-appropriate config directory
    """
    return Path(user_config_dir(APP_NAME, APP_AUTHOR))


def get_default_config_path() -> Path:
    """
    Get the default configuration file path.

    Returns:
        Path to the default config file
    """
    return get_default_config_dir() / CONFIG_FILENAME


# ============================================================================
# GbhwdbConfig Class
# ============================================================================


class GbhwdbConfig:
    """
    Pipeline configuration manager.

    Configuration sources (in priority order):
    1. Environment variables
    2. Configuration file
    3. Default values

    Attributes:
        data_dir: Root of the contributed submission tree
        build_dir: Output directory for data, CSV and photo assets
        crawl_workers: Thread pool size for per-unit crawl work
        photo_workers: Thread pool size for photo derivative generation
        strict_unit_names: Abort the crawl on malformed unit names
        thumbnail_sizes: Thumbnail widths generated from the front photo
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        config_dir: Optional[Path] = None,
    ):
        """
        Initialize pipeline configuration.

        Args:
            config_path: Explicit path to config file (takes precedence)
            config_dir: Directory containing config file
        """
        if config_path:
            self._config_path = Path(config_path)
        elif config_dir:
            self._config_path = Path(config_dir) / CONFIG_FILENAME
        else:
            env_path = os.environ.get(ENV_CONFIG_PATH)
            self._config_path = Path(env_path) if env_path else get_default_config_path()

        self._data_dir: str = DEFAULT_DATA_DIR
        self._build_dir: str = DEFAULT_BUILD_DIR
        self._crawl_workers: int = DEFAULT_CRAWL_WORKERS
        self._photo_workers: int = DEFAULT_PHOTO_WORKERS
        self._strict_unit_names: bool = True
        self._thumbnail_sizes: List[int] = list(DEFAULT_THUMBNAIL_SIZES)
        self._log_level: str = DEFAULT_LOG_LEVEL

        self._load()

    @property
    def config_path(self) -> Path:
        """Get the configuration file path."""
        return self._config_path

    # -------------------------------------------------------------------------
    # Configuration Properties
    # -------------------------------------------------------------------------

    @property
    def data_dir(self) -> Path:
        """Get the submission data root."""
        return Path(os.environ.get(ENV_DATA_DIR, self._data_dir))

    @data_dir.setter
    def data_dir(self, value) -> None:
        self._data_dir = str(value)

    @property
    def build_dir(self) -> Path:
        """Get the build output directory."""
        return Path(os.environ.get(ENV_BUILD_DIR, self._build_dir))

    @build_dir.setter
    def build_dir(self, value) -> None:
        self._build_dir = str(value)

    @property
    def crawl_workers(self) -> int:
        return self._crawl_workers

    @crawl_workers.setter
    def crawl_workers(self, value: int) -> None:
        self._crawl_workers = value

    @property
    def photo_workers(self) -> int:
        return self._photo_workers

    @photo_workers.setter
    def photo_workers(self, value: int) -> None:
        self._photo_workers = value

    @property
    def strict_unit_names(self) -> bool:
        return self._strict_unit_names

    @strict_unit_names.setter
    def strict_unit_names(self, value: bool) -> None:
        self._strict_unit_names = value

    @property
    def thumbnail_sizes(self) -> List[int]:
        return self._thumbnail_sizes

    @thumbnail_sizes.setter
    def thumbnail_sizes(self, value: List[int]) -> None:
        self._thumbnail_sizes = list(value)

    @property
    def log_level(self) -> str:
        """Get the log level."""
        return os.environ.get(ENV_LOG_LEVEL, self._log_level)

    @log_level.setter
    def log_level(self, value: str) -> None:
        self._log_level = value

    # -------------------------------------------------------------------------
    # Configuration Management
    # -------------------------------------------------------------------------

    def _load(self) -> None:
        """Load configuration from file."""
        if not self._config_path.exists():
            return

        try:
            with open(self._config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file: {e}")

        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file must contain a mapping: {self._config_path}"
            )

        self._data_dir = str(data.get("data_dir", DEFAULT_DATA_DIR))
        self._build_dir = str(data.get("build_dir", DEFAULT_BUILD_DIR))
        self._crawl_workers = data.get("crawl_workers", DEFAULT_CRAWL_WORKERS)
        self._photo_workers = data.get("photo_workers", DEFAULT_PHOTO_WORKERS)
        self._strict_unit_names = data.get("strict_unit_names", True)
        self._thumbnail_sizes = list(
            data.get("thumbnail_sizes", DEFAULT_THUMBNAIL_SIZES)
        )
        self._log_level = data.get("log_level", DEFAULT_LOG_LEVEL)

    def save(self) -> None:
        """Save configuration to file."""
        self._config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "data_dir": self._data_dir,
            "build_dir": self._build_dir,
            "crawl_workers": self._crawl_workers,
            "photo_workers": self._photo_workers,
            "strict_unit_names": self._strict_unit_names,
            "thumbnail_sizes": self._thumbnail_sizes,
            "log_level": self._log_level,
        }

        with open(self._config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)

    def validate(self) -> None:
        """
        Validate the current configuration.

        Raises:
            ConfigValidationError: If configuration is invalid
        """
        if not isinstance(self.crawl_workers, int) or self.crawl_workers <= 0:
            raise ConfigValidationError(
                f"crawl_workers must be a positive integer, got: {self.crawl_workers}"
            )

        if not isinstance(self.photo_workers, int) or not 1 <= self.photo_workers <= 16:
            raise ConfigValidationError(
                f"photo_workers must be between 1 and 16, got: {self.photo_workers}"
            )

        if not isinstance(self.strict_unit_names, bool):
            raise ConfigValidationError(
                f"strict_unit_names must be a boolean, got: {self.strict_unit_names}"
            )

        for size in self.thumbnail_sizes:
            if not isinstance(size, int) or size <= 0:
                raise ConfigValidationError(
                    f"thumbnail_sizes must contain positive integers, got: {size}"
                )

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"Invalid log_level: {self.log_level}"
            )
