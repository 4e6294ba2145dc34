"""
User configuration management for Image Finder.

Supports configuration from multiple sources (in order of priority):
1. Runtime parameters (highest priority)
2. Environment variables
3. User config file (~/.imagefinder/config.json)
4. Default values from config.py (lowest priority)

Example config.json:
{
    "default_workers": 4,
    "batch_size": 50,
    "result_limit": 10,
    "forced_match_distance": 2.0,
    "max_image_pixels": 500000000,
    "index_db_file": null
}
"""

import json
import os
from pathlib import Path
from typing import Any, Optional
import logging

from .config import (
    DEFAULT_WORKERS,
    BATCH_SIZE,
    RESULT_LIMIT,
    FORCED_MATCH_DISTANCE,
    MAX_IMAGE_PIXELS,
    INDEX_DB_FILE,
)

logger = logging.getLogger(__name__)


class UserConfig:
    """
    Manages user configuration from file and environment variables.

    Attributes are lazy-loaded and cached for performance.
    """

    _instance: Optional['UserConfig'] = None
    _config_data: Optional[dict] = None

    def __new__(cls):
        """Singleton pattern to ensure one config instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        env_dir = os.getenv('IMAGEFINDER_CONFIG_DIR')
        if env_dir:
            return Path(env_dir)
        return Path.home() / '.imagefinder'

    @property
    def config_file_path(self) -> Path:
        """Get the configuration file path."""
        return self.config_dir / 'config.json'

    def _load_config_file(self) -> dict:
        """Load configuration from JSON file."""
        if not self.config_file_path.exists():
            return {}

        try:
            with open(self.config_file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                logger.debug(f"Loaded configuration from {self.config_file_path}")
                return data
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {self.config_file_path}: {e}")
            return {}

    def _get_config_data(self) -> dict:
        """Get cached config data (lazy loading)."""
        if self._config_data is None:
            self._config_data = self._load_config_file()
        return self._config_data

    def reload(self):
        """Reload configuration from file."""
        self._config_data = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Get a configuration value with priority:
        1. Environment variable (if env_var specified)
        2. Config file
        3. Default value

        Args:
            key: Configuration key
            default: Default value if not found
            env_var: Optional environment variable name to check

        Returns:
            Configuration value
        """
        if env_var:
            env_value = os.getenv(env_var)
            if env_value is not None:
                # Try to parse as JSON for numbers and other non-string types
                try:
                    return json.loads(env_value)
                except (json.JSONDecodeError, TypeError):
                    return env_value

        config_data = self._get_config_data()
        if key in config_data:
            return config_data[key]

        return default

    @property
    def default_workers(self) -> int:
        """Number of parallel hashing workers."""
        return int(self.get('default_workers', default=DEFAULT_WORKERS, env_var='IMAGEFINDER_WORKERS'))

    @property
    def batch_size(self) -> int:
        """Records committed per indexing transaction."""
        return int(self.get('batch_size', default=BATCH_SIZE, env_var='IMAGEFINDER_BATCH_SIZE'))

    @property
    def result_limit(self) -> int:
        """Search results returned when few forced matches exist."""
        return int(self.get('result_limit', default=RESULT_LIMIT, env_var='IMAGEFINDER_RESULT_LIMIT'))

    @property
    def forced_match_distance(self) -> float:
        """Distance at or below which a match is always returned."""
        return float(self.get(
            'forced_match_distance',
            default=FORCED_MATCH_DISTANCE,
            env_var='IMAGEFINDER_FORCED_DISTANCE'
        ))

    @property
    def max_image_pixels(self) -> int:
        """Maximum image size in pixels (decompression bomb limit)."""
        return int(self.get('max_image_pixels', default=MAX_IMAGE_PIXELS, env_var='IMAGEFINDER_MAX_PIXELS'))

    @property
    def index_db_file(self) -> str:
        """Path to the index database file."""
        custom = self.get('index_db_file', env_var='IMAGEFINDER_DB')
        if custom:
            return str(custom)
        return INDEX_DB_FILE

    def create_example_config(self) -> bool:
        """Create an example configuration file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        example_config = {
            "_comment": "Image Finder User Configuration",
            "default_workers": DEFAULT_WORKERS,
            "batch_size": BATCH_SIZE,
            "result_limit": RESULT_LIMIT,
            "forced_match_distance": FORCED_MATCH_DISTANCE,
            "max_image_pixels": MAX_IMAGE_PIXELS,
            "index_db_file": None,
        }

        try:
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example_config, f, indent=2)
            logger.info(f"Created example config file at {self.config_file_path}")
            return True
        except OSError as e:
            logger.error(f"Failed to create example config: {e}")
            return False


_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Get the global UserConfig instance."""
    return _user_config
