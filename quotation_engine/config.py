"""Configuration management for the quotation detection pipeline."""

import logging
import os
import yaml
from pathlib import Path
from typing import Any, List, Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

CONFIG_ENV_VAR = "QUOTATION_ENGINE_CONFIG"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class Config:
    """Centralized configuration manager."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration from YAML file."""
        config_path = config_path or os.getenv(CONFIG_ENV_VAR)
        if config_path:
            config_file = Path(config_path)
        else:
            config_file = Path(__file__).parent.parent / "config/config.yaml"

        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")

        with open(config_file, 'r') as f:
            self.config = yaml.safe_load(f) or {}

        self.path = config_file

        # Replace environment variable placeholders
        self._substitute_env_vars(self.config)

    def _substitute_env_vars(self, obj: Any) -> None:
        """Recursively substitute environment variables in config."""
        if isinstance(obj, dict):
            for key, value in obj.items():
                if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
                    env_var = value[2:-1]
                    obj[key] = os.getenv(env_var, value)
                else:
                    self._substitute_env_vars(value)
        elif isinstance(obj, list):
            for i, item in enumerate(obj):
                if isinstance(item, str) and item.startswith("${") and item.endswith("}"):
                    obj[i] = os.getenv(item[2:-1], item)
                else:
                    self._substitute_env_vars(item)

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Example: config.get('training.test_proportion')
        """
        keys = path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default

        return value

    @property
    def database_provider(self) -> str:
        """Get quotation database provider name."""
        return self.get('database.provider', 'sqlite')

    @property
    def cache_dir(self) -> str:
        """Directory holding the cached train/test CSVs and grid results."""
        return self.get('training.cache_dir', 'data/cache')

    @property
    def random_seed(self) -> int:
        return int(self.get('training.random_seed', 42))

    @property
    def test_proportion(self) -> float:
        return float(self.get('training.test_proportion', 0.25))

    @property
    def lds_versions(self) -> List[str]:
        """Bible versions classed as LDS scripture."""
        return list(self.get('scriptures.lds_versions', []))

    @property
    def log_level(self) -> str:
        return str(self.get('logging.level', 'INFO')).upper()


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the global config so the next get_config() reloads it."""
    global _config
    _config = None


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging for scripts."""
    if level is None:
        level = get_config().log_level
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )
