"""Configuration loaded from an optional YAML file merged over defaults."""

import copy
import logging
import os

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LOGNORM_CONFIG"


class Config:
    """Configuration manager that loads from YAML and merges with defaults."""

    DEFAULTS = {
        "timeline": {
            "min_buckets": 20,
            "max_buckets": 100,
            "width": 50,
        },
        "output": {
            "format": "text",
            "color": False,
        },
        "reader": {
            "encoding": "utf-8",
        },
        "logging": {
            "level": "WARNING",
        },
    }

    def __init__(self, config_path=None):
        self._config = copy.deepcopy(self.DEFAULTS)

        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR)

        if config_path is not None:
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    user_config = yaml.safe_load(f)

                if user_config and isinstance(user_config, dict):
                    self._config = self._deep_merge(self._config, user_config)
                logger.info("Loaded YAML config from %s", config_path)
            except FileNotFoundError:
                logger.debug("Config file %s not found, using defaults", config_path)
            except yaml.YAMLError:
                logger.warning("Invalid YAML in %s, using defaults", config_path)

    @staticmethod
    def _deep_merge(base, override):
        """Recursively merge override dict into base dict."""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)
        return result

    def timeline_bounds(self):
        """(min_buckets, max_buckets), validated."""
        timeline = self._config["timeline"]
        if not isinstance(timeline, dict):
            raise ValueError("timeline section must be a mapping")
        try:
            low, high = int(timeline["min_buckets"]), int(timeline["max_buckets"])
        except (TypeError, ValueError):
            raise ValueError("timeline bucket bounds must be integers")
        if low <= 0 or high <= 0:
            raise ValueError("timeline bucket bounds must be positive")
        if low > high:
            raise ValueError(
                f"timeline.min_buckets ({low}) exceeds timeline.max_buckets ({high})"
            )
        return low, high

    def get(self, key, default=None):
        """Get a top-level config key."""
        return self._config.get(key, default)

    def __getitem__(self, key):
        return self._config[key]

    def __contains__(self, key):
        return key in self._config
