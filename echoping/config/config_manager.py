#!/usr/bin/env python3
"""
Configuration Manager for echoping

Features:
- JSON configuration file
- Environment variable overrides
- JSON Schema validation of all parameters
- Default values matching the classic ping client
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "ECHOPING_CONFIG"
DEFAULT_CONFIG_FILE = "echoping.json"


class ConfigError(ValueError):
    """Raised when a configuration does not match the schema."""
    pass


class ConfigSchema:
    """Configuration schema with validation"""

    SCHEMA = {
        "type": "object",
        "required": ["version", "ping", "output"],
        "properties": {
            "version": {"type": "string", "pattern": r"^\d+\.\d+\.\d+$"},
            "ping": {
                "type": "object",
                "required": ["count", "payload_size", "timeout_ms"],
                "properties": {
                    "count": {"type": "integer", "minimum": 0},
                    "payload_size": {"type": "integer", "minimum": 0, "maximum": 65507},
                    "timeout_ms": {"type": "integer", "minimum": 1},
                    "strict_reply_matching": {"type": "boolean"}
                },
                "additionalProperties": False
            },
            "output": {
                "type": "object",
                "properties": {
                    "colors_enabled": {"type": "boolean"},
                    "log_level": {"type": "string", "enum": ["DEBUG", "INFO", "WARNING", "ERROR"]}
                },
                "additionalProperties": False
            }
        }
    }

    @staticmethod
    def get_defaults() -> Dict[str, Any]:
        """Return default configuration"""
        return {
            "version": "1.0.0",
            "ping": {
                "count": 4,
                "payload_size": 32,
                "timeout_ms": 1000,
                "strict_reply_matching": False
            },
            "output": {
                "colors_enabled": True,
                "log_level": "WARNING"
            }
        }

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate a configuration document.

        Raises:
            ConfigError: Describing the first schema violation
        """
        validator = Draft7Validator(cls.SCHEMA)
        error = best_match(validator.iter_errors(config))
        if error is not None:
            location = ".".join(str(p) for p in error.path) or "<root>"
            raise ConfigError(f"{location}: {error.message}")


def default_config_path() -> str:
    """Config file from $ECHOPING_CONFIG, else echoping.json in the cwd."""
    return os.environ.get(CONFIG_FILE_ENV) or DEFAULT_CONFIG_FILE


class ConfigManager:
    """
    Configuration manager with file, env, and validation support

    Usage:
        config = ConfigManager("echoping.json")
        config.load()
        count = config.get("ping.count")
        config.set("ping.count", 10)
        config.save()
    """

    ENV_PREFIX = "ECHOPING_"

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration manager

        Args:
            config_file: Path to JSON config file (default: $ECHOPING_CONFIG or echoping.json)
        """
        self.config_file = config_file or default_config_path()
        self.config = ConfigSchema.get_defaults()
        self.modified = False

    def load(self, config_file: Optional[str] = None) -> bool:
        """
        Load configuration from file

        A missing file leaves the defaults in place. A file that cannot be
        read, parsed or validated is ignored with a warning.

        Args:
            config_file: Optional path override

        Returns:
            True if loaded successfully, False otherwise
        """
        if config_file:
            self.config_file = config_file

        path = Path(self.config_file)

        if not path.exists():
            logger.debug("Config file not found: %s, using defaults", self.config_file)
            return False

        try:
            with open(path, 'r', encoding='utf-8') as f:
                loaded_config = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Config parse error in %s: %s", self.config_file, e)
            return False
        except OSError as e:
            logger.warning("Config load error in %s: %s", self.config_file, e)
            return False

        merged = ConfigSchema.get_defaults()
        if isinstance(loaded_config, dict):
            self._merge_config(merged, loaded_config)
        else:
            merged = loaded_config

        try:
            ConfigSchema.validate(merged)
        except ConfigError as e:
            logger.warning("Config validation failed for %s: %s; using defaults", self.config_file, e)
            self.config = ConfigSchema.get_defaults()
            return False

        self.config = merged
        logger.debug("Config loaded: %s", self.config_file)
        return True

    def save(self, config_file: Optional[str] = None) -> bool:
        """
        Save configuration to file

        Args:
            config_file: Optional path override

        Returns:
            True if saved successfully
        """
        if config_file:
            self.config_file = config_file

        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            logger.error("Config save error: %s", e)
            return False

        logger.debug("Config saved: %s", self.config_file)
        self.modified = False
        return True

    def _merge_config(self, base: Dict, override: Dict) -> None:
        """Deep merge configuration"""
        for key, value in override.items():
            if (key in base and
                    isinstance(base[key], dict) and
                    isinstance(value, dict)):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def resolved(self) -> Dict[str, Any]:
        """Configuration with environment overrides applied"""
        resolved = copy.deepcopy(self.config)
        for section, section_schema in ConfigSchema.SCHEMA["properties"].items():
            for key in section_schema.get("properties", {}):
                env_value = os.environ.get(self.ENV_PREFIX + f"{section}_{key}".upper())
                if env_value is not None:
                    resolved.setdefault(section, {})[key] = self._parse_env_value(env_value)
        return resolved

    def validate(self) -> bool:
        """Validate configuration, including environment overrides, against schema"""
        try:
            ConfigSchema.validate(self.resolved())
        except ConfigError as e:
            logger.warning("Validation error: %s", e)
            return False
        return True

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation

        Args:
            key: Configuration key (e.g., "ping.timeout_ms")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        # Check environment variable first
        env_key = (self.ENV_PREFIX + key.upper().replace(".", "_"))
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._parse_env_value(env_value)

        # Navigate through config
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value"""
        # Boolean
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        # Integer
        try:
            return int(value)
        except ValueError:
            pass

        # Float
        try:
            return float(value)
        except ValueError:
            pass

        # String
        return value

    def set(self, key: str, value: Any) -> bool:
        """
        Set configuration value using dot notation

        Args:
            key: Configuration key
            value: Value to set

        Returns:
            True if successful
        """
        keys = key.split(".")

        # Navigate to parent
        current = self.config
        for k in keys[:-1]:
            if k not in current:
                current[k] = {}
            current = current[k]

        # Set value
        current[keys[-1]] = value
        self.modified = True
        return True

    def export_for_cli(self) -> Dict[str, Any]:
        """Export configuration for CLI usage"""
        return {
            "count": self.get("ping.count"),
            "payload_size": self.get("ping.payload_size"),
            "timeout_ms": self.get("ping.timeout_ms"),
            "strict_reply_matching": self.get("ping.strict_reply_matching"),
            "colors_enabled": self.get("output.colors_enabled"),
            "log_level": str(self.get("output.log_level")).upper(),
        }


def create_default_config(filename: str = DEFAULT_CONFIG_FILE) -> bool:
    """Create default configuration file"""
    config = ConfigManager(filename)
    config.config = ConfigSchema.get_defaults()
    return config.save()
