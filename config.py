"""
Configuration Management System for TableView

This module provides centralized configuration management for the table
renderer, including rendering defaults, logging configuration and cache options.

Usage:
    from config import CONFIG

    # Access config
    print(CONFIG.get('table.orientation'))

    # Update config (runtime)
    CONFIG.update('table.class_prefix', 'col-')

    # Get with default
    value = CONFIG.get('some.nested.key', default='default_value')
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Optional, Dict
import warnings


VALID_ORIENTATIONS = ['horizontal', 'vertical']
VALID_HEADER_PLACEMENTS = ['none', 'front', 'back', 'both']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class ConfigManager:
    """
    Centralized configuration management with hierarchical key access.

    Supports:
    - Nested dictionary access with dot notation
    - Default values and fallbacks
    - Environment variable overrides
    - Config validation
    - Runtime updates
    """

    def __init__(self, config_dict: Optional[Dict] = None):
        """
        Create a ConfigManager populated with the given configuration or the module defaults and apply environment variable overrides.

        Parameters:
            config_dict (dict | None): Optional initial configuration dictionary to use instead of the built-in defaults. If None, the manager is initialized from the default configuration.
        """
        self._config = config_dict or self._get_default_config()
        self._env_prefix = "TABLEVIEW_"
        self._load_env_overrides()

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """
        Provide the default nested configuration used by the renderer.

        Returns:
            Dict[str, Any]: A dictionary with the default configuration sections
            ('table', 'logging', 'performance') and their default settings.
        """
        return {

            # ========== TABLE RENDERING DEFAULTS ==========
            "table": {
                "orientation": "vertical",  # 'horizontal', 'vertical'
                "show_headers": "none",  # 'none', 'front', 'back', 'both'
                "class_prefix": "data",
                "add_header_classes": False,
                "missing_text": "",  # Text for None / NaN cells
            },

            # ========== LOGGING SETTINGS ==========
            "logging": {
                "enabled": True,
                "level": "INFO",  # DEBUG, INFO, WARNING, ERROR, CRITICAL
                "format": "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
                "date_format": "%Y-%m-%d %H:%M:%S",

                # File Logging
                "file_enabled": False,
                "log_dir": "logs",
                "log_file": "tableview.log",
                "max_log_size": 10485760,  # 10MB in bytes
                "backup_count": 5,

                # Console Logging
                "console_enabled": True,
                "console_level": "WARNING",

                # What to Log
                "log_data_operations": True,
                "log_render_operations": False,  # Can be verbose
                "log_performance": False,  # Timing information
            },

            # ========== PERFORMANCE SETTINGS ==========
            "performance": {
                "enable_render_cache": True,
            },
        }

    @staticmethod
    def _coerce_env_value(current: Any, value: str) -> Any:
        """
        Convert an environment variable string to the type of the value it overrides.

        Parameters:
            current (Any): The existing configuration value; its type drives the conversion.
            value (str): Raw string from the environment.

        Returns:
            Any: `value` converted to bool or int when `current` is one, otherwise the string unchanged.

        Raises:
            ValueError: If the string cannot be converted to the expected type.
        """
        if isinstance(current, bool):
            lowered = value.strip().lower()
            if lowered in ('1', 'true', 'yes', 'on'):
                return True
            if lowered in ('0', 'false', 'no', 'off'):
                return False
            raise ValueError(f"cannot interpret {value!r} as a boolean")
        if isinstance(current, int):
            return int(value)
        return value

    def _load_env_overrides(self) -> None:
        """
        Apply configuration overrides from environment variables that start with the TABLEVIEW_ prefix.

        Environment variables must follow the form TABLEVIEW_<SECTION>_<KEY>=value; the portion after the prefix is lowercased and split on underscores, where the first segment is treated as the section and the remaining segments are joined with underscores to form the key within that section (e.g., TABLEVIEW_TABLE_CLASS_PREFIX -> table.class_prefix). Values are converted to the type of the default they replace. Variables without at least a section and key are ignored. If applying an override fails, a warning is emitted and the override is skipped.
        """
        for key, value in os.environ.items():
            if key.startswith(self._env_prefix):
                # TABLEVIEW_LOGGING_LEVEL -> ['logging', 'level']
                parts = key[len(self._env_prefix):].lower().split('_')

                if len(parts) < 2:
                    continue

                section = parts[0]
                key_name = '_'.join(parts[1:])
                dotted = f"{section}.{key_name}"

                try:
                    coerced = self._coerce_env_value(self.get(dotted), value)
                    self.update(dotted, coerced)
                except (KeyError, ValueError, TypeError) as e:
                    warnings.warn(f"Failed to set env override {key}={value}: {e}", stacklevel=2)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieve a configuration value using a dot-separated key path.

        Parameters:
            key (str): Dot-separated path to a nested configuration value (e.g., "logging.level").
            default: Value to return if the specified path does not exist.

        Returns:
            The configuration value at the given path, or `default` if the path is not found.
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def update(self, key: str, value: Any) -> None:
        """
        Set an existing configuration value identified by a dot-separated path.

        Parameters:
            key (str): Dot-separated path to an existing configuration entry (e.g., "table.class_prefix").
            value (Any): Value to assign to the configuration entry.

        Raises:
            KeyError: If any intermediate path segment or the final key does not exist in the configuration.
        """
        keys = key.split('.')
        config = self._config

        # Navigate to parent key
        for k in keys[:-1]:
            if not isinstance(config, dict) or k not in config:
                raise KeyError(f"Config path '{'.'.join(keys[:-1])}' does not exist")
            config = config[k]

        final_key = keys[-1]
        if not isinstance(config, dict) or final_key not in config:
            raise KeyError(f"Config key '{key}' does not exist")

        config[final_key] = value

    def set_nested(self, key: str, value: Any, create: bool = False) -> None:
        """
        Set a value in the configuration using a dot-separated path, optionally creating missing intermediate dictionaries.

        Parameters:
            key (str): Dot-separated path to the configuration key (e.g., "section.sub.key").
            value (Any): Value to assign to the final key.
            create (bool): If True, create missing intermediate dictionaries along the path; if False and a path segment is missing, a KeyError is raised.
        """
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                if create:
                    config[k] = {}
                else:
                    raise KeyError(f"Config path '{k}' does not exist")
            config = config[k]

        config[keys[-1]] = value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Return a deep copy of a top-level configuration section.

        Parameters:
            section (str): Top-level section name (e.g., "table").

        Returns:
            dict or Any: A deep copy of the section dictionary if the section is a dict; otherwise the section value as-is.
        """
        result = self.get(section, {})
        return copy.deepcopy(result) if isinstance(result, dict) else result

    def to_dict(self) -> Dict[str, Any]:
        """Get a deep copy of the entire configuration dictionary."""
        return copy.deepcopy(self._config)

    def to_json(self, filepath: Optional[str] = None, pretty: bool = True) -> str:
        """
        Serialize the current configuration to a JSON string.

        Parameters:
            filepath (str | None): Optional filesystem path to write the JSON output; when provided, the file is overwritten.
            pretty (bool): If True, format the JSON with indentation for readability; if False, produce compact JSON.

        Returns:
            str: The configuration serialized as a JSON-formatted string.
        """
        json_str = json.dumps(self._config, indent=2 if pretty else None)

        if filepath:
            Path(filepath).write_text(json_str)

        return json_str

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate key configuration constraints and collect any violations.

        Performs a set of sanity checks on configuration values and records any problems found:
        - Ensures `table.orientation` is one of `VALID_ORIENTATIONS`.
        - Ensures `table.show_headers` is one of `VALID_HEADER_PLACEMENTS`.
        - Ensures `table.class_prefix` and `table.missing_text` are strings.
        - Ensures `logging.level` is one of `VALID_LOG_LEVELS`.

        Returns:
            tuple: (is_valid, errors) where `is_valid` is `True` if no validation errors were found, `False` otherwise; `errors` is a list of human-readable error messages.
        """
        errors = []

        orientation = self.get('table.orientation')
        if str(orientation).lower() not in VALID_ORIENTATIONS:
            errors.append(f"table.orientation must be one of {VALID_ORIENTATIONS}")

        show_headers = self.get('table.show_headers')
        if str(show_headers).lower() not in VALID_HEADER_PLACEMENTS:
            errors.append(f"table.show_headers must be one of {VALID_HEADER_PLACEMENTS}")

        for key in ('table.class_prefix', 'table.missing_text'):
            if not isinstance(self.get(key), str):
                errors.append(f"{key} must be a string")

        if self.get('logging.level') not in VALID_LOG_LEVELS:
            errors.append(f"logging.level must be one of {VALID_LOG_LEVELS}")

        return len(errors) == 0, errors

    def __repr__(self) -> str:
        return f"ConfigManager({len(self._config)} sections)"


# Global config instance
CONFIG = ConfigManager()
