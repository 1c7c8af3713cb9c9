#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
panbin v0.1.0

Configuration parser: YAML config loading, merging, and validation.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

import copy
import os
import re
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .schema import DEFAULT_CONFIG, _deep_merge, validate_config


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


# Keys whose values must end up as integers (env substitution yields strings)
_INTEGER_KEYS = ('binning.num_bins', 'binning.bin_width', 'binning.workers')
_BOOLEAN_KEYS = ('binning.emit_sequences', 'output.aggregate_by_delimiter')


class ConfigParser:
    """
    Parse and validate panbin configuration files.

    Features:
    - Load YAML configuration files
    - Merge with default values
    - Environment variable substitution (${VAR} and ${VAR:-default})
    - CLI parameter overrides
    - Schema validation
    - Dotted notation access (e.g., config.get('binning.bin_width'))
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration parser.

        Args:
            config_file: Path to YAML configuration file (optional)
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)

        # Load user configuration if provided
        if self.config_file:
            self._load_user_config()

    def _load_user_config(self):
        """Load and merge user configuration file."""
        if not self.config_file or not self.config_file.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_file}"
            )

        try:
            with open(self.config_file, 'r') as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(
                f"Invalid YAML in config file {self.config_file}: {e}"
            )

        if user_config is None:
            return
        if not isinstance(user_config, dict):
            raise ConfigValidationError(
                f"Config file {self.config_file} must contain a mapping at the top level"
            )

        # User values override defaults
        self._config = _deep_merge(self._config, user_config)
        self._config = self._substitute_env_vars(self._config)
        self._coerce_types()

    def _substitute_env_vars(self, config: Any) -> Any:
        """
        Recursively substitute environment variables in configuration.

        Supports:
        - ${VAR}: Replace with environment variable VAR
        - ${VAR:-default}: Replace with VAR, or 'default' if not set
        """
        if isinstance(config, dict):
            return {k: self._substitute_env_vars(v) for k, v in config.items()}

        elif isinstance(config, list):
            return [self._substitute_env_vars(item) for item in config]

        elif isinstance(config, str):
            pattern = r'\$\{([^}:]+)(?::-(.*?))?\}'

            def replace_var(match):
                var_name = match.group(1)
                default_value = match.group(2)
                return os.environ.get(var_name, default_value or '')

            return re.sub(pattern, replace_var, config)

        else:
            return config

    def _coerce_types(self):
        """Turn substituted strings back into integers/booleans where expected."""
        for key in _INTEGER_KEYS:
            value = self.get(key)
            if isinstance(value, str):
                try:
                    self.set(key, int(value) if value.strip() else 0)
                except ValueError:
                    raise ConfigValidationError(f"{key} must be an integer, got {value!r}")
        for key in _BOOLEAN_KEYS:
            value = self.get(key)
            if isinstance(value, str):
                self.set(key, value.strip().lower() in ('1', 'true', 'yes', 'on'))

    def merge_cli_overrides(self, overrides: Dict[str, Any]):
        """
        Merge command-line overrides into configuration.

        Args:
            overrides: Dictionary of override values. Keys use dotted
                       notation (e.g., 'binning.bin_width'); None values are
                       ignored so unset CLI options keep the file's values.
        """
        for key, value in overrides.items():
            if value is None:
                continue
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Supports dotted notation for nested access.

        Args:
            key: Configuration key (e.g., 'output.format')
            default: Default value if key not found
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """Set a configuration value using dotted notation."""
        keys = key.split('.')
        target = self._config
        for k in keys[:-1]:
            if not isinstance(target.get(k), dict):
                target[k] = {}
            target = target[k]
        target[keys[-1]] = value

    def get_binning_config(self) -> Dict[str, Any]:
        """Get binning configuration section."""
        return self._config.get('binning', {})

    def get_output_config(self) -> Dict[str, Any]:
        """Get output configuration section."""
        return self._config.get('output', {})

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration section."""
        return self._config.get('logging', {})

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return copy.deepcopy(self._config)

    def validate(self) -> bool:
        """
        Validate configuration against the schema.

        Raises:
            ConfigValidationError: If validation fails (all problems listed)
        """
        errors = validate_config(self._config)
        if errors:
            raise ConfigValidationError("; ".join(errors))
        return True

    def to_binning_options(self):
        """Build BinningOptions from the binning and output sections."""
        from ..binning import BinningOptions

        binning = self.get_binning_config()
        output = self.get_output_config()
        return BinningOptions(
            num_bins=int(binning.get('num_bins') or 0),
            bin_width=int(binning.get('bin_width') or 0),
            emit_sequences=bool(binning.get('emit_sequences', True)),
            name_delimiter=output.get('name_delimiter') or None,
            aggregate_by_delimiter=bool(output.get('aggregate_by_delimiter', False)),
            workers=int(binning.get('workers') or 1),
        )

    def __repr__(self) -> str:
        """String representation."""
        return f"ConfigParser(config_file={self.config_file})"

# panbin v0.1.0
# Any usage is subject to this software's license.
