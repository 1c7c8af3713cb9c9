"""
panbin v0.1.0

Configuration schema for panbin.

Defines all available configuration parameters with defaults and validation.

Author: panbin Development Team
License: Dual License (Academic/Commercial)
"""

import copy
from typing import Dict, Any, Optional, List
from pathlib import Path
import yaml


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Binning
    # ========================================================================
    'binning': {
        'num_bins': 0,  # 0 = derive from bin_width
        'bin_width': 0,  # bp; 0 = derive from num_bins (wins if both set)
        'emit_sequences': True,  # Report each bin's graph sequence (json only)
        'workers': 1,  # Threads used to bin paths
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'format': 'tsv',  # 'tsv', 'json'
        'name_delimiter': None,  # e.g. '#' for PanSN path names
        'aggregate_by_delimiter': False,  # Merge paths sharing a name prefix
    },

    # ========================================================================
    # Logging
    # ========================================================================
    'logging': {
        'level': 'WARNING',  # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
        'log_file': None,  # Also log to this file when set
    },
}

TEMPLATES = ['default', 'json', 'tsv', 'pansn']
VALID_FORMATS = ['tsv', 'json']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                user_config = yaml.safe_load(f)

            if user_config:
                # Deep merge user config into defaults
                config = _deep_merge(config, user_config)

    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default', 'json', 'tsv', 'pansn')
    """
    if template not in TEMPLATES:
        raise ValueError(f"Unknown template: {template} (expected one of {', '.join(TEMPLATES)})")

    config = copy.deepcopy(DEFAULT_CONFIG)

    # Customize for specific templates
    if template == 'json':
        config['output']['format'] = 'json'
        config['binning']['bin_width'] = 1000

    elif template == 'tsv':
        config['output']['format'] = 'tsv'
        config['binning']['bin_width'] = 1000
        config['binning']['emit_sequences'] = False

    elif template == 'pansn':
        # PanSN names: sample#haplotype#contig
        config['output']['format'] = 'json'
        config['output']['name_delimiter'] = '#'
        config['binning']['bin_width'] = 1000

    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []
    binning = config.get('binning', {}) or {}
    output = config.get('output', {}) or {}

    num_bins = binning.get('num_bins', 0) or 0
    bin_width = binning.get('bin_width', 0) or 0
    if not _is_count(num_bins):
        errors.append(f"binning.num_bins must be a non-negative integer, got {num_bins!r}")
    if not _is_count(bin_width):
        errors.append(f"binning.bin_width must be a non-negative integer, got {bin_width!r}")
    if num_bins == 0 and bin_width == 0:
        errors.append("a bin width or a bin count is required (binning.bin_width / binning.num_bins)")

    workers = binning.get('workers', 1)
    if not _is_count(workers) or workers < 1:
        errors.append(f"binning.workers must be a positive integer, got {workers!r}")

    if output.get('format') not in VALID_FORMATS:
        errors.append(f"Invalid output format: {output.get('format')}")

    delimiter = output.get('name_delimiter')
    if delimiter is not None and not isinstance(delimiter, str):
        errors.append(f"output.name_delimiter must be a string, got {delimiter!r}")

    level = str((config.get('logging', {}) or {}).get('level', 'WARNING')).upper()
    if level not in VALID_LOG_LEVELS:
        errors.append(f"Invalid logging level: {level}")

    return errors
