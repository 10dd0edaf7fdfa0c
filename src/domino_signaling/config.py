"""
Configuration for domino-signaling views.

Defaults live in configs/default.yaml; a user YAML file is merged over them
section by section.
"""

import copy
import yaml
from pathlib import Path
from typing import Dict, Optional, Union

from .errors import ConfigError


DEFAULT_CONFIG_PATH = Path(__file__).parent / 'configs' / 'default.yaml'


def _merge(base: Dict, override: Dict) -> Dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path) -> Dict:
    with open(path, 'r') as f:
        config = yaml.safe_load(f)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Config file must hold a mapping: {path}")
    return config


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict:
    """
    Load view parameters.

    Args:
        config_path: Optional user YAML file merged over the defaults

    Returns:
        Dict with 'heatmap', 'feature_heatmap', 'correlation_heatmap',
        'cluster_network' and 'gene_network' sections
    """
    config = _read_yaml(DEFAULT_CONFIG_PATH)

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        user = _read_yaml(config_path)
        unknown = sorted(set(user) - set(config))
        if unknown:
            raise ConfigError(f"Unknown config sections: {', '.join(unknown)}")
        config = _merge(config, user)

    return config
