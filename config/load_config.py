"""Configuration loader for the dual prediction simulator.

Reads YAML settings (config/settings.yaml by default) and merges them over
DEFAULTS. A settings file that cannot be parsed is a ConfigurationError; a
missing file means "defaults only".
"""
from __future__ import annotations
import hashlib
from pathlib import Path
from typing import Any, Dict

import yaml

from dual_prediction.errors import ConfigurationError

DEFAULTS: Dict[str, Any] = {
    'measurements_path': 'data/measurements.csv',
    'predictor': 'linear',
    'channels': ['temperature'],
    'thresholds': {},
    'default_threshold': 10.0,
    'results_log_path': 'data/simulation_log.csv',
    'sweep_thresholds': [1.0, 2.0, 5.0, 10.0, 20.0, 50.0],
}

CONFIG_PATH = Path(__file__).parent / 'settings.yaml'

_cache: Dict[Path, Dict[str, Any]] = {}


def _compute_version(path: Path) -> str:
    return hashlib.sha1(path.read_bytes()).hexdigest()[:12]


def load_settings(path: Path) -> Dict[str, Any]:
    try:
        with open(path, 'r') as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")
    return loaded


def get_config(path: str | Path | None = None, refresh: bool = False) -> Dict[str, Any]:
    cfg_path = Path(path) if path is not None else CONFIG_PATH
    if cfg_path in _cache and not refresh:
        return _cache[cfg_path]
    cfg = DEFAULTS.copy()
    if cfg_path.exists():
        cfg.update(load_settings(cfg_path))
        cfg['config_version'] = _compute_version(cfg_path)
    elif path is not None:
        raise ConfigurationError(f"Settings file not found: {cfg_path}")
    else:
        cfg['config_version'] = 'defaults'
    _cache[cfg_path] = cfg
    return cfg


def get_config_version(path: str | Path | None = None) -> str:
    return get_config(path).get('config_version', 'unknown')


__all__ = ['DEFAULTS', 'CONFIG_PATH', 'load_settings', 'get_config', 'get_config_version']
