import pytest
import yaml

from config.load_config import DEFAULTS, get_config, get_config_version
from dual_prediction.errors import ConfigurationError
from dual_prediction.simulator import SimulationConfig


def test_default_settings_file_builds_valid_config():
    cfg = get_config()
    assert isinstance(cfg, dict)
    assert cfg['config_version']
    sim_cfg = SimulationConfig.from_settings(cfg)
    assert len(sim_cfg.channels) >= 1


def test_settings_merge_over_defaults(tmp_path):
    path = tmp_path / 'settings.yaml'
    path.write_text(yaml.safe_dump({'predictor': 'moving-average', 'channels': ['pressure']}))
    cfg = get_config(path)
    assert cfg['predictor'] == 'moving-average'
    assert cfg['channels'] == ['pressure']
    assert cfg['default_threshold'] == DEFAULTS['default_threshold']
    assert len(cfg['config_version']) == 12
    assert get_config_version(path) == cfg['config_version']


def test_config_is_cached_until_refresh(tmp_path):
    path = tmp_path / 'settings.yaml'
    path.write_text("predictor: linear\n")
    first = get_config(path)
    assert get_config(path) is first
    path.write_text("predictor: weighted-moving-average\n")
    refreshed = get_config(path, refresh=True)
    assert refreshed['predictor'] == 'weighted-moving-average'
    assert refreshed['config_version'] != first['config_version']


def test_empty_settings_file_means_defaults(tmp_path):
    path = tmp_path / 'settings.yaml'
    path.write_text("")
    cfg = get_config(path)
    assert cfg['predictor'] == DEFAULTS['predictor']


def test_missing_explicit_settings_file(tmp_path):
    with pytest.raises(ConfigurationError, match='not found'):
        get_config(tmp_path / 'missing.yaml')


@pytest.mark.parametrize('text', ["channels: [temperature\n", "- just\n- a list\n"])
def test_malformed_settings_rejected(tmp_path, text):
    path = tmp_path / 'settings.yaml'
    path.write_text(text)
    with pytest.raises(ConfigurationError):
        get_config(path)


def test_bad_threshold_in_settings_is_configuration_error(tmp_path):
    path = tmp_path / 'settings.yaml'
    path.write_text(yaml.safe_dump({'channels': ['t'], 'thresholds': {'t': -1}}))
    with pytest.raises(ConfigurationError):
        SimulationConfig.from_settings(get_config(path))


@pytest.mark.parametrize('channels', [5, 2.5, True, {'t': 1}, [1, 2], [['t']]])
def test_malformed_channels_setting_rejected(tmp_path, channels):
    path = tmp_path / 'settings.yaml'
    path.write_text(yaml.safe_dump({'channels': channels, 'default_threshold': 1}))
    with pytest.raises(ConfigurationError):
        SimulationConfig.from_settings(get_config(path))


def test_scalar_channels_rejected_without_settings_file():
    with pytest.raises(ConfigurationError, match='channels'):
        SimulationConfig.from_settings({'channels': 5, 'default_threshold': 1})
