"""End-to-end tests for run_simulation.main."""

import pandas as pd
import pytest
import yaml

from run_simulation import main


@pytest.fixture
def workspace(tmp_path):
    measurements = tmp_path / 'measurements.csv'
    measurements.write_text("temperature,pressure\n10,1000\n12,1001\n35,1002\n13,1001\n")
    settings = tmp_path / 'settings.yaml'
    settings.write_text(yaml.safe_dump({
        'measurements_path': str(measurements),
        'channels': ['temperature'],
        'predictor': 'linear',
        'default_threshold': 10,
        'results_log_path': str(tmp_path / 'simulation_log.csv'),
        'sweep_thresholds': [1, 10, 100],
    }))
    return tmp_path, settings


def test_single_run_prints_summary(workspace, capsys):
    tmp_path, settings = workspace
    assert main(['--config', str(settings)]) == 0
    out = capsys.readouterr().out
    assert 'temperaturesRootMeanSquareError = 1.0' in out
    assert 'fractionOfMeasurementsSent = 0.75' in out


def test_two_channel_run_with_overrides(workspace, capsys):
    tmp_path, settings = workspace
    rc = main(['--config', str(settings), '--channels', 'temperature,pressure',
               '--predictor', 'moving-average', '--threshold', '5'])
    assert rc == 0
    out = capsys.readouterr().out
    assert 'pressuresRootMeanSquareError' in out
    assert 'moving-average' in out


def test_log_and_markdown_outputs(workspace):
    tmp_path, settings = workspace
    md = tmp_path / 'RUN.md'
    assert main(['--config', str(settings), '--log-results', '--markdown', str(md)]) == 0
    assert main(['--config', str(settings), '--log-results']) == 0
    log = pd.read_csv(tmp_path / 'simulation_log.csv')
    assert len(log) == 2
    assert md.exists()


def test_unsupported_predictor_aborts_without_summary(workspace, capsys):
    _, settings = workspace
    assert main(['--config', str(settings), '--predictor', 'kalman']) == 1
    assert 'fractionOfMeasurementsSent' not in capsys.readouterr().out


def test_non_positive_threshold_aborts(workspace):
    _, settings = workspace
    assert main(['--config', str(settings), '--threshold', '0']) == 1


def test_malformed_measurements_abort(workspace, capsys):
    tmp_path, settings = workspace
    bad = tmp_path / 'bad.csv'
    bad.write_text("temperature\n10\nwarm\n")
    assert main(['--config', str(settings), '--measurements', str(bad)]) == 1
    assert 'fractionOfMeasurementsSent' not in capsys.readouterr().out


def test_missing_measurements_file_aborts(workspace):
    tmp_path, settings = workspace
    assert main(['--config', str(settings), '--measurements', str(tmp_path / 'none.csv')]) == 1


def test_sweep_prints_table_and_plot(workspace, capsys):
    tmp_path, settings = workspace
    plot = tmp_path / 'tradeoff.png'
    rc = main(['--config', str(settings), '--sweep', '--sweep-predictors', 'linear,moving-average',
               '--plot', str(plot)])
    assert rc == 0
    out = capsys.readouterr().out
    assert '| predictor' in out
    assert out.count('moving-average') == 3
    assert plot.exists()


def test_sweep_with_explicit_thresholds(workspace, capsys):
    _, settings = workspace
    assert main(['--config', str(settings), '--sweep', '--sweep-thresholds', '2,4',
                 '--sweep-predictors', 'linear']) == 0
    out = capsys.readouterr().out
    assert out.count('| linear') == 2


def test_undecodable_measurements_abort(workspace, capsys):
    tmp_path, settings = workspace
    bad = tmp_path / 'binary.csv'
    bad.write_bytes(b"temperature\n10\n\xff\xfe12\n")
    assert main(['--config', str(settings), '--measurements', str(bad)]) == 1
    assert 'fractionOfMeasurementsSent' not in capsys.readouterr().out


def test_directory_as_measurements_aborts(workspace):
    tmp_path, settings = workspace
    assert main(['--config', str(settings), '--measurements', str(tmp_path)]) == 1


def test_scalar_channels_setting_aborts(workspace):
    tmp_path, settings = workspace
    cfg = yaml.safe_load(settings.read_text())
    cfg['channels'] = 5
    scalar = tmp_path / 'scalar_channels.yaml'
    scalar.write_text(yaml.safe_dump(cfg))
    assert main(['--config', str(scalar)]) == 1
