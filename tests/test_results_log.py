import json
from datetime import datetime

import pandas as pd

from dual_prediction.results_log import BASE_OUTPUT_COLUMNS, append_run_summary, prepare_log_row
from dual_prediction.scoring import summarize
from dual_prediction.simulator import DualPredictionSimulator, SimulationConfig


def _summary_and_config(predictor='linear'):
    cfg = SimulationConfig(channels=('temperature',), thresholds={'temperature': 10}, predictor=predictor)
    result = DualPredictionSimulator(cfg).run({'temperature': [10, 12, 35, 13]})
    return summarize(result), cfg


def test_prepare_log_row_columns():
    summary, cfg = _summary_and_config()
    row = prepare_log_row(summary, cfg, measurements_source='m.csv', config_version='abc123',
                          commit_hash='deadbee', timestamp=datetime(2025, 1, 2, 3, 4, 5, 999))
    assert list(row.columns[:len(BASE_OUTPUT_COLUMNS)]) == list(BASE_OUTPUT_COLUMNS)
    rec = row.iloc[0]
    assert rec['run_timestamp'] == '2025-01-02T03:04:05'
    assert rec['fraction_sent'] == 0.75
    assert rec['rmse_temperature'] == 1.0
    assert json.loads(rec['thresholds']) == {'temperature': 10.0}


def test_append_run_summary_accumulates(tmp_path):
    log_path = tmp_path / 'logs' / 'simulation_log.csv'
    summary, cfg = _summary_and_config()
    append_run_summary(summary, cfg, log_path=log_path, config_version='v1', commit_hash='c1')
    summary2, cfg2 = _summary_and_config('moving-average')
    combined = append_run_summary(summary2, cfg2, log_path=log_path, config_version='v1', commit_hash='c1')

    assert len(combined) == 2
    on_disk = pd.read_csv(log_path)
    assert on_disk['predictor'].tolist() == ['linear', 'moving-average']
    assert on_disk['commit_hash'].tolist() == ['c1', 'c1']
