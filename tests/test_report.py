from dual_prediction.report import format_summary, legacy_lines, write_summary_markdown
from dual_prediction.scoring import summarize
from dual_prediction.simulator import run_decision_loop


def _summary():
    result = run_decision_loop(
        {'temperature': [10, 12, 35, 13], 'pressure': [1000, 1000, 1000, 1000]},
        {'temperature': 10, 'pressure': 10},
    )
    return summarize(result)


def test_legacy_lines():
    lines = legacy_lines(_summary())
    assert lines == [
        'temperaturesRootMeanSquareError = 1.0',
        'pressuresRootMeanSquareError = 0.0',
        'fractionOfMeasurementsSent = 0.75',
    ]


def test_format_summary_contains_every_channel():
    text = format_summary(_summary())
    assert 'Predictor:            linear' in text
    assert 'Fraction sent:        75.0%' in text
    assert 'temperature' in text and 'pressure' in text
    assert 'fractionOfMeasurementsSent = 0.75' in text


def test_write_summary_markdown(tmp_path):
    path = write_summary_markdown(_summary(), tmp_path / 'out' / 'RUN.md', source='data/measurements.csv')
    text = path.read_text()
    assert text.startswith('# Dual Prediction Run')
    assert '`data/measurements.csv`' in text
    assert '| temperature |' in text
    assert '1.0000' in text
