"""Dual prediction data-reduction simulator."""

from .errors import SimulationError, ConfigurationError, InputFormatError
from .predictors import Predictor, get_predictor, PREDICTORS
from .simulator import (
    SimulationConfig,
    SimulationResult,
    DualPredictionSimulator,
    run_decision_loop,
    simulate_channel,
)
from .scoring import RunSummary, rmse, efficiency, summarize

__all__ = [
    'SimulationError',
    'ConfigurationError',
    'InputFormatError',
    'Predictor',
    'get_predictor',
    'PREDICTORS',
    'SimulationConfig',
    'SimulationResult',
    'DualPredictionSimulator',
    'run_decision_loop',
    'simulate_channel',
    'RunSummary',
    'rmse',
    'efficiency',
    'summarize',
]
