"""Predictors shared by sender and receiver.

Each predictor maps the last two *reconstructed* values of a channel to a
forecast for the next index. Predictors are stateless, so one instance can be
shared by every channel of a run.
"""

from __future__ import annotations

from typing import Dict, Optional, Type

from .errors import ConfigurationError


class Predictor:
    """Base class; subclasses implement :meth:`predict`."""

    name: str = ''

    def predict(self, last: float, second_last: Optional[float] = None) -> float:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class LinearPredictor(Predictor):
    """Last-value predictor: the next value equals the last reconstructed one."""

    name = 'linear'

    def predict(self, last: float, second_last: Optional[float] = None) -> float:
        return last


class MovingAveragePredictor(Predictor):
    """Mean of the last two reconstructed values."""

    name = 'moving-average'

    def predict(self, last: float, second_last: Optional[float] = None) -> float:
        if second_last is None:
            return last
        return (last + second_last) / 2


class WeightedMovingAveragePredictor(Predictor):
    """Weighted mean favouring the most recent value (0.75 / 0.25)."""

    name = 'weighted-moving-average'
    last_weight = 0.75

    def predict(self, last: float, second_last: Optional[float] = None) -> float:
        if second_last is None:
            return last
        return last * self.last_weight + second_last * (1 - self.last_weight)


PREDICTORS: Dict[str, Type[Predictor]] = {
    LinearPredictor.name: LinearPredictor,
    MovingAveragePredictor.name: MovingAveragePredictor,
    WeightedMovingAveragePredictor.name: WeightedMovingAveragePredictor,
}

ALIASES = {
    'last-value': LinearPredictor.name,
    'linear-predictor': LinearPredictor.name,
}


def normalize_predictor_name(name: str) -> str:
    """Canonical variant name (lowercase, ``-`` separated).

    Raises ConfigurationError for anything that is not a known variant.
    """
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError(f"Predictor variant must be a non-empty string, got {name!r}")
    key = name.strip().lower().replace('_', '-')
    key = ALIASES.get(key, key)
    if key not in PREDICTORS:
        supported = ', '.join(sorted(PREDICTORS))
        raise ConfigurationError(f"Predicting algorithm not supported: {name!r} (supported: {supported})")
    return key


def get_predictor(name: str) -> Predictor:
    """Instantiate the predictor registered under ``name``."""
    return PREDICTORS[normalize_predictor_name(name)]()


__all__ = [
    'Predictor',
    'LinearPredictor',
    'MovingAveragePredictor',
    'WeightedMovingAveragePredictor',
    'PREDICTORS',
    'normalize_predictor_name',
    'get_predictor',
]
