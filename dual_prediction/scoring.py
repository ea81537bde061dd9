#!/usr/bin/env python3
"""
Scoring for Dual Prediction Runs

Two numbers describe a run:
- RMSE per channel: how far the receiver's reconstruction drifts from the
  true readings (lower is better, 0 when everything was sent)
- Fraction sent: share of indices whose record was actually transmitted
  (lower means more data saved; never 0 because index 0 is always sent)

RMSE includes index 0, which is always exact.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Sequence

import numpy as np
from sklearn.metrics import mean_squared_error

from .simulator import SimulationResult


def rmse(measured: Sequence[float], reconstructed: Sequence[float]) -> float:
    """
    Root-mean-square error between true and reconstructed values.

    Uses the population mean (divisor N), not the sample variance.

    Args:
        measured: True values
        reconstructed: Values the receiver holds for the same indices

    Returns:
        RMSE (0-inf, lower is better)

    Example:
        >>> rmse([10, 12, 35, 13], [10, 10, 35, 13])
        1.0
    """
    measured = np.asarray(measured, dtype=float)
    reconstructed = np.asarray(reconstructed, dtype=float)

    if len(measured) != len(reconstructed):
        raise ValueError("measured and reconstructed must have same length")
    if len(measured) == 0:
        raise ValueError("rmse needs at least one value")

    return float(np.sqrt(mean_squared_error(measured, reconstructed)))


def efficiency(transmissions: int, num_measurements: int) -> float:
    """
    Fraction of measurements actually transmitted, in (0, 1].

    Args:
        transmissions: Number of indices sent (index 0 included)
        num_measurements: Sequence length N

    Returns:
        transmissions / num_measurements
    """
    if num_measurements < 1:
        raise ValueError("num_measurements must be at least 1")
    if not 1 <= transmissions <= num_measurements:
        raise ValueError(
            f"transmissions must be between 1 and {num_measurements}, got {transmissions}"
        )
    return transmissions / num_measurements


@dataclass(frozen=True)
class RunSummary:
    """Per-channel RMSE plus the shared fraction of measurements sent."""

    predictor: str
    channel_rmse: Mapping[str, float]
    fraction_sent: float
    transmissions: int
    num_measurements: int

    @property
    def channels(self):
        return tuple(self.channel_rmse)

    def to_dict(self) -> Dict[str, object]:
        row: Dict[str, object] = {
            'predictor': self.predictor,
            'num_measurements': self.num_measurements,
            'transmissions': self.transmissions,
            'fraction_sent': self.fraction_sent,
        }
        for channel, value in self.channel_rmse.items():
            row[f'rmse_{channel}'] = value
        return row


def summarize(result: SimulationResult) -> RunSummary:
    """Score a completed simulation run."""
    channel_rmse = {
        channel: rmse(result.measured[channel], result.reconstructed[channel])
        for channel in result.channels
    }
    return RunSummary(
        predictor=result.predictor,
        channel_rmse=MappingProxyType(channel_rmse),
        fraction_sent=efficiency(result.transmissions, result.num_measurements),
        transmissions=result.transmissions,
        num_measurements=result.num_measurements,
    )


__all__ = ['rmse', 'efficiency', 'RunSummary', 'summarize']
