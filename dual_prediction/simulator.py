"""Dual Prediction Decision Loop

Sender and receiver run the same predictor over the values both of them
hold: the reconstructed sequence, never the true readings. At every index the
sender compares each channel's true reading with the forecast. When any
channel misses by more than its own threshold the whole record is
transmitted; otherwise both sides silently adopt the forecasts.

Index 0 is always transmitted so the two endpoints start synchronized.

Run:
    python run_simulation.py --predictor moving-average --threshold 10
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from .errors import ConfigurationError, InputFormatError
from .predictors import Predictor, get_predictor, normalize_predictor_name

logger = logging.getLogger(__name__)

Measurements = Union[pd.DataFrame, Mapping[str, Sequence[float]]]


def exceeds_threshold(actual: float, predicted: float, threshold: float) -> bool:
    # Strict comparison: a miss of exactly ``threshold`` is suppressed.
    return abs(actual - predicted) > threshold


def _coerce_threshold(channel: str, value: object, allow_zero: bool = False) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"Threshold for channel {channel!r} must be a number, got {value!r}")
    try:
        threshold = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ConfigurationError(f"Threshold for channel {channel!r} must be a number, got {value!r}") from None
    if math.isnan(threshold):
        raise ConfigurationError(f"Threshold for channel {channel!r} is NaN")
    if threshold < 0 or (threshold == 0 and not allow_zero):
        bound = 'non-negative' if allow_zero else 'positive'
        raise ConfigurationError(f"Threshold for channel {channel!r} must be {bound}, got {threshold}")
    return threshold


@dataclass
class _ChannelState:
    """Last two reconstructed values of one channel."""

    last: float
    second_last: Optional[float] = None

    def advance(self, value: float) -> None:
        self.second_last = self.last
        self.last = value


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of one completed pass over the measurements."""

    channels: Tuple[str, ...]
    predictor: str
    thresholds: Mapping[str, float]
    measured: Mapping[str, Tuple[float, ...]]
    reconstructed: Mapping[str, Tuple[float, ...]]
    sent: Tuple[bool, ...]
    transmissions: int

    @property
    def num_measurements(self) -> int:
        return len(self.sent)

    def to_frame(self) -> pd.DataFrame:
        """One row per index: true value, received value per channel and the sent flag."""
        data: Dict[str, list] = {}
        for channel in self.channels:
            data[channel] = list(self.measured[channel])
            data[f'{channel}_received'] = list(self.reconstructed[channel])
        data['sent'] = list(self.sent)
        return pd.DataFrame(data)


def run_decision_loop(
    series: Mapping[str, Sequence[float]],
    thresholds: Mapping[str, float],
    predictor: Union[Predictor, str] = 'linear',
) -> SimulationResult:
    """Run the send/suppress loop over one or more co-located channels.

    Args:
        series: Channel name -> chronological true values; all of equal length N >= 1.
        thresholds: Channel name -> maximum tolerated forecast miss (>= 0).
        predictor: Predictor instance or variant name.

    Returns:
        Frozen SimulationResult with the reconstructed sequences and send count.
    """
    if isinstance(predictor, str):
        predictor = get_predictor(predictor)

    channels = tuple(series)
    if not channels:
        raise ConfigurationError("At least one channel is required")

    limits: Dict[str, float] = {}
    for channel in channels:
        if channel not in thresholds:
            raise ConfigurationError(f"No threshold configured for channel {channel!r}")
        limits[channel] = _coerce_threshold(channel, thresholds[channel], allow_zero=True)

    values: Dict[str, Tuple[float, ...]] = {}
    for channel in channels:
        try:
            values[channel] = tuple(float(v) for v in series[channel])
        except (TypeError, ValueError) as e:
            raise InputFormatError(f"Channel {channel!r} contains a non-numeric value: {e}") from e
        if not all(math.isfinite(v) for v in values[channel]):
            raise InputFormatError(f"Channel {channel!r} contains a non-finite value")

    lengths = {channel: len(v) for channel, v in values.items()}
    if len(set(lengths.values())) != 1:
        raise InputFormatError(f"Channels have different lengths: {lengths}")
    n = lengths[channels[0]]
    if n == 0:
        raise InputFormatError("No measurements to simulate")

    states = {channel: _ChannelState(values[channel][0]) for channel in channels}
    received: Dict[str, List[float]] = {channel: [values[channel][0]] for channel in channels}
    sent: List[bool] = [True]
    transmissions = 1

    for i in range(1, n):
        predicted = {
            channel: predictor.predict(states[channel].last, states[channel].second_last)
            for channel in channels
        }
        triggered = [
            channel for channel in channels
            if exceeds_threshold(values[channel][i], predicted[channel], limits[channel])
        ]
        if triggered:
            transmissions += 1
            logger.debug(f"Index {i}: sent (threshold exceeded on {', '.join(triggered)})")
        for channel in channels:
            value = values[channel][i] if triggered else predicted[channel]
            received[channel].append(value)
            states[channel].advance(value)
        sent.append(bool(triggered))

    return SimulationResult(
        channels=channels,
        predictor=predictor.name,
        thresholds=MappingProxyType(limits),
        measured=MappingProxyType(values),
        reconstructed=MappingProxyType({channel: tuple(v) for channel, v in received.items()}),
        sent=tuple(sent),
        transmissions=transmissions,
    )


def simulate_channel(
    values: Sequence[float],
    threshold: float,
    predictor: Union[Predictor, str] = 'linear',
    channel: str = 'value',
) -> SimulationResult:
    """One-dimensional run: the decision loop over a single channel."""
    return run_decision_loop({channel: values}, {channel: threshold}, predictor)


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable run configuration.

    Thresholds must be strictly positive here; ``float('inf')`` is accepted and
    means "never resync after index 0".
    """

    channels: Tuple[str, ...]
    thresholds: Mapping[str, float]
    predictor: str = 'linear'

    def __post_init__(self):
        if isinstance(self.channels, str):
            channels = (self.channels,)
        elif isinstance(self.channels, (list, tuple)):
            channels = tuple(self.channels)
        else:
            raise ConfigurationError(f"Channels must be a list of names, got {self.channels!r}")
        if not channels:
            raise ConfigurationError("Channel set is empty")
        for channel in channels:
            if not isinstance(channel, str) or not channel.strip():
                raise ConfigurationError(f"Channel names must be non-empty strings, got {channel!r}")
        if len(set(channels)) != len(channels):
            raise ConfigurationError(f"Duplicate channel names in {list(channels)}")

        if not isinstance(self.thresholds, Mapping):
            raise ConfigurationError(f"Thresholds must be a mapping of channel -> value, got {self.thresholds!r}")
        thresholds = {}
        for channel in channels:
            if channel not in self.thresholds:
                raise ConfigurationError(f"No threshold configured for channel {channel!r}")
            thresholds[channel] = _coerce_threshold(channel, self.thresholds[channel])

        object.__setattr__(self, 'channels', channels)
        object.__setattr__(self, 'thresholds', MappingProxyType(thresholds))
        object.__setattr__(self, 'predictor', normalize_predictor_name(self.predictor))

    @classmethod
    def from_settings(cls, settings: Mapping[str, object]) -> 'SimulationConfig':
        """Build from a settings dict (see ``config/load_config.py``).

        Channels missing from ``thresholds`` fall back to ``default_threshold``.
        """
        channels = settings.get('channels') or []
        if isinstance(channels, str):
            channels = [c.strip() for c in channels.split(',') if c.strip()]
        if not isinstance(channels, (list, tuple)):
            raise ConfigurationError(f"'channels' must be a list of names, got {channels!r}")
        for channel in channels:
            if not isinstance(channel, str):
                raise ConfigurationError(f"Channel names must be strings, got {channel!r}")
        raw_thresholds = settings.get('thresholds') or {}
        if not isinstance(raw_thresholds, Mapping):
            raise ConfigurationError(f"'thresholds' must be a mapping, got {raw_thresholds!r}")
        thresholds = dict(raw_thresholds)
        default = settings.get('default_threshold')
        if default is not None:
            for channel in channels:
                thresholds.setdefault(channel, default)
        return cls(
            channels=tuple(channels),
            thresholds=thresholds,
            predictor=settings.get('predictor', 'linear'),  # type: ignore[arg-type]
        )

    def with_threshold(self, threshold: float) -> 'SimulationConfig':
        """Copy with the same threshold on every channel."""
        return replace(self, thresholds={channel: threshold for channel in self.channels})

    def with_predictor(self, predictor: str) -> 'SimulationConfig':
        return replace(self, predictor=predictor)


class DualPredictionSimulator:
    """Runs the decision loop for a fixed configuration.

    The predictor is resolved at construction, so an unsupported variant
    fails before any measurement is touched.
    """

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.predictor = get_predictor(config.predictor)

    def run(self, measurements: Measurements) -> SimulationResult:
        series = self._select_channels(measurements)
        result = run_decision_loop(series, self.config.thresholds, self.predictor)
        logger.info(
            f"Simulated {result.num_measurements} measurements on {', '.join(result.channels)} "
            f"with {result.predictor}: {result.transmissions} sent"
        )
        return result

    def _select_channels(self, measurements: Measurements) -> Dict[str, List[float]]:
        missing = [channel for channel in self.config.channels if channel not in measurements]
        if missing:
            raise InputFormatError(f"Measurements missing channel(s): {', '.join(missing)}")
        return {channel: list(measurements[channel]) for channel in self.config.channels}


__all__ = [
    'Measurements',
    'exceeds_threshold',
    'SimulationResult',
    'run_decision_loop',
    'simulate_channel',
    'SimulationConfig',
    'DualPredictionSimulator',
]
