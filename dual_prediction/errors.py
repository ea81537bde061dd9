"""Exceptions raised by the simulator.

Both error kinds are fatal: they are raised before any simulation output
exists and there is nothing to retry.
"""


class SimulationError(Exception):
    """Base class for simulator failures."""


class ConfigurationError(SimulationError):
    """Unsupported predictor, bad threshold or empty channel set."""


class InputFormatError(SimulationError):
    """Malformed measurement input (bad field, wrong field count, no data)."""
