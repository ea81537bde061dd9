"""Measurement loading.

Reads a CSV of co-located readings (one column per channel, in configured
channel order) into a DataFrame keyed by channel name. The first line of the
file is a header and is always skipped; channels bind to columns by position.
Any malformed record aborts the load.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Sequence, Union

import numpy as np
import pandas as pd

from .errors import InputFormatError

logger = logging.getLogger(__name__)

# 1 header line precedes the data; pandas rows are 0-based.
HEADER_LINES = 1


def _file_line(row_index: int) -> int:
    return row_index + HEADER_LINES + 1


def load_measurements(source: Union[str, Path, IO[str]], channels: Sequence[str]) -> pd.DataFrame:
    """Load per-channel sequences from ``source``.

    Args:
        source: Path or open text handle of the CSV.
        channels: Channel names, bound to the first ``len(channels)`` columns.

    Returns:
        DataFrame with one float column per channel, N >= 1 rows.

    Raises:
        FileNotFoundError: ``source`` path does not exist.
        InputFormatError: wrong field count, non-numeric value, undecodable
            text, no data rows, or a path that is not a regular file.
    """
    channels = list(channels)
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Missing measurements file: {path}")
        if not path.is_file():
            raise InputFormatError(f"{path}: not a regular file")
        label = str(path)
    else:
        label = getattr(source, 'name', '<stream>')

    try:
        raw = pd.read_csv(
            source,
            header=None,
            skiprows=HEADER_LINES,
            dtype=str,
            skipinitialspace=True,
        )
    except pd.errors.EmptyDataError:
        raise InputFormatError(f"{label}: no measurements after header") from None
    except pd.errors.ParserError as e:
        raise InputFormatError(f"{label}: wrong field count ({e})") from e
    except UnicodeDecodeError as e:
        raise InputFormatError(f"{label}: not valid UTF-8 text ({e.reason} at byte {e.start})") from e

    if raw.empty:
        raise InputFormatError(f"{label}: no measurements after header")
    if raw.shape[1] < len(channels):
        raise InputFormatError(
            f"{label}: expected {len(channels)} field(s) per record "
            f"({', '.join(channels)}), found {raw.shape[1]}"
        )

    # Unbound trailing columns may be blank.
    missing = raw.iloc[:, :len(channels)].isna()
    if missing.any().any():
        row, col = np.argwhere(missing.to_numpy())[0]
        raise InputFormatError(f"{label}: line {_file_line(row)} is missing field {col + 1}")

    frame = pd.DataFrame(index=raw.index)
    for col, channel in enumerate(channels):
        numeric = pd.to_numeric(raw[col].str.strip(), errors='coerce')
        bad = numeric.isna() | ~np.isfinite(numeric)
        if bad.any():
            row = int(np.flatnonzero(bad.to_numpy())[0])
            raise InputFormatError(
                f"{label}: line {_file_line(row)} has non-numeric {channel} value {raw.iat[row, col]!r}"
            )
        frame[channel] = numeric.astype(float)

    frame = frame.reset_index(drop=True)
    logger.info(f"Loaded {len(frame)} measurements ({', '.join(channels)}) from {label}")
    return frame


__all__ = ['load_measurements']
