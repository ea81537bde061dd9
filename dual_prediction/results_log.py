"""Run history log.

Appends one row per simulation run to a CSV so results from different
predictors, thresholds and measurement files can be compared later. Rows carry
the settings version and commit hash for lineage.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from .scoring import RunSummary
from .simulator import SimulationConfig

DEFAULT_LOG_PATH = Path(__file__).resolve().parent.parent / "data" / "simulation_log.csv"

BASE_OUTPUT_COLUMNS: Sequence[str] = (
    "run_timestamp",
    "predictor",
    "channels",
    "thresholds",
    "measurements_source",
    "num_measurements",
    "transmissions",
    "fraction_sent",
    "config_version",
    "commit_hash",
)


def prepare_log_row(
    summary: RunSummary,
    config: SimulationConfig,
    *,
    measurements_source: str = "",
    config_version: str = "unknown",
    commit_hash: str = "unknown",
    timestamp: datetime | None = None,
) -> pd.DataFrame:
    """Single-row frame: base columns first, then ``rmse_<channel>`` columns."""

    when = (timestamp or datetime.now()).replace(microsecond=0).isoformat()
    row = summary.to_dict()
    row.update({
        "run_timestamp": when,
        "channels": ",".join(config.channels),
        "thresholds": json.dumps(dict(config.thresholds), sort_keys=True),
        "measurements_source": measurements_source,
        "config_version": config_version,
        "commit_hash": commit_hash,
    })
    extra_cols = [c for c in row if c not in BASE_OUTPUT_COLUMNS]
    return pd.DataFrame([row], columns=[*BASE_OUTPUT_COLUMNS, *extra_cols])


def append_run_summary(
    summary: RunSummary,
    config: SimulationConfig,
    *,
    log_path: Optional[Path] = None,
    measurements_source: str = "",
    config_version: str = "unknown",
    commit_hash: str = "unknown",
    timestamp: datetime | None = None,
) -> pd.DataFrame:
    """Append a run to the log and return the full log."""

    path = Path(log_path) if log_path else DEFAULT_LOG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    new_row = prepare_log_row(
        summary,
        config,
        measurements_source=measurements_source,
        config_version=config_version,
        commit_hash=commit_hash,
        timestamp=timestamp,
    )

    if path.exists():
        existing = pd.read_csv(path)
        combined = pd.concat([existing, new_row], ignore_index=True, sort=False)
    else:
        combined = new_row

    combined.to_csv(path, index=False)
    return combined


__all__ = ["append_run_summary", "prepare_log_row", "DEFAULT_LOG_PATH"]
