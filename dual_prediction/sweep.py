"""Threshold / Predictor Sweep

Runs the simulator once per (predictor, threshold) pair over the same
measurements and tabulates the data-saving vs fidelity trade-off. Each pair
gets its own simulator instance; nothing is shared between runs.

Outputs (via run_simulation.py --sweep):
  stdout markdown table
  optional PNG of fraction sent vs RMSE (--plot)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from tabulate import tabulate

from .scoring import summarize
from .simulator import DualPredictionSimulator, Measurements, SimulationConfig

logger = logging.getLogger(__name__)


def sweep_thresholds(
    measurements: Measurements,
    config: SimulationConfig,
    thresholds: Iterable[float],
    predictors: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """Grid of runs; every channel gets the swept threshold.

    Args:
        measurements: Same input accepted by DualPredictionSimulator.run
        config: Base configuration (channel set, default predictor)
        thresholds: Threshold values to try (each > 0)
        predictors: Predictor variants to try (default: config.predictor)

    Returns:
        DataFrame with predictor, threshold, transmissions, fraction_sent and
        rmse_<channel> columns, one row per run.
    """
    thresholds = list(thresholds)
    predictor_names = list(predictors) if predictors else [config.predictor]
    records: List[dict] = []
    for predictor in predictor_names:
        for threshold in thresholds:
            run_config = config.with_predictor(predictor).with_threshold(threshold)
            summary = summarize(DualPredictionSimulator(run_config).run(measurements))
            row = summary.to_dict()
            row['threshold'] = float(threshold)
            records.append(row)
    logger.info(f"Sweep finished: {len(records)} runs ({len(predictor_names)} predictors x {len(thresholds)} thresholds)")

    frame = pd.DataFrame(records)
    if frame.empty:
        return frame
    leading = ['predictor', 'threshold', 'transmissions', 'fraction_sent']
    rest = [c for c in frame.columns if c not in leading and c != 'num_measurements']
    return frame[leading + rest]


def sweep_markdown(frame: pd.DataFrame) -> str:
    if frame.empty:
        return "No sweep results."
    return tabulate(frame.values, headers=list(frame.columns), tablefmt='pipe', floatfmt='.4f')


def plot_tradeoff(frame: pd.DataFrame, save_path: Union[str, Path]) -> Path:
    """Plot fraction sent (x) against RMSE (y), one line per predictor and channel."""
    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    rmse_cols = [c for c in frame.columns if c.startswith('rmse_')]

    fig, ax = plt.subplots(figsize=(9, 6))
    for predictor, grp in frame.groupby('predictor'):
        grp = grp.sort_values('fraction_sent')
        for col in rmse_cols:
            label = f"{predictor} / {col[len('rmse_'):]}"
            ax.plot(grp['fraction_sent'], grp[col], 'o-', linewidth=2, markersize=5, label=label)

    ax.set_xlabel('Fraction of Measurements Sent', fontsize=12)
    ax.set_ylabel('RMSE', fontsize=12)
    ax.set_title('Dual Prediction Trade-off', fontsize=14, fontweight='bold')
    ax.set_xlim([0, 1.05])
    ax.grid(True, alpha=0.3)
    if rmse_cols:
        ax.legend(fontsize=9)
    fig.tight_layout()
    fig.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    logger.info(f"Trade-off plot saved to {save_path}")
    return save_path


__all__ = ['sweep_thresholds', 'sweep_markdown', 'plot_tradeoff']
