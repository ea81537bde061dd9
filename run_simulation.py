#!/usr/bin/env python3
"""
Dual Prediction Simulation
Run this script to:
1. Load a measurement CSV (header line + one column per channel)
2. Replay the dual prediction send/suppress scheme over it
3. Print per-channel RMSE and the fraction of measurements sent
4. Optionally log the run, write a markdown summary, or sweep thresholds

Examples:
    python run_simulation.py
    python run_simulation.py --channels temperature --predictor moving-average --threshold 5
    python run_simulation.py --sweep --plot data/tradeoff.png
"""

import argparse
import logging
import sys
from typing import List, Optional

from config.load_config import get_config
from config.versioning import get_commit_hash
from dual_prediction.errors import SimulationError
from dual_prediction.measurements import load_measurements
from dual_prediction.predictors import PREDICTORS
from dual_prediction.report import print_summary, write_summary_markdown
from dual_prediction.results_log import append_run_summary
from dual_prediction.scoring import summarize
from dual_prediction.simulator import DualPredictionSimulator, SimulationConfig
from dual_prediction.sweep import plot_tradeoff, sweep_markdown, sweep_thresholds

logger = logging.getLogger(__name__)


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(',') if item.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate dual prediction data reduction over recorded measurements.")
    parser.add_argument("--config", type=str, default=None, help="Settings YAML (default: config/settings.yaml)")
    parser.add_argument("--measurements", type=str, default=None, help="Measurement CSV (overrides measurements_path)")
    parser.add_argument("--channels", type=str, default=None, help="Comma-separated channel names in column order")
    parser.add_argument("--predictor", type=str, default=None, help=f"One of: {', '.join(PREDICTORS)}")
    parser.add_argument("--threshold", type=float, default=None, help="Threshold applied to every channel")
    parser.add_argument("--log-results", action="store_true", help="Append the run to the results log CSV")
    parser.add_argument("--markdown", type=str, default=None, help="Write a markdown summary to this path")
    parser.add_argument("--sweep", action="store_true", help="Sweep thresholds/predictors instead of a single run")
    parser.add_argument("--sweep-thresholds", type=str, default=None, help="Comma-separated thresholds for --sweep")
    parser.add_argument("--sweep-predictors", type=str, default=None, help="Comma-separated predictors for --sweep (default: all)")
    parser.add_argument("--plot", type=str, default=None, help="Save the sweep trade-off plot to this PNG")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging (every sent index)")
    return parser


def resolve_config(args: argparse.Namespace, settings: dict) -> SimulationConfig:
    """Settings with command line overrides applied."""
    merged = dict(settings)
    if args.channels:
        merged['channels'] = _split_list(args.channels)
    if args.predictor:
        merged['predictor'] = args.predictor
    if args.threshold is not None:
        merged['thresholds'] = {}
        merged['default_threshold'] = args.threshold
    return SimulationConfig.from_settings(merged)


def _sweep_values(args: argparse.Namespace, settings: dict) -> List[float]:
    if args.sweep_thresholds:
        raw = _split_list(args.sweep_thresholds)
    else:
        raw = settings.get('sweep_thresholds') or []
    try:
        return [float(v) for v in raw]
    except (TypeError, ValueError):
        raise SimulationError(f"Invalid sweep thresholds: {raw!r}") from None


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        settings = get_config(args.config)
        config = resolve_config(args, settings)
        source = args.measurements or settings['measurements_path']
        measurements = load_measurements(source, config.channels)

        if args.sweep:
            predictors = _split_list(args.sweep_predictors) if args.sweep_predictors else list(PREDICTORS)
            frame = sweep_thresholds(measurements, config, _sweep_values(args, settings), predictors)
            print(sweep_markdown(frame))
            if args.plot and not frame.empty:
                plot_tradeoff(frame, args.plot)
            return 0

        summary = summarize(DualPredictionSimulator(config).run(measurements))
    except (SimulationError, FileNotFoundError) as e:
        logger.error(f"❌ {e}")
        return 1

    print_summary(summary)
    if args.markdown:
        path = write_summary_markdown(summary, args.markdown, source=str(source))
        logger.info(f"Markdown summary written to {path}")
    if args.log_results:
        log = append_run_summary(
            summary,
            config,
            log_path=settings.get('results_log_path'),
            measurements_source=str(source),
            config_version=settings.get('config_version', 'unknown'),
            commit_hash=get_commit_hash(),
        )
        logger.info(f"Results log updated. Rows now: {len(log)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
