"""Human-readable rendering of a run summary."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from tabulate import tabulate

from .scoring import RunSummary


def legacy_lines(summary: RunSummary) -> List[str]:
    """``name = value`` lines in the format the original command line printed."""
    lines = [f"{channel}sRootMeanSquareError = {value}" for channel, value in summary.channel_rmse.items()]
    lines.append(f"fractionOfMeasurementsSent = {summary.fraction_sent}")
    return lines


def format_summary(summary: RunSummary, title: str = "Dual Prediction Run Summary") -> str:
    lines = ["=" * 60, title, "=" * 60, ""]
    lines.append(f"  Predictor:            {summary.predictor}")
    lines.append(f"  Measurements:         {summary.num_measurements:,}")
    lines.append(f"  Transmissions:        {summary.transmissions:,}")
    lines.append(f"  Fraction sent:        {summary.fraction_sent:.1%}")
    lines.append("")
    lines.append(f"  {'Channel':20} {'RMSE':>12}")
    lines.append("  " + "-" * 33)
    for channel, value in summary.channel_rmse.items():
        lines.append(f"  {channel:20} {value:12.4f}")
    lines.append("")
    lines.extend(legacy_lines(summary))
    lines.append("=" * 60)
    return "\n".join(lines)


def print_summary(summary: RunSummary, title: str = "Dual Prediction Run Summary") -> None:
    print(format_summary(summary, title))


def summary_markdown(summary: RunSummary, source: Optional[str] = None) -> str:
    lines = ["# Dual Prediction Run", ""]
    if source:
        lines.append(f"Measurements: `{source}`")
    lines.append(f"Predictor: {summary.predictor}")
    lines.append(
        f"Fraction sent: {summary.fraction_sent:.4f} "
        f"({summary.transmissions} of {summary.num_measurements})"
    )
    lines.append("")
    rows = [[channel, value] for channel, value in summary.channel_rmse.items()]
    lines.append(tabulate(rows, headers=['channel', 'rmse'], tablefmt='pipe', floatfmt='.4f'))
    lines.append("")
    return "\n".join(lines)


def write_summary_markdown(summary: RunSummary, path: Union[str, Path], source: Optional[str] = None) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(summary_markdown(summary, source))
    return path


__all__ = ['legacy_lines', 'format_summary', 'print_summary', 'summary_markdown', 'write_summary_markdown']
