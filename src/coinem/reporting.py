"""Reporting of per-iteration estimates."""

from datetime import datetime
from pathlib import Path
from typing import Callable

import pandas as pd

from coinem.estimator import IterationEstimate


def get_timestamp() -> str:
    """Timestamp for result file names, as YYYYMMDD_HHMMSS."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if missing and return it as a Path."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def format_estimate(estimate: IterationEstimate) -> str:
    """Format one estimate as "iteration, theta0, theta1".

    Args:
        estimate: Estimate to format.

    Returns:
        Line such as "   1, 0.62500000, 0.41000000".
    """
    return f"{estimate.iteration:4d}, {estimate.theta0:.8f}, {estimate.theta1:.8f}"


class ConsoleReporter:
    """Writes one formatted line per estimate."""

    def __init__(self, echo: Callable[[str], None] = print):
        self.echo = echo

    def report(self, estimate: IterationEstimate) -> None:
        self.echo(format_estimate(estimate))


class CollectingReporter:
    """Keeps every reported estimate in memory."""

    def __init__(self):
        self.estimates: list[IterationEstimate] = []

    def report(self, estimate: IterationEstimate) -> None:
        self.estimates.append(estimate)


def estimates_to_frame(estimates: list[IterationEstimate]) -> pd.DataFrame:
    """Convert estimates to a DataFrame with iteration, theta0 and theta1 columns."""
    return pd.DataFrame(
        [
            {"iteration": e.iteration, "theta0": e.theta0, "theta1": e.theta1}
            for e in estimates
        ],
        columns=["iteration", "theta0", "theta1"],
    )


def save_estimates(
    estimates: list[IterationEstimate],
    output_dir: str | Path,
    timestamp: str,
    prefix: str = "estimates",
) -> Path:
    """Save estimates to a CSV file.

    Args:
        estimates: Estimates to save.
        output_dir: Directory for the file (created if missing).
        timestamp: Timestamp used in the file name.
        prefix: File name prefix.

    Returns:
        Path of the written file.
    """
    output_dir = ensure_dir(output_dir)
    path = output_dir / f"{prefix}_{timestamp}.csv"
    estimates_to_frame(estimates).to_csv(path, index=False)
    return path
