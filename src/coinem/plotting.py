"""Plotting functions for estimator runs."""

from pathlib import Path

import matplotlib.pyplot as plt

from coinem.estimator import IterationEstimate


def _draw_trajectory(ax, estimates: list[IterationEstimate], ground_truth: tuple[float, float]) -> None:
    iterations = [e.iteration for e in estimates]

    ax.plot(iterations, [e.theta0 for e in estimates], marker="o", linewidth=2, label="theta0")
    ax.plot(iterations, [e.theta1 for e in estimates], marker="s", linewidth=2, label="theta1")

    for i, truth in enumerate(ground_truth):
        ax.axhline(truth, color="gray", linestyle="--", alpha=0.7, label="Ground truth" if i == 0 else None)

    ax.set_xlabel("Iteration", fontsize=12)
    ax.set_ylabel("Head probability", fontsize=12)
    ax.set_ylim(0, 1.05)
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")


def plot_trajectory(
    estimates: list[IterationEstimate],
    ground_truth: tuple[float, float],
    output_path: str | Path,
    title: str = "EM Estimates per Iteration",
) -> None:
    """Plot theta0 and theta1 against iteration.

    Args:
        estimates: Estimates in iteration order.
        ground_truth: True head probabilities, drawn as reference lines.
        output_path: Path to save the plot.
        title: Plot title.
    """
    fig, ax = plt.subplots(figsize=(10, 6))

    _draw_trajectory(ax, estimates, ground_truth)
    ax.set_title(title, fontsize=14)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close()


def plot_mode_comparison(
    runs: dict[str, list[IterationEstimate]],
    ground_truth: tuple[float, float],
    output_path: str | Path,
    title: str = "Feedback Modes: em vs resample",
) -> None:
    """Plot the trajectories of several modes side by side.

    Args:
        runs: Mapping from mode name to its estimates.
        ground_truth: True head probabilities.
        output_path: Path to save the plot.
        title: Figure title.
    """
    fig, axes = plt.subplots(1, len(runs), figsize=(7 * len(runs), 6), sharey=True, squeeze=False)

    for ax, (mode, estimates) in zip(axes[0], runs.items()):
        _draw_trajectory(ax, estimates, ground_truth)
        ax.set_title(f"mode = {mode}", fontsize=12)

    fig.suptitle(title, fontsize=14)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close()
