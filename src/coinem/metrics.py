"""Metrics computation for estimator runs."""

import numpy as np
from scipy import stats

from coinem.estimator import IterationEstimate


def compute_mean(values: list[float]) -> float:
    """Compute mean of values.

    Args:
        values: List of estimates.

    Returns:
        Mean value.
    """
    if not values:
        return 0.0
    return float(np.mean(values))


def compute_std(values: list[float]) -> float:
    """Compute sample standard deviation of values.

    Args:
        values: List of estimates.

    Returns:
        Standard deviation of the values.
    """
    if len(values) < 2:
        return 0.0
    return float(np.std(values, ddof=1))


def compute_stderr(values: list[float]) -> float:
    """Compute standard error of the mean.

    Args:
        values: List of estimates.

    Returns:
        Standard error of the mean.
    """
    if len(values) < 2:
        return 0.0
    return float(np.std(values, ddof=1) / np.sqrt(len(values)))


def compute_confidence_interval(
    values: list[float],
    confidence: float = 0.95,
) -> tuple[float, float]:
    """Student-t confidence interval for the mean of values.

    Args:
        values: List of estimates.
        confidence: Confidence level.

    Returns:
        Tuple of (lower, upper). Collapses to the mean for fewer than 2 values.
    """
    mean = compute_mean(values)
    if len(values) < 2:
        return mean, mean
    half_width = stats.t.ppf((1 + confidence) / 2.0, len(values) - 1) * compute_stderr(values)
    return mean - float(half_width), mean + float(half_width)


def distance_to_truth(
    theta0: float,
    theta1: float,
    ground_truth: tuple[float, float],
) -> float:
    """Largest absolute error of an estimate pair, up to relabeling of the coins.

    EM cannot tell which coin is "first", so both assignments are tried and the
    better one is kept.

    Args:
        theta0: Estimate for coin 0.
        theta1: Estimate for coin 1.
        ground_truth: True head probabilities.

    Returns:
        Maximum absolute error under the best assignment.
    """
    a, b = ground_truth
    direct = max(abs(theta0 - a), abs(theta1 - b))
    swapped = max(abs(theta0 - b), abs(theta1 - a))
    return min(direct, swapped)


def summarize_run(
    estimates: list[IterationEstimate],
    ground_truth: tuple[float, float],
) -> dict:
    """Summarize a sequence of estimates.

    Args:
        estimates: Estimates in iteration order.
        ground_truth: True head probabilities.

    Returns:
        Dictionary with per-coin mean, std, stderr and 95% confidence interval
        of the mean, the final estimates and their distance to the truth. Empty runs give an "n_iterations" of 0 only.
    """
    if not estimates:
        return {"n_iterations": 0}

    theta0_values = [e.theta0 for e in estimates]
    theta1_values = [e.theta1 for e in estimates]
    final = estimates[-1]

    return {
        "n_iterations": len(estimates),
        "mean_theta0": compute_mean(theta0_values),
        "mean_theta1": compute_mean(theta1_values),
        "std_theta0": compute_std(theta0_values),
        "std_theta1": compute_std(theta1_values),
        "stderr_theta0": compute_stderr(theta0_values),
        "stderr_theta1": compute_stderr(theta1_values),
        "ci_theta0": compute_confidence_interval(theta0_values),
        "ci_theta1": compute_confidence_interval(theta1_values),
        "final_theta0": final.theta0,
        "final_theta1": final.theta1,
        "final_distance": distance_to_truth(final.theta0, final.theta1, ground_truth),
    }
