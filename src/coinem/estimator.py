"""Expectation-Maximization for a mixture of two coins.

Each iteration draws a fresh batch of experiments, weights every head count by the
posterior probability that each coin produced it (E-step), and turns the weighted
head and tail counts into new head probabilities (M-step).

Two feedback modes are supported:

- "em": the estimates of one iteration become the scoring parameters of the next,
  so the estimates converge.
- "resample": every iteration is scored against the initial parameters, so the
  estimates only vary with the resampled batch. This is how the legacy coin-flip
  tool behaves.
"""

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from coinem.likelihood import FULL_RUN_RULES, log_likelihood
from coinem.sampler import THETA1, THETA2, BernoulliSampler, generate_batch

MODES = ("em", "resample")


@dataclass
class IterationEstimate:
    """Estimates produced by one iteration."""

    iteration: int  # 1-based
    theta0: float
    theta1: float


@dataclass
class SufficientStatistics:
    """Responsibility-weighted head and tail counts for one batch."""

    p0: float = 0.0  # heads attributed to coin 0
    p1: float = 0.0  # tails attributed to coin 0
    q0: float = 0.0  # heads attributed to coin 1
    q1: float = 0.0  # tails attributed to coin 1


def responsibilities(log_a: float, log_b: float) -> tuple[float, float]:
    """Normalize two log likelihoods into weights that sum to 1.

    Works in log space, so two likelihoods that both underflow in linear space
    still keep their ratio. Ties, including two impossible outcomes (-inf), split
    the weight evenly.

    Args:
        log_a: Log likelihood under coin 0.
        log_b: Log likelihood under coin 1.

    Returns:
        Tuple of (weight for coin 0, weight for coin 1).
    """
    if log_a == log_b:
        return 0.5, 0.5

    total = np.logaddexp(log_a, log_b)
    w0 = float(np.exp(log_a - total))
    return w0, 1.0 - w0


def accumulate(
    batch: list[int],
    theta0: float,
    theta1: float,
    sample_size: int,
    full_run_rule: str = "binomial",
) -> SufficientStatistics:
    """E-step: accumulate expected head and tail counts for each coin.

    Args:
        batch: Head counts, one per experiment.
        theta0: Scoring head probability of coin 0.
        theta1: Scoring head probability of coin 1.
        sample_size: Flips per experiment.
        full_run_rule: Passed through to the likelihood.

    Returns:
        Accumulated sufficient statistics.
    """
    stats = SufficientStatistics()
    n = sample_size

    for k in batch:
        w0, w1 = responsibilities(
            log_likelihood(theta0, n, k, full_run_rule),
            log_likelihood(theta1, n, k, full_run_rule),
        )
        stats.p0 += k * w0
        stats.q0 += k * w1

        # Tails are scored as successes of the complementary coin
        w0, w1 = responsibilities(
            log_likelihood(1.0 - theta0, n, n - k, full_run_rule),
            log_likelihood(1.0 - theta1, n, n - k, full_run_rule),
        )
        stats.p1 += (n - k) * w0
        stats.q1 += (n - k) * w1

    return stats


def maximize(
    stats: SufficientStatistics,
    fallback: tuple[float, float],
) -> tuple[float, float]:
    """M-step: expected proportion of heads attributed to each coin.

    Args:
        stats: Sufficient statistics from accumulate.
        fallback: Values returned for a coin that was attributed no flips.

    Returns:
        Tuple of (theta0, theta1).
    """
    total0 = stats.p0 + stats.p1
    total1 = stats.q0 + stats.q1
    theta0 = stats.p0 / total0 if total0 > 0 else fallback[0]
    theta1 = stats.q0 / total1 if total1 > 0 else fallback[1]
    return theta0, theta1


class EMEstimator:
    """Iterative estimator for the head probabilities of two hidden coins.

    The estimator moves from "initialized" to "iterating" on the first step and to
    "exhausted" once the fixed iteration budget is spent. There is no convergence
    test.
    """

    def __init__(
        self,
        theta0: float,
        theta1: float,
        sample_size: int = 50,
        iterations: int = 10,
        mode: str = "em",
        full_run_rule: str = "binomial",
        sampler: BernoulliSampler | None = None,
        seed: int | None = None,
        ground_truth: tuple[float, float] = (THETA1, THETA2),
    ):
        """Initialize the estimator.

        Args:
            theta0: Initial guess for coin 0.
            theta1: Initial guess for coin 1.
            sample_size: Experiments per batch and flips per experiment.
            iterations: Number of iterations to run.
            mode: "em" or "resample".
            full_run_rule: "binomial" or "complement".
            sampler: Source of random draws. Built from seed if None.
            seed: Seed for a new sampler.
            ground_truth: Head probabilities used to simulate the batches.

        Raises:
            ValueError: If any parameter is invalid.
        """
        for name, value in (("theta0", theta0), ("theta1", theta1)):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if sample_size < 1:
            raise ValueError(f"sample_size must be at least 1, got {sample_size}")
        if iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {iterations}")
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode}. Available: {list(MODES)}")
        if full_run_rule not in FULL_RUN_RULES:
            raise ValueError(
                f"Unknown full-run rule: {full_run_rule}. "
                f"Available: {list(FULL_RUN_RULES)}"
            )

        self.initial_parameters = (float(theta0), float(theta1))
        self.scoring_parameters = self.initial_parameters
        self.sample_size = sample_size
        self.iterations = iterations
        self.mode = mode
        self.full_run_rule = full_run_rule
        self.sampler = sampler if sampler is not None else BernoulliSampler(seed)
        self.ground_truth = ground_truth
        self.completed = 0

    @property
    def state(self) -> str:
        """Current lifecycle state."""
        if self.completed >= self.iterations:
            return "exhausted"
        if self.completed == 0:
            return "initialized"
        return "iterating"

    def step(self) -> IterationEstimate:
        """Run one iteration on a freshly generated batch.

        Returns:
            The new estimates.

        Raises:
            RuntimeError: If the iteration budget is already spent.
        """
        if self.state == "exhausted":
            raise RuntimeError(f"All {self.iterations} iterations already ran")

        batch = generate_batch(self.sampler, self.sample_size, self.ground_truth)
        theta0, theta1 = self.scoring_parameters
        stats = accumulate(batch, theta0, theta1, self.sample_size, self.full_run_rule)
        estimates = maximize(stats, fallback=self.scoring_parameters)

        if self.mode == "em":
            self.scoring_parameters = estimates

        self.completed += 1
        return IterationEstimate(self.completed, estimates[0], estimates[1])

    def run(self) -> Iterator[IterationEstimate]:
        """Yield the estimates of every remaining iteration."""
        while self.state != "exhausted":
            yield self.step()
