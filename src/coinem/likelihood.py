"""Binomial likelihood computed in log space."""

import math

import numpy as np

FULL_RUN_RULES = ("binomial", "complement")


def _check_arguments(p: float, n: int, k: int) -> None:
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"p must be in [0, 1], got {p}")
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    if not 0 <= k <= n:
        raise ValueError(f"k must be in [0, {n}], got {k}")


def _scaled_log(count: int, x: float) -> float:
    """count * log(x), with 0 * log(0) taken as 0."""
    if count == 0:
        return 0.0
    if x <= 0.0:
        return -math.inf
    return count * math.log(x)


def log_binomial_coefficient(n: int, k: int) -> float:
    """Compute log C(n, k) as a difference of log sums.

    log C(n, k) = sum(log i, i=k+1..n) - sum(log i, i=1..n-k)

    Args:
        n: Number of trials.
        k: Number of successes.

    Returns:
        Natural log of the binomial coefficient.
    """
    if not 0 <= k <= n:
        raise ValueError(f"k must be in [0, {n}], got {k}")
    upper = np.log(np.arange(k + 1, n + 1, dtype=float)).sum()
    lower = np.log(np.arange(1, n - k + 1, dtype=float)).sum()
    return float(upper - lower)


def log_likelihood(
    p: float,
    n: int,
    k: int,
    full_run_rule: str = "binomial",
) -> float:
    """Log probability of k heads in n flips of a coin with head probability p.

    Boundary probabilities are defined by continuity: with p = 0 only k = 0 is
    possible, with p = 1 only k = n. Impossible outcomes return -inf.

    Args:
        p: Head probability, in [0, 1].
        n: Number of flips.
        k: Number of heads, in [0, n].
        full_run_rule: How to score k == n. "binomial" gives p**n; "complement"
            gives (1 - p)**n, which reproduces the legacy coin-flip tool.

    Returns:
        Log likelihood, possibly -inf.

    Raises:
        ValueError: If an argument is out of range or the rule is unknown.
    """
    if full_run_rule not in FULL_RUN_RULES:
        raise ValueError(
            f"Unknown full-run rule: {full_run_rule}. "
            f"Available: {list(FULL_RUN_RULES)}"
        )
    _check_arguments(p, n, k)

    if k == n and full_run_rule == "complement":
        return _scaled_log(n, 1.0 - p)

    if p == 0.0:
        return 0.0 if k == 0 else -math.inf
    if p == 1.0:
        return 0.0 if k == n else -math.inf

    if k == n:
        return n * math.log(p)

    return (
        log_binomial_coefficient(n, k)
        + k * math.log(p)
        + (n - k) * math.log1p(-p)
    )


def likelihood(
    p: float,
    n: int,
    k: int,
    full_run_rule: str = "binomial",
) -> float:
    """Probability of k heads in n flips of a coin with head probability p.

    See log_likelihood for the arguments.
    """
    return math.exp(log_likelihood(p, n, k, full_run_rule))
