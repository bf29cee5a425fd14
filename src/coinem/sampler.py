"""Random coin flips and simulated experiments."""

import numpy as np

# Ground-truth head probabilities of the two hidden coins
THETA1 = 0.75
THETA2 = 0.35


class BernoulliSampler:
    """Source of uniform variates and weighted coin flips.

    All draws come from a single numpy Generator, so a seeded sampler yields the
    same stream every time.
    """

    def __init__(
        self,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ):
        """Initialize the sampler.

        Args:
            seed: Seed for a fresh generator. Ignored when rng is given.
            rng: Generator to draw from (e.g. shared with other code).
        """
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def uniform(self) -> float:
        """Draw one variate in [0, 1)."""
        return float(self.rng.random())

    def uniforms(self, n: int) -> np.ndarray:
        """Draw n variates in [0, 1)."""
        return self.rng.random(n)

    def flip(self, p: float) -> bool:
        """Flip a coin that lands heads with probability p."""
        return self.uniform() < p


def run_experiment(sampler: BernoulliSampler, p: float, n: int) -> int:
    """Flip a coin n times and count the heads.

    Args:
        sampler: Source of random draws.
        p: Head probability of the coin.
        n: Number of flips.

    Returns:
        Number of heads, in [0, n].

    Raises:
        ValueError: If p is outside [0, 1] or n is negative.
    """
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"p must be in [0, 1], got {p}")
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")

    if n == 0:
        return 0

    return int(np.count_nonzero(sampler.uniforms(n) < p))


def generate_batch(
    sampler: BernoulliSampler,
    sample_size: int,
    ground_truth: tuple[float, float] = (THETA1, THETA2),
) -> list[int]:
    """Generate a training batch of head counts.

    Each of the sample_size experiments picks one of the two coins with even odds
    and flips it sample_size times. The choice of coin is not returned.

    Args:
        sampler: Source of random draws.
        sample_size: Number of experiments, and flips per experiment.
        ground_truth: Head probabilities of the first and second coin.

    Returns:
        List of head counts, one per experiment.
    """
    first, second = ground_truth
    batch = []
    for _ in range(sample_size):
        p = first if sampler.uniform() > 0.5 else second
        batch.append(run_experiment(sampler, p, sample_size))
    return batch
