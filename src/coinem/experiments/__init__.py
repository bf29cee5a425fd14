"""Experiments module for single estimator runs and feedback mode comparisons."""

from coinem.experiments.estimation import run_estimation
from coinem.experiments.mode_comparison import run_mode_comparison

__all__ = ["run_estimation", "run_mode_comparison"]
