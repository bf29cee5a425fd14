"""
Two-coin EM: Expectation-Maximization for a Bernoulli mixture.

This package simulates batches of coin-flip experiments drawn from two hidden coins
and recovers their head probabilities with the EM algorithm, without knowing which
coin produced which experiment.
"""

__version__ = "0.1.0"
