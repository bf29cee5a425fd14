"""Single estimator run.

Runs the EM estimator with a configuration, forwards every estimate to a reporter,
and saves the trajectory (CSV and optionally a plot).
"""

from typing import Any

from coinem.config import Config
from coinem.estimator import EMEstimator
from coinem.metrics import summarize_run
from coinem.plotting import plot_trajectory
from coinem.reporting import CollectingReporter, ensure_dir, get_timestamp, save_estimates


def build_estimator(config: Config, seed: int | None = None) -> EMEstimator:
    """Create an estimator from the configuration.

    Args:
        config: Run configuration.
        seed: Seed overriding config.seed.

    Returns:
        A fresh estimator.
    """
    est = config.estimator
    return EMEstimator(
        theta0=est.theta0,
        theta1=est.theta1,
        sample_size=est.sample_size,
        iterations=est.iterations,
        mode=est.mode,
        full_run_rule=est.full_run_rule,
        seed=seed if seed is not None else config.seed,
    )


def run_estimation(
    config: Config,
    reporter=None,
    verbose: bool = True,
) -> dict[str, Any]:
    """Run the estimator for the configured number of iterations.

    Args:
        config: Run configuration.
        reporter: Optional sink with a report(estimate) method, called once per
            iteration as estimates are produced.
        verbose: If True, print where results were saved.

    Returns:
        Dictionary with 'estimates', 'summary', 'output_paths' and 'timestamp'.
    """
    estimator = build_estimator(config)
    collected = CollectingReporter()

    for estimate in estimator.run():
        collected.report(estimate)
        if reporter is not None:
            reporter.report(estimate)

    estimates = collected.estimates
    summary = summarize_run(estimates, estimator.ground_truth)

    timestamp = get_timestamp()
    output_paths = {}

    if config.output.save_raw:
        raw_path = save_estimates(estimates, config.output.dir, timestamp, prefix=f"estimates_{config.estimator.mode}")
        output_paths["raw"] = str(raw_path)
        if verbose:
            print(f"Saved estimates to {raw_path}")

    if config.output.save_plots and estimates:
        plot_path = ensure_dir(config.output.dir) / f"trajectory_{config.estimator.mode}_{timestamp}.png"
        plot_trajectory(estimates, estimator.ground_truth, plot_path)
        output_paths["plot"] = str(plot_path)
        if verbose:
            print(f"Saved plot to {plot_path}")

    return {
        "estimates": estimates,
        "summary": summary,
        "output_paths": output_paths,
        "timestamp": timestamp,
    }
