"""Feedback mode comparison.

Runs the estimator once per feedback mode on identical batches: both runs start
from the same seed, so any difference comes from whether the estimates are fed
back into the scoring step.
"""

from typing import Any

import numpy as np
from tqdm import tqdm

from coinem.config import Config
from coinem.estimator import MODES
from coinem.experiments.estimation import build_estimator
from coinem.metrics import summarize_run
from coinem.plotting import plot_mode_comparison
from coinem.reporting import ensure_dir, get_timestamp, save_estimates


def run_mode_comparison(
    config: Config,
    verbose: bool = True,
) -> dict[str, Any]:
    """Run every feedback mode with the same seed.

    The configured mode is ignored.

    Args:
        config: Run configuration.
        verbose: If True, show a progress bar and print saved paths.

    Returns:
        Dictionary with 'seed', 'runs' (mode -> estimates), 'summaries'
        (mode -> summary), 'output_paths' and 'timestamp'.
    """
    seed = config.seed
    if seed is None:
        seed = int(np.random.default_rng().integers(2**32))

    iterations = config.estimator.iterations
    pbar = tqdm(total=iterations * len(MODES), disable=not verbose, desc="Mode comparison")

    runs = {}
    summaries = {}
    for mode in MODES:
        pbar.set_description(f"mode={mode}")
        mode_config = config.model_copy(
            update={"estimator": config.estimator.model_copy(update={"mode": mode})}
        )
        estimator = build_estimator(mode_config, seed=seed)

        estimates = []
        for estimate in estimator.run():
            estimates.append(estimate)
            pbar.update(1)

        runs[mode] = estimates
        summaries[mode] = summarize_run(estimates, estimator.ground_truth)

    pbar.close()

    timestamp = get_timestamp()
    output_paths = {}

    if config.output.save_raw:
        for mode, estimates in runs.items():
            path = save_estimates(estimates, config.output.dir, timestamp, prefix=f"compare_{mode}")
            output_paths[mode] = str(path)
            if verbose:
                print(f"Saved {mode} estimates to {path}")

    if config.output.save_plots and iterations > 0:
        plot_path = ensure_dir(config.output.dir) / f"mode_comparison_{timestamp}.png"
        plot_mode_comparison(runs, estimator.ground_truth, plot_path)
        output_paths["plot"] = str(plot_path)
        if verbose:
            print(f"Saved plot to {plot_path}")

    return {
        "seed": seed,
        "runs": runs,
        "summaries": summaries,
        "output_paths": output_paths,
        "timestamp": timestamp,
    }
