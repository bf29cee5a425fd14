"""Command-line interface for the two-coin EM estimator."""

from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv
from pydantic import ValidationError

from coinem.config import Config, load_raw_config
from coinem.experiments.estimation import run_estimation
from coinem.experiments.mode_comparison import run_mode_comparison
from coinem.reporting import ConsoleReporter

PREFACE = """\
The Expectation-Maximization (EM) algorithm finds maximum-likelihood estimates for
model parameters when the data has unobserved (hidden) latent variables. Here every
experiment is a run of coin flips made with one of two coins, and the coin used is
hidden. Starting from two initial guesses, each iteration weights every experiment
by how likely each coin is to have produced it, then re-estimates both head
probabilities from the weighted counts.
"""

EPILOG = "example: coinem run -a 0.5 -b 0.9"

MODE_NOTES = {
    "em": "estimates are fed back into the next iteration",
    "resample": "every iteration is scored against the initial guesses; estimates are not fed back",
}

app = typer.Typer(
    name="coinem",
    help=PREFACE,
    epilog=EPILOG,
    add_completion=False,
)


def _build_config(
    config_path: Optional[Path],
    overrides: dict[str, Any],
    seed: Optional[int],
    output_dir: Optional[Path],
    save: Optional[bool],
    plot: Optional[bool],
) -> Config:
    """Merge the config file with command-line overrides and validate.

    Exits with code 2 on missing or invalid parameters.
    """
    raw: dict[str, Any] = {}
    if config_path is not None:
        try:
            raw = load_raw_config(config_path)
        except (FileNotFoundError, ValueError) as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=2)

    estimator = dict(raw.get("estimator") or {})
    estimator.update({k: v for k, v in overrides.items() if v is not None})
    raw["estimator"] = estimator

    output = dict(raw.get("output") or {})
    if output_dir is not None:
        output["dir"] = str(output_dir)
    if save is not None:
        output["save_raw"] = save
    if plot is not None:
        output["save_plots"] = plot
    raw["output"] = output

    if seed is not None:
        raw["seed"] = seed

    for name, flags in (("theta0", "-a/--theta0"), ("theta1", "-b/--theta1")):
        if estimator.get(name) is None:
            typer.echo(f"Error: {flags} is required", err=True)
            raise typer.Exit(code=2)

    try:
        return Config(**raw)
    except ValidationError as e:
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"])
            typer.echo(f"Error: invalid {location}: {error['msg']}", err=True)
        raise typer.Exit(code=2)


@app.command("run")
def cmd_run(
    theta0: Optional[float] = typer.Option(
        None,
        "--theta0",
        "-a",
        help="Theta 0; initial guess. [Required]",
    ),
    theta1: Optional[float] = typer.Option(
        None,
        "--theta1",
        "-b",
        help="Theta 1; initial guess. [Required]",
    ),
    sample: Optional[int] = typer.Option(
        None,
        "--sample",
        "-s",
        help="Number of samples (default: 50).",
    ),
    iterate: Optional[int] = typer.Option(
        None,
        "--iterate",
        "-i",
        help="Number of iterations (default: 10).",
    ),
    mode: Optional[str] = typer.Option(
        None,
        "--mode",
        "-m",
        help="Feedback mode: 'em' or 'resample' (default: em).",
    ),
    full_run_rule: Optional[str] = typer.Option(
        None,
        "--full-run-rule",
        help="Likelihood of an all-heads run: 'binomial' (p^n, default) or 'complement' ((1-p)^n, reproduces the legacy tool's numbers).",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Random seed (overrides config).",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for results (default: results).",
    ),
    save: Optional[bool] = typer.Option(
        None,
        "--save/--no-save",
        help="Save the estimates as CSV.",
    ),
    plot: Optional[bool] = typer.Option(
        None,
        "--plot/--no-plot",
        help="Save a plot of the estimates.",
    ),
) -> None:
    """Run the EM estimator and print one line per iteration.

    Each line is "iteration, theta0, theta1".
    """
    load_dotenv()

    cfg = _build_config(
        config,
        {
            "theta0": theta0,
            "theta1": theta1,
            "sample_size": sample,
            "iterations": iterate,
            "mode": mode,
            "full_run_rule": full_run_rule,
        },
        seed,
        output_dir,
        save,
        plot,
    )

    typer.echo(f"Feedback mode: {cfg.estimator.mode} ({MODE_NOTES[cfg.estimator.mode]})", err=True)

    results = run_estimation(cfg, reporter=ConsoleReporter(typer.echo), verbose=False)

    for name, path in results["output_paths"].items():
        typer.echo(f"Saved {name}: {path}", err=True)


@app.command("compare")
def cmd_compare(
    theta0: Optional[float] = typer.Option(
        None,
        "--theta0",
        "-a",
        help="Theta 0; initial guess. [Required]",
    ),
    theta1: Optional[float] = typer.Option(
        None,
        "--theta1",
        "-b",
        help="Theta 1; initial guess. [Required]",
    ),
    sample: Optional[int] = typer.Option(
        None,
        "--sample",
        "-s",
        help="Number of samples (default: 50).",
    ),
    iterate: Optional[int] = typer.Option(
        None,
        "--iterate",
        "-i",
        help="Number of iterations (default: 10).",
    ),
    full_run_rule: Optional[str] = typer.Option(
        None,
        "--full-run-rule",
        help="Likelihood of an all-heads run: 'binomial' (p^n, default) or 'complement' ((1-p)^n, reproduces the legacy tool's numbers).",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Random seed (overrides config).",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for results (default: results).",
    ),
    save: Optional[bool] = typer.Option(
        None,
        "--save/--no-save",
        help="Save the estimates as CSV.",
    ),
    plot: Optional[bool] = typer.Option(
        None,
        "--plot/--no-plot",
        help="Save a side-by-side plot of both modes.",
    ),
) -> None:
    """Run both feedback modes on the same batches and compare them."""
    load_dotenv()

    cfg = _build_config(
        config,
        {
            "theta0": theta0,
            "theta1": theta1,
            "sample_size": sample,
            "iterations": iterate,
            "full_run_rule": full_run_rule,
        },
        seed,
        output_dir,
        save,
        plot,
    )

    results = run_mode_comparison(cfg, verbose=False)
    em_run = results["runs"]["em"]
    resample_run = results["runs"]["resample"]

    typer.echo(f"Seed: {results['seed']}", err=True)
    typer.echo(f"{'iter':>4}  {'em theta0':>12} {'em theta1':>12}  {'rs theta0':>12} {'rs theta1':>12}")
    for em, rs in zip(em_run, resample_run):
        typer.echo(
            f"{em.iteration:4d}  {em.theta0:12.8f} {em.theta1:12.8f}  {rs.theta0:12.8f} {rs.theta1:12.8f}"
        )

    typer.echo()
    typer.echo("Final distance to ground truth:")
    for mode, summary in results["summaries"].items():
        if summary["n_iterations"] == 0:
            typer.echo(f"  {mode}: no iterations")
        else:
            low0, high0 = summary["ci_theta0"]
            low1, high1 = summary["ci_theta1"]
            typer.echo(
                f"  {mode}: {summary['final_distance']:.4f}"
                f"  (95% CI theta0 [{low0:.4f}, {high0:.4f}], theta1 [{low1:.4f}, {high1:.4f}])"
            )

    for name, path in results["output_paths"].items():
        typer.echo(f"Saved {name}: {path}", err=True)


if __name__ == "__main__":
    app()
