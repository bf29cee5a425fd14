"""Configuration loading and management."""

import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator


class EstimatorConfig(BaseModel):
    """Configuration for the EM estimator."""

    theta0: float = Field(..., ge=0.0, le=1.0)
    theta1: float = Field(..., ge=0.0, le=1.0)
    sample_size: int = Field(50, ge=1)
    iterations: int = Field(10, ge=0)
    mode: Literal["em", "resample"] = "em"
    full_run_rule: Literal["binomial", "complement"] = "binomial"


class OutputConfig(BaseModel):
    """Configuration for output settings."""

    dir: str = "results"
    save_raw: bool = True
    save_plots: bool = False


class Config(BaseModel):
    """Main configuration model."""

    estimator: EstimatorConfig
    output: OutputConfig = Field(default_factory=OutputConfig)
    seed: int | None = Field(None, ge=0)

    @field_validator("seed", mode="before")
    @classmethod
    def empty_seed_is_unset(cls, value: Any) -> Any:
        # ${VAR:-} expands to an empty string
        if isinstance(value, str) and not value.strip():
            return None
        return value


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.
    """
    if isinstance(value, str):
        # Pattern matches ${VAR} or ${VAR:-default}
        pattern = r"\$\{([^}:]+)(?::-([^}]*))?\}"

        def replace(match: re.Match) -> str:
            var_name = match.group(1)
            default = match.group(2)
            return os.environ.get(var_name, default if default is not None else "")

        return re.sub(pattern, replace, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def load_raw_config(config_path: str | Path) -> dict[str, Any]:
    """Read a YAML configuration file without validating it.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Configuration dictionary with environment variables expanded.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the file or one of its sections is not a mapping.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")
    for section in ("estimator", "output"):
        value = raw_config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"Config section '{section}' must be a mapping: {config_path}")

    return expand_env_vars(raw_config)


def load_config(config_path: str | Path) -> Config:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Parsed Config object.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the file or one of its sections is not a mapping.
        pydantic.ValidationError: If the config file is invalid.
    """
    return Config(**load_raw_config(config_path))
