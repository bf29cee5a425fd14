"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from coinem.config import Config, EstimatorConfig, expand_env_vars, load_config


class TestEstimatorConfig:
    """Tests for estimator parameter validation."""

    def test_defaults(self):
        """Sample size and iterations default to 50 and 10."""
        cfg = EstimatorConfig(theta0=0.6, theta1=0.5)
        assert cfg.sample_size == 50
        assert cfg.iterations == 10
        assert cfg.mode == "em"
        assert cfg.full_run_rule == "binomial"

    def test_thetas_required(self):
        """Both initial guesses are required."""
        with pytest.raises(ValidationError):
            EstimatorConfig(theta0=0.6)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"theta0": 1.2},
            {"theta1": -0.5},
            {"sample_size": 0},
            {"iterations": -1},
            {"mode": "gibbs"},
            {"full_run_rule": "other"},
        ],
    )
    def test_invalid(self, kwargs):
        """Out-of-range values are rejected."""
        params = {"theta0": 0.6, "theta1": 0.5, **kwargs}
        with pytest.raises(ValidationError):
            EstimatorConfig(**params)


class TestExpandEnvVars:
    """Tests for environment variable expansion."""

    def test_set_variable(self, monkeypatch):
        """${VAR} expands to its value."""
        monkeypatch.setenv("COINEM_TEST_VALUE", "17")
        assert expand_env_vars("${COINEM_TEST_VALUE}") == "17"

    def test_default(self, monkeypatch):
        """${VAR:-default} falls back when unset."""
        monkeypatch.delenv("COINEM_TEST_MISSING", raising=False)
        assert expand_env_vars("${COINEM_TEST_MISSING:-3}") == "3"

    def test_nested(self, monkeypatch):
        """Expansion recurses into dicts and lists."""
        monkeypatch.setenv("COINEM_TEST_DIR", "out")
        value = {"output": {"dir": "${COINEM_TEST_DIR}"}, "items": ["${COINEM_TEST_DIR}", 1]}
        assert expand_env_vars(value) == {"output": {"dir": "out"}, "items": ["out", 1]}


class TestLoadConfig:
    """Tests for YAML loading."""

    def test_load(self, tmp_path):
        """A complete file is parsed."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "estimator:\n"
            "  theta0: 0.6\n"
            "  theta1: 0.5\n"
            "  sample_size: 20\n"
            "  iterations: 3\n"
            "  mode: resample\n"
            "output:\n"
            "  dir: out\n"
            "  save_raw: false\n"
            "seed: 7\n"
        )
        cfg = load_config(path)

        assert cfg.estimator.theta0 == 0.6
        assert cfg.estimator.sample_size == 20
        assert cfg.estimator.mode == "resample"
        assert cfg.output.dir == "out"
        assert cfg.output.save_raw is False
        assert cfg.output.save_plots is False
        assert cfg.seed == 7

    def test_seed_from_environment(self, tmp_path, monkeypatch):
        """The seed can come from the environment."""
        monkeypatch.setenv("COINEM_SEED", "99")
        path = tmp_path / "config.yaml"
        path.write_text("estimator:\n  theta0: 0.6\n  theta1: 0.5\nseed: ${COINEM_SEED:-}\n")
        assert load_config(path).seed == 99

    def test_empty_seed_is_unset(self, tmp_path, monkeypatch):
        """An empty expanded seed means no seed."""
        monkeypatch.delenv("COINEM_SEED", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text("estimator:\n  theta0: 0.6\n  theta1: 0.5\nseed: ${COINEM_SEED:-}\n")
        assert load_config(path).seed is None

    def test_missing_file(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_file(self, tmp_path):
        """Invalid values fail validation."""
        path = tmp_path / "config.yaml"
        path.write_text("estimator:\n  theta0: 0.6\n  theta1: 0.5\n  sample_size: 0\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_negative_seed(self, tmp_path):
        """Seeds must be non-negative."""
        path = tmp_path / "config.yaml"
        path.write_text("estimator:\n  theta0: 0.6\n  theta1: 0.5\nseed: -1\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_top_level_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

    def test_section_not_a_mapping(self, tmp_path):
        """Sections must be mappings too."""
        path = tmp_path / "config.yaml"
        path.write_text("estimator:\n  theta0: 0.6\n  theta1: 0.5\noutput: results\n")
        with pytest.raises(ValueError, match="output"):
            load_config(path)

    def test_config_defaults(self):
        """Output settings have defaults."""
        cfg = Config(estimator={"theta0": 0.1, "theta1": 0.9})
        assert cfg.output.dir == "results"
        assert cfg.output.save_raw is True
        assert cfg.seed is None
