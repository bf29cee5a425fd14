"""Tests for the command-line interface."""

import re

from typer.testing import CliRunner

from coinem.cli import app

runner = CliRunner()

LINE = re.compile(r"^\s*\d+, \d\.\d{8}, \d\.\d{8}$")


def _estimate_lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if LINE.match(line)]


class TestRunCommand:
    """Tests for `coinem run`."""

    def test_prints_one_line_per_iteration(self, tmp_path):
        result = runner.invoke(
            app,
            ["run", "-a", "0.6", "-b", "0.5", "-s", "20", "-i", "3", "--seed", "1", "-o", str(tmp_path)],
        )
        assert result.exit_code == 0, result.output
        lines = _estimate_lines(result.output)
        assert len(lines) == 3
        assert lines[0].startswith("   1, ")

    def test_deterministic(self, tmp_path):
        args = ["run", "-a", "0.6", "-b", "0.5", "-s", "50", "-i", "1", "--seed", "42", "--no-save"]
        first = runner.invoke(app, args)
        second = runner.invoke(app, args)
        assert _estimate_lines(first.output) == _estimate_lines(second.output)

    def test_announces_mode(self):
        result = runner.invoke(
            app, ["run", "-a", "0.6", "-b", "0.5", "-s", "10", "-i", "1", "-m", "resample", "--no-save"]
        )
        assert result.exit_code == 0, result.output
        assert "resample" in result.output

    def test_saves_csv(self, tmp_path):
        result = runner.invoke(
            app, ["run", "-a", "0.6", "-b", "0.5", "-s", "10", "-i", "2", "--seed", "3", "-o", str(tmp_path)]
        )
        assert result.exit_code == 0, result.output
        assert len(list(tmp_path.glob("estimates_em_*.csv"))) == 1

    def test_missing_theta(self):
        result = runner.invoke(app, ["run", "-a", "0.6"])
        assert result.exit_code == 2
        assert "--theta1" in result.output
        assert not _estimate_lines(result.output)

    def test_invalid_sample_size(self):
        result = runner.invoke(app, ["run", "-a", "0.6", "-b", "0.5", "-s", "0"])
        assert result.exit_code == 2
        assert "sample_size" in result.output

    def test_invalid_theta(self):
        result = runner.invoke(app, ["run", "-a", "1.6", "-b", "0.5"])
        assert result.exit_code == 2
        assert "theta0" in result.output

    def test_zero_iterations(self):
        result = runner.invoke(app, ["run", "-a", "0.6", "-b", "0.5", "-i", "0", "--no-save"])
        assert result.exit_code == 0, result.output
        assert _estimate_lines(result.output) == []

    def test_config_file(self, tmp_path):
        """Options come from the config file and the CLI overrides them."""
        config = tmp_path / "config.yaml"
        config.write_text(
            "estimator:\n"
            "  theta0: 0.6\n"
            "  theta1: 0.5\n"
            "  sample_size: 10\n"
            "  iterations: 5\n"
            "output:\n"
            "  save_raw: false\n"
        )
        result = runner.invoke(app, ["run", "-c", str(config), "-i", "2"])
        assert result.exit_code == 0, result.output
        assert len(_estimate_lines(result.output)) == 2

    def test_missing_config_file(self, tmp_path):
        result = runner.invoke(app, ["run", "-c", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 2
        assert "not found" in result.output

    def test_negative_seed(self):
        """A negative seed is rejected before any iteration."""
        result = runner.invoke(app, ["run", "-a", "0.6", "-b", "0.5", "-i", "1", "--seed", "-1", "--no-save"])
        assert result.exit_code == 2
        assert "seed" in result.output
        assert not _estimate_lines(result.output)

    def test_config_file_not_a_mapping(self, tmp_path):
        """A YAML list at the top level is reported, not raised."""
        config = tmp_path / "config.yaml"
        config.write_text("- 1\n- 2\n")
        result = runner.invoke(app, ["run", "-c", str(config), "-a", "0.6", "-b", "0.5"])
        assert result.exit_code == 2
        assert "mapping" in result.output

    def test_config_section_not_a_mapping(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("estimator: [1, 2]\n")
        result = runner.invoke(app, ["run", "-c", str(config), "-a", "0.6", "-b", "0.5"])
        assert result.exit_code == 2
        assert "estimator" in result.output
        assert not _estimate_lines(result.output)

    def test_help_names_legacy_rule(self):
        """The full-run rule help says which setting matches the legacy tool."""
        result = runner.invoke(app, ["run", "--help"])
        assert result.exit_code == 0
        assert "legacy" in result.output


class TestCompareCommand:
    """Tests for `coinem compare`."""

    def test_compare(self, tmp_path):
        result = runner.invoke(
            app,
            ["compare", "-a", "0.01", "-b", "0.99", "-s", "20", "-i", "3", "--seed", "5", "-o", str(tmp_path)],
        )
        assert result.exit_code == 0, result.output
        assert "em theta0" in result.output
        assert "Final distance to ground truth" in result.output
        assert "95% CI theta0" in result.output
        assert len(list(tmp_path.glob("compare_*.csv"))) == 2
