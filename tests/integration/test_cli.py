"""Integration tests for the foilplan CLI.

These tests verify the plan, compare and validate commands end-to-end,
including exit codes, output formats and command line overrides.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from foilplan.cli.main import app

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "configs"


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


class TestValidateCommand:
    """Tests for the validate command."""

    def test_clean_config(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "small_pool.json")])
        assert result.exit_code == 0
        assert "Validation passed" in result.output

    def test_config_with_warnings(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "deep_pool.json")])
        assert result.exit_code == 2
        assert "Warnings:" in result.output
        assert "stacked" in result.output

    def test_schema_error(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "invalid_depth.json")])
        assert result.exit_code == 1
        assert "vessel.depth" in result.output

    def test_invalid_json(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "malformed.json")])
        assert result.exit_code == 1
        assert "Invalid JSON syntax" in result.output

    def test_file_not_found(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "nonexistent.json")])
        assert result.exit_code == 1
        assert "not found" in result.output.lower()

    def test_unsupported_version(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["validate", str(FIXTURES_PATH / "unsupported_version.json")]
        )
        assert result.exit_code == 1
        assert "schema_version" in result.output


class TestPlanCommand:
    """Tests for the plan command."""

    def test_text_report(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["plan", str(FIXTURES_PATH / "family_pool.json")])
        assert result.exit_code == 0
        assert "MEMBRANE PLAN" in result.stdout
        assert "Rolls: 3 narrow + 1 wide" in result.stdout

    def test_json_output(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["plan", str(FIXTURES_PATH / "family_pool.json"), "--format", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["configuration"]["total_rolls_narrow"] == 3
        assert data["configuration"]["total_rolls_wide"] == 1
        assert data["pricing"]["main_area"] == 104

    def test_subtype_override(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app,
            [
                "plan",
                str(FIXTURES_PATH / "family_pool.json"),
                "-f",
                "json",
                "--subtype",
                "printed",
            ],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["configuration"]["subtype"] == "printed"
        assert data["configuration"]["total_rolls_wide"] == 0

    def test_priority_override(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app,
            [
                "plan",
                str(FIXTURES_PATH / "small_pool.json"),
                "-f",
                "json",
                "-p",
                "minimize-total-material",
            ],
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)["configuration"]["priority"] == (
            "minimize-total-material"
        )

    def test_features_priced_as_structural(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["plan", str(FIXTURES_PATH / "pool_with_features.json"), "-f", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        keys = [s["key"] for s in data["configuration"]["surfaces"]]
        assert keys[:2] == ["floor", "walls"]
        assert "stairs" in keys
        assert data["pricing"]["structural_area"] > 0

    def test_output_file(self, runner: CliRunner, tmp_path: Path) -> None:
        output = tmp_path / "plan.json"
        result = runner.invoke(
            app,
            [
                "plan",
                str(FIXTURES_PATH / "small_pool.json"),
                "--format",
                "json",
                "--output",
                str(output),
            ],
        )
        assert result.exit_code == 0
        assert "Plan written to" in result.stdout
        assert json.loads(output.read_text())["configuration"]["total_rolls_wide"] == 1

    def test_unknown_format(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["plan", str(FIXTURES_PATH / "small_pool.json"), "--format", "dxf"]
        )
        assert result.exit_code == 1
        assert "Unknown format" in result.output

    def test_unknown_subtype(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["plan", str(FIXTURES_PATH / "small_pool.json"), "--subtype", "glitter"]
        )
        assert result.exit_code == 1

    def test_invalid_config(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["plan", str(FIXTURES_PATH / "invalid_depth.json")])
        assert result.exit_code == 1
        assert "Errors:" in result.output


class TestCompareCommand:
    """Tests for the compare command."""

    def test_text_table(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["compare", str(FIXTURES_PATH / "family_pool.json")])
        assert result.exit_code == 0
        for strategy in ("narrow-only", "wide-only", "mixed"):
            assert strategy in result.stdout

    def test_json(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["compare", str(FIXTURES_PATH / "family_pool.json"), "-f", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert list(data) == ["narrow-only", "wide-only", "mixed"]
        assert data["narrow-only"]["total_rolls_wide"] == 0
        assert data["mixed"]["total_rolls_narrow"] == 3

    def test_unknown_format(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["compare", str(FIXTURES_PATH / "family_pool.json"), "-f", "csv"]
        )
        assert result.exit_code == 1
        assert "Unknown format" in result.output
        assert "Available formats: json, text" in result.output
