"""Integration tests for wizardflow CLI commands."""

from pathlib import Path

from typer.testing import CliRunner

from wizardflow.cli.app import app

runner = CliRunner()


def _write_config(tmp_path: Path, body: str) -> str:
    cfg = tmp_path / "config.yaml"
    cfg.write_text(body)
    return str(cfg)


class TestMainApp:
    def test_help_flag(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "wizardflow" in result.output.lower()

    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "wizardflow version" in result.output


class TestStepsCommand:
    def test_lists_preset_flow(self) -> None:
        result = runner.invoke(app, ["steps", "romantic-kiss"])
        assert result.exit_code == 0
        assert "PHOTO_UPLOAD_0" in result.output
        assert "PHOTO_UPLOAD_1" in result.output
        assert "GENERATING" in result.output
        assert "RESULT_PREVIEW" in result.output

    def test_no_result_flag(self) -> None:
        result = runner.invoke(app, ["steps", "text-to-video", "--no-result", "--no-preview"])
        assert result.exit_code == 0
        assert "RESULT_PREVIEW" not in result.output
        assert "SCENARIO_PREVIEW" not in result.output
        assert "TEXT_INPUT" in result.output

    def test_unknown_scenario(self) -> None:
        result = runner.invoke(app, ["steps", "does-not-exist"])
        assert result.exit_code == 1
        assert "Unknown scenario" in result.output

    def test_scenario_from_config(self, tmp_path: Path) -> None:
        cfg = _write_config(
            tmp_path,
            "scenarios:\n  solo:\n    photo_uploads:\n      count: 1\n      labels: [Me]\n",
        )
        result = runner.invoke(app, ["steps", "solo", "--config", cfg])
        assert result.exit_code == 0
        assert "PHOTO_UPLOAD_0" in result.output

    def test_text_bounds_conflicting_with_defaults_fail(self, tmp_path: Path) -> None:
        cfg = _write_config(
            tmp_path,
            "scenarios:\n  long:\n    text_input:\n      enabled: true\n      min_length: 600\n",
        )
        result = runner.invoke(app, ["steps", "long", "--config", cfg])
        assert result.exit_code == 1
        assert "does not build" in result.output


class TestCreditsCommand:
    def test_quote_with_selections(self) -> None:
        result = runner.invoke(
            app, ["credits", "image-to-video", "--duration", "8s", "--resolution", "1080p"]
        )
        assert result.exit_code == 0
        # 8 seconds x 1.0 per second x 1.5 for 1080p
        assert "12 credits" in result.output

    def test_fallback_without_duration(self, tmp_path: Path) -> None:
        cfg = _write_config(tmp_path, "credits:\n  fallback_cost: 7\n")
        result = runner.invoke(app, ["credits", "romantic-kiss", "-c", cfg])
        assert result.exit_code == 0
        assert "7 credits" in result.output
        assert "fallback" in result.output

    def test_config_defaults_used(self, tmp_path: Path) -> None:
        cfg = _write_config(
            tmp_path,
            "scenarios:\n"
            "  clip:\n"
            "    duration_selection:\n"
            "      enabled: true\n"
            "      default_duration: 12\n",
        )
        result = runner.invoke(app, ["credits", "clip", "-c", cfg])
        assert result.exit_code == 0
        assert "12 credits" in result.output

    def test_empty_scenario_fails(self, tmp_path: Path) -> None:
        cfg = _write_config(tmp_path, "scenarios:\n  empty: {}\n")
        result = runner.invoke(app, ["credits", "empty", "-c", cfg])
        assert result.exit_code == 1
        assert "does not build" in result.output

    def test_text_bounds_conflicting_with_defaults_fail(self, tmp_path: Path) -> None:
        cfg = _write_config(
            tmp_path,
            "scenarios:\n  long:\n    text_input:\n      enabled: true\n      min_length: 600\n",
        )
        result = runner.invoke(app, ["credits", "long", "-c", cfg])
        assert result.exit_code == 1
        assert "does not build" in result.output


class TestPresetsCommand:
    def test_lists_builtins_and_config(self, tmp_path: Path) -> None:
        cfg = _write_config(tmp_path, "scenarios:\n  solo:\n    photo_uploads:\n      count: 1\n")
        result = runner.invoke(app, ["presets", "-c", cfg])
        assert result.exit_code == 0
        assert "romantic-kiss" in result.output
        assert "solo" in result.output

    def test_invalid_config_scenario(self, tmp_path: Path) -> None:
        cfg = _write_config(tmp_path, "scenarios:\n  bad:\n    photo_uploads:\n      count: -2\n")
        result = runner.invoke(app, ["presets", "-c", cfg])
        assert result.exit_code == 1
        assert "Invalid scenario" in result.output


class TestConfigCommand:
    def test_displays_settings(self) -> None:
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Credits" in result.output
        assert "Step Builder" in result.output
