from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from flacjack import main as flacjack_main


@pytest.fixture
def cli(monkeypatch):
    """Patches logging and the orchestrator; returns what the command built."""
    created = {}

    def fake_setup_logging(output_dir, debug=False, log_path=None):
        created["log_dir"] = output_dir
        created["log_debug"] = debug
        created["log_path"] = log_path
        return MagicMock()

    class DummyOrchestrator:
        @classmethod
        def from_config(cls, config, event_bus):
            created["config"] = config
            created["bus"] = event_bus
            return cls()

        def run(self):
            created["ran"] = True

    monkeypatch.setattr(flacjack_main, "setup_logging", fake_setup_logging)
    monkeypatch.setattr(flacjack_main, "Orchestrator", DummyOrchestrator)
    return created


def test_main_help_lists_options():
    runner = CliRunner()
    result = runner.invoke(flacjack_main.app, ["--help"])

    assert result.exit_code == 0
    assert "--input-path" in result.output
    assert "--output-path" in result.output


def test_main_applies_cli_overrides(tmp_path, cli):
    runner = CliRunner()
    input_dir = tmp_path / "flac"
    input_dir.mkdir()
    output_dir = tmp_path / "mp3"

    result = runner.invoke(
        flacjack_main.app,
        ["-i", str(input_dir), "-o", str(output_dir), "-w", "3", "--debug"],
    )

    assert result.exit_code == 0, result.output
    assert "Starting FLAC converter with 3 workers" in result.output
    general = cli["config"].general
    assert general.input_root == input_dir
    assert general.output_root == output_dir
    assert general.workers == 3
    assert general.debug is True
    assert cli["log_dir"] == output_dir
    assert cli["log_debug"] is True
    assert cli["ran"] is True


def test_main_reads_config_file(config_yaml_path, cli):
    runner = CliRunner()

    result = runner.invoke(flacjack_main.app, ["--config", str(config_yaml_path)])

    assert result.exit_code == 0, result.output
    config = cli["config"]
    assert config.general.workers == 3
    assert config.tools.lame == "/opt/lame/bin/lame"


def test_main_cli_overrides_config_file(config_yaml_path, cli):
    runner = CliRunner()

    result = runner.invoke(flacjack_main.app, ["--config", str(config_yaml_path), "-w", "7"])

    assert result.exit_code == 0, result.output
    assert cli["config"].general.workers == 7


def test_main_missing_config_exits(tmp_path, cli):
    runner = CliRunner()

    result = runner.invoke(flacjack_main.app, ["--config", str(tmp_path / "nope.yaml")])

    assert result.exit_code == 1
    assert "ran" not in cli


def test_main_rejects_invalid_worker_count(tmp_path, cli):
    runner = CliRunner()

    result = runner.invoke(
        flacjack_main.app,
        ["-i", str(tmp_path / "in"), "-o", str(tmp_path / "out"), "-w", "0"],
    )

    assert result.exit_code == 1
    assert "ran" not in cli


def test_main_removes_stale_partial_outputs(tmp_path, cli):
    runner = CliRunner()
    output_dir = tmp_path / "mp3"
    (output_dir / "Artist").mkdir(parents=True)
    stale = output_dir / "Artist" / "Song.mp3.tmp"
    stale.write_bytes(b"partial")
    notes = output_dir / "Artist" / "notes.tmp"
    notes.write_text("user file")

    result = runner.invoke(flacjack_main.app, ["-i", str(tmp_path / "flac"), "-o", str(output_dir)])

    assert result.exit_code == 0, result.output
    assert not stale.exists()
    assert notes.exists()


def test_main_ctrl_c_exits_130(tmp_path, cli, monkeypatch):
    class InterruptedOrchestrator:
        @classmethod
        def from_config(cls, config, event_bus):
            return cls()

        def run(self):
            raise KeyboardInterrupt

    monkeypatch.setattr(flacjack_main, "Orchestrator", InterruptedOrchestrator)
    runner = CliRunner()

    result = runner.invoke(flacjack_main.app, ["-i", str(tmp_path / "flac"), "-o", str(tmp_path / "mp3")])

    assert result.exit_code == 130
    assert "stopped by user" in result.output
