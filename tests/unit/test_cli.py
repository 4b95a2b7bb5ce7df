"""Unit tests for the command line interface."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from issue_sync.configuration.cli import typer_app
from issue_sync.configuration.env import Settings
from issue_sync.configuration.file import load_config_file
from issue_sync.configuration.models import ConfigFileModel
from issue_sync.jira.exceptions import JiraApiError
from issue_sync.synchronize.models import SyncDecision
from issue_sync.synchronize.results import RepositorySyncResult, SyncPassResult

runner = CliRunner()

SYNC_ARGS = [
    "sync",
    "--github-token",
    "token",
    "--jira-user",
    "user",
    "--jira-pass",
    "pass",
    "--jira-uri",
    "https://jira.example.com",
    "--repo-name",
    "owner/repo",
    "--jira-project",
    "PROJ",
]


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run without environment settings or configuration files, and leave logging alone."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    empty_settings = Settings.model_construct()
    monkeypatch.setattr("issue_sync.configuration.cli.settings", empty_settings)
    monkeypatch.setattr("issue_sync.configuration.reconcile.settings", empty_settings)
    monkeypatch.setattr("issue_sync.configuration.cli.configure_logging", MagicMock())


def make_pass_result(error: str | None = None) -> SyncPassResult:
    issue_results = None
    if error is None:
        issue_results = MagicMock()
        issue_results.decision_counts = {SyncDecision.CREATE: 2, SyncDecision.UPDATE: 1, SyncDecision.NOOP: 3}
        issue_results.failures = []
    return SyncPassResult([RepositorySyncResult("owner/repo", "PROJ", issue_results=issue_results, error=error)])


def test_sync_success() -> None:
    """Test that a successful pass prints a summary and exits cleanly."""
    with patch("issue_sync.configuration.cli.run_sync_workflow", AsyncMock(return_value=make_pass_result())) as workflow:
        result = runner.invoke(typer_app, SYNC_ARGS)

    assert result.exit_code == 0, result.output
    assert "owner/repo -> PROJ: 2 created, 1 updated, 3 unchanged, 0 with errors" in result.output
    sync_config = workflow.await_args.args[0]
    assert sync_config.jira_uri == "https://jira.example.com"
    assert sync_config.dry_run is False


def test_sync_dry_run() -> None:
    """Test that dry-run mode is announced and passed on."""
    with patch("issue_sync.configuration.cli.run_sync_workflow", AsyncMock(return_value=make_pass_result())) as workflow:
        result = runner.invoke(typer_app, [*SYNC_ARGS, "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "Dry run enabled" in result.output
    assert workflow.await_args.args[0].dry_run is True


def test_sync_failed_pass_exits_non_zero() -> None:
    """Test that a failed repository pass gives a non-zero exit code."""
    with patch("issue_sync.configuration.cli.run_sync_workflow", AsyncMock(return_value=make_pass_result(error="search failed"))):
        result = runner.invoke(typer_app, SYNC_ARGS)

    assert result.exit_code == 1


def test_sync_fatal_error_exits_non_zero() -> None:
    """Test that a fatal JIRA error gives a non-zero exit code."""
    with patch("issue_sync.configuration.cli.run_sync_workflow", AsyncMock(side_effect=JiraApiError("unauthorized", status_code=401))):
        result = runner.invoke(typer_app, SYNC_ARGS)

    assert result.exit_code == 1


def test_sync_configuration_error() -> None:
    """Test that a configuration error stops the run before synchronizing."""
    with patch("issue_sync.configuration.cli.run_sync_workflow", AsyncMock()) as workflow:
        result = runner.invoke(typer_app, [arg for arg in SYNC_ARGS if arg not in ("--jira-uri", "https://jira.example.com")])

    assert result.exit_code == 1
    workflow.assert_not_awaited()


def test_sync_reads_config_file(tmp_path: Path) -> None:
    """Test that settings missing from the command line are read from the config file."""
    config_path = tmp_path / "sync.yaml"
    config_path.write_text("jira-uri: https://file.example.com\nperiod: 0\n")
    args = [arg for arg in SYNC_ARGS if arg not in ("--jira-uri", "https://jira.example.com")]

    with patch("issue_sync.configuration.cli.run_sync_workflow", AsyncMock(return_value=make_pass_result())) as workflow:
        result = runner.invoke(typer_app, [*args, "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    sync_config = workflow.await_args.args[0]
    assert sync_config.jira_uri == "https://file.example.com"
    assert sync_config.config_file == config_path


def test_sync_configures_logging_before_reading_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that logging is set up before the config file is read, then follows the file's log level."""
    config_path = tmp_path / "sync.yaml"
    config_path.write_text("log-level: debug\n")
    calls: list[str] = []
    monkeypatch.setattr("issue_sync.configuration.cli.configure_logging", MagicMock(side_effect=lambda level: calls.append(f"logging:{level}")))
    original_load = load_config_file

    def recording_load(path: Path | None) -> ConfigFileModel:
        calls.append("load")
        return original_load(path)

    monkeypatch.setattr("issue_sync.configuration.cli.load_config_file", recording_load)

    with patch("issue_sync.configuration.cli.run_sync_workflow", AsyncMock(return_value=make_pass_result())):
        result = runner.invoke(typer_app, [*SYNC_ARGS, "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert calls == ["logging:info", "load", "logging:debug"]


def test_sync_cli_log_level_wins_over_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that --log-level is applied once and the file's log level is ignored."""
    config_path = tmp_path / "sync.yaml"
    config_path.write_text("log-level: debug\n")
    logging_mock = MagicMock()
    monkeypatch.setattr("issue_sync.configuration.cli.configure_logging", logging_mock)

    with patch("issue_sync.configuration.cli.run_sync_workflow", AsyncMock(return_value=make_pass_result())):
        result = runner.invoke(typer_app, [*SYNC_ARGS, "--config", str(config_path), "--log-level", "error"])

    assert result.exit_code == 0, result.output
    logging_mock.assert_called_once_with("error")


def test_translate_file(tmp_path: Path) -> None:
    """Test that a Markdown file is printed as JIRA markup."""
    markdown_path = tmp_path / "issue.md"
    markdown_path.write_text("# Title\n**bold** text\n")

    result = runner.invoke(typer_app, ["translate", str(markdown_path)])

    assert result.exit_code == 0
    assert result.output == "h1. Title\n*bold* text\n\n"


def test_translate_stdin() -> None:
    """Test that standard input is translated when the path is a dash."""
    result = runner.invoke(typer_app, ["translate", "-"], input="~~old~~ [docs](https://example.com)")

    assert result.exit_code == 0
    assert result.output == "-old- [docs|https://example.com]\n"


def test_translate_missing_file(tmp_path: Path) -> None:
    """Test that a missing file is reported."""
    result = runner.invoke(typer_app, ["translate", str(tmp_path / "missing.md")])

    assert result.exit_code == 1
