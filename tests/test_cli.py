"""Tests for the command-line interface."""

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from prompt_refiner.cli import app
from prompt_refiner.config import DaemonConfig
from prompt_refiner.errors import RefineErrorCode, RefinerError
from prompt_refiner.refinement import PromptRefiner

runner = CliRunner()


@pytest.fixture
def mock_refine():
    with patch.object(PromptRefiner, 'refine', new=AsyncMock(return_value="Refined prompt")) as refine:
        yield refine


class TestRefineCommand:

    def test_plain_output(self, mock_refine):
        result = runner.invoke(app, ["refine", "draft prompt", "--plain"])

        assert result.exit_code == 0
        assert "Refined prompt" in result.stdout
        assert mock_refine.await_args.args[0] == "draft prompt"

    def test_panel_output(self, mock_refine):
        result = runner.invoke(app, ["refine", "draft prompt"])

        assert result.exit_code == 0
        assert "Refined prompt" in result.stdout

    def test_reads_prompt_from_stdin(self, mock_refine):
        result = runner.invoke(app, ["refine", "--plain"], input="piped prompt\n")

        assert result.exit_code == 0
        assert mock_refine.await_args.args[0] == "piped prompt\n"

    def test_options_are_forwarded(self, mock_refine):
        result = runner.invoke(app, [
            "refine", "draft",
            "--url", "http://cli.test/hook",
            "--timeout-ms", "2500",
            "--daemon",
            "--socket", "/tmp/cli.sock",
        ])

        assert result.exit_code == 0
        options = mock_refine.await_args.args[1]
        assert options.url == "http://cli.test/hook"
        assert options.timeout_ms == 2500
        assert options.use_daemon is True
        assert options.socket_path == "/tmp/cli.sock"

    def test_daemon_flag_left_unset(self, mock_refine):
        runner.invoke(app, ["refine", "draft"])

        assert mock_refine.await_args.args[1].use_daemon is None

    def test_empty_prompt_exits_with_error(self, mock_refine):
        result = runner.invoke(app, ["refine"], input="   \n")

        assert result.exit_code == 1
        mock_refine.assert_not_awaited()

    def test_refinement_error_exits_with_error(self, mock_refine):
        mock_refine.side_effect = RefinerError("Webhook error: 500 boom", RefineErrorCode.WEBHOOK_ERROR)

        result = runner.invoke(app, ["refine", "draft", "--plain"])

        assert result.exit_code == 1
        assert "Refined prompt" not in result.stdout

    def test_bad_config_file_exits_with_error(self, mock_refine, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("- not\n- a mapping\n")

        result = runner.invoke(app, ["refine", "draft", "--config", str(bad)])

        assert result.exit_code == 1
        mock_refine.assert_not_awaited()

    def test_verbose_shows_configuration(self, mock_refine):
        result = runner.invoke(app, ["refine", "draft", "-v", "--url", "http://cli.test/hook"])

        assert result.exit_code == 0
        assert "webhook" in result.output


class TestDaemonCommand:

    def test_flags_build_daemon_config(self, tmp_path):
        socket = str(tmp_path / "d.sock")

        with patch('prompt_refiner.cli.run_daemon') as run_daemon:
            result = runner.invoke(app, [
                "daemon", "--socket", socket, "--cache-ttl-ms", "1000", "--cache-max", "5",
            ])

        assert result.exit_code == 0
        daemon_config, refiner_config = run_daemon.call_args.args
        assert daemon_config == DaemonConfig(socket_path=socket, cache_ttl_ms=1000, cache_max_entries=5)
        assert refiner_config.max_retries >= 0

    def test_config_file_settings(self, temp_config_file, monkeypatch):
        for name in ('REFINER_WEBHOOK_URL', 'REFINER_DAEMON_SOCKET', 'REFINER_CACHE_TTL_MS', 'REFINER_CACHE_MAX'):
            monkeypatch.delenv(name, raising=False)

        with patch('prompt_refiner.cli.run_daemon') as run_daemon:
            result = runner.invoke(app, ["daemon", "--config", str(temp_config_file)])

        assert result.exit_code == 0
        daemon_config, refiner_config = run_daemon.call_args.args
        assert daemon_config.socket_path == '/tmp/file-refiner.sock'
        assert daemon_config.cache_max_entries == 50
        assert refiner_config.webhook_url == 'http://file.test/webhook'
