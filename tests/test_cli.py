"""Tests for CLI functions and process exit codes."""

from unittest.mock import patch

import pytest

from infra_explorer import __version__
from infra_explorer.adapters.config import DEFAULT_API_URL
from infra_explorer.adapters.terminal import TerminalUnavailableError
from infra_explorer.cli import _setup_argparse, cli_main, load_config
from infra_explorer.main import EXIT_FAILURE, EXIT_INTERRUPTED, main


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("API_URL", "API_TIMEOUT_SECONDS", "LOG_LEVEL", "LOG_FILE", "LOG_REQUESTS"):
        monkeypatch.delenv(f"INFRA_EXPLORER_{name}", raising=False)


class TestSetupArgparse:
    """Tests for _setup_argparse function."""

    def test_defaults_leave_options_unset(self) -> None:
        """Given no arguments, when parsing, then every option is None."""
        args = _setup_argparse().parse_args([])

        assert args.api_url is None
        assert args.api_timeout_seconds is None
        assert args.log_requests is None

    def test_version_flag_prints_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Given --version, when parsing, then the version is printed and parsing exits."""
        with pytest.raises(SystemExit) as exc_info:
            _setup_argparse().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert f"infra-explorer {__version__}" in capsys.readouterr().out


class TestLoadConfig:
    """Tests for load_config function."""

    def test_without_arguments_uses_default_url(self) -> None:
        """Given no arguments, when loading config, then the default API URL is used."""
        config = load_config([])

        assert config.api_url == DEFAULT_API_URL

    def test_command_line_overrides_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Given an env URL and --api-url, when loading config, then the flag wins."""
        monkeypatch.setenv("INFRA_EXPLORER_API_URL", "http://env.example/api")

        config = load_config(["--api-url", "http://flag.example/api", "--timeout", "3"])

        assert config.api_url == "http://flag.example/api"
        assert config.api_timeout_seconds == 3.0

    def test_unset_flags_keep_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Given an env URL and no flag, when loading config, then the env value is kept."""
        monkeypatch.setenv("INFRA_EXPLORER_API_URL", "http://env.example/api")

        config = load_config(["--log-requests"])

        assert config.api_url == "http://env.example/api"
        assert config.log_requests is True


class TestCliMain:
    """Tests for cli_main function."""

    def test_invalid_configuration_exits_with_failure(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Given an invalid URL, when running the CLI, then it exits with code 1."""
        with pytest.raises(SystemExit) as exc_info:
            cli_main(["--api-url", "ftp://example.com"])

        assert exc_info.value.code == 1
        assert "invalid configuration" in capsys.readouterr().err

    @patch("infra_explorer.cli.main", return_value=0)
    def test_exit_code_comes_from_main(self, mock_main: object) -> None:
        """Given main returns 0, when running the CLI, then the process exits with 0."""
        with pytest.raises(SystemExit) as exc_info:
            cli_main([])

        assert exc_info.value.code == 0


class TestMain:
    """Tests for main exit codes."""

    @patch("infra_explorer.main.configure_logging")
    @patch(
        "infra_explorer.main.curses_terminal",
        side_effect=TerminalUnavailableError("standard input and output must be a terminal"),
    )
    def test_when_terminal_unavailable_then_returns_failure(
        self, mock_terminal: object, mock_logging: object
    ) -> None:
        """Given no terminal, when running main, then it returns exit code 1."""
        assert main(load_config([])) == EXIT_FAILURE

    @patch("infra_explorer.main.configure_logging")
    @patch("infra_explorer.main.curses_terminal", side_effect=KeyboardInterrupt)
    def test_when_interrupted_then_returns_130(
        self, mock_terminal: object, mock_logging: object
    ) -> None:
        """Given Ctrl-C, when running main, then it returns exit code 130."""
        assert main(load_config([])) == EXIT_INTERRUPTED
