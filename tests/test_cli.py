"""Tests for the ``elbman`` command line."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from elbman.cli import app
from elbman.io.credentials import ElbManagerSettings

runner = CliRunner()

REQUIRED = ["-s", "foo_sa", "-l", "foo_elb", "-t", "token"]


@pytest.fixture(autouse=True)
def no_env_file():
    with patch("elbman.cli.load_env", return_value=False), patch(
        "elbman.cli.ElbManagerSettings",
        side_effect=lambda: ElbManagerSettings(_env_file=None),
    ):
        yield


class TestOptions:
    @patch("elbman.cli.run_from_settings", return_value=0)
    def test_options_are_forwarded(self, mock_run):
        result = runner.invoke(
            app,
            ["--add", "-e", "prod", *REQUIRED, "--dryrun", "--timeout", "10", "--poll-interval", "0.5"],
        )

        assert result.exit_code == 0
        kwargs = mock_run.call_args.kwargs
        assert kwargs["add"] is True
        assert kwargs["remove"] is False
        assert kwargs["env"] == "prod"
        assert kwargs["server_array"] == "foo_sa"
        assert kwargs["elb"] == "foo_elb"
        assert kwargs["refresh_token"] == "token"
        assert kwargs["dry_run"] is True
        assert kwargs["timeout"] == 10
        assert kwargs["poll_interval"] == 0.5

    @patch("elbman.cli.run_from_settings", return_value=0)
    def test_long_option_names(self, mock_run):
        result = runner.invoke(
            app,
            [
                "--remove",
                "--server_array", "foo_sa",
                "--elb", "foo_elb",
                "--refresh_token", "token",
                "--api_url", "https://us-3.rightscale.com",
                "--api_version", "1.5",
                "--oauth2_api_url", "https://us-3.rightscale.com/api/oauth2",
            ],
        )

        assert result.exit_code == 0
        kwargs = mock_run.call_args.kwargs
        assert kwargs["remove"] is True
        assert kwargs["api_url"] == "https://us-3.rightscale.com"
        assert kwargs["oauth2_api_url"] == "https://us-3.rightscale.com/api/oauth2"

    @patch("elbman.cli.run_from_settings", return_value=5)
    def test_exit_code_is_propagated(self, mock_run):
        result = runner.invoke(app, ["--add", *REQUIRED])

        assert result.exit_code == 5


class TestValidation:
    def test_add_and_remove(self):
        result = runner.invoke(app, ["--add", "--remove", *REQUIRED])
        assert result.exit_code == 2

    def test_no_action(self):
        result = runner.invoke(app, REQUIRED)
        assert result.exit_code == 2

    def test_missing_refresh_token(self):
        result = runner.invoke(app, ["--add", "-s", "foo_sa", "-l", "foo_elb"])
        assert result.exit_code == 2

    def test_bad_env(self):
        result = runner.invoke(app, ["--add", "-e", "qa", *REQUIRED])
        assert result.exit_code == 2

    def test_dry_run_needs_no_server(self):
        result = runner.invoke(app, ["--add", *REQUIRED, "--dryrun"])
        assert result.exit_code == 0

    def test_invalid_timeout_in_environment(self, monkeypatch):
        monkeypatch.setenv("RS_TIMEOUT", "0")

        result = runner.invoke(app, ["--add", *REQUIRED])

        assert result.exit_code == 2

    def test_invalid_poll_interval_in_environment(self, monkeypatch):
        monkeypatch.setenv("RS_POLL_INTERVAL", "-1")

        result = runner.invoke(app, ["--add", *REQUIRED, "--dryrun"])

        assert result.exit_code == 2
