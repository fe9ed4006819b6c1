"""Tests for the bot CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

from click.testing import CliRunner

from mpbot.cli import cli


def _write_config(tmp_path: Path, **kwargs: Any) -> str:
    data: dict[str, Any] = {
        "verificationToken": "vt",
        "secret": "top-secret",
        "senderId": "sid",
        "auth": {"clientId": "cid", "clientSecret": "cs"},
        "port": 4000,
    }
    data.update(kwargs)
    p = tmp_path / "config.json"
    p.write_text(json.dumps(data))
    return str(p)


def test_check_config_outputs_public_settings(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", _write_config(tmp_path), "check-config"])
    assert result.exit_code == 0
    output = json.loads(result.output)
    assert output["senderId"] == "sid"
    assert output["port"] == 4000
    assert "top-secret" not in result.output


def test_check_config_rejects_placeholders(tmp_path: Path) -> None:
    runner = CliRunner()
    config = _write_config(tmp_path, verificationToken="change-me")
    result = runner.invoke(cli, ["--config", config, "check-config"])
    assert result.exit_code == 1
    assert "update the configuration" in result.output


def test_missing_config_file_fails(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(tmp_path / "nope.json"), "check-config"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_serve_runs_uvicorn_with_config_address(tmp_path: Path) -> None:
    runner = CliRunner()
    with patch("mpbot.cli.uvicorn.run") as mock_run, \
         patch("mpbot.cli.configure_logging") as mock_logging:
        result = runner.invoke(cli, ["--config", _write_config(tmp_path), "serve"])

    assert result.exit_code == 0, result.output
    mock_logging.assert_called_once_with("INFO")
    mock_run.assert_called_once()
    kwargs = mock_run.call_args[1]
    assert kwargs["host"] == "localhost"
    assert kwargs["port"] == 4000


def test_serve_options_override_config(tmp_path: Path) -> None:
    runner = CliRunner()
    with patch("mpbot.cli.uvicorn.run") as mock_run, patch("mpbot.cli.configure_logging"):
        result = runner.invoke(cli, [
            "--config", _write_config(tmp_path),
            "serve", "--host", "0.0.0.0", "--port", "9000", "--log-level", "debug",
        ])

    assert result.exit_code == 0, result.output
    kwargs = mock_run.call_args[1]
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 9000
    assert kwargs["log_level"] == "debug"


def test_serve_refuses_placeholder_config(tmp_path: Path) -> None:
    runner = CliRunner()
    config = _write_config(tmp_path, auth={"clientId": "your-client-id", "clientSecret": "x"})
    with patch("mpbot.cli.uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["--config", config, "serve"])

    assert result.exit_code == 1
    mock_run.assert_not_called()
