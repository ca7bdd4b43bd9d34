from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner
from review_relay.cli import main


@patch("review_relay.cli.load_dotenv")
@patch("review_relay.cli.uvicorn")
def test_cli_serves_app(mock_uvicorn, mock_load_dotenv, monkeypatch):
    """Test CLI builds the app and starts uvicorn."""
    monkeypatch.setenv("REVIEW_RELAY_API_KEYS", "key-a,key-b")
    runner = CliRunner()

    with runner.isolated_filesystem():
        result = runner.invoke(main, ["--port", "8123", "--host", "0.0.0.0"])

    assert result.exit_code == 0
    mock_load_dotenv.assert_called_once()
    call_args = mock_uvicorn.run.call_args
    assert call_args[1]["host"] == "0.0.0.0"
    assert call_args[1]["port"] == 8123
    assert "API keys loaded: 2" in result.output


@patch("review_relay.cli.load_dotenv")
@patch("review_relay.cli.uvicorn")
def test_cli_reads_config_file(mock_uvicorn, mock_load_dotenv, monkeypatch):
    """Test the default config file in the working directory is used."""
    for var in ("PORT", "REVIEW_RELAY_API_KEYS", "ANTHROPIC_API_KEYS", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    runner = CliRunner()

    with runner.isolated_filesystem():
        Path(".review-relay.json").write_text('{"port": 6001, "api_keys": ["file-key"]}')
        result = runner.invoke(main, [])

    assert result.exit_code == 0
    assert mock_uvicorn.run.call_args[1]["port"] == 6001
    assert "API keys loaded: 1" in result.output


@patch("review_relay.cli.load_dotenv")
@patch("review_relay.cli.uvicorn")
def test_cli_invalid_config_exits_2(mock_uvicorn, mock_load_dotenv):
    """Test configuration errors exit with code 2."""
    runner = CliRunner()

    with runner.isolated_filesystem():
        Path("bad.json").write_text('{"unknown_setting": 1}')
        result = runner.invoke(main, ["--config", "bad.json"])

    assert result.exit_code == 2
    assert "unknown_setting" in result.output
    mock_uvicorn.run.assert_not_called()


@patch("review_relay.cli.load_dotenv")
@patch("review_relay.cli.uvicorn")
def test_cli_keyboard_interrupt(mock_uvicorn, mock_load_dotenv):
    """Test Ctrl-C exits with the SIGINT code."""
    mock_uvicorn.run.side_effect = KeyboardInterrupt()
    runner = CliRunner()

    with runner.isolated_filesystem():
        result = runner.invoke(main, [])

    assert result.exit_code == 130
    assert "cancelled" in result.output


def test_cli_version():
    """Test --version prints the package version."""
    result = CliRunner().invoke(main, ["--version"])

    assert result.exit_code == 0
    assert "review-relay" in result.output
