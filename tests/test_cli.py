"""CLI tests."""

from typer.testing import CliRunner

from qrgate.cli.app import app

runner = CliRunner()


def test_validate_url_ok():
    result = runner.invoke(app, ["validate-url", "https://example.com"])
    assert result.exit_code == 0
    assert "Valid URL" in result.output


def test_validate_url_rejects():
    result = runner.invoke(app, ["validate-url", "ftp://example.com"])
    assert result.exit_code == 1
    assert "Only HTTP and HTTPS URLs are supported" in result.output


def test_generate_writes_png(tmp_path):
    out = tmp_path / "code.png"
    result = runner.invoke(app, ["generate", "https://example.com", "--out", str(out)])
    assert result.exit_code == 0
    assert out.read_bytes().startswith(b"\x89PNG")


def test_generate_invalid_url_writes_nothing(tmp_path):
    out = tmp_path / "code.png"
    result = runner.invoke(app, ["generate", "not a url", "--out", str(out)])
    assert result.exit_code == 1
    assert not out.exists()


def test_limits_table():
    result = runner.invoke(app, ["limits"])
    assert result.exit_code == 0
    assert "window_ms" in result.output
    assert "300000" in result.output


def test_simulate_counts_decisions():
    result = runner.invoke(app, ["simulate", "--requests", "7", "--spacing-ms", "0"])
    assert result.exit_code == 0
    assert "admitted=5 rejected=2" in result.output


def test_simulate_spaced_calls_refill():
    result = runner.invoke(
        app, ["simulate", "--requests", "7", "--spacing-ms", "300000", "--max-tokens", "1"]
    )
    assert result.exit_code == 0
    assert "admitted=7 rejected=0" in result.output
