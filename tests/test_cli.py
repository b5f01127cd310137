"""Tests for the command-line interface."""

import pytest
from typer.testing import CliRunner

from readitout.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("STORAGE_AUDIO_DIR", str(tmp_path / "audio"))


def test_voices_lists_styles():
    result = runner.invoke(app, ["voices"])

    assert result.exit_code == 0
    assert "narrator" in result.output
    assert "2min" in result.output


def test_create_requires_exactly_one_source():
    result = runner.invoke(app, ["create", "--url", "https://example.com", "--text", "Both"])

    assert result.exit_code == 1
    assert "Exactly one" in result.output


def test_show_missing_podcast():
    result = runner.invoke(app, ["show", "missing-id"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_init_writes_env_example(tmp_path):
    result = runner.invoke(app, ["init"])

    assert result.exit_code == 0
    assert "STORAGE_BACKEND" in (tmp_path / ".env.example").read_text()
