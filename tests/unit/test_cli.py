"""CLI commands run offline: no API key, in-memory store."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from newsframes.cli.app import cli
from newsframes.core.config import set_core_config

_ENV_VARS = [
    "NEWSFRAMES_CONFIG_PATH",
    "NEWSFRAMES_DEFAULT_LLM",
    "NEWSFRAMES_STORAGE_BACKEND",
    "NEWSFRAMES_GRAPH_CONFIG_PATH",
    "GEMINI_API_KEY",
    "OPENAI_API_KEY",
]


@pytest.fixture
def runner(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield CliRunner()
    set_core_config(None)  # type: ignore[arg-type]


def test_graph_prints_structure(runner):
    result = runner.invoke(cli, ["graph"])
    assert result.exit_code == 0, result.output
    structure = json.loads(result.stdout)
    assert structure["entry"] == "anonymizer"
    assert structure["steps"][1]["kind"] == "parallel-group"


def test_analyze_without_api_key_still_returns_a_document(runner):
    result = runner.invoke(cli, ["analyze", "Dog attacks 4-year-old causing injuries"])
    assert result.exit_code == 0, result.output

    body = json.loads(result.stdout)
    assert set(body) == {"message", "data", "graph_structure"}
    data = body["data"]
    assert data["input_headline"] == "Dog attacks 4-year-old causing injuries"
    assert data["anonymization_result"]["failure_kind"] == "configuration"
    assert all(data["analysis_error_flags"].values())
    assert body["message"] == "Initial proper noun replacement failed."


def test_show_refuses_memory_backend(runner):
    result = runner.invoke(cli, ["show", "does-not-exist"])
    assert result.exit_code == 1
    assert "memory storage backend keeps nothing between runs" in result.output


def test_show_unknown_id(runner, monkeypatch):
    from newsframes.modules.providers.storage.memory import InMemoryHeadlineStore

    # A non-memory backend whose store is empty.
    monkeypatch.setenv("NEWSFRAMES_STORAGE_BACKEND", "postgres")
    monkeypatch.setattr("newsframes.cli.app.create_store", lambda cfg: InMemoryHeadlineStore())

    result = runner.invoke(cli, ["show", "does-not-exist"])
    assert result.exit_code == 1
    assert "No record with id does-not-exist" in result.output


def test_broken_graph_file_is_reported(runner, tmp_path, monkeypatch):
    path = tmp_path / "broken.json"
    path.write_text("{", encoding="utf-8")
    monkeypatch.setenv("NEWSFRAMES_GRAPH_CONFIG_PATH", str(path))

    result = runner.invoke(cli, ["graph"])
    assert result.exit_code == 1
    assert "Cannot load graph definition" in result.output
