"""Shared test fixtures for the Gist test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

# Tests run against config/test.toml unless a test points elsewhere
os.environ.setdefault("GIST_ENV", "test")
os.environ.setdefault("GIST_CONFIG_DIR", str(Path(__file__).resolve().parents[1] / "config"))

from gist.conversation.models import RunStats  # noqa: E402
from gist.streaming.events import (  # noqa: E402
    AgentEvent,
    ResultEvent,
    TextEvent,
    ToolResultEvent,
    ToolUseEvent,
)


@pytest.fixture
def config_files(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Callable[..., Path]:
    """Point GIST_CONFIG_DIR at a fresh directory and write TOML files into it.

    Usage:
        def test_something(config_files):
            config_files({"default.toml": "debug = false"}, env="staging")
    """
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("GIST_CONFIG_DIR", str(config_dir))

    def _write(files: dict[str, str] | None = None, env: str = "none") -> Path:
        monkeypatch.setenv("GIST_ENV", env)
        for filename, content in (files or {}).items():
            (config_dir / filename).write_text(content)
        return config_dir

    return _write


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    from gist.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def scenario_events() -> list[AgentEvent]:
    """One short exploration: narration, one Read call, the answer, stats."""
    return [
        TextEvent(content="Let me check."),
        ToolUseEvent(tool="Read", input={"file_path": "README.md"}),
        ToolResultEvent(content="# Demo\nA small web application."),
        TextEvent(content=" It's a web app."),
        ResultEvent(stats=RunStats(tool_uses=1, tokens=120, duration_ms=800)),
    ]
