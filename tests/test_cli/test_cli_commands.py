"""Tests for the pgn-mule CLI."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from pgn_mule import __version__
from pgn_mule.cli import main
from pgn_mule.config.settings import get_settings
from pgn_mule.sources.schemas import Source, source_to_json


@pytest.fixture
def runner():
    return CliRunner()


class _StoreContext:
    """Async context manager yielding a prepared in-memory store."""

    def __init__(self, store):
        self._store = store

    async def __aenter__(self):
        return self._store

    async def __aexit__(self, *exc):
        return None


def test_version(runner):
    result = runner.invoke(main, ["version"])

    assert result.exit_code == 0
    assert result.output.strip() == f"Version: {__version__}"


def test_list_sources(runner, memory_store):
    memory_store.data["source:wch"] = source_to_json(
        Source(name="wch", url="https://example.com/wch.pgn", update_freq_seconds=5)
    )

    with patch("pgn_mule.storage.store.KeyValueStore", return_value=_StoreContext(memory_store)):
        result = runner.invoke(main, ["list-sources"])

    assert result.exit_code == 0
    assert "wch" in result.output
    assert "every 5s, delay 0s" in result.output
    assert "https://example.com/wch.pgn" in result.output


def test_list_sources_empty(runner, memory_store):
    with patch("pgn_mule.storage.store.KeyValueStore", return_value=_StoreContext(memory_store)):
        result = runner.invoke(main, ["list-sources"])

    assert result.output.strip() == "No active sources"


def _service():
    service = MagicMock()
    service.arm_polling = True
    return service


def test_command_prints_reply(runner):
    service = _service()
    handler = MagicMock()
    handler.handle = AsyncMock(return_value="Version: x")

    with patch("pgn_mule.api.dependencies.get_relay_service", AsyncMock(return_value=service)), \
            patch("pgn_mule.admin.commands.CommandHandler", return_value=handler), \
            patch("pgn_mule.api.dependencies.cleanup_dependencies", AsyncMock()) as cleanup:
        result = runner.invoke(main, ["command", "version"])

    assert result.exit_code == 0
    assert "Version: x" in result.output
    assert "Saved only" not in result.output
    handler.handle.assert_awaited_once_with("version")
    cleanup.assert_awaited_once()


def test_command_add_persists_without_polling(runner):
    service = _service()
    handler = MagicMock()
    handler.handle = AsyncMock(return_value="wch -> https://example.com/wch.pgn")

    with patch("pgn_mule.api.dependencies.get_relay_service", AsyncMock(return_value=service)), \
            patch("pgn_mule.admin.commands.CommandHandler", return_value=handler), \
            patch("pgn_mule.api.dependencies.cleanup_dependencies", AsyncMock()):
        result = runner.invoke(main, ["command", "add", "wch", "https://example.com/wch.pgn"])

    assert result.exit_code == 0
    assert service.arm_polling is False
    assert "Saved only" in result.output
    assert "/admin/command" in result.output


def test_command_unknown_exits_nonzero(runner):
    handler = MagicMock()
    handler.handle = AsyncMock(return_value=None)

    with patch("pgn_mule.api.dependencies.get_relay_service", AsyncMock(return_value=_service())), \
            patch("pgn_mule.admin.commands.CommandHandler", return_value=handler), \
            patch("pgn_mule.api.dependencies.cleanup_dependencies", AsyncMock()):
        result = runner.invoke(main, ["command", "good", "morning"])

    assert result.exit_code == 1
    handler.handle.assert_awaited_once_with("good morning")


def test_health_reports_unreachable_redis(runner):
    store = MagicMock()
    store.connect = AsyncMock(side_effect=ConnectionError("refused"))

    with patch("pgn_mule.storage.store.KeyValueStore", return_value=store):
        result = runner.invoke(main, ["health"])

    assert result.exit_code == 1
    assert "redis: False" in result.output


def test_debug_flag_raises_log_level(runner, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    get_settings.cache_clear()

    try:
        result = runner.invoke(main, ["--debug", "version"])

        assert result.exit_code == 0
        assert get_settings().log_level == "DEBUG"
    finally:
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        get_settings.cache_clear()
