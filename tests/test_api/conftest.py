"""Shared fixtures for API tests."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from pgn_mule.admin.commands import CommandHandler
from pgn_mule.api.app import create_app
from pgn_mule.api.dependencies import get_command_handler, get_relay_service, get_store
from pgn_mule.replacements.repository import ReplacementRepository
from pgn_mule.replacements.service import ReplacementService
from pgn_mule.services.relay_service import RelayService
from pgn_mule.sources.repository import SourceRepository


@pytest.fixture
def mock_scheduler():
    scheduler = MagicMock()
    scheduler.active = ["wch"]
    return scheduler


@pytest.fixture
def relay_service(memory_store, mock_scheduler, test_settings, clock):
    """RelayService over the in-memory store; polling is mocked out."""
    return RelayService(
        SourceRepository(memory_store),
        ReplacementService(ReplacementRepository(memory_store)),
        mock_scheduler,
        settings=test_settings,
        clock=clock,
    )


@pytest.fixture
def client(memory_store, relay_service):
    """TestClient with dependencies overridden. Lifespan is not run."""
    app = create_app()
    app.dependency_overrides[get_store] = lambda: memory_store
    app.dependency_overrides[get_relay_service] = lambda: relay_service
    app.dependency_overrides[get_command_handler] = lambda: CommandHandler(relay_service)
    yield TestClient(app)
    app.dependency_overrides.clear()
