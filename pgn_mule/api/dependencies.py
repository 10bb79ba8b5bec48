"""
Dependency injection for FastAPI endpoints.
"""

from pgn_mule.admin.commands import CommandHandler
from pgn_mule.ingestion.http_client import UpstreamClient
from pgn_mule.ingestion.scheduler import PollScheduler
from pgn_mule.notifications.channels import Notifier, create_notifier
from pgn_mule.replacements.repository import ReplacementRepository
from pgn_mule.replacements.service import ReplacementService
from pgn_mule.services.relay_service import RelayService
from pgn_mule.sources.repository import SourceRepository
from pgn_mule.storage.store import KeyValueStore

# Global service instances (initialized on first request or at startup)
_store: KeyValueStore | None = None
_upstream_client: UpstreamClient | None = None
_notifier: Notifier | None = None
_relay_service: RelayService | None = None


async def get_store() -> KeyValueStore:
    """Get the connected key-value store."""
    global _store

    if _store is None:
        _store = KeyValueStore()
        await _store.connect()

    return _store


async def get_relay_service() -> RelayService:
    """
    Get the relay service instance.

    Creates the singleton service together with its poll scheduler,
    upstream client and notifier.
    """
    global _upstream_client, _notifier, _relay_service

    if _relay_service is None:
        store = await get_store()
        repository = SourceRepository(store)

        _upstream_client = UpstreamClient()
        await _upstream_client.open()
        _notifier = create_notifier()

        scheduler = PollScheduler(repository, _upstream_client, _notifier)
        _relay_service = RelayService(
            repository,
            ReplacementService(ReplacementRepository(store)),
            scheduler,
        )

    return _relay_service


async def get_command_handler() -> CommandHandler:
    return CommandHandler(await get_relay_service())


async def cleanup_dependencies() -> None:
    """Stop polling and release connections."""
    global _store, _upstream_client, _notifier, _relay_service

    if _relay_service is not None:
        await _relay_service.scheduler.stop()
        _relay_service = None

    if _upstream_client is not None:
        await _upstream_client.close()
        _upstream_client = None

    if _store is not None:
        await _store.close()
        _store = None

    _notifier = None
