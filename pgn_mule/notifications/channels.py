"""Notification channel implementations for operator messages.

Provides an ABC for notification channels plus a Zulip stream channel and
a log-only fallback. Delivery failures are logged and never raised, so a
chat outage cannot stall a poll cycle.
"""

import logging
from abc import ABC, abstractmethod

import httpx

from pgn_mule.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Abstract base for notification delivery channels."""

    def __init__(self) -> None:
        self._last_message: str | None = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this channel (e.g. 'zulip', 'log')."""

    @abstractmethod
    async def send(self, text: str) -> bool:
        """Deliver a message.

        Returns:
            True if delivery succeeded, False otherwise.
        """

    async def say(self, text: str) -> bool:
        self._last_message = text
        return await self.send(text)

    async def say_once(self, text: str) -> bool:
        """Send unless identical to the immediately preceding message."""
        if text == self._last_message:
            return False
        return await self.say(text)


class LogNotifier(Notifier):
    """Writes notifications to the application log."""

    @property
    def name(self) -> str:
        return "log"

    async def send(self, text: str) -> bool:
        logger.info("Notification: %s", text)
        return True


class ZulipNotifier(Notifier):
    """Posts notifications to a Zulip stream topic.

    Creates a new ``httpx.AsyncClient`` per call (short-lived, no pooling).
    """

    def __init__(
        self,
        realm: str,
        username: str,
        api_key: str,
        stream: str,
        topic: str,
        timeout: float = 10.0,
    ) -> None:
        super().__init__()
        self._url = f"{realm.rstrip('/')}/api/v1/messages"
        self._auth = (username, api_key)
        self._stream = stream
        self._topic = topic
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "zulip"

    async def send(self, text: str) -> bool:
        payload = {
            "type": "stream",
            "to": self._stream,
            "topic": self._topic,
            "content": text,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(self._url, data=payload, auth=self._auth)
                if resp.is_success:
                    return True
                logger.warning("Zulip returned %d: %s", resp.status_code, resp.text[:200])
                return False
        except httpx.TimeoutException:
            logger.warning("Zulip timed out sending notification")
            return False
        except httpx.HTTPError as e:
            logger.warning("Zulip notification failed: %s", e)
            return False


def create_notifier(settings: Settings | None = None) -> Notifier:
    """Zulip when configured, log-only otherwise."""
    settings = settings or get_settings()
    if settings.zulip_configured:
        return ZulipNotifier(
            realm=settings.zulip_realm,
            username=settings.zulip_username,
            api_key=settings.zulip_api_key,
            stream=settings.zulip_stream,
            topic=settings.zulip_topic,
        )
    return LogNotifier()
