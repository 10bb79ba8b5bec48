"""Tests for notification channels."""

from urllib.parse import parse_qs

import httpx
import pytest
import respx

from pgn_mule.config.settings import Settings
from pgn_mule.notifications.channels import LogNotifier, ZulipNotifier, create_notifier

ZULIP_URL = "https://chess.zulipchat.com/api/v1/messages"


@pytest.fixture
def zulip():
    return ZulipNotifier(
        realm="https://chess.zulipchat.com/",
        username="relay-bot@chess.zulipchat.com",
        api_key="secret",
        stream="broadcast",
        topic="pgn-mule",
    )


class TestSayOnce:
    """Tests for duplicate suppression."""

    @pytest.mark.asyncio
    async def test_identical_consecutive_message_is_suppressed(self):
        notifier = LogNotifier()

        assert await notifier.say_once("wch Slowing refresh to 60 seconds") is True
        assert await notifier.say_once("wch Slowing refresh to 60 seconds") is False

    @pytest.mark.asyncio
    async def test_different_message_in_between_resets(self):
        notifier = LogNotifier()

        await notifier.say_once("a")
        await notifier.say("b")

        assert await notifier.say_once("a") is True


class TestZulipNotifier:
    """Tests for Zulip delivery."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_posts_stream_message(self, zulip):
        route = respx.post(ZULIP_URL).mock(return_value=httpx.Response(200, json={"result": "success"}))

        assert await zulip.say("wch removed due to inactivity") is True

        request = route.calls.last.request
        form = parse_qs(request.content.decode())
        assert form["type"] == ["stream"]
        assert form["to"] == ["broadcast"]
        assert form["topic"] == ["pgn-mule"]
        assert form["content"] == ["wch removed due to inactivity"]
        assert request.headers["Authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_status_returns_false(self, zulip):
        respx.post(ZULIP_URL).mock(return_value=httpx.Response(401, json={"result": "error"}))

        assert await zulip.say("hello") is False

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_failure_returns_false(self, zulip):
        respx.post(ZULIP_URL).mock(side_effect=httpx.ConnectError("refused"))

        assert await zulip.say("hello") is False


class TestCreateNotifier:
    """Tests for channel selection from settings."""

    def test_log_when_unconfigured(self):
        assert isinstance(create_notifier(Settings(zulip_realm=None)), LogNotifier)

    def test_zulip_when_configured(self):
        settings = Settings(
            zulip_realm="https://chess.zulipchat.com",
            zulip_username="bot@chess.zulipchat.com",
            zulip_api_key="secret",
        )

        assert isinstance(create_notifier(settings), ZulipNotifier)
