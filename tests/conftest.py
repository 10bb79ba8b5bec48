"""Pytest fixtures for pgn-mule tests."""

from datetime import datetime, timedelta, timezone

import pytest

from pgn_mule.config.settings import Settings

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class InMemoryStore:
    """Dict-backed stand-in for KeyValueStore."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(data or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None

    async def keys(self, prefix: str) -> list[str]:
        return [k for k in self.data if k.startswith(prefix)]

    async def health_check(self) -> bool:
        return True


class FakeClock:
    """Manually advanced clock returning aware UTC datetimes."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        redis_url="redis://localhost:6379/1",
        public_host="relay.test",
        public_port=3000,
        default_update_freq_seconds=10,
        slow_poll_rate_seconds=60,
        minutes_inactivity_slowdown=30,
        minutes_inactivity_die=1440,
        delay_max_seconds=3600,
    )


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def _make_game(round: str, white: str = "Carlsen", black: str = "Nepo", moves: str = "1. e4 e5 *") -> str:
    return (
        f'[Event "Candidates"]\n'
        f'[Round "{round}"]\n'
        f'[White "{white}"]\n'
        f'[Black "{black}"]\n'
        f"\n{moves}"
    )


@pytest.fixture
def two_game_pgn() -> str:
    """Two concatenated games, rounds 3.1 and 3.2."""
    return "\n\n".join([
        _make_game("3.1", "Carlsen", "Nepo", "1. e4 e5 2. Nf3 Nc6 *"),
        _make_game("3.2", "Ding", "Caruana", "1. d4 d5 2. c4 e6 *"),
    ])


@pytest.fixture
def make_game():
    """Factory for single-game PGN text: make_game(round, white, black, moves)."""
    return _make_game
