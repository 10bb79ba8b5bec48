"""Tests for the aggregated feed endpoint."""

from pgn_mule.history.buffer import PgnHistory
from pgn_mule.pgn.games import join_games, split_games
from pgn_mule.sources.schemas import Source, source_to_json


def _store_source(memory_store, clock, name: str, snapshot: str, delay: int = 0) -> None:
    history = PgnHistory(delay_seconds=delay)
    history.add(snapshot, at=clock.now)
    source = Source(
        name=name,
        url=f"https://example.com/{name}.pgn",
        delay_seconds=delay,
        history=history,
        date_last_polled=clock.now,
        date_last_updated=clock.now,
    )
    memory_store.data[f"source:{name}"] = source_to_json(source)


class TestFeedEndpoint:
    """Test GET /{names}."""

    def test_root(self, client):
        resp = client.get("/")

        assert resp.status_code == 200
        assert resp.text == "Hello World"

    def test_favicon_not_found(self, client):
        assert client.get("/favicon.ico").status_code == 404

    def test_round_and_slice_across_sources(self, client, memory_store, clock, make_game):
        _store_source(memory_store, clock, "A", join_games([make_game("2.1"), make_game("3.1", "A1", "A2")]))
        _store_source(memory_store, clock, "B", join_games([make_game("3.2", "B1", "B2"), make_game("3.3")]))

        resp = client.get("/A/B", params={"round": "3", "slice": "1-2"})

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert split_games(resp.text) == [make_game("3.1", "A1", "A2"), make_game("3.2", "B1", "B2")]

    def test_unknown_source_gives_empty_body(self, client):
        resp = client.get("/nothing-here")

        assert resp.status_code == 200
        assert resp.text == ""

    def test_delayed_source_is_empty_until_delay_passes(self, client, memory_store, clock, make_game):
        _store_source(memory_store, clock, "wch", make_game("1"), delay=60)

        assert client.get("/wch").text == ""

        clock.advance(seconds=61)
        assert client.get("/wch").text == make_game("1")

    def test_shredder_flag(self, client, memory_store, clock, make_game):
        _store_source(memory_store, clock, "wch", make_game("1", moves="1. O-O O-O *"))

        assert client.get("/wch", params={"shredder": "1"}).text.endswith("1. Kh1 Kh8 *")
        assert client.get("/wch", params={"shredder": "0"}).text.endswith("1. O-O O-O *")

    def test_roundbase(self, client, memory_store, clock, make_game):
        _store_source(memory_store, clock, "wch", join_games([make_game("7.1"), make_game("7.2")]))

        text = client.get("/wch", params={"roundbase": "3"}).text

        assert '[Round "3"]' in text
        assert '[Round "4"]' in text

    def test_request_id_is_echoed(self, client):
        resp = client.get("/", headers={"X-Request-ID": "abc-123"})

        assert resp.headers["X-Request-ID"] == "abc-123"

    def test_malformed_record_is_server_error(self, client, memory_store):
        memory_store.data["source:broken"] = "{not json"

        resp = client.get("/broken")

        assert resp.status_code == 500
        assert resp.json()["error_type"] == "malformed_record"
