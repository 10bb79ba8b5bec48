"""Tests for ReplacementService and its repository."""

import json

import pytest

from pgn_mule.errors import InvalidReplacementError, MalformedRecordError
from pgn_mule.replacements.repository import REPLACEMENTS_KEY, ReplacementRepository
from pgn_mule.replacements.schemas import Replacement
from pgn_mule.replacements.service import ReplacementService


@pytest.fixture
def service(memory_store):
    return ReplacementService(ReplacementRepository(memory_store))


class TestReplacementRepository:
    """Tests for persisting the ordered list."""

    @pytest.mark.asyncio
    async def test_empty_store_gives_empty_list(self, memory_store):
        assert await ReplacementRepository(memory_store).get_all() == []

    @pytest.mark.asyncio
    async def test_persisted_format(self, memory_store):
        repo = ReplacementRepository(memory_store)

        await repo.set_all([Replacement("a", "b"), Replacement("x+", "y", regex=True)])

        assert json.loads(memory_store.data[REPLACEMENTS_KEY]) == [
            {"oldContent": "a", "newContent": "b"},
            {"oldContent": "x+", "newContent": "y", "regex": True},
        ]

    @pytest.mark.asyncio
    async def test_malformed_record_raises(self, memory_store):
        memory_store.data[REPLACEMENTS_KEY] = '[{"newContent": "b"}]'

        with pytest.raises(MalformedRecordError):
            await ReplacementRepository(memory_store).get_all()

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, memory_store):
        memory_store.data[REPLACEMENTS_KEY] = "not json"

        with pytest.raises(MalformedRecordError):
            await ReplacementRepository(memory_store).get_all()


class TestReplacementService:
    """Tests for the read/append/remove contract."""

    @pytest.mark.asyncio
    async def test_add_then_apply(self, service):
        await service.add("1.e4 -> 1.d4")

        assert await service.apply("1.e4 e5") == "1.d4 e5"

    @pytest.mark.asyncio
    async def test_append_preserves_order(self, service):
        await service.add("a -> b")
        await service.add("b -> c")

        assert await service.get_all() == [Replacement("a", "b"), Replacement("b", "c")]
        assert await service.apply("a") == "c"

    @pytest.mark.asyncio
    async def test_add_invalid_does_not_mutate(self, service):
        await service.add("a -> b")

        with pytest.raises(InvalidReplacementError):
            await service.add("nothing to split")

        assert len(await service.get_all()) == 1

    @pytest.mark.asyncio
    async def test_add_bulk(self, service):
        rules = await service.add_bulk("a\tb\nc\td")

        assert len(rules) == 2
        assert await service.apply("ac") == "bd"

    @pytest.mark.asyncio
    async def test_remove_range_reduces_length(self, service):
        for i in range(6):
            await service.append(Replacement(f"r{i}", ""))

        removed = await service.remove("2-4")

        assert removed == 3
        assert [r.old_content for r in await service.get_all()] == ["r0", "r1", "r5"]

    @pytest.mark.asyncio
    async def test_remove_single_index(self, service):
        await service.add("a -> b")
        await service.add("c -> d")

        assert await service.remove("0") == 1
        assert await service.get_all() == [Replacement("c", "d")]

    @pytest.mark.asyncio
    async def test_remove_invalid_selector(self, service):
        with pytest.raises(InvalidReplacementError):
            await service.remove("first")
