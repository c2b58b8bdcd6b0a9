"""Tests for the append-only name cache against a real SQLite database."""

import pytest


@pytest.mark.asyncio
async def test_store_is_idempotent(name_cache):
    assert await name_cache.store_user_name("u1", "Alice") is True
    assert await name_cache.store_user_name("u1", "Alice") is False

    assert await name_cache.get_user_names_by_id("u1") == ["Alice"]


@pytest.mark.asyncio
async def test_names_accumulate_per_id(name_cache):
    await name_cache.store_user_name("u1", "Alice")
    await name_cache.store_user_name("u1", "AliceTheGreat")

    assert sorted(await name_cache.get_user_names_by_id("u1")) == ["Alice", "AliceTheGreat"]


@pytest.mark.asyncio
async def test_name_can_point_at_several_ids(name_cache):
    await name_cache.store_user_name("u1", "Agent")
    await name_cache.store_user_name("u2", "Agent")
    await name_cache.store_user_name("u3", "Other")

    assert sorted(await name_cache.get_user_ids_by_name("Agent")) == ["u1", "u2"]
    assert await name_cache.get_user_ids_by_name("Missing") == []

