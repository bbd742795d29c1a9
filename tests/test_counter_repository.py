from __future__ import annotations

import asyncio

import pytest

from matrimony.db import get_db
from matrimony.db.collections import BIODATA_ID_SEQUENCE
from matrimony.repositories.counter import CounterRepository


@pytest.mark.asyncio
async def test_first_value_is_one_and_values_increase(api_client) -> None:
    repo = CounterRepository(get_db())

    assert await repo.current_value(BIODATA_ID_SEQUENCE) == 0
    assert await repo.next_value(BIODATA_ID_SEQUENCE) == 1
    assert await repo.next_value(BIODATA_ID_SEQUENCE) == 2
    assert await repo.current_value(BIODATA_ID_SEQUENCE) == 2


@pytest.mark.asyncio
async def test_concurrent_allocation_yields_distinct_contiguous_values(api_client) -> None:
    repo = CounterRepository(get_db())
    await repo.next_value("orders")
    before = await repo.current_value("orders")

    values = await asyncio.gather(*(repo.next_value("orders") for _ in range(50)))

    assert len(set(values)) == 50
    assert sorted(values) == list(range(before + 1, before + 51))


@pytest.mark.asyncio
async def test_sequences_are_independent(api_client) -> None:
    repo = CounterRepository(get_db())

    assert await repo.next_value("a") == 1
    assert await repo.next_value("a") == 2
    assert await repo.next_value("b") == 1
