# tests/conftest.py

from __future__ import annotations

import pytest

from .fakes import FakeClock, MemoryKeyValueStore


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()
