from __future__ import annotations

import pytest

from quotegen.quote_store import QuoteStore
from quotegen.storage import JsonFileStore, MemoryStore


@pytest.fixture
def memory_storage():
    return MemoryStore()


@pytest.fixture
def file_storage(tmp_path):
    return JsonFileStore(str(tmp_path / "store.json"))


@pytest.fixture
def empty_store(memory_storage):
    return QuoteStore(memory_storage, seed=[])


@pytest.fixture
def seeded_store(memory_storage):
    return QuoteStore(memory_storage)
