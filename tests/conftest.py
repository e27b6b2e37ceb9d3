"""
Shared fixtures for the LexiRead test suite.
"""

import random
from datetime import datetime, timezone

import pytest

from lexiread.schemas import VocabularyItem
from lexiread.srs import InMemoryStore, SqlStore, get_engine


@pytest.fixture
def now():
    """Fixed reference time so scheduling tests never depend on the wall clock."""
    return datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def sql_store():
    """SqlStore on a private in-memory SQLite database."""
    store = SqlStore(get_engine("sqlite://"))
    yield store
    store.engine.dispose()


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def vocabulary():
    return [
        VocabularyItem(item_id="w-huis", text="huis", translation="house",
                       source_lang="nl", target_lang="en", list_ids=["basics"]),
        VocabularyItem(item_id="w-kat", text="kat", translation="cat",
                       source_lang="nl", target_lang="en", list_ids=["basics", "animals"]),
        VocabularyItem(item_id="w-hond", text="hond", translation="dog",
                       source_lang="nl", target_lang="en", list_ids=["animals"]),
        VocabularyItem(item_id="w-boom", text="boom", translation="tree",
                       source_lang="nl", target_lang="en", list_ids=["basics"]),
        VocabularyItem(item_id="w-fiets", text="fiets", translation="bicycle",
                       source_lang="nl", target_lang="en", list_ids=["basics"]),
    ]
