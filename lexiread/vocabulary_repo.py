"""
Vocabulary repository.

The scheduling core only needs stable item ids and list membership to build
a quiz sample. ``MongoVocabularyRepo`` reads the reader's saved words from
MongoDB; ``InMemoryVocabulary`` serves tests and embedded hosts.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, runtime_checkable

from pymongo import MongoClient
from pymongo.collection import Collection

from lexiread import config
from lexiread.errors import ConfigurationError
from lexiread.schemas import VocabularyItem

COLLECTION_NAME = "vocabulary"


@runtime_checkable
class VocabularyProvider(Protocol):
    """Read-only access to vocabulary items."""

    def get_item(self, item_id: str) -> Optional[VocabularyItem]:
        ...

    def list_items(self, list_id: Optional[str] = None) -> list[VocabularyItem]:
        """All items, or only those in ``list_id``."""
        ...

    def list_item_ids(self, list_id: Optional[str] = None) -> list[str]:
        ...


class InMemoryVocabulary:
    """Vocabulary held in a dict, keyed by item id (insertion order kept)."""

    def __init__(self, items: Iterable[VocabularyItem] = ()):
        self._items: dict[str, VocabularyItem] = {item.item_id: item for item in items}

    def add(self, item: VocabularyItem) -> None:
        self._items[item.item_id] = item

    def remove(self, item_id: str) -> None:
        self._items.pop(item_id, None)

    def get_item(self, item_id: str) -> Optional[VocabularyItem]:
        return self._items.get(item_id)

    def list_items(self, list_id: Optional[str] = None) -> list[VocabularyItem]:
        if list_id is None:
            return list(self._items.values())
        return [item for item in self._items.values() if list_id in item.list_ids]

    def list_item_ids(self, list_id: Optional[str] = None) -> list[str]:
        return [item.item_id for item in self.list_items(list_id)]


def _doc_to_item(doc: dict) -> VocabularyItem:
    return VocabularyItem(
        item_id=str(doc["item_id"]),
        text=doc.get("text", ""),
        translation=doc.get("translation", ""),
        source_lang=doc.get("source_lang", ""),
        target_lang=doc.get("target_lang", ""),
        list_ids=[str(list_id) for list_id in doc.get("list_ids", [])],
    )


class MongoVocabularyRepo:
    """
    MongoDB-backed vocabulary.

    Documents carry ``item_id``, ``text``, ``translation``, language tags and
    a ``list_ids`` array of list memberships.

    Args:
        collection: Collection to read from. If omitted, one is opened from
            MONGO_URI / MONGO_DB_NAME.
    """

    def __init__(self, collection: Optional[Collection] = None):
        self._client: Optional[MongoClient] = None
        self._collection = collection

    @property
    def collection(self) -> Collection:
        """Lazily connect so constructing the repo never touches the network."""
        if self._collection is not None:
            return self._collection

        mongo_uri = config.get_mongo_uri()
        if not mongo_uri:
            raise ConfigurationError("MONGO_URI not found in environment variables")

        self._client = MongoClient(
            mongo_uri,
            maxPoolSize=10,  # Connection pool size
            minPoolSize=1,   # Keep at least 1 connection alive
            maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
        )
        self._collection = self._client[config.get_mongo_db_name()][COLLECTION_NAME]
        return self._collection

    def get_item(self, item_id: str) -> Optional[VocabularyItem]:
        doc = self.collection.find_one({"item_id": item_id})
        return _doc_to_item(doc) if doc else None

    def list_items(self, list_id: Optional[str] = None) -> list[VocabularyItem]:
        query = {"list_ids": list_id} if list_id is not None else {}
        return [_doc_to_item(doc) for doc in self.collection.find(query).sort("item_id", 1)]

    def list_item_ids(self, list_id: Optional[str] = None) -> list[str]:
        query = {"list_ids": list_id} if list_id is not None else {}
        cursor = self.collection.find(query, {"item_id": 1, "_id": 0}).sort("item_id", 1)
        return [str(doc["item_id"]) for doc in cursor]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            self._collection = None
