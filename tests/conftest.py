from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional, Set

import pytest

from field_migrator.models import StoredDocument
from field_migrator.stores.base import DocumentStore, WriteBatch


class MemoryBatch(WriteBatch):
    def __init__(self, store: "MemoryStore", collection: str) -> None:
        super().__init__()
        self._store = store
        self._collection = collection

    async def commit(self) -> None:
        self._store.commit_sizes.append(len(self))
        if len(self._store.commit_sizes) in self._store.fail_commits:
            raise RuntimeError("simulated commit failure")

        docs = self._store.collections.setdefault(self._collection, {})
        for m in self.mutations:
            if m.ref not in docs:
                raise RuntimeError(f"document {m.ref} not found")

        for m in self.mutations:
            docs[m.ref][m.set_field] = m.value
            docs[m.ref].pop(m.delete_field, None)


class MemoryStore(DocumentStore):
    """In-memory document store that records queries and commits."""

    name = "memory"
    max_batch_size = 500

    def __init__(
        self,
        collections: Optional[Dict[str, Dict[Any, Dict[str, Any]]]] = None,
        fail_commits: Optional[Set[int]] = None,
        query_error: Optional[Exception] = None,
        extra_results: Optional[List[StoredDocument]] = None,
    ) -> None:
        self.collections = collections or {}
        self.fail_commits = fail_commits or set()
        self.query_error = query_error
        self.extra_results = extra_results or []
        self.query_calls = 0
        self.commit_sizes: List[int] = []
        self.closed = False

    async def find_with_field(self, collection: str, field: str) -> List[StoredDocument]:
        self.query_calls += 1
        if self.query_error is not None:
            raise self.query_error

        docs = self.collections.get(collection, {})
        results = [
            StoredDocument(ref=ref, data=copy.deepcopy(data))
            for ref, data in docs.items()
            if data.get(field) is not None
        ]
        return results + self.extra_results

    def new_batch(self, collection: str) -> MemoryBatch:
        return MemoryBatch(self, collection)

    async def close(self) -> None:
        self.closed = True


def make_photos() -> Dict[str, Dict[Any, Dict[str, Any]]]:
    return {
        "photos": {
            1: {"id": 1, "createdAt": 100},
            2: {"id": 2, "createdAt": 200},
            3: {"id": 3, "title": "sunset"},
            4: {"id": 4},
            5: {"id": 5, "createdAt": 500},
        }
    }


@pytest.fixture
def photos_store() -> MemoryStore:
    return MemoryStore(make_photos())
