"""Document store interface consumed by the migration driver."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from field_migrator.models import Mutation, StoredDocument


class WriteBatch(ABC):
    """Queue of mutations applied atomically on ``commit``."""

    def __init__(self) -> None:
        self.mutations: List[Mutation] = []

    def update(self, mutation: Mutation) -> None:
        self.mutations.append(mutation)

    def __len__(self) -> int:
        return len(self.mutations)

    @abstractmethod
    async def commit(self) -> None:
        """Apply every queued mutation, or none of them."""


class DocumentStore(ABC):
    name: str = "store"
    # Largest batch the backend accepts in one atomic write.
    max_batch_size: int = 500

    @abstractmethod
    async def find_with_field(self, collection: str, field: str) -> List[StoredDocument]:
        """Return every document whose ``field`` is present and non-null."""

    @abstractmethod
    def new_batch(self, collection: str) -> WriteBatch:
        ...

    async def close(self) -> None:
        return None
