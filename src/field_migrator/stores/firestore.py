from __future__ import annotations

from typing import List

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from field_migrator.models import StoredDocument
from field_migrator.stores.base import DocumentStore, WriteBatch

# Firestore rejects batched writes with more than 500 operations.
FIRESTORE_MAX_BATCH_SIZE = 500


class FirestoreWriteBatch(WriteBatch):
    def __init__(self, client: firestore.AsyncClient) -> None:
        super().__init__()
        self._client = client

    async def commit(self) -> None:
        if not self.mutations:
            return

        batch = self._client.batch()
        for m in self.mutations:
            # update() fails on missing documents, which fails the whole batch.
            batch.update(
                m.ref,
                {
                    m.set_field: m.value,
                    m.delete_field: firestore.DELETE_FIELD,
                },
            )
        await batch.commit()


class FirestoreStore(DocumentStore):
    name = "firestore"
    max_batch_size = FIRESTORE_MAX_BATCH_SIZE

    def __init__(self, client: firestore.AsyncClient) -> None:
        self._client = client

    async def find_with_field(self, collection: str, field: str) -> List[StoredDocument]:
        query = self._client.collection(collection).where(filter=FieldFilter(field, "!=", None))
        snapshots = await query.get()
        return [StoredDocument(ref=snap.reference, data=snap.to_dict() or {}) for snap in snapshots]

    def new_batch(self, collection: str) -> FirestoreWriteBatch:
        return FirestoreWriteBatch(self._client)
