from __future__ import annotations

import logging
from typing import List

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import UpdateOne

from field_migrator.exceptions import StoreError
from field_migrator.models import StoredDocument
from field_migrator.stores.base import DocumentStore, WriteBatch

logger = logging.getLogger(__name__)

# pymongo splits bulk writes above the server's maxWriteBatchSize.
MONGO_MAX_BATCH_SIZE = 100_000


class MongoWriteBatch(WriteBatch):
    def __init__(self, client: AsyncIOMotorClient, database: str, collection: str) -> None:
        super().__init__()
        self._client = client
        self._coll = client[database][collection]

    def _operations(self) -> List[UpdateOne]:
        return [
            UpdateOne(
                {"_id": m.ref, m.delete_field: {"$ne": None}},
                {"$set": {m.set_field: m.value}, "$unset": {m.delete_field: ""}},
            )
            for m in self.mutations
        ]

    async def commit(self) -> None:
        ops = self._operations()
        if not ops:
            return

        async with await self._client.start_session() as session:
            async with session.start_transaction():
                result = await self._coll.bulk_write(ops, ordered=True, session=session)
                if result.matched_count != len(ops):
                    # Leaving the block with an exception aborts the transaction.
                    raise StoreError(
                        f"Matched {result.matched_count} of {len(ops)} documents; "
                        "some no longer hold the field"
                    )
        logger.debug(f"bulk_write modified {result.modified_count} documents")


class MongoStore(DocumentStore):
    """MongoDB backend. Batches commit inside a multi-document transaction,
    which needs a replica set or sharded cluster."""

    name = "mongodb"
    max_batch_size = MONGO_MAX_BATCH_SIZE

    def __init__(self, client: AsyncIOMotorClient, database: str) -> None:
        self._client = client
        self._database = database

    async def find_with_field(self, collection: str, field: str) -> List[StoredDocument]:
        coll = self._client[self._database][collection]
        cursor = coll.find({field: {"$ne": None}}, projection={"_id": 1, field: 1})
        docs = await cursor.to_list(length=None)
        return [StoredDocument(ref=doc["_id"], data=doc) for doc in docs]

    def new_batch(self, collection: str) -> MongoWriteBatch:
        return MongoWriteBatch(self._client, self._database, collection)

    async def close(self) -> None:
        self._client.close()
