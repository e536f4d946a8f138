from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorClient

from field_migrator.config import RuntimeConfig
from field_migrator.exceptions import ConfigurationError, StoreConnectionError
from field_migrator.stores.base import DocumentStore


def get_motor_client(mongodb_uri: str) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(mongodb_uri)


def get_firestore_client(project: str | None = None, database: str | None = None):
    from google.cloud import firestore

    kwargs = {}
    if project:
        kwargs["project"] = project
    if database:
        kwargs["database"] = database
    return firestore.AsyncClient(**kwargs)


def open_store(config: RuntimeConfig) -> DocumentStore:
    """Build the document store for the configured backend."""
    if config.backend == "mongodb":
        from field_migrator.stores.mongo import MongoStore

        if not config.mongodb_uri or not config.default_db:
            raise ConfigurationError("MongoDB backend needs both mongodb_uri and default_db.")
        try:
            client = get_motor_client(config.mongodb_uri)
        except Exception as exc:
            raise StoreConnectionError(f"Could not create MongoDB client: {exc}") from exc
        return MongoStore(client, config.default_db)

    if config.backend == "firestore":
        from field_migrator.stores.firestore import FirestoreStore

        try:
            client = get_firestore_client(config.firestore_project, config.firestore_database)
        except Exception as exc:
            raise StoreConnectionError(f"Could not create Firestore client: {exc}") from exc
        return FirestoreStore(client)

    raise ConfigurationError(f"Unknown backend '{config.backend}'.")
