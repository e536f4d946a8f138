from field_migrator.stores.base import DocumentStore, WriteBatch

__all__ = ["DocumentStore", "WriteBatch"]
