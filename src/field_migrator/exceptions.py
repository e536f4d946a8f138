"""Custom exceptions for field-migrator."""

from __future__ import annotations

from typing import Any


class FieldMigratorError(Exception):
    """Base exception for field-migrator."""

    # Documents durably migrated before the error surfaced.
    committed: int = 0


class ConfigurationError(FieldMigratorError):
    """Raised when configuration is missing or invalid."""

    pass


class StoreConnectionError(FieldMigratorError):
    """Raised when the document store client cannot be created."""

    pass


class StoreError(FieldMigratorError):
    """Raised by a store backend when a write cannot be applied."""

    pass


class QueryError(FieldMigratorError):
    """Raised when the field-exists query fails."""

    pass


class TransformError(FieldMigratorError):
    """Raised when a queried document does not carry the field being renamed."""

    def __init__(self, ref: Any, field: str):
        super().__init__(f"Document {ref!r} has no value for field '{field}'")
        self.ref = ref
        self.field = field


class CommitError(FieldMigratorError):
    """Raised when a batch commit fails.

    Batches before ``batch_number`` are already durable; ``committed`` counts
    the documents they migrated.
    """

    def __init__(self, batch_number: int, processed: int, committed: int, reason: str):
        super().__init__(
            f"Commit of batch {batch_number} failed after {committed} documents were migrated: {reason}"
        )
        self.batch_number = batch_number
        self.processed = processed
        self.committed = committed
