from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class RenameRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    collection: str
    old_field: str
    new_field: str


class StoredDocument(BaseModel):
    """Snapshot of a queried document: its store reference and field map."""

    model_config = ConfigDict(frozen=True)

    ref: Any
    data: Dict[str, Any] = Field(default_factory=dict)


class Mutation(BaseModel):
    """Pending write: set ``set_field`` to ``value`` and delete ``delete_field``."""

    model_config = ConfigDict(frozen=True)

    ref: Any
    set_field: str
    value: Any = None
    delete_field: str


class MigrationResult(BaseModel):
    collection: str
    old_field: str
    new_field: str
    matched: int = 0
    processed: int = 0
    committed: int = 0
    batches: int = 0
    dry_run: bool = False
