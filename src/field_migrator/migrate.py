from __future__ import annotations

import asyncio
import logging

from field_migrator.exceptions import CommitError, ConfigurationError, QueryError, TransformError
from field_migrator.models import MigrationResult, RenameRule
from field_migrator.stores.base import DocumentStore, WriteBatch
from field_migrator.transform import move_field

logger = logging.getLogger(__name__)


def check_rule(rule: RenameRule) -> None:
    if not rule.collection:
        raise ConfigurationError("Collection name must not be empty.")
    if not rule.old_field or not rule.new_field:
        raise ConfigurationError("Both the old and the new field name are required.")
    if rule.old_field == rule.new_field:
        raise ConfigurationError(f"Old and new field are both '{rule.old_field}'; nothing to rename.")
    for field in (rule.old_field, rule.new_field):
        if "." in field:
            raise ConfigurationError(f"Nested field paths are not supported: '{field}'.")
        if field.startswith("$"):
            raise ConfigurationError(f"Field names must not start with '$': '{field}'.")
        if field == "_id":
            raise ConfigurationError("The document id field '_id' cannot be renamed or overwritten.")


def check_batch_size(batch_size: int, ceiling: int) -> None:
    if batch_size <= 0 or batch_size > ceiling:
        raise ConfigurationError(f"Batch size must be between 1 and {ceiling}, got {batch_size}.")


async def run_migration(
    store: DocumentStore,
    rule: RenameRule,
    batch_size: int,
    dry_run: bool = False,
    rate_limit_ms: int = 0,
) -> MigrationResult:
    """Move ``rule.old_field`` to ``rule.new_field`` on every document holding it.

    Mutations are committed in batches of ``batch_size``, one batch at a time.
    A failed commit raises ``CommitError``; earlier batches stay committed and
    re-running picks up the documents that still carry the old field.
    """
    check_rule(rule)
    check_batch_size(batch_size, store.max_batch_size)

    logger.info(f"Starting migration for collection '{rule.collection}' on {store.name}...")
    logger.info(f"Renaming field '{rule.old_field}' to '{rule.new_field}'.")

    try:
        documents = await store.find_with_field(rule.collection, rule.old_field)
    except Exception as exc:
        raise QueryError(f"Query for documents with '{rule.old_field}' in '{rule.collection}' failed: {exc}") from exc

    result = MigrationResult(
        collection=rule.collection,
        old_field=rule.old_field,
        new_field=rule.new_field,
        matched=len(documents),
        dry_run=dry_run,
    )

    if not documents:
        logger.info(f"No documents found with the '{rule.old_field}' field. Nothing to migrate.")
        return result

    logger.info(f"Found {len(documents)} documents to migrate...")

    batch = store.new_batch(rule.collection)
    for document in documents:
        try:
            mutation = move_field(document, rule)
        except TransformError as exc:
            exc.committed = result.committed
            logger.error(f"Stopping: {exc}")
            raise

        batch.update(mutation)
        result.processed += 1
        logger.debug(f"Queued {document.ref!r}")

        if len(batch) == batch_size:
            await _commit(batch, result, dry_run)
            batch = store.new_batch(rule.collection)
            if rate_limit_ms > 0 and not dry_run and result.processed < len(documents):
                await _sleep_ms(rate_limit_ms)

    if len(batch) > 0:
        await _commit(batch, result, dry_run, final=True)

    verb = "Would migrate" if dry_run else "Migrated"
    logger.info(f"Migration complete! {verb} {result.processed} documents in {result.batches} batches.")
    return result


async def _commit(batch: WriteBatch, result: MigrationResult, dry_run: bool, final: bool = False) -> None:
    batch_number = result.batches + 1
    size = len(batch)
    label = "final batch" if final else "batch"

    if dry_run:
        logger.info(f"Dry run: skipping commit of {label} {batch_number} ({size} documents).")
        result.batches += 1
        return

    logger.info(f"Committing {label} {batch_number} of {size} documents...")
    try:
        await batch.commit()
    except Exception as exc:
        logger.error(f"Commit of batch {batch_number} failed: {exc}")
        raise CommitError(batch_number, result.processed, result.committed, str(exc)) from exc

    result.batches += 1
    result.committed += size


async def _sleep_ms(ms: int) -> None:
    await asyncio.sleep(ms / 1000)
