from __future__ import annotations

from field_migrator.exceptions import TransformError
from field_migrator.models import Mutation, RenameRule, StoredDocument


def move_field(document: StoredDocument, rule: RenameRule) -> Mutation:
    """Build the mutation that moves ``rule.old_field`` to ``rule.new_field``.

    The value is carried over untouched; falsy values such as ``0`` or ``""``
    are moved like any other. A missing or null old field means the document
    no longer matches the field-exists query and raises ``TransformError``.
    """
    value = document.data.get(rule.old_field)
    if value is None:
        raise TransformError(document.ref, rule.old_field)

    return Mutation(
        ref=document.ref,
        set_field=rule.new_field,
        value=value,
        delete_field=rule.old_field,
    )
