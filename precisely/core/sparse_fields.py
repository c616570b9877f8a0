"""Sparse Field-Set — flattens the present fields of a document into dotted paths.

Invariants:
    - Only non-None leaves appear in the result; None never becomes an explicit write
    - Nested models contribute "<parent>.<child>" keys, so a partial nested update
      leaves sibling fields alone
    - Nested models with no set field contribute nothing

Design Decisions:
    - Walks the pydantic model fields directly instead of relying on serializer
      omit-empty behavior
"""

from pydantic import BaseModel


def to_sparse_field_set(
    value: BaseModel, exclude: frozenset[str] = frozenset(),
) -> dict[str, object]:
    """Map dotted field path -> value for every set leaf of `value`.

    `exclude` names top-level fields to skip (e.g. {"id"} for patches,
    where the id selects the record instead of being written).
    """
    return _walk(value, "", exclude)


def _walk(
    value: BaseModel, prefix: str, exclude: frozenset[str],
) -> dict[str, object]:
    fields: dict[str, object] = {}
    for name in type(value).model_fields:
        if not prefix and name in exclude:
            continue
        field_value = getattr(value, name)
        if field_value is None:
            continue
        path = f"{prefix}{name}"
        if isinstance(field_value, BaseModel):
            fields.update(_walk(field_value, f"{path}.", exclude))
        else:
            fields[path] = field_value
    return fields
