"""
Layout editing operations on a FormDefinition.

All operations mutate the definition in place and preserve row order and
field order. Removing a field leaves conditions that point at it untouched:
conditions are plain data, and the visibility engine treats a rule whose
field no longer exists as never matching.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from app.errors import InvalidLayout, UnknownField, UnknownRow
from app.schemas import (
    FormDefinition,
    FormField,
    Row,
    build_field,
    default_field,
    new_id,
)

logger = logging.getLogger(__name__)

COLUMN_COUNTS = (1, 2, 3)


def _require_row(definition: FormDefinition, row_id: str):
    found = definition.find_row(row_id)
    if found is None:
        raise UnknownRow(row_id)
    return found


def _require_field(definition: FormDefinition, field_id: str):
    found = definition.find_field(field_id)
    if found is None:
        raise UnknownField(field_id)
    return found


def add_row(definition: FormDefinition, column_count: int = 1) -> str:
    if column_count not in COLUMN_COUNTS:
        raise InvalidLayout(column_count)
    row = Row(columnCount=column_count)
    definition.rows.append(row)
    logger.info("Added row %s (%d columns)", row.id, column_count)
    return row.id


def remove_row(definition: FormDefinition, row_id: str) -> None:
    index, row = _require_row(definition, row_id)
    del definition.rows[index]
    logger.info("Removed row %s with %d field(s)", row_id, len(row.fields))


def move_row(definition: FormDefinition, row_id: str, target_index: int) -> None:
    index, row = _require_row(definition, row_id)
    del definition.rows[index]
    target_index = max(0, min(target_index, len(definition.rows)))
    definition.rows.insert(target_index, row)


def set_column_count(definition: FormDefinition, row_id: str, column_count: int) -> None:
    if column_count not in COLUMN_COUNTS:
        raise InvalidLayout(column_count)
    _, row = _require_row(definition, row_id)
    row.columnCount = column_count


def add_field(definition: FormDefinition, row_id: str, field_type: str) -> str:
    _, row = _require_row(definition, row_id)
    field = default_field(field_type)
    row.fields.append(field)
    logger.info("Added %s field %s to row %s", field_type, field.id, row_id)
    return field.id


def move_field(definition: FormDefinition, field_id: str, target_row_id: str, target_index: int) -> None:
    """Move a field to `target_index` within the target row.

    The index is interpreted after the field has been taken out of its
    current row and is clamped to the target row's bounds.
    """
    row, index, field = _require_field(definition, field_id)
    _, target_row = _require_row(definition, target_row_id)
    del row.fields[index]
    target_index = max(0, min(target_index, len(target_row.fields)))
    target_row.fields.insert(target_index, field)


def remove_field(definition: FormDefinition, field_id: str) -> None:
    row, index, _ = _require_field(definition, field_id)
    del row.fields[index]
    dangling = sum(
        1
        for other in definition.iter_fields()
        for condition in other.conditions
        for rule in condition.rules
        if rule.fieldId == field_id
    )
    if dangling:
        logger.info("Removed field %s; %d rule(s) still reference it and will never match", field_id, dangling)
    else:
        logger.info("Removed field %s", field_id)


def update_field(definition: FormDefinition, field_id: str, changes: Dict[str, Any]) -> FormField:
    """Apply `changes` to a field and re-validate it against its type.

    `id` and `type` cannot be changed. Raises pydantic.ValidationError when
    the result is not a valid field of that type.
    """
    row, index, field = _require_field(definition, field_id)
    for key in ("id", "type"):
        if key in changes and changes[key] != getattr(field, key):
            raise ValueError(f"field {key} cannot be changed")

    data = field.model_dump()
    data.update(changes)
    updated = build_field(data)
    for condition in updated.conditions:
        if any(rule.fieldId == field_id for rule in condition.rules):
            raise ValueError(f"field {field_id} cannot reference itself in a condition")
    row.fields[index] = updated
    return updated


def duplicate_field(definition: FormDefinition, field_id: str) -> str:
    row, index, field = _require_field(definition, field_id)
    data = field.model_dump()
    data["id"] = new_id()
    copy = build_field(data)
    row.fields.insert(index + 1, copy)
    return copy.id


def rows_from_fields(fields: Iterable[Dict[str, Any]]) -> List[Row]:
    """Group a flat list of field dicts into rows.

    A field's optional `columns` hint gives the column count of the row it
    belongs to; a row is closed once it holds that many fields.
    """
    rows: List[Row] = []
    current: List[FormField] = []
    columns = 1
    for data in fields:
        data = dict(data)
        hint = data.pop("columns", None) or 1
        data.pop("rowId", None)
        if not current:
            columns = hint if hint in COLUMN_COUNTS else 1
        current.append(build_field(data))
        if len(current) >= columns:
            rows.append(Row(columnCount=columns, fields=current))
            current = []
    if current:
        rows.append(Row(columnCount=columns, fields=current))
    return rows
