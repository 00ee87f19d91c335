from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Mapping, Optional

from app.schemas import (
    LAYOUT_TYPES,
    NUMERIC_TYPES,
    OPERATORS,
    TEXTUAL_TYPES,
    Condition,
    FormDefinition,
    FormField,
    Rule,
)

logger = logging.getLogger(__name__)

CHECKED_VALUES = frozenset({"true", "checked", "on", "yes", "1"})
UNCHECKED_VALUES = frozenset({"false", "unchecked", "off", "no", "0", ""})


def _to_number(x: Any) -> Optional[float]:
    # numbers and numeric strings like "12.3"; booleans are not numbers here
    if isinstance(x, bool):
        return None
    if isinstance(x, (int, float)):
        number = float(x)
    elif isinstance(x, str):
        try:
            number = float(x.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number


def as_text(x: Any) -> str:
    if x is None:
        return ""
    if isinstance(x, bool):
        return "true" if x else "false"
    if isinstance(x, float) and x.is_integer():
        return str(int(x))
    if isinstance(x, (list, tuple)):
        return ", ".join(as_text(item) for item in x)
    return str(x)


def _as_checked(x: Any) -> Optional[bool]:
    if x is None:
        return False
    if isinstance(x, bool):
        return x
    if isinstance(x, (int, float)):
        return x != 0
    if isinstance(x, str):
        lowered = x.strip().lower()
        if lowered in CHECKED_VALUES:
            return True
        if lowered in UNCHECKED_VALUES:
            return False
    return None


def is_checked(x: Any) -> bool:
    # submitted values outside the known spellings count by truthiness
    checked = _as_checked(x)
    return bool(x) if checked is None else checked


def _compare(left: Any, op: str, right: Any, field_type: str) -> bool:
    if field_type == "checkbox":
        expected = _as_checked(right)
        if expected is None or op not in ("equals", "not_equals"):
            return False
        actual = is_checked(left)
        return actual == expected if op == "equals" else actual != expected

    if op == "equals":
        return as_text(left) == as_text(right)
    if op == "not_equals":
        return as_text(left) != as_text(right)
    if op == "contains":
        if field_type not in TEXTUAL_TYPES:
            return False
        return as_text(right) in as_text(left)
    if op in ("greater_than", "less_than"):
        if field_type not in NUMERIC_TYPES:
            return False
        left_num = _to_number(left)
        right_num = _to_number(right)
        if left_num is None or right_num is None:
            return False
        return left_num > right_num if op == "greater_than" else left_num < right_num
    return False


def evaluate_rule(
    rule: Rule,
    values: Mapping[str, Any],
    fields: Mapping[str, FormField],
    owner_id: Optional[str] = None,
) -> bool:
    """
    True when the rule holds for the submitted values.

    Rules that point at the owning field, at a field that no longer exists
    or at a layout element never hold. Hidden fields are still read: their
    submitted values stay live for other fields' rules.
    """
    if rule.fieldId == owner_id:
        return False
    target = fields.get(rule.fieldId)
    if target is None or target.type in LAYOUT_TYPES:
        logger.debug("Rule references unknown field %s; treating as false", rule.fieldId)
        return False
    if rule.operator not in OPERATORS:
        logger.debug("Unknown operator %r on rule for %s; treating as false", rule.operator, rule.fieldId)
        return False
    try:
        return _compare(values.get(rule.fieldId), rule.operator, rule.value, target.type)
    except (TypeError, ValueError):
        logger.debug("Rule on %s could not be evaluated; treating as false", rule.fieldId, exc_info=True)
        return False


def condition_matches(
    condition: Condition,
    values: Mapping[str, Any],
    fields: Mapping[str, FormField],
    owner_id: Optional[str] = None,
) -> bool:
    results = [evaluate_rule(rule, values, fields, owner_id) for rule in condition.rules]
    if not results:
        return False
    if condition.logic == "all":
        return all(results)
    if condition.logic == "any":
        return any(results)
    return False


def evaluate_field_visibility(
    field: FormField,
    values: Mapping[str, Any],
    fields: Mapping[str, FormField],
) -> bool:
    # Every condition is evaluated; the last one that matches decides.
    visible = True
    for condition in field.conditions:
        if condition_matches(condition, values, fields, field.id):
            visible = condition.action == "show"
    return visible


def compute_visibility(definition: FormDefinition, values: Mapping[str, Any]) -> Dict[str, bool]:
    """Visibility of every field in the definition for the given values."""
    fields = definition.field_index()
    return {
        field_id: evaluate_field_visibility(field, values, fields)
        for field_id, field in fields.items()
    }


def visible_fields(definition: FormDefinition, values: Mapping[str, Any]) -> List[FormField]:
    visibility = compute_visibility(definition, values)
    return [field for field in definition.iter_fields() if visibility[field.id]]


def has_conditional_fields(definition: FormDefinition) -> bool:
    return any(field.conditions for field in definition.iter_fields())


def explain_visibility(definition: FormDefinition, values: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    """
    Returns, per field id:
      {"visible": bool, "conditions": [{"action", "logic", "matched", "rules": [...]}]}

    Each rule entry carries the value it was evaluated against and whether
    it passed. Useful for showing the author why a field is hidden.
    """
    fields = definition.field_index()
    report: Dict[str, Dict[str, Any]] = {}
    for field_id, field in fields.items():
        conditions = []
        for condition in field.conditions:
            rules = [
                {
                    "fieldId": rule.fieldId,
                    "operator": rule.operator,
                    "value": rule.value,
                    "actualValue": values.get(rule.fieldId),
                    "passed": evaluate_rule(rule, values, fields, field_id),
                }
                for rule in condition.rules
            ]
            conditions.append({
                "action": condition.action,
                "logic": condition.logic,
                "matched": condition_matches(condition, values, fields, field_id),
                "rules": rules,
            })
        report[field_id] = {
            "visible": evaluate_field_visibility(field, values, fields),
            "conditions": conditions,
        }
    return report


def _is_absent(field: FormField, value: Any) -> bool:
    if field.type == "checkbox":
        return not is_checked(value)
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def missing_required_fields(
    definition: FormDefinition,
    values: Mapping[str, Any],
    visibility: Optional[Mapping[str, bool]] = None,
) -> List[str]:
    """Labels of required, visible fields that have no value."""
    if visibility is None:
        visibility = compute_visibility(definition, values)
    missing = []
    for field in definition.iter_fields():
        if field.type in LAYOUT_TYPES or not field.required:
            continue
        if not visibility.get(field.id, False):
            continue
        if _is_absent(field, values.get(field.id)):
            missing.append(field.label)
    return missing
