from types import MappingProxyType

import pytest

from app.rules import (
    compute_visibility,
    explain_visibility,
    has_conditional_fields,
    missing_required_fields,
    visible_fields,
)


def _target(*conditions, field_type="text"):
    return {"id": "T", "type": field_type, "label": "Target", "conditions": list(conditions)}


def _cond(action, *rules, logic="all"):
    return {
        "action": action,
        "logic": logic,
        "rules": [{"fieldId": f, "operator": op, "value": v} for f, op, v in rules],
    }


@pytest.fixture
def sources():
    return [
        {"id": "A", "type": "number", "label": "A"},
        {"id": "B", "type": "number", "label": "B"},
        {"id": "name", "type": "text", "label": "Name"},
        {"id": "agree", "type": "checkbox", "label": "Agree"},
        {"id": "color", "type": "select", "label": "Color", "options": ["Red", "Blue"]},
    ]


def test_field_without_conditions_is_always_visible(make_definition, sources):
    definition = make_definition(sources)
    assert all(compute_visibility(definition, {}).values())


def test_last_matching_condition_wins(make_definition, sources):
    definition = make_definition(sources + [_target(
        _cond("hide", ("A", "equals", 1)),
        _cond("show", ("A", "equals", 1)),
    )])
    assert compute_visibility(definition, {"A": 1})["T"] is True

    reversed_order = make_definition(sources + [_target(
        _cond("show", ("A", "equals", 1)),
        _cond("hide", ("A", "equals", 1)),
    )])
    assert compute_visibility(reversed_order, {"A": 1})["T"] is False


def test_non_matching_later_condition_does_not_override(make_definition, sources):
    definition = make_definition(sources + [_target(
        _cond("hide", ("A", "equals", 1)),
        _cond("show", ("A", "equals", 2)),
    )])
    assert compute_visibility(definition, {"A": 1})["T"] is False


def test_no_matching_condition_keeps_field_visible(make_definition, sources):
    definition = make_definition(sources + [_target(_cond("show", ("A", "equals", 1)))])
    assert compute_visibility(definition, {"A": 2})["T"] is True


def test_all_versus_any(make_definition, sources):
    rules = [("A", "equals", 1), ("B", "equals", 2)]
    values = {"A": 1, "B": 3}

    all_definition = make_definition(sources + [_target(_cond("hide", *rules, logic="all"))])
    any_definition = make_definition(sources + [_target(_cond("hide", *rules, logic="any"))])

    # hide applies only when the condition matches
    assert compute_visibility(all_definition, values)["T"] is True
    assert compute_visibility(any_definition, values)["T"] is False
    assert compute_visibility(all_definition, {"A": 1, "B": 2})["T"] is False


def test_equals_is_case_sensitive_and_compares_text(make_definition, sources):
    definition = make_definition(sources + [_target(_cond("hide", ("color", "equals", "Red")))])

    assert compute_visibility(definition, {"color": "Red"})["T"] is False
    assert compute_visibility(definition, {"color": "red"})["T"] is True

    numeric = make_definition(sources + [_target(_cond("hide", ("A", "equals", "1")))])
    assert compute_visibility(numeric, {"A": 1})["T"] is False
    assert compute_visibility(numeric, {"A": 1.0})["T"] is False


def test_absent_value_is_empty_string(make_definition, sources):
    definition = make_definition(sources + [_target(_cond("hide", ("name", "equals", "")))])
    assert compute_visibility(definition, {})["T"] is False

    not_equals = make_definition(sources + [_target(_cond("hide", ("name", "not_equals", "Ann")))])
    assert compute_visibility(not_equals, {})["T"] is False
    assert compute_visibility(not_equals, {"name": "Ann"})["T"] is True


def test_absent_checkbox_is_unchecked(make_definition, sources):
    checked = make_definition(sources + [_target(_cond("show", ("agree", "equals", "checked")),
                                                 _cond("hide", ("agree", "equals", "unchecked")))])

    assert compute_visibility(checked, {})["T"] is False
    assert compute_visibility(checked, {"agree": True})["T"] is True
    assert compute_visibility(checked, {"agree": "checked"})["T"] is True
    assert compute_visibility(checked, {"agree": False})["T"] is False


def test_contains_only_for_textual_fields(make_definition, sources):
    definition = make_definition(sources + [_target(_cond("hide", ("name", "contains", "ann")))])
    assert compute_visibility(definition, {"name": "Joanne"})["T"] is False
    assert compute_visibility(definition, {"name": "JoAnne"})["T"] is True

    numeric = make_definition(sources + [_target(_cond("hide", ("A", "contains", "1")))])
    assert compute_visibility(numeric, {"A": 12})["T"] is True


def test_numeric_comparisons(make_definition, sources):
    greater = make_definition(sources + [_target(_cond("hide", ("A", "greater_than", 10)))])
    less = make_definition(sources + [_target(_cond("hide", ("A", "less_than", "10")))])

    assert compute_visibility(greater, {"A": 11})["T"] is False
    assert compute_visibility(greater, {"A": "10.5"})["T"] is False
    assert compute_visibility(greater, {"A": 10})["T"] is True
    assert compute_visibility(less, {"A": 3})["T"] is False

    # non-numeric values evaluate false for both operators
    for value in ("abc", "", None, True):
        assert compute_visibility(greater, {"A": value})["T"] is True
        assert compute_visibility(less, {"A": value})["T"] is True


def test_numeric_operator_on_text_field_is_false(make_definition, sources):
    definition = make_definition(sources + [_target(_cond("hide", ("name", "greater_than", 1)))])
    assert compute_visibility(definition, {"name": "5"})["T"] is True


def test_hidden_field_values_stay_live(make_definition, sources):
    definition = make_definition(sources + [
        {"id": "M", "type": "text", "label": "Middle",
         "conditions": [_cond("hide", ("A", "equals", 1))]},
        {"id": "L", "type": "text", "label": "Last",
         "conditions": [_cond("hide", ("M", "equals", "secret"))]},
    ])

    visibility = compute_visibility(definition, {"A": 1, "M": "secret"})

    assert visibility["M"] is False
    assert visibility["L"] is False


def test_rules_on_unknown_or_layout_fields_never_match(make_definition, sources):
    definition = make_definition(sources + [
        {"id": "H", "type": "heading1", "content": "Title"},
        _target(
            _cond("hide", ("ghost", "equals", "")),
            _cond("hide", ("H", "equals", "")),
        ),
    ])
    assert compute_visibility(definition, {})["T"] is True


def test_visibility_is_total_and_does_not_mutate_values(make_definition, sources):
    definition = make_definition(sources + [
        {"id": "H", "type": "divider"},
        _target(_cond("hide", ("A", "equals", 1))),
    ])
    values = MappingProxyType({"A": 1})

    visibility = compute_visibility(definition, values)

    assert set(visibility) == {"A", "B", "name", "agree", "color", "H", "T"}
    assert dict(values) == {"A": 1}
    assert compute_visibility(definition, values) == visibility


def test_visible_fields_preserves_order(make_definition, sources):
    definition = make_definition(sources[:2], [_target(_cond("hide", ("A", "equals", 1))), sources[2]])

    assert [f.id for f in visible_fields(definition, {"A": 1})] == ["A", "B", "name"]
    assert [f.id for f in visible_fields(definition, {})] == ["A", "B", "T", "name"]


def test_has_conditional_fields(make_definition, sources):
    assert has_conditional_fields(make_definition(sources)) is False
    assert has_conditional_fields(make_definition(sources + [_target(_cond("show", ("A", "equals", 1)))])) is True


def test_explain_visibility_reports_each_rule(make_definition, sources):
    definition = make_definition(sources + [_target(
        _cond("hide", ("A", "equals", 1), ("B", "equals", 2), logic="any"),
    )])

    report = explain_visibility(definition, {"A": 1, "B": 3})

    target = report["T"]
    assert target["visible"] is False
    condition = target["conditions"][0]
    assert condition["matched"] is True
    assert [r["passed"] for r in condition["rules"]] == [True, False]
    assert condition["rules"][1]["actualValue"] == 3
    assert report["A"] == {"visible": True, "conditions": []}


def test_missing_required_fields_skips_hidden_fields(make_definition):
    definition = make_definition([
        {"id": "smoker", "type": "checkbox", "label": "Smoker"},
        {"id": "per_day", "type": "number", "label": "Per day", "required": True,
         "conditions": [_cond("hide", ("smoker", "equals", "unchecked"))]},
        {"id": "name", "type": "text", "label": "Name", "required": True},
        {"id": "consent", "type": "checkbox", "label": "Consent", "required": True},
        {"id": "note", "type": "paragraph", "content": "Thanks"},
    ])

    assert missing_required_fields(definition, {}) == ["Name", "Consent"]
    assert missing_required_fields(definition, {"smoker": True, "name": " "}) == ["Per day", "Name", "Consent"]
    assert missing_required_fields(definition, {"smoker": True, "per_day": 0, "name": "Ann", "consent": True}) == []


@pytest.mark.parametrize("value, visible", [(1, True), ("yes", True), ("1", True), (0, False), ("no", False)])
def test_checkbox_rules_accept_numeric_and_word_values(make_definition, sources, value, visible):
    definition = make_definition(sources + [_target(_cond("hide", ("agree", "equals", "unchecked")))])

    assert compute_visibility(definition, {"agree": value})["T"] is visible


def test_unknown_operator_loads_and_never_matches(make_definition, sources):
    definition = make_definition(sources + [_target(
        _cond("hide", ("name", "starts_with", "A")),
        _cond("hide", ("name", "starts_with", "A"), ("A", "equals", 1), logic="any"),
    )])

    assert definition.field_index()["T"].conditions[0].rules[0].operator == "starts_with"
    assert compute_visibility(definition, {"name": "Ann"})["T"] is True
    assert compute_visibility(definition, {"name": "Ann", "A": 1})["T"] is False
    report = explain_visibility(definition, {"name": "Ann"})
    assert report["T"]["conditions"][0]["rules"][0]["passed"] is False
