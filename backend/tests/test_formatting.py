import pytest

from app.formatting import FormattedValue, ValueSymbols, format_value, truncate
from app.schemas import build_field
from app.styles import STYLES

SYMBOLS = ValueSymbols(max_chars=10)


def _field(field_type, **extra):
    data = {"type": field_type, "label": "Label", **extra}
    if field_type in ("select", "radio", "multiselect"):
        data.setdefault("options", ["a", "b"])
    return build_field(data)


def test_checkbox_absent_is_placeholder_not_no():
    field = _field("checkbox")

    assert format_value(field, None, SYMBOLS).text == "(Not provided)"
    assert format_value(field, "", SYMBOLS).text == "(Not provided)"
    assert format_value(field, True, SYMBOLS) == FormattedValue("Yes", checked=True)
    assert format_value(field, "true", SYMBOLS).text == "Yes"
    assert format_value(field, False, SYMBOLS) == FormattedValue("No", checked=False)


@pytest.mark.parametrize("value, expected", [(3, 3), ("4", 4), (5.0, 5), (9, 5)])
def test_rating_counts_filled_symbols(value, expected):
    formatted = format_value(_field("rating"), value, SYMBOLS)

    assert formatted.rating == expected
    assert formatted.text == f"{expected}/5"


@pytest.mark.parametrize("value", [None, "", 0, "great", True, 2.5])
def test_rating_without_usable_value_is_not_rated(value):
    formatted = format_value(_field("rating"), value, SYMBOLS)

    assert formatted == FormattedValue("(Not rated)")


def test_signature_uses_style_prefix():
    symbols = ValueSymbols(max_chars=40, signature_prefix="Signed: ")

    assert format_value(_field("signature"), "Ann Lee", symbols).text == "Signed: Ann Lee"
    assert format_value(_field("signature"), None, symbols).text == "(No signature provided)"


def test_other_types_show_raw_value_truncated():
    assert format_value(_field("text"), "short", SYMBOLS).text == "short"
    assert format_value(_field("textarea"), "a much longer value", SYMBOLS).text == "a much lon"
    assert format_value(_field("number"), 0, SYMBOLS).text == "0"
    assert format_value(_field("number"), 12.0, SYMBOLS).text == "12"
    assert format_value(_field("multiselect"), ["a", "b"], SYMBOLS).text == "a, b"
    assert format_value(_field("file"), {"originalName": "scan.pdf", "url": "/x"}, SYMBOLS).text == "scan.pdf"
    assert format_value(_field("textarea"), "line one\nline two", ValueSymbols()).text == "line one line two"
    assert format_value(_field("email"), None, SYMBOLS).text == "(Not provided)"
    assert format_value(_field("select"), [], SYMBOLS).text == "(Not provided)"


def test_truncation_is_idempotent():
    assert truncate("abc", 5) == "abc"
    assert truncate("abcdefgh", 5) == "abcde"
    assert truncate(truncate("abcdefgh", 5), 5) == "abcde"
    assert truncate("abcde", 5) == "abcde"
    with pytest.raises(ValueError):
        truncate("abc", -1)


@pytest.mark.parametrize("name", sorted(STYLES))
def test_each_style_truncates_to_its_own_limit(name):
    symbols = STYLES[name].symbols
    long_value = "x" * (symbols.max_chars + 20)
    within = "y" * symbols.max_chars

    formatted = format_value(_field("text"), long_value, symbols)

    assert len(formatted.text) == symbols.max_chars
    assert format_value(_field("text"), within, symbols).text == within
    assert format_value(_field("text"), formatted.text, symbols).text == formatted.text


@pytest.mark.parametrize("value", [True, 1, 2.5, "1", "yes", "Yes", "on", "checked", "x"])
def test_checkbox_truthy_values_print_yes(value):
    formatted = format_value(_field("checkbox"), value, SYMBOLS)

    assert formatted == FormattedValue("Yes", checked=True)


@pytest.mark.parametrize("value", [False, 0, 0.0, "0", "no", "No", "off", "false", "unchecked"])
def test_checkbox_falsy_values_print_no(value):
    formatted = format_value(_field("checkbox"), value, SYMBOLS)

    assert formatted == FormattedValue("No", checked=False)
