"""Per-type value formatting shared by every document style."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from app.rules import as_text, is_checked
from app.schemas import FormField

RATING_MAX = 5


@dataclass(frozen=True)
class ValueSymbols:
    """The words and glyphs a style uses when writing field values."""
    max_chars: int = 45
    placeholder: str = "(Not provided)"
    not_rated: str = "(Not rated)"
    no_signature: str = "(No signature provided)"
    yes: str = "Yes"
    no: str = "No"
    rating_suffix: str = ""
    signature_prefix: str = ""


@dataclass(frozen=True)
class FormattedValue:
    text: str
    # filled symbols out of RATING_MAX, set only for rated values
    rating: Optional[int] = None
    # set only for answered checkboxes
    checked: Optional[bool] = None


def truncate(text: str, limit: int) -> str:
    """Cut `text` to at most `limit` characters. Applying it twice changes nothing."""
    if limit < 0:
        raise ValueError("limit must not be negative")
    return text if len(text) <= limit else text[:limit]


def is_absent(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _rating(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if not isinstance(value, int) or value < 1:
        return None
    return min(value, RATING_MAX)


def _plain_text(value: Any) -> str:
    if isinstance(value, dict):
        # uploaded file metadata
        value = value.get("originalName") or value.get("filename") or value.get("url") or ""
    return " ".join(as_text(value).split())


def format_value(field: FormField, value: Any, symbols: ValueSymbols) -> FormattedValue:
    """Text for a field's submitted value, using the style's symbols."""
    if field.type == "checkbox":
        if is_absent(value):
            return FormattedValue(symbols.placeholder)
        checked = is_checked(value)
        return FormattedValue(symbols.yes if checked else symbols.no, checked=checked)

    if field.type == "rating":
        stars = _rating(value)
        if stars is None:
            return FormattedValue(symbols.not_rated)
        return FormattedValue(f"{stars}/{RATING_MAX}{symbols.rating_suffix}", rating=stars)

    if field.type == "signature":
        if is_absent(value):
            return FormattedValue(symbols.no_signature)
        return FormattedValue(truncate(symbols.signature_prefix + _plain_text(value), symbols.max_chars))

    if is_absent(value):
        return FormattedValue(symbols.placeholder)
    return FormattedValue(truncate(_plain_text(value), symbols.max_chars))
