import datetime as dt
import uuid
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, TypeAdapter, model_validator


FieldType = Literal[
    "text", "textarea", "email", "tel", "number", "url", "date", "time",
    "select", "radio", "checkbox", "multiselect", "file", "rating", "signature",
    "heading1", "heading2", "paragraph", "divider",
]

LAYOUT_TYPES = frozenset({"heading1", "heading2", "paragraph", "divider"})
CHOICE_TYPES = frozenset({"select", "radio", "multiselect"})
# Field types a `contains` rule may target
TEXTUAL_TYPES = frozenset({"text", "textarea", "email", "tel", "url", "select", "radio"})
# Field types a `greater_than` / `less_than` rule may target
NUMERIC_TYPES = frozenset({"number", "rating"})

# Display names used as the default label of a freshly added field
FIELD_TYPE_LABELS: Dict[str, str] = {
    "heading1": "Main Heading",
    "heading2": "Sub Heading",
    "paragraph": "Paragraph",
    "divider": "Divider",
    "text": "Text Input",
    "textarea": "Text Area",
    "email": "Email",
    "tel": "Phone",
    "number": "Number",
    "url": "URL",
    "select": "Dropdown",
    "radio": "Radio",
    "checkbox": "Checkbox",
    "multiselect": "Multi-Select",
    "date": "Date",
    "time": "Time",
    "file": "File Upload",
    "rating": "Rating",
    "signature": "Signature",
}

DEFAULT_OPTIONS = ["Option 1", "Option 2"]

OPERATORS = frozenset({"equals", "not_equals", "contains", "greater_than", "less_than"})
RuleValue = Union[bool, int, float, str, None]


def new_id() -> str:
    return uuid.uuid4().hex


class Rule(BaseModel):
    fieldId: str
    # unknown operators are kept and evaluate false
    operator: str = "equals"
    value: RuleValue = ""


class Condition(BaseModel):
    action: Literal["show", "hide"] = "show"
    logic: Literal["all", "any"] = "all"
    rules: List[Rule] = Field(min_length=1)


# ---------- field variants ----------

class _FieldBase(BaseModel):
    id: str = Field(default_factory=new_id)
    conditions: List[Condition] = Field(default_factory=list)

    @property
    def is_layout(self) -> bool:
        return self.type in LAYOUT_TYPES


class _InputField(_FieldBase):
    label: str = Field(min_length=1)
    required: bool = False
    placeholder: str = ""


class _ChoiceField(_InputField):
    options: List[str] = Field(min_length=1)


class _ContentField(_FieldBase):
    content: str = ""


class TextField(_InputField):
    type: Literal["text"] = "text"


class TextAreaField(_InputField):
    type: Literal["textarea"] = "textarea"


class EmailField(_InputField):
    type: Literal["email"] = "email"


class TelField(_InputField):
    type: Literal["tel"] = "tel"


class NumberField(_InputField):
    type: Literal["number"] = "number"


class UrlField(_InputField):
    type: Literal["url"] = "url"


class DateField(_InputField):
    type: Literal["date"] = "date"


class TimeField(_InputField):
    type: Literal["time"] = "time"


class SelectField(_ChoiceField):
    type: Literal["select"] = "select"


class RadioField(_ChoiceField):
    type: Literal["radio"] = "radio"


class MultiSelectField(_ChoiceField):
    type: Literal["multiselect"] = "multiselect"


class CheckboxField(_InputField):
    type: Literal["checkbox"] = "checkbox"


class FileField(_InputField):
    type: Literal["file"] = "file"


class RatingField(_InputField):
    type: Literal["rating"] = "rating"


class SignatureField(_InputField):
    type: Literal["signature"] = "signature"


class Heading1Field(_ContentField):
    type: Literal["heading1"] = "heading1"


class Heading2Field(_ContentField):
    type: Literal["heading2"] = "heading2"


class ParagraphField(_ContentField):
    type: Literal["paragraph"] = "paragraph"


class DividerField(_FieldBase):
    type: Literal["divider"] = "divider"


FormField = Annotated[
    Union[
        TextField, TextAreaField, EmailField, TelField, NumberField, UrlField,
        DateField, TimeField, SelectField, RadioField, MultiSelectField,
        CheckboxField, FileField, RatingField, SignatureField,
        Heading1Field, Heading2Field, ParagraphField, DividerField,
    ],
    Field(discriminator="type"),
]

_field_adapter = TypeAdapter(FormField)


def build_field(data: Dict[str, Any]) -> FormField:
    """Validate a plain dict into the matching field variant."""
    return _field_adapter.validate_python(data)


def default_field(field_type: str) -> FormField:
    """A new field of the given type with the builder's defaults."""
    data: Dict[str, Any] = {"type": field_type}
    if field_type not in LAYOUT_TYPES:
        data["label"] = FIELD_TYPE_LABELS.get(field_type, field_type)
    if field_type in CHOICE_TYPES:
        data["options"] = list(DEFAULT_OPTIONS)
    return build_field(data)


# ---------- layout ----------

class Row(BaseModel):
    id: str = Field(default_factory=new_id)
    columnCount: int = Field(default=1, ge=1, le=3)
    fields: List[FormField] = Field(default_factory=list)


class FormSettings(BaseModel):
    title: str = ""
    subtitle: str = ""
    date: Optional[dt.date] = None
    showHeader: bool = True
    showDate: bool = True
    showPageNumbers: bool = True
    headerAlignment: Literal["left", "center", "right"] = "center"
    footerText: str = ""


class FormDefinition(BaseModel):
    rows: List[Row] = Field(default_factory=list)
    settings: FormSettings = Field(default_factory=FormSettings)

    @model_validator(mode="after")
    def _check_identifiers(self):
        row_ids = set()
        field_ids = set()
        for row in self.rows:
            if row.id in row_ids:
                raise ValueError(f"duplicate row id: {row.id}")
            row_ids.add(row.id)
            for field in row.fields:
                if field.id in field_ids:
                    raise ValueError(f"duplicate field id: {field.id}")
                field_ids.add(field.id)
                for condition in field.conditions:
                    if any(rule.fieldId == field.id for rule in condition.rules):
                        raise ValueError(f"field {field.id} references itself in a condition")
        return self

    def iter_fields(self) -> Iterator[FormField]:
        for row in self.rows:
            yield from row.fields

    def field_index(self) -> Dict[str, FormField]:
        return {field.id: field for field in self.iter_fields()}

    def find_row(self, row_id: str) -> Optional[Tuple[int, Row]]:
        for index, row in enumerate(self.rows):
            if row.id == row_id:
                return index, row
        return None

    def find_field(self, field_id: str) -> Optional[Tuple[Row, int, FormField]]:
        for row in self.rows:
            for index, field in enumerate(row.fields):
                if field.id == field_id:
                    return row, index, field
        return None


# ---------- API models ----------

class FormTemplateIn(BaseModel):
    id: str
    name: str
    category: str = ""
    description: str = ""
    definition: FormDefinition = Field(default_factory=FormDefinition)
    version: int = 1


class FormTemplateOut(FormTemplateIn):
    createdAt: dt.datetime


class SubmissionIn(BaseModel):
    values: Dict[str, Any]
    comments: Optional[str] = ""


class ValuesIn(BaseModel):
    values: Dict[str, Any] = Field(default_factory=dict)


class RenderRequest(BaseModel):
    definition: FormDefinition
    values: Dict[str, Any] = Field(default_factory=dict)
    style: Optional[str] = None


class NewFieldIn(BaseModel):
    type: FieldType


class MoveFieldIn(BaseModel):
    targetRowId: str
    targetIndex: int = Field(ge=0)
