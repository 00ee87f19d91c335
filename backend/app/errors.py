class FormEngineError(Exception):
    """Base class for errors raised by the form definition and rendering core."""


class InvalidLayout(FormEngineError):
    def __init__(self, column_count):
        super().__init__(f"Column count must be 1, 2 or 3 (got {column_count!r})")
        self.column_count = column_count


class UnknownRow(FormEngineError):
    def __init__(self, row_id: str):
        super().__init__(f"Row not found: {row_id}")
        self.row_id = row_id


class UnknownField(FormEngineError):
    def __init__(self, field_id: str):
        super().__init__(f"Field not found: {field_id}")
        self.field_id = field_id


class UnknownStyle(FormEngineError):
    def __init__(self, style: str):
        super().__init__(f"Unknown document style: {style!r}")
        self.style = style
