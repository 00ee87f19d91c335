"""Style-agnostic draw operations. Coordinates are millimetres from the top-left corner of the page."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

Color = Tuple[int, int, int]
FontFamily = Literal["sans", "serif"]
FontWeight = Literal["normal", "bold", "italic"]
Align = Literal["left", "center", "right"]

BLACK: Color = (0, 0, 0)

_FONT_NAMES = {
    ("sans", "normal"): "Helvetica",
    ("sans", "bold"): "Helvetica-Bold",
    ("sans", "italic"): "Helvetica-Oblique",
    ("serif", "normal"): "Times-Roman",
    ("serif", "bold"): "Times-Bold",
    ("serif", "italic"): "Times-Italic",
}


def font_name(family: str, weight: str) -> str:
    """The standard PDF font used for a family/weight tag."""
    return _FONT_NAMES[(family, weight)]


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[Color] = None
    stroke: Optional[Color] = None
    line_width: float = 0.0


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Color = BLACK
    line_width: float = 0.5


@dataclass(frozen=True)
class Text:
    x: float
    y: float  # baseline
    text: str
    size: float
    weight: FontWeight = "normal"
    color: Color = BLACK
    font: FontFamily = "sans"
    align: Align = "left"


DrawOp = Union[Rect, Line, Text]

_OP_NAMES = {Rect: "rect", Line: "line", Text: "text"}


def op_to_dict(op: DrawOp) -> Dict[str, Any]:
    data = asdict(op)
    for key, value in data.items():
        if isinstance(value, tuple):
            data[key] = list(value)
    return {"op": _OP_NAMES[type(op)], **data}


@dataclass
class PageInstruction:
    """One page of a rendered document: an ordered list of draw ops."""
    number: int
    width: float
    height: float
    ops: List[DrawOp] = field(default_factory=list)

    def texts(self) -> List[str]:
        return [op.text for op in self.ops if isinstance(op, Text)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "width": self.width,
            "height": self.height,
            "ops": [op_to_dict(op) for op in self.ops],
        }


def translate(op: DrawOp, dx: float, dy: float) -> DrawOp:
    """The same op moved by (dx, dy)."""
    if isinstance(op, Line):
        return replace(op, x1=op.x1 + dx, y1=op.y1 + dy, x2=op.x2 + dx, y2=op.y2 + dy)
    return replace(op, x=op.x + dx, y=op.y + dy)
