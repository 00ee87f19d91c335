"""
Document rendering: lays visible fields out onto fixed-size pages.

The renderer is pure layout. Visibility is decided beforehand (see
app.rules) and passed in; the renderer only reads it. A document is built
by a small state machine:

    START -> HEADER -> FIELDS -> [FOOTER -> FIELDS]* -> FOOTER -> DONE

Pages are only handed back once the machine reaches DONE.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from app.drawing import PageInstruction, translate
from app.formatting import format_value
from app.rules import compute_visibility, missing_required_fields
from app.schemas import LAYOUT_TYPES, FormDefinition, FormSettings
from app.styles import Block, DocumentStyle, get_style, resolve_style

logger = logging.getLogger(__name__)


class RenderState(str, Enum):
    START = "start"
    HEADER = "emitting_header"
    FIELDS = "emitting_fields"
    FOOTER = "emitting_footer"
    DONE = "done"


class _DocumentBuilder:
    def __init__(self, style: DocumentStyle, settings: FormSettings):
        self.style = style
        self.settings = settings
        self.state = RenderState.START
        self.pages: List[PageInstruction] = []
        self.page: Optional[PageInstruction] = None
        self.cursor = 0.0
        self.value_blocks = 0

    def _expect(self, state: RenderState) -> None:
        if self.state is not state:
            raise RuntimeError(f"renderer is in state {self.state.value}, expected {state.value}")

    def _open_page(self) -> None:
        self.page = PageInstruction(len(self.pages) + 1, self.style.page_width, self.style.page_height)
        self.pages.append(self.page)
        self.cursor = self.style.top_margin

    def _emit_footer(self) -> None:
        self.state = RenderState.FOOTER
        self.page.ops.extend(self.style.footer(self.page.number, self.settings))

    def emit_header(self) -> None:
        self._expect(RenderState.START)
        self.state = RenderState.HEADER
        self._open_page()
        ops, self.cursor = self.style.header(self.settings)
        self.page.ops.extend(ops)
        self.state = RenderState.FIELDS

    def next_value_index(self) -> int:
        index = self.value_blocks
        self.value_blocks += 1
        return index

    def place_line(self, cells: List[Tuple[float, Block]]) -> None:
        """Place one line of cells; the whole line always lands on a single page."""
        self._expect(RenderState.FIELDS)
        height = max((block.height for _, block in cells), default=0.0)
        if height <= 0:
            return
        if self.cursor + height > self.style.content_bottom:
            if self.cursor > self.style.top_margin:
                self._emit_footer()
                self.state = RenderState.FIELDS
                self._open_page()
            else:
                logger.warning("Block of %.1fmm is taller than a %s page; it will overflow",
                               height, self.style.name)
        for x, block in cells:
            self.page.ops.extend(translate(op, x, self.cursor) for op in block.ops)
        self.cursor += height

    def finish(self) -> List[PageInstruction]:
        self._expect(RenderState.FIELDS)
        self._emit_footer()
        self.state = RenderState.DONE
        return self.pages


def render(
    definition: FormDefinition,
    values: Mapping[str, Any],
    visibility: Mapping[str, bool],
    style: Union[str, DocumentStyle],
) -> List[PageInstruction]:
    """
    Lay out the visible fields of `definition` as pages of draw ops.

    Fields missing from `visibility` are treated as hidden. Raises
    UnknownStyle for an unrecognised style name before anything is drawn.
    """
    doc_style = style if isinstance(style, DocumentStyle) else get_style(style)
    builder = _DocumentBuilder(doc_style, definition.settings)
    builder.emit_header()

    for row in definition.rows:
        shown = [field for field in row.fields if visibility.get(field.id, False)]
        if not shown:
            continue
        columns = max(1, min(row.columnCount, 3))
        width = (doc_style.content_width - doc_style.column_gap * (columns - 1)) / columns
        # fields beyond the column count wrap onto further lines
        for start in range(0, len(shown), columns):
            cells = []
            for column, field in enumerate(shown[start:start + columns]):
                if field.type in LAYOUT_TYPES:
                    block = doc_style.block(field, None, width, builder.value_blocks)
                else:
                    value = format_value(field, values.get(field.id), doc_style.symbols)
                    block = doc_style.block(field, value, width, builder.next_value_index())
                x = doc_style.margin + column * (width + doc_style.column_gap)
                cells.append((x, block))
            builder.place_line(cells)

    pages = builder.finish()
    logger.debug("Rendered %d page(s) in %s style", len(pages), doc_style.name)
    return pages


@dataclass
class RenderedDocument:
    style: str
    pages: List[PageInstruction]
    visibility: Dict[str, bool]
    missing_required: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "style": self.style,
            "pageCount": len(self.pages),
            "pages": [page.to_dict() for page in self.pages],
            "visibility": self.visibility,
            "missingRequired": self.missing_required,
        }


def render_document(
    definition: FormDefinition,
    values: Mapping[str, Any],
    style: Optional[str],
    default_style: Optional[str] = None,
) -> RenderedDocument:
    """Compute visibility for `values` and render in one call."""
    doc_style = resolve_style(style, default_style)
    visibility = compute_visibility(definition, values)
    pages = render(definition, values, visibility, doc_style)
    return RenderedDocument(
        style=doc_style.name,
        pages=pages,
        visibility=visibility,
        missing_required=missing_required_fields(definition, values, visibility),
    )
