"""
Document styles.

A style turns one field (already formatted) into a block of draw ops
positioned relative to the top-left corner of its cell, and supplies the
page header, the per-page footer and the vertical limits the renderer
paginates against. Styles hold no per-render state.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

from app.drawing import Color, DrawOp, Line, Rect, Text, font_name
from app.errors import UnknownStyle
from app.formatting import RATING_MAX, FormattedValue, ValueSymbols
from app.schemas import FormField, FormSettings

DEFAULT_TITLE = "Form Submission"

# fixed English names so dates do not depend on the process locale
DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def wrap_text(text: str, font: str, size: float, width: float) -> List[str]:
    """Split `text` into lines no wider than `width` mm.

    Words wider than a whole line are broken between characters.
    """
    max_width = max(width, 0.0) * mm
    lines: List[str] = []
    for line in simpleSplit(text, font, size, max_width):
        while len(line) > 1 and stringWidth(line, font, size) > max_width:
            cut = len(line) - 1
            while cut > 1 and stringWidth(line[:cut], font, size) > max_width:
                cut -= 1
            lines.append(line[:cut])
            line = line[cut:]
        lines.append(line)
    return lines or [""]


@dataclass
class Block:
    height: float
    ops: List[DrawOp] = field(default_factory=list)


class DocumentStyle:
    name = ""
    branding = "FormForge"

    page_width = 210.0
    page_height = 297.0
    margin = 20.0
    # cursor position at the top of every page after the first
    top_margin = 30.0
    # blocks must end at or above this line
    content_bottom = 262.0
    column_gap = 6.0

    font = "sans"
    symbols = ValueSymbols()

    heading_sizes = {"heading1": 18.0, "heading2": 14.0}
    heading_color: Color = (17, 24, 39)
    paragraph_size = 10.0
    paragraph_color: Color = (55, 65, 81)
    divider_color: Color = (209, 213, 219)

    rating_mark_size = 3.5
    rating_mark_gap = 1.5
    rating_fill: Color = (0, 0, 0)
    rating_stroke: Color = (0, 0, 0)

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    # ---------- page furniture ----------

    def header(self, settings: FormSettings) -> Tuple[List[DrawOp], float]:
        """Draw ops for the first-page header and the cursor position below it."""
        raise NotImplementedError

    def footer(self, page_number: int, settings: FormSettings) -> List[DrawOp]:
        raise NotImplementedError

    def format_date(self, settings: FormSettings) -> Optional[str]:
        if settings.date is None or not settings.showDate:
            return None
        d = settings.date
        return f"{d.month}/{d.day}/{d.year}"

    def footer_text(self, settings: FormSettings) -> str:
        return settings.footerText or self.branding

    def aligned_x(self, settings: FormSettings) -> float:
        if settings.headerAlignment == "left":
            return self.margin
        if settings.headerAlignment == "right":
            return self.page_width - self.margin
        return self.page_width / 2

    # ---------- field blocks ----------

    def block(self, field: FormField, value: Optional[FormattedValue], width: float, index: int) -> Block:
        """`index` counts the label/value blocks already placed in the document."""
        if field.type in self.heading_sizes:
            return self.heading_block(field.type, field.content, width)
        if field.type == "paragraph":
            return self.paragraph_block(field.content, width)
        if field.type == "divider":
            return self.divider_block(width)
        return self.value_block(field, value, width, index)

    def value_block(self, field: FormField, value: FormattedValue, width: float, index: int) -> Block:
        raise NotImplementedError

    def text_lines(self, x: float, y: float, text: str, size: float, weight: str,
                   color: Color, width: float, leading: float) -> List[Text]:
        """Left-aligned text wrapped to `width` mm, first baseline at `y`."""
        lines = wrap_text(text, font_name(self.font, weight), size, width)
        return [Text(x, y + i * leading, line, size, weight, color, self.font) for i, line in enumerate(lines)]

    def heading_block(self, level: str, content: str, width: float) -> Block:
        if not content.strip():
            return Block(0.0)
        size = self.heading_sizes[level]
        line_height = size * 0.5
        ops = self.text_lines(0, line_height + 1, content, size, "bold", self.heading_color, width, line_height + 1)
        return Block(line_height + 5 + (len(ops) - 1) * (line_height + 1), list(ops))

    def paragraph_block(self, content: str, width: float) -> Block:
        if not content.strip():
            return Block(0.0)
        line_height = self.paragraph_size * 0.5
        ops = self.text_lines(0, line_height, content, self.paragraph_size, "normal",
                              self.paragraph_color, width, line_height)
        return Block(line_height * len(ops) + 4, list(ops))

    def divider_block(self, width: float) -> Block:
        return Block(8.0, [Line(0, 4, width, 4, self.divider_color, 0.4)])

    def rating_marks(self, x: float, y: float, filled: int) -> List[DrawOp]:
        step = self.rating_mark_size + self.rating_mark_gap
        return [
            Rect(
                x + i * step, y, self.rating_mark_size, self.rating_mark_size,
                fill=self.rating_fill if i < filled else None,
                stroke=self.rating_stroke,
                line_width=0.2,
            )
            for i in range(RATING_MAX)
        ]

    @property
    def rating_marks_width(self) -> float:
        return RATING_MAX * (self.rating_mark_size + self.rating_mark_gap)


class ModernStyle(DocumentStyle):
    """Coloured banner header, striped label/value blocks."""
    name = "modern"
    branding = "Powered by FormForge - Professional Form to PDF Generator"
    content_bottom = 270.0
    symbols = ValueSymbols(max_chars=45, signature_prefix="Signed: ")

    banner_color: Color = (59, 130, 246)
    stripe_color: Color = (249, 250, 251)
    label_color: Color = (31, 41, 55)
    value_color: Color = (75, 85, 99)
    muted_color: Color = (107, 114, 128)
    footer_band_color: Color = (243, 244, 246)
    heading_color: Color = (37, 99, 235)
    rating_fill: Color = (245, 158, 11)
    rating_stroke: Color = (245, 158, 11)
    block_height = 25.0

    def header(self, settings):
        if not settings.showHeader:
            return [], self.top_margin
        x = self.aligned_x(settings)
        align = settings.headerAlignment
        title = settings.title or DEFAULT_TITLE
        ops: List[DrawOp] = [Rect(0, 0, self.page_width, 35, fill=self.banner_color)]
        if settings.subtitle:
            ops.append(Text(x, 17, title, 24, "bold", (255, 255, 255), self.font, align))
            ops.append(Text(x, 28, settings.subtitle, 12, "normal", (255, 255, 255), self.font, align))
        else:
            ops.append(Text(x, 22, title, 24, "bold", (255, 255, 255), self.font, align))
        cursor = 45.0
        date_text = self.format_date(settings)
        if date_text:
            ops.append(Text(self.margin, 52, date_text, 11, "normal", self.muted_color, self.font))
            cursor = 62.0
        return ops, cursor

    def format_date(self, settings):
        if settings.date is None or not settings.showDate:
            return None
        d = settings.date
        return f"Submitted on {DAY_NAMES[d.weekday()]}, {MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"

    def footer(self, page_number, settings):
        y = self.page_height - 10
        ops: List[DrawOp] = [
            Rect(0, self.page_height - 20, self.page_width, 20, fill=self.footer_band_color),
            Text(self.page_width / 2, y, self.footer_text(settings), 9, "normal", self.muted_color, self.font, "center"),
        ]
        if settings.showPageNumbers:
            ops.append(Text(self.page_width - self.margin, y, f"Page {page_number}", 9, "normal", self.muted_color, self.font, "right"))
        return ops

    def value_block(self, field, value, width, index):
        leading = 5.0
        labels = self.text_lines(0, 7, f"{field.label}:", 12, "bold", self.label_color, width, leading)
        # everything below the label moves down by its extra lines
        shift = (len(labels) - 1) * leading
        marks: List[DrawOp] = []
        x = 0.0
        if value.rating is not None:
            marks = self.rating_marks(0, 12 + shift, value.rating)
            x = self.rating_marks_width + 1
        elif value.checked is not None:
            marks = [Rect(0, 12 + shift, 3.5, 3.5, fill=self.banner_color if value.checked else None,
                          stroke=self.banner_color, line_width=0.3)]
            x = 6.0
        texts = self.text_lines(x, 15 + shift, value.text, 11, "normal", self.value_color, width - x, leading)
        extra = shift + (len(texts) - 1) * leading

        ops: List[DrawOp] = []
        if index % 2 == 0:
            ops.append(Rect(-3, 0, width + 6, 20 + extra, fill=self.stripe_color))
        ops.extend(labels)
        ops.extend(marks)
        ops.extend(texts)
        return Block(self.block_height + extra, ops)


class ClassicStyle(DocumentStyle):
    """Bordered title box and a two-column table of labels and values."""
    name = "classic"
    branding = "Generated by FormForge"
    font = "serif"
    content_bottom = 262.0
    symbols = ValueSymbols(max_chars=35, rating_suffix=" stars")

    heading_sizes = {"heading1": 16.0, "heading2": 13.0}
    heading_color: Color = (0, 0, 0)
    paragraph_size = 11.0
    paragraph_color: Color = (0, 0, 0)
    divider_color: Color = (0, 0, 0)
    rating_mark_size = 3.0
    block_height = 16.0

    def header(self, settings):
        if not settings.showHeader:
            return [], self.top_margin
        x = self.aligned_x(settings)
        align = settings.headerAlignment
        title = (settings.title or DEFAULT_TITLE).upper()
        ops: List[DrawOp] = [
            Rect(self.margin, 15, self.content_width, 40, stroke=(0, 0, 0), line_width=0.8),
            Text(x, 30, title, 20, "bold", (0, 0, 0), self.font, align),
        ]
        if settings.subtitle:
            ops.append(Text(x, 39, settings.subtitle, 12, "italic", (0, 0, 0), self.font, align))
        date_text = self.format_date(settings)
        if date_text:
            ops.append(Text(x, 48, f"Date: {date_text}", 11, "normal", (0, 0, 0), self.font, align))
        return ops, 70.0

    def footer(self, page_number, settings):
        rule_y = self.page_height - 30
        ops: List[DrawOp] = [
            Line(self.margin, rule_y, self.page_width - self.margin, rule_y, (0, 0, 0), 0.5),
            Text(self.page_width / 2, rule_y + 12, self.footer_text(settings), 10, "italic", (0, 0, 0), self.font, "center"),
        ]
        if settings.showPageNumbers:
            ops.append(Text(self.page_width - self.margin, rule_y + 12, f"Page {page_number}",
                            10, "normal", (0, 0, 0), self.font, "right"))
        return ops

    def heading_block(self, level, content, width):
        block = super().heading_block(level, content, width)
        if block.ops and level == "heading2":
            block.ops.append(Line(0, block.height - 2, width, block.height - 2, (0, 0, 0), 0.3))
        return block

    def divider_block(self, width):
        return Block(8.0, [
            Line(0, 3.4, width, 3.4, self.divider_color, 0.3),
            Line(0, 4.6, width, 4.6, self.divider_color, 0.3),
        ])

    def value_block(self, field, value, width, index):
        leading = 5.0
        split = min(60.0, width * 0.4)
        labels = self.text_lines(3, 10.5, f"{field.label}:", 11, "bold", (0, 0, 0), split - 6, leading)
        x = split + 3
        value_width = width - x - 3
        y = 10.5
        marks: List[DrawOp] = []
        if value.rating is not None:
            marks = self.rating_marks(x, 7, value.rating)
            if value_width - self.rating_marks_width - 1 >= 20:
                x += self.rating_marks_width + 1
                value_width -= self.rating_marks_width + 1
            else:
                # narrow cell: the text goes under the marks
                y += leading
        texts = self.text_lines(x, y, value.text, 11, "normal", (0, 0, 0), value_width, leading)
        extra = max((len(labels) - 1) * leading, y - 10.5 + (len(texts) - 1) * leading)
        height = self.block_height + extra

        ops: List[DrawOp] = [
            Rect(0, 0, width, height, stroke=(0, 0, 0), line_width=0.3),
            Line(split, 0, split, height, (0, 0, 0), 0.3),
        ]
        ops.extend(labels)
        ops.extend(marks)
        ops.extend(texts)
        return Block(height, ops)


class MinimalStyle(DocumentStyle):
    """Plain text, no frames."""
    name = "minimal"
    content_bottom = 280.0
    symbols = ValueSymbols(
        max_chars=60,
        placeholder="—",
        not_rated="—",
        no_signature="—",
    )

    muted_color: Color = (128, 128, 128)
    value_color: Color = (64, 64, 64)
    rating_fill: Color = (64, 64, 64)
    rating_stroke: Color = (128, 128, 128)
    rating_mark_size = 2.5
    rating_mark_gap = 1.0
    block_height = 18.0

    def header(self, settings):
        if not settings.showHeader:
            return [], self.top_margin
        x = self.aligned_x(settings)
        align = settings.headerAlignment
        ops: List[DrawOp] = [Text(x, 40, settings.title or DEFAULT_TITLE, 20, "normal", (0, 0, 0), self.font, align)]
        if settings.subtitle:
            ops.append(Text(x, 48, settings.subtitle, 12, "normal", self.value_color, self.font, align))
        date_text = self.format_date(settings)
        if date_text:
            ops.append(Text(x, 55, date_text, 10, "normal", self.muted_color, self.font, align))
        return ops, 70.0

    def footer(self, page_number, settings):
        y = self.page_height - 10
        ops: List[DrawOp] = [
            Text(self.page_width - self.margin, y, self.footer_text(settings), 8, "normal", self.muted_color, self.font, "right"),
        ]
        if settings.showPageNumbers:
            ops.append(Text(self.margin, y, str(page_number), 8, "normal", self.muted_color, self.font))
        return ops

    def value_block(self, field, value, width, index):
        leading = 4.5
        ops: List[DrawOp] = list(self.text_lines(0, 5, field.label, 10.5, "bold", (0, 0, 0), width, leading))
        shift = (len(ops) - 1) * leading
        x = 0.0
        if value.rating is not None:
            ops.extend(self.rating_marks(0, 8.5 + shift, value.rating))
            x = self.rating_marks_width + 1
        texts = self.text_lines(x, 11 + shift, value.text, 10.5, "normal", self.value_color, width - x, leading)
        ops.extend(texts)
        return Block(self.block_height + shift + (len(texts) - 1) * leading, ops)


STYLES: Dict[str, DocumentStyle] = {
    style.name: style for style in (ModernStyle(), ClassicStyle(), MinimalStyle())
}


def get_style(name: str) -> DocumentStyle:
    try:
        return STYLES[name]
    except (KeyError, TypeError):
        raise UnknownStyle(name) from None


def resolve_style(name: Optional[str], default: Optional[str] = None) -> DocumentStyle:
    """Look up a style; `default` is used only when no name was given."""
    if not name and default:
        name = default
    return get_style(name)
