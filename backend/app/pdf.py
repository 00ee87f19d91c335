"""Encode rendered pages as a PDF with reportlab."""
import io
from typing import Iterable, Optional

from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from app.drawing import Color, DrawOp, Line, PageInstruction, Rect, Text, font_name


def _rgb(color: Color):
    return tuple(channel / 255.0 for channel in color)


def _draw(pdf: canvas.Canvas, op: DrawOp, page_height: float) -> None:
    # draw ops measure y downwards from the top of the page; reportlab measures up from the bottom
    if isinstance(op, Rect):
        if op.fill is not None:
            pdf.setFillColorRGB(*_rgb(op.fill))
        if op.stroke is not None:
            pdf.setStrokeColorRGB(*_rgb(op.stroke))
            pdf.setLineWidth(op.line_width * mm)
        pdf.rect(
            op.x * mm, (page_height - op.y - op.height) * mm, op.width * mm, op.height * mm,
            stroke=int(op.stroke is not None), fill=int(op.fill is not None),
        )
    elif isinstance(op, Line):
        pdf.setStrokeColorRGB(*_rgb(op.color))
        pdf.setLineWidth(op.line_width * mm)
        pdf.line(op.x1 * mm, (page_height - op.y1) * mm, op.x2 * mm, (page_height - op.y2) * mm)
    elif isinstance(op, Text):
        pdf.setFillColorRGB(*_rgb(op.color))
        pdf.setFont(font_name(op.font, op.weight), op.size)
        x, y = op.x * mm, (page_height - op.y) * mm
        if op.align == "center":
            pdf.drawCentredString(x, y, op.text)
        elif op.align == "right":
            pdf.drawRightString(x, y, op.text)
        else:
            pdf.drawString(x, y, op.text)
    else:
        raise TypeError(f"Unsupported draw op: {type(op).__name__}")


def write_pdf(pages: Iterable[PageInstruction], title: Optional[str] = None) -> bytes:
    """PDF bytes for the pages. Output is byte-for-byte stable for identical input."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, invariant=1)
    if title:
        pdf.setTitle(title)
    for page in pages:
        pdf.setPageSize((page.width * mm, page.height * mm))
        for op in page.ops:
            _draw(pdf, op, page.height)
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()
