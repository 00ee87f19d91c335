import pytest

from app.drawing import Line, PageInstruction, Rect, Text
from app.pdf import write_pdf
from app.renderer import render_document
from app.styles import STYLES


@pytest.mark.parametrize("style", sorted(STYLES))
def test_rendered_document_encodes_to_stable_pdf(make_definition, style):
    definition = make_definition(
        [{"id": "a", "type": "text", "label": "Name"}, {"id": "r", "type": "rating", "label": "Score"}],
        [{"id": "d", "type": "divider"}],
        column_count=2,
        settings={"title": "Feedback", "date": "2024-05-01"},
    )
    document = render_document(definition, {"a": "Ann", "r": 4}, style)

    first = write_pdf(document.pages, title="Feedback")
    second = write_pdf(document.pages, title="Feedback")

    assert first.startswith(b"%PDF")
    assert first == second


def test_one_pdf_page_per_instruction():
    pages = [
        PageInstruction(n, 210, 297, [
            Rect(10, 10, 50, 20, fill=(200, 200, 200), stroke=(0, 0, 0), line_width=0.3),
            Line(10, 40, 200, 40),
            Text(105, 60, f"Page {n}", 12, "bold", align="center"),
        ])
        for n in (1, 2, 3)
    ]

    content = write_pdf(pages)

    assert b"/Count 3" in content


def test_unsupported_op_is_rejected():
    with pytest.raises(TypeError):
        write_pdf([PageInstruction(1, 210, 297, ["not an op"])])
