from typing import Any, Mapping, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from app.config import settings
from app.errors import UnknownStyle
from app.pdf import write_pdf
from app.renderer import RenderedDocument, render_document
from app.schemas import FormDefinition, RenderRequest

router = APIRouter(prefix="/api/documents", tags=["documents"])


def build_document(definition: FormDefinition, values: Mapping[str, Any], style: Optional[str]) -> RenderedDocument:
    """Render with the configured default style when the caller names none."""
    try:
        return render_document(definition, values, style, default_style=settings.DEFAULT_STYLE)
    except UnknownStyle as e:
        raise HTTPException(status_code=400, detail=str(e))


def pdf_response(definition: FormDefinition, document: RenderedDocument) -> Response:
    date = definition.settings.date
    filename = f"{document.style}-form-{date.isoformat()}.pdf" if date else f"{document.style}-form.pdf"
    content = write_pdf(document.pages, title=definition.settings.title or None)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/render")
async def render_pages(request: RenderRequest):
    """Lay out a posted definition and values as pages of draw operations."""
    document = build_document(request.definition, request.values, request.style)
    return document.to_dict()


@router.post("/pdf")
async def render_pdf(request: RenderRequest):
    document = build_document(request.definition, request.values, request.style)
    return pdf_response(request.definition, document)
