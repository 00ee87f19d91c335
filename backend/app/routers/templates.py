from datetime import datetime

from fastapi import APIRouter, HTTPException, Query

from app.database import forms_collection
from app.templates import builtin_templates, get_builtin_template

router = APIRouter(prefix="/api/templates", tags=["templates"])


@router.get("")
async def list_templates():
    return [
        {"id": t.id, "name": t.name, "category": t.category, "description": t.description}
        for t in builtin_templates()
    ]


@router.get("/{template_id}")
async def get_template(template_id: str):
    template = get_builtin_template(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return template.model_dump(mode="json")


@router.post("/{template_id}/use")
async def use_template(template_id: str, form_id: str = Query(..., min_length=1)):
    """Copy a built-in template into a new stored form."""
    template = get_builtin_template(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")
    if await forms_collection.find_one({"_id": form_id}):
        raise HTTPException(status_code=409, detail="A form with this id already exists")

    doc = template.model_dump(mode="json")
    doc["id"] = form_id
    doc["_id"] = form_id
    doc["createdAt"] = datetime.utcnow()
    await forms_collection.insert_one(doc)
    return {"status": "ok", "formId": form_id}
