import logging
from datetime import datetime
from typing import Any, Callable, Dict

from fastapi import APIRouter, HTTPException, Query

from app import layout
from app.database import (
    forms_collection,
    submissions_collection,
    convert_objectid_to_str,
    load_definition,
    save_definition,
)
from app.errors import InvalidLayout, UnknownField, UnknownRow
from app.rules import compute_visibility, explain_visibility
from app.schemas import FormDefinition, FormTemplateIn, FormTemplateOut, MoveFieldIn, NewFieldIn, ValuesIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/forms", tags=["forms"])


@router.get("")
async def list_forms():
    """Get a list of all form templates with basic info."""
    items = []
    async for item in forms_collection.find({}, {"_id": 1, "name": 1, "category": 1, "createdAt": 1}):
        item["id"] = item.pop("_id")
        items.append(convert_objectid_to_str(item))
    return items


@router.post("")
async def upsert_form(form: FormTemplateIn):
    doc = form.model_dump(mode="json")
    doc["_id"] = form.id
    # Only set createdAt if this is a new document
    existing = await forms_collection.find_one({"_id": form.id})
    if not existing:
        doc["createdAt"] = datetime.utcnow()
    else:
        doc["createdAt"] = existing.get("createdAt", datetime.utcnow())

    await forms_collection.replace_one({"_id": form.id}, doc, upsert=True)
    logger.info("Saved form %s", form.id)
    return {"status": "ok", "formId": form.id}


@router.get("/{form_id}", response_model=FormTemplateOut)
async def get_form(form_id: str):
    form = await forms_collection.find_one({"_id": form_id})
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")

    form["id"] = form.pop("_id")
    return convert_objectid_to_str(form)


@router.delete("/{form_id}")
async def delete_form(form_id: str):
    """Delete a form template and all its submissions."""
    item = await forms_collection.find_one({"_id": form_id})
    if not item:
        raise HTTPException(status_code=404, detail="Form not found")

    await forms_collection.delete_one({"_id": form_id})
    await submissions_collection.delete_many({"formId": form_id})
    logger.info("Deleted form %s", form_id)
    return {"status": "ok", "formId": form_id}


async def _apply_edit(form_id: str, edit: Callable[[FormDefinition], Any]) -> Any:
    """Load the definition, apply one layout operation and store the result."""
    definition = await load_definition(form_id)
    if definition is None:
        raise HTTPException(status_code=404, detail="Form not found")
    try:
        result = edit(definition)
    except InvalidLayout as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (UnknownRow, UnknownField) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        # includes pydantic validation errors from field updates
        raise HTTPException(status_code=422, detail=str(e))
    await save_definition(form_id, definition)
    return result


@router.post("/{form_id}/rows")
async def add_row(form_id: str, column_count: int = Query(1, description="Number of columns (1-3)")):
    row_id = await _apply_edit(form_id, lambda d: layout.add_row(d, column_count))
    return {"status": "ok", "rowId": row_id}


@router.delete("/{form_id}/rows/{row_id}")
async def remove_row(form_id: str, row_id: str):
    await _apply_edit(form_id, lambda d: layout.remove_row(d, row_id))
    return {"status": "ok", "rowId": row_id}


@router.patch("/{form_id}/rows/{row_id}/move")
async def move_row(form_id: str, row_id: str, target_index: int = Query(..., ge=0)):
    await _apply_edit(form_id, lambda d: layout.move_row(d, row_id, target_index))
    return {"status": "ok", "rowId": row_id, "index": target_index}


@router.put("/{form_id}/rows/{row_id}/columns")
async def set_column_count(form_id: str, row_id: str, column_count: int = Query(...)):
    await _apply_edit(form_id, lambda d: layout.set_column_count(d, row_id, column_count))
    return {"status": "ok", "rowId": row_id, "columnCount": column_count}


@router.post("/{form_id}/rows/{row_id}/fields")
async def add_field(form_id: str, row_id: str, body: NewFieldIn):
    field_id = await _apply_edit(form_id, lambda d: layout.add_field(d, row_id, body.type))
    return {"status": "ok", "fieldId": field_id}


@router.patch("/{form_id}/fields/{field_id}")
async def update_field(form_id: str, field_id: str, changes: Dict[str, Any]):
    field = await _apply_edit(form_id, lambda d: layout.update_field(d, field_id, changes))
    return field.model_dump(mode="json")


@router.post("/{form_id}/fields/{field_id}/duplicate")
async def duplicate_field(form_id: str, field_id: str):
    copy_id = await _apply_edit(form_id, lambda d: layout.duplicate_field(d, field_id))
    return {"status": "ok", "fieldId": copy_id}


@router.patch("/{form_id}/fields/{field_id}/move")
async def move_field(form_id: str, field_id: str, body: MoveFieldIn):
    await _apply_edit(form_id, lambda d: layout.move_field(d, field_id, body.targetRowId, body.targetIndex))
    return {"status": "ok", "fieldId": field_id, "rowId": body.targetRowId, "index": body.targetIndex}


@router.delete("/{form_id}/fields/{field_id}")
async def remove_field(form_id: str, field_id: str):
    await _apply_edit(form_id, lambda d: layout.remove_field(d, field_id))
    return {"status": "ok", "fieldId": field_id}


@router.post("/{form_id}/visibility")
async def evaluate_visibility(form_id: str, body: ValuesIn):
    """Which fields are shown for the given values, with a per-rule breakdown."""
    definition = await load_definition(form_id)
    if definition is None:
        raise HTTPException(status_code=404, detail="Form not found")
    return {
        "visibility": compute_visibility(definition, body.values),
        "details": explain_visibility(definition, body.values),
    }
