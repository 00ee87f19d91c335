import logging
from datetime import datetime
from typing import Literal, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import APIRouter, HTTPException, Query

from app.database import submissions_collection, convert_objectid_to_str, load_definition
from app.routers.documents import build_document, pdf_response
from app.rules import compute_visibility, missing_required_fields
from app.schemas import SubmissionIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/forms", tags=["submissions"])


def _object_id(submission_id: str) -> ObjectId:
    try:
        return ObjectId(submission_id)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=400, detail="Invalid submission id")


@router.post("/{form_id}/submit")
async def submit_form(form_id: str, submission: SubmissionIn):
    definition = await load_definition(form_id)
    if definition is None:
        raise HTTPException(status_code=404, detail="Form not found")

    visibility = compute_visibility(definition, submission.values)
    missing = missing_required_fields(definition, submission.values, visibility)
    if missing:
        raise HTTPException(
            status_code=422,
            detail={"message": "Please fill in the required fields", "missing": missing},
        )

    doc = {
        "formId": form_id,
        "values": submission.values,
        "visibility": visibility,
        "comments": submission.comments or "",
        "submittedAt": datetime.utcnow(),
    }
    await submissions_collection.insert_one(doc)
    logger.info("Stored submission for form %s", form_id)
    return convert_objectid_to_str(doc)


@router.get("/{form_id}/submissions")
async def list_submissions(form_id: str):
    """Return submissions for a form (most recent first)."""
    submissions = []
    cursor = submissions_collection.find({"formId": form_id}, sort=[("submittedAt", -1)])
    async for doc in cursor:
        doc = convert_objectid_to_str(doc)
        submissions.append({
            "id": doc.get("_id"),
            "formId": doc.get("formId"),
            "values": doc.get("values", {}),
            "comments": doc.get("comments", ""),
            "submittedAt": doc.get("submittedAt"),
        })
    return submissions


@router.delete("/{form_id}/submissions/{submission_id}")
async def delete_submission(form_id: str, submission_id: str):
    """Delete a single submission by id."""
    oid = _object_id(submission_id)
    result = await submissions_collection.delete_one({"_id": oid, "formId": form_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Submission not found")
    return {"status": "ok", "deletedId": submission_id}


@router.get("/{form_id}/submissions/{submission_id}/document")
async def submission_document(
    form_id: str,
    submission_id: str,
    style: Optional[str] = Query(None, description="modern, classic or minimal"),
    format: Literal["json", "pdf"] = Query("json"),
):
    """Render a stored submission against the form's current definition."""
    definition = await load_definition(form_id)
    if definition is None:
        raise HTTPException(status_code=404, detail="Form not found")
    submission = await submissions_collection.find_one({"_id": _object_id(submission_id), "formId": form_id})
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")

    document = build_document(definition, submission.get("values", {}), style)
    if format == "pdf":
        return pdf_response(definition, document)
    return document.to_dict()
