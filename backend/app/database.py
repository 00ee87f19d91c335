from datetime import datetime
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient
from bson import ObjectId

from app.config import settings
from app.schemas import FormDefinition

client = AsyncIOMotorClient(settings.MONGO_URI)
db = client[settings.DB_NAME]

forms_collection = db.forms
submissions_collection = db.submissions


def convert_objectid_to_str(doc: Any) -> Any:
    """Convert MongoDB ObjectId values (at any depth) to strings for JSON serialization."""
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, dict):
        return {key: convert_objectid_to_str(value) for key, value in doc.items()}
    if isinstance(doc, list):
        return [convert_objectid_to_str(item) for item in doc]
    return doc


async def load_definition(form_id: str) -> Optional[FormDefinition]:
    """The stored definition of a template, or None when the template does not exist."""
    doc = await forms_collection.find_one({"_id": form_id})
    if not doc:
        return None
    return FormDefinition.model_validate(doc.get("definition") or {})


async def save_definition(form_id: str, definition: FormDefinition) -> None:
    await forms_collection.update_one(
        {"_id": form_id},
        {"$set": {"definition": definition.model_dump(mode="json"), "updatedAt": datetime.utcnow()}},
    )
