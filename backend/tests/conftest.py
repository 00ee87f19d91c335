"""
Shared fixtures.

HTTP tests run against in-memory stand-ins for the Mongo collections, so no
database or running server is needed.
"""
import copy

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from app.schemas import FormDefinition


class _DeleteResult:
    def __init__(self, deleted_count: int):
        self.deleted_count = deleted_count


class _Cursor:
    def __init__(self, docs):
        self._docs = iter(docs)

    def __aiter__(self):
        return self

    async def __anext__(self):
        try:
            return next(self._docs)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """The subset of the motor collection API the routers use."""

    def __init__(self):
        self.docs = []

    @staticmethod
    def _matches(doc, query):
        return all(doc.get(key) == value for key, value in query.items())

    async def find_one(self, query, projection=None):
        for doc in self.docs:
            if self._matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query, projection=None, sort=None):
        docs = [copy.deepcopy(doc) for doc in self.docs if self._matches(doc, query)]
        for key, direction in reversed(sort or []):
            docs.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return _Cursor(docs)

    async def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))

    async def replace_one(self, query, doc, upsert=False):
        for index, existing in enumerate(self.docs):
            if self._matches(existing, query):
                self.docs[index] = copy.deepcopy(doc)
                return
        if upsert:
            self.docs.append(copy.deepcopy(doc))

    async def update_one(self, query, update):
        for doc in self.docs:
            if self._matches(doc, query):
                doc.update(copy.deepcopy(update.get("$set", {})))
                return

    async def delete_one(self, query):
        for index, doc in enumerate(self.docs):
            if self._matches(doc, query):
                del self.docs[index]
                return _DeleteResult(1)
        return _DeleteResult(0)

    async def delete_many(self, query):
        before = len(self.docs)
        self.docs = [doc for doc in self.docs if not self._matches(doc, query)]
        return _DeleteResult(before - len(self.docs))


@pytest.fixture
def collections(monkeypatch):
    import app.database as database
    import app.routers.forms as forms_router
    import app.routers.submissions as submissions_router
    import app.routers.templates as templates_router

    forms, submissions = FakeCollection(), FakeCollection()
    for module in (database, forms_router, submissions_router, templates_router):
        if hasattr(module, "forms_collection"):
            monkeypatch.setattr(module, "forms_collection", forms)
        if hasattr(module, "submissions_collection"):
            monkeypatch.setattr(module, "submissions_collection", submissions)
    return forms, submissions


@pytest.fixture
def client(collections):
    from app.main import app
    return TestClient(app)


@pytest.fixture
def make_definition():
    """Build a FormDefinition from rows given as lists of field dicts."""
    def _make(*rows, column_count=1, settings=None):
        return FormDefinition.model_validate({
            "rows": [
                {"id": f"row{i}", "columnCount": column_count, "fields": fields}
                for i, fields in enumerate(rows)
            ],
            "settings": settings or {},
        })
    return _make
