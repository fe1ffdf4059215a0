"""
Unit-test fixtures.

``FakeFirestore`` is a small in-memory stand-in for
:class:`google.cloud.firestore_v1.AsyncClient` covering the calls the
threads models make: document CRUD, ``ArrayUnion`` updates, filtered and
ordered queries, aggregation counts and ``get_all``.
"""
import copy
import itertools
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from google.api_core.exceptions import NotFound
from google.cloud.firestore_v1.transforms import ArrayUnion
from google.cloud.firestore_v1.types import StructuredQuery

from threads_app import FirestoreDB, cache, database, init_threads_app


_ids = itertools.count(1)


class FakeSnapshot:
    def __init__(self, doc_id: str, data: Optional[Dict[str, Any]], field_paths=None):
        self.id = doc_id
        self.exists = data is not None
        if data is not None and field_paths is not None:
            data = {key: value for key, value in data.items() if key in field_paths}
        self._data = copy.deepcopy(data)

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocumentRef:
    def __init__(self, store: Dict[str, Dict[str, Any]], doc_id: str):
        self._store = store
        self.id = doc_id

    async def get(self):
        return FakeSnapshot(self.id, self._store.get(self.id))

    async def set(self, data):
        self._store[self.id] = copy.deepcopy(data)

    async def update(self, data):
        if self.id not in self._store:
            raise NotFound(f"No document to update: {self.id}")
        document = self._store[self.id]
        for key, value in data.items():
            if isinstance(value, ArrayUnion):
                current = list(document.get(key) or [])
                current.extend(item for item in value.values if item not in current)
                document[key] = current
            else:
                document[key] = copy.deepcopy(value)

    async def delete(self):
        self._store.pop(self.id, None)


def _matches(document: Dict[str, Any], field: str, op: str, value: Any) -> bool:
    if field not in document:
        return False
    current = document[field]
    if op == "==":
        return current == value
    if op == "!=":
        return current != value
    if op == "<":
        return current < value
    if op == "<=":
        return current <= value
    if op == ">":
        return current > value
    if op == ">=":
        return current >= value
    if op == "in":
        return current in value
    if op == "not-in":
        return current not in value
    if op == "array_contains":
        return value in (current or [])
    raise ValueError(f"Unsupported operator {op}")


class FakeAggregation:
    def __init__(self, value: int):
        self._value = value

    async def get(self):
        return [[SimpleNamespace(alias="count", value=self._value)]]


class FakeQuery:
    def __init__(self, store, filters=None, orders=None, offset=0, limit=None, fields=None):
        self._store = store
        self._filters = filters or []
        self._orders = orders or []
        self._offset = offset
        self._limit = limit
        self._fields = fields

    def _copy(self, **changes):
        values = dict(
            filters=list(self._filters),
            orders=list(self._orders),
            offset=self._offset,
            limit=self._limit,
            fields=self._fields,
        )
        values.update(changes)
        return FakeQuery(self._store, **values)

    def where(self, filter=None):
        op = filter.op_string
        if op == StructuredQuery.UnaryFilter.Operator.IS_NULL:
            op = "=="
        elif op == StructuredQuery.UnaryFilter.Operator.IS_NOT_NULL:
            op = "!="
        return self._copy(filters=self._filters + [(filter.field_path, op, filter.value)])

    def order_by(self, field_path, direction="ASCENDING"):
        return self._copy(orders=self._orders + [(field_path, direction)])

    def offset(self, value):
        return self._copy(offset=value)

    def limit(self, value):
        return self._copy(limit=value)

    def select(self, fields):
        return self._copy(fields=list(fields))

    def _results(self) -> List[FakeSnapshot]:
        rows = [
            (doc_id, document)
            for doc_id, document in self._store.items()
            if all(_matches(document, *f) for f in self._filters)
        ]
        for field, direction in reversed(self._orders):
            rows = [row for row in rows if field in row[1]]
            rows.sort(key=lambda row: row[1][field], reverse=direction == "DESCENDING")
        rows = rows[self._offset:]
        if self._limit is not None:
            rows = rows[: self._limit]
        return [FakeSnapshot(doc_id, document, self._fields) for doc_id, document in rows]

    async def stream(self):
        for snapshot in self._results():
            yield snapshot

    async def get(self):
        return self._results()

    def count(self):
        return FakeAggregation(len(self._results()))


class FakeCollection(FakeQuery):
    def __init__(self, store):
        super().__init__(store)

    def document(self, doc_id: Optional[str] = None):
        return FakeDocumentRef(self._store, doc_id or f"doc{next(_ids):05d}")


class FakeFirestore:
    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.get_all_calls = 0

    def collection(self, name: str) -> FakeCollection:
        return FakeCollection(self.collections.setdefault(name, {}))

    async def get_all(self, references, field_paths=None):
        self.get_all_calls += 1
        for ref in references:
            yield FakeSnapshot(ref.id, ref._store.get(ref.id), field_paths)


def make_db(client) -> FirestoreDB:
    """FirestoreDB around ``client`` without building a real AsyncClient."""
    db = FirestoreDB.__new__(FirestoreDB)
    db.project_id = "test-project"
    db.database = None
    db.credentials = None
    db._emulator_host = None
    db.client = client
    return db


@pytest.fixture
def fake_firestore():
    return FakeFirestore()


@pytest.fixture
def firestore_db(fake_firestore):
    db = make_db(fake_firestore)
    init_threads_app(db)
    yield db
    database.reset_connection()


@pytest.fixture(autouse=True)
def clean_cache():
    cache.clear()
    yield
    cache.clear()
