"""Shared fixtures: an in-memory stand-in for the Firestore client."""

import uuid
from contextlib import contextmanager
from types import SimpleNamespace
from unittest.mock import patch

import pytest


def _clone(value):
    """Copy dicts and lists; leave sentinels and geo-points as the same objects."""
    if isinstance(value, dict):
        return {k: _clone(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_clone(v) for v in value]
    return value


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return _clone(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, client, collection, doc_id):
        self._client = client
        self.collection_name = collection
        self.id = doc_id

    def _store(self):
        return self._client.data.setdefault(self.collection_name, {})

    def get(self):
        return FakeSnapshot(self, _clone(self._store().get(self.id)))

    def set(self, data, merge=False):
        store = self._store()
        if merge and self.id in store:
            store[self.id].update(_clone(data))
        else:
            store[self.id] = _clone(data)

    def update(self, data):
        store = self._store()
        if self.id not in store:
            raise KeyError(f"No document to update: {self.collection_name}/{self.id}")
        store[self.id].update(_clone(data))

    def delete(self):
        self._store().pop(self.id, None)


class FakeAggregateQuery:
    def __init__(self, query):
        self._query = query

    def get(self):
        return [[SimpleNamespace(alias="count", value=len(self._query._matching()))]]


class FakeQuery:
    def __init__(self, client, collection, filters=(), limit=None, fields=None):
        self._client = client
        self._collection = collection
        self._filters = tuple(filters)
        self._limit = limit
        self._fields = fields

    def where(self, field_path, op, value):
        assert op == "==", "fake only supports equality filters"
        return FakeQuery(self._client, self._collection, self._filters + ((field_path, value),),
                         self._limit, self._fields)

    def limit(self, count):
        return FakeQuery(self._client, self._collection, self._filters, count, self._fields)

    def select(self, field_paths):
        self._client.projections.append((self._collection, tuple(field_paths)))
        return FakeQuery(self._client, self._collection, self._filters, self._limit, tuple(field_paths))

    def _matching(self):
        self._client.reads.append(self._collection)
        docs = self._client.data.get(self._collection, {})
        ids = [
            doc_id for doc_id, data in docs.items()
            if all(data.get(f) == v for f, v in self._filters)
        ]
        if self._limit is not None:
            ids = ids[: self._limit]
        return ids

    def stream(self):
        for doc_id in self._matching():
            ref = FakeDocumentReference(self._client, self._collection, doc_id)
            snapshot = ref.get()
            if self._fields is not None:
                data = snapshot.to_dict()
                snapshot = FakeSnapshot(ref, {f: data[f] for f in self._fields if f in data})
            yield snapshot

    def get(self):
        return list(self.stream())

    def count(self):
        return FakeAggregateQuery(self)


class FakeCollection(FakeQuery):
    def __init__(self, client, name):
        super().__init__(client, name)
        self.id = name

    def document(self, doc_id=None):
        return FakeDocumentReference(self._client, self._collection, doc_id or uuid.uuid4().hex[:20])


class FakeBatch:
    def __init__(self, client):
        self._client = client
        self._ops = []

    def set(self, ref, data, merge=False):
        self._ops.append(("set", ref, data, merge))

    def update(self, ref, data):
        self._ops.append(("update", ref, data, False))

    def delete(self, ref):
        self._ops.append(("delete", ref, None, False))

    def commit(self):
        client = self._client
        if client.fail_on_commit is not None and len(client.commits) + 1 == client.fail_on_commit:
            raise RuntimeError("deadline exceeded")
        assert len(self._ops) <= 500, "Firestore rejects batches over 500 writes"
        for op, ref, data, merge in self._ops:
            if op == "set":
                ref.set(data, merge=merge)
            elif op == "update":
                ref.update(data)
            else:
                ref.delete()
        client.commits.append(len(self._ops))
        return []


class FakeFirestore:
    project = "osakel-test"

    def __init__(self, data=None):
        self.data = _clone(data or {})
        self.commits = []
        self.reads = []
        self.projections = []
        self.fail_on_commit = None

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeBatch(self)

    def docs(self, collection):
        return self.data.get(collection, {})


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def make_db():
    return FakeFirestore


@pytest.fixture
def no_sleep():
    calls = []
    return calls.append, calls


@pytest.fixture
def patched_session():
    """Route CLI commands to an in-memory database instead of Firebase."""
    db = FakeFirestore()

    @contextmanager
    def session(credential_source=None, project_id=None, name=None):
        yield db

    with patch("OSAKEL.core.cli.firestore_session", session):
        yield db
