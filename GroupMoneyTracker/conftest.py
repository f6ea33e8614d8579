import copy

import pytest

from ledger import Ledger
from people import Person
from purchases import Item, Purchase
from payments import Payment


class FakeSnapshot:
    def __init__(self, data):
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocument:
    def __init__(self, store, path):
        self._store = store
        self._path = path

    def collection(self, name):
        return FakeCollection(self._store, self._path + (name,))

    def get(self):
        return FakeSnapshot(self._store.get(self._path))

    def set(self, data):
        self._store[self._path] = copy.deepcopy(data)


class FakeCollection:
    def __init__(self, store, path):
        self._store = store
        self._path = path

    def document(self, doc_id):
        return FakeDocument(self._store, self._path + (doc_id,))


class FakeFirestore:
    """In-memory stand-in for the parts of firestore.Client we use."""

    def __init__(self):
        self.documents = {}

    def collection(self, name):
        return FakeCollection(self.documents, (name,))


@pytest.fixture
def fake_db(monkeypatch):
    import ledger_store

    db = FakeFirestore()
    monkeypatch.setattr(ledger_store, "get_db", lambda: db)
    return db


@pytest.fixture
def snacks_ledger():
    """Alice and Bob share snacks; Carol has only paid."""
    people = [
        Person("A", "Alice"),
        Person("B", "Bob"),
        Person("C", "Carol"),
    ]
    snacks = Purchase(
        purchase_id="PU1",
        title="Snacks",
        date="2025-03-02",
        items=[
            Item("I1", "Chips", 599, ["A", "B"]),
            Item("I2", "Soda", 350, ["A"]),
        ],
        fee_cents=101,
        notes="Corner shop",
    )
    payments = [
        Payment("PA2", "C", 500, "2025-03-04"),
        Payment("PA1", "A", 200, "2025-03-03", note="partial", method="Venmo"),
    ]
    return Ledger(people, [snacks], payments)
