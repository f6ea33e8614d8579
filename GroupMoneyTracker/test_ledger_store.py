import pytest

import ledger_store
from ledger import Ledger
from ledger_store import load_ledger, save_ledger


def test_load_missing_state_is_empty(fake_db):
    ledger = load_ledger("user-1")
    assert ledger.to_dict() == {"people": [], "purchases": [], "payments": []}


def test_save_then_load(fake_db, snacks_ledger):
    result = save_ledger("user-1", snacks_ledger)

    assert result["path"] == "users/user-1/app/state"
    stored = fake_db.documents[("users", "user-1", "app", "state")]
    assert stored["updated_at"] == result["updated_at"]
    assert "receiptRef" not in stored["purchases"][0]

    loaded = load_ledger("user-1")
    assert loaded.to_dict() == snacks_ledger.to_dict()


def test_accounts_are_isolated(fake_db, snacks_ledger):
    save_ledger("user-1", snacks_ledger)
    assert load_ledger("user-2").people == ()


def test_save_replaces_whole_document(fake_db, snacks_ledger):
    save_ledger("user-1", snacks_ledger)
    save_ledger("user-1", Ledger())

    assert load_ledger("user-1").purchases == ()


@pytest.mark.parametrize("account_id", ["", "   ", None])
def test_invalid_account_id(fake_db, account_id):
    with pytest.raises(ValueError):
        load_ledger(account_id)


def test_firestore_unavailable(monkeypatch):
    monkeypatch.setattr(ledger_store, "get_db", lambda: None)

    with pytest.raises(RuntimeError, match="Firestore is not available"):
        load_ledger("user-1")
    with pytest.raises(RuntimeError):
        save_ledger("user-1", Ledger())


def test_legacy_receipt_survives_load_and_save(fake_db):
    fake_db.documents[("users", "user-1", "app", "state")] = {
        "purchases": [{
            "id": "p",
            "title": "Groceries",
            "date": "2024-05-01",
            "items": [],
            "taxAndFeesCents": 0,
            "receiptDataUrl": "data:image/png;base64,AAAA",
        }],
    }

    ledger = load_ledger("user-1")
    assert ledger.purchases[0].receipt_ref == "data:image/png;base64,AAAA"

    save_ledger("user-1", ledger)
    stored = fake_db.documents[("users", "user-1", "app", "state")]
    assert stored["purchases"][0]["receiptRef"] == "data:image/png;base64,AAAA"


def test_unexpected_storage_error_is_logged_and_raised(fake_db, monkeypatch, caplog):
    def broken_set(self, data):
        raise OSError("backend exploded")

    monkeypatch.setattr(type(fake_db.collection("users").document("x")), "set", broken_set)

    with pytest.raises(OSError):
        save_ledger("user-1", Ledger())
    assert "Error saving state for account user-1" in caplog.text
