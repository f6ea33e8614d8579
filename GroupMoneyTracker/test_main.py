import pytest
from fastapi.testclient import TestClient

import main
from ledger_store import save_ledger


@pytest.fixture
def client(fake_db):
    main.app.dependency_overrides[main.get_account_id] = lambda: "user-1"
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


def test_health():
    response = TestClient(main.app).get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_requests_without_token_are_rejected(fake_db):
    response = TestClient(main.app).get("/ledger")
    assert response.status_code in (401, 403)


def test_full_flow(client):
    alice = client.post("/people", json={"name": "Alice"}).json()
    bob = client.post("/people", json={"name": "Bob"}).json()

    response = client.post("/purchases", json={
        "title": "Snacks",
        "date": "2025-03-02",
        "fees": "$1.01",
        "items": [
            {"description": "Chips", "price": "5.99", "participant_ids": [alice["id"], bob["id"]]},
            {"description": "Soda", "price": "3.50", "participant_ids": [alice["id"]]},
        ],
    })
    assert response.status_code == 201
    purchase = response.json()
    assert purchase["taxAndFeesCents"] == 101
    assert purchase["status"] == "open"

    response = client.post("/payments", json={"person_id": bob["id"], "amount": "5", "method": "Cash"})
    assert response.status_code == 201

    balances = {b["name"]: b for b in client.get("/balances").json()}
    assert balances["Alice"]["owed_cents"] == 701
    assert balances["Alice"]["balance"] == "$7.01"
    assert balances["Bob"]["balance_cents"] == -150
    assert balances["Bob"]["balance"] == "-$1.50"

    breakdown = client.get(f"/purchases/{purchase['id']}/breakdown").json()
    assert [(e["name"], e["amount"]) for e in breakdown] == [("Alice", "$7.01"), ("Bob", "$3.50")]

    toggled = client.post(f"/purchases/{purchase['id']}/toggle-status").json()
    assert toggled["status"] == "settled"

    statement = client.get(f"/people/{bob['id']}/statement").json()
    assert statement["charge_rows"][0]["status_label"] == "Settled"
    assert statement["totals"] == {"charges_cents": 350, "payments_cents": 500, "balance_cents": -150}

    csv_response = client.get(f"/people/{bob['id']}/statement.csv")
    assert csv_response.status_code == 200
    assert csv_response.headers["content-type"].startswith("text/csv")
    assert "Bob-statement.csv" in csv_response.headers["content-disposition"]
    assert '"Payment","' in csv_response.text

    pdf_response = client.get(f"/people/{bob['id']}/statement.pdf")
    assert pdf_response.status_code == 200
    assert pdf_response.content.startswith(b"%PDF")


def test_newest_purchase_first(client):
    for title in ("First", "Second"):
        client.post("/purchases", json={"title": title, "items": [{"price": "1"}]})

    titles = [p["title"] for p in client.get("/ledger").json()["purchases"]]
    assert titles == ["Second", "First"]


@pytest.mark.parametrize("payload, message", [
    ({"title": "", "items": [{"price": "1"}]}, "Please enter a purchase title."),
    ({"title": "Lunch", "items": []}, "Please add at least one item."),
])
def test_purchase_validation(client, payload, message):
    response = client.post("/purchases", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == message


@pytest.mark.parametrize("payload, message", [
    ({"person_id": "", "amount": "5"}, "Select a person for the payment."),
    ({"person_id": "A", "amount": "0"}, "Enter a valid payment amount."),
])
def test_payment_validation(client, payload, message):
    response = client.post("/payments", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == message


def test_blank_person_name(client):
    assert client.post("/people", json={"name": "  "}).status_code == 400


def test_unknown_ids_return_404(client):
    assert client.post("/purchases/nope/toggle-status").status_code == 404
    assert client.get("/purchases/nope/breakdown").status_code == 404
    assert client.get("/people/nope/statement").status_code == 404


def test_loads_existing_state(client, snacks_ledger):
    save_ledger("user-1", snacks_ledger)

    balances = client.get("/balances").json()
    assert [b["balance_cents"] for b in balances] == [501, 350, -500]


def test_database_unavailable(client, monkeypatch):
    import ledger_store

    monkeypatch.setattr(ledger_store, "get_db", lambda: None)
    assert client.get("/ledger").status_code == 503


def test_payment_for_person_outside_group(client):
    response = client.post("/payments", json={"person_id": "ghost", "amount": "5"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Select a person for the payment."
    assert client.get("/ledger").json()["payments"] == []


def test_long_price_does_not_crash(client):
    response = client.post("/purchases", json={"title": "Huge", "items": [{"price": "9" * 40}]})

    assert response.status_code == 201
    assert response.json()["items"][0]["priceCents"] == int("9" * 40) * 100


def test_statement_download_with_non_ascii_name(client):
    person = client.post("/people", json={"name": "李雷"}).json()

    response = client.get(f"/people/{person['id']}/statement.csv")
    assert response.status_code == 200
    assert "filename*=UTF-8''%E6%9D%8E%E9%9B%B7-statement.csv" in response.headers["content-disposition"]


def test_storage_error_details_are_not_leaked(client, monkeypatch):
    import ledger_store

    class BrokenDb:
        def collection(self, name):
            raise OSError("grpc channel 10.0.0.7 refused")

    monkeypatch.setattr(ledger_store, "get_db", lambda: BrokenDb())
    response = client.get("/ledger")

    assert response.status_code == 500
    assert response.json()["detail"] == "Could not load ledger"
