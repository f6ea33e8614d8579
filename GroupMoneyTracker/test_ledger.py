from datetime import date

import pytest

from ledger import Ledger, add_person, add_purchase, add_payment, toggle_purchase_status
from payments import build_payment
from purchases import build_item, build_purchase


def test_build_purchase_cleans_input():
    items = [build_item("  ", "5.99", ["A", "B"]), build_item("Soda", "$3.50", ["A"])]
    purchase = build_purchase("  Snacks ", items, date="2025-03-02", fees_text="1.01", notes="   ")

    assert purchase.title == "Snacks"
    assert purchase.items[0].description == "Item"
    assert purchase.items[0].price_cents == 599
    assert purchase.items[1].price_cents == 350
    assert purchase.fee_cents == 101
    assert purchase.notes is None
    assert purchase.status == "open"
    assert "notes" not in purchase.to_dict()


def test_build_purchase_defaults_date_to_today():
    purchase = build_purchase("Lunch", [build_item("x", "1", [])])
    assert purchase.date == date.today().isoformat()


def test_build_purchase_unparseable_fee_is_zero():
    purchase = build_purchase("Lunch", [build_item("x", "1", [])], fees_text="n/a")
    assert purchase.fee_cents == 0


@pytest.mark.parametrize("title, items, message", [
    ("", [object()], "Please enter a purchase title."),
    ("   ", [object()], "Please enter a purchase title."),
    ("Lunch", [], "Please add at least one item."),
])
def test_build_purchase_validation(title, items, message):
    with pytest.raises(ValueError, match=message):
        build_purchase(title, items)


def test_build_purchase_rejects_bad_date():
    with pytest.raises(ValueError, match="YYYY-MM-DD"):
        build_purchase("Lunch", [build_item("x", "1", [])], date="03/02/2025")


def test_build_payment():
    payment = build_payment("A", "$20", date="2025-03-03", note=" thanks ", method="")

    assert payment.amount_cents == 2000
    assert payment.note == "thanks"
    assert payment.method is None
    assert payment.to_dict() == {
        "id": payment.payment_id,
        "personId": "A",
        "amountCents": 2000,
        "date": "2025-03-03",
        "note": "thanks",
    }


@pytest.mark.parametrize("person_id, amount, message", [
    ("", "5", "Select a person for the payment."),
    ("A", "0", "Enter a valid payment amount."),
    ("A", "abc", "Enter a valid payment amount."),
])
def test_build_payment_validation(person_id, amount, message):
    with pytest.raises(ValueError, match=message):
        build_payment(person_id, amount)


def test_snapshot_operations_do_not_mutate(snacks_ledger):
    before = snacks_ledger.to_dict()

    with_person = add_person(snacks_ledger, "  Dan ")
    purchase = build_purchase("Coffee", [build_item("Latte", "4", ["D"])])
    with_purchase = add_purchase(snacks_ledger, purchase)
    payment = build_payment("B", "3.50")
    with_payment = add_payment(snacks_ledger, payment)

    assert snacks_ledger.to_dict() == before
    assert with_person.people[-1].name == "Dan"
    assert with_purchase.purchases[0] is purchase
    assert with_payment.payments[0] is payment


def test_add_person_rejects_blank_name():
    with pytest.raises(ValueError):
        add_person(Ledger(), "   ")


def test_toggle_status_round_trip(snacks_ledger):
    settled = toggle_purchase_status(snacks_ledger, "PU1")
    reopened = toggle_purchase_status(settled, "PU1")

    assert snacks_ledger.purchases[0].status == "open"
    assert settled.purchases[0].status == "settled"
    assert settled.purchases[0].status_label == "Settled"
    assert reopened.purchases[0].status == "open"


def test_toggle_unknown_purchase_is_noop(snacks_ledger):
    assert toggle_purchase_status(snacks_ledger, "missing").to_dict() == snacks_ledger.to_dict()


def test_from_dict_migrates_old_documents():
    ledger = Ledger.from_dict({
        "people": [{"id": "A", "name": "Alice"}],
        "purchases": [{
            "id": "PU1",
            "title": "Old",
            "date": "2024-01-01",
            "items": [{"id": "i", "description": "x", "priceCents": 100, "participantIds": ["A"]}],
            "taxAndFeesCents": 0,
        }],
    })

    assert ledger.purchases[0].status == "open"
    assert ledger.payments == ()
    assert Ledger.from_dict(None).to_dict() == {"people": [], "purchases": [], "payments": []}
