"""
Statement Module

This module builds an auditable per-person statement: every purchase the
person shares in, every payment they made, and the resulting totals.

Features:
    - Charge rows with the person's share of each purchase
    - Payment rows for the person's payments
    - Summary totals consistent with balances.py
    - Flat export rows for CSV/PDF rendering
    - Named per-purchase breakdowns ("Unknown" for deleted people)

Data Model:
    Output - statement (dict):
        - person_id: string
        - person_name: string ("Unknown" if not in People)
        - charge_rows: list of dicts
            - purchase_id, date, title, amount_cents, status, status_label, notes
        - payment_rows: list of dicts
            - payment_id, date, amount_cents, method, note
        - totals: dict
            - charges_cents, payments_cents, balance_cents

    Rows keep the snapshot's own order (newest first); nothing is re-sorted
    by date.

Functions:
    build_statement: Statement for one person.
    export_rows: Flatten a statement into typed rows.
    purchase_breakdown_named: Allocation of one purchase with person names.
"""

from ledger import Ledger
from money import cents_to_amount_str
from purchases import Purchase
from splitter import allocate_purchase
from utils import person_name


CHARGE_TYPE = "Charge"
PAYMENT_TYPE = "Payment"


def _shares_in(purchase: Purchase, person_id: str) -> bool:
    """Check whether the person is on at least one item of the purchase."""
    return any(person_id in item.participant_ids for item in purchase.items)


def build_statement(ledger: Ledger, person_id: str) -> dict:
    """
    Build the statement for one person.

    Args:
        ledger: Snapshot of people, purchases and payments.
        person_id: ID of the person.

    Returns:
        dict: Statement with charge_rows, payment_rows and totals. See
            the module docstring for the row layout.

    Notes:
        - balance = charges - payments (positive = still owes)
        - An unknown person_id yields a statement named "Unknown"
    """
    charge_rows = []
    for purchase in ledger.purchases:
        if not _shares_in(purchase, person_id):
            continue

        allocation = allocate_purchase(purchase)
        charge_rows.append({
            "purchase_id": purchase.purchase_id,
            "date": purchase.date,
            "title": purchase.title,
            "amount_cents": allocation.get(person_id, 0),
            "status": purchase.status,
            "status_label": purchase.status_label,
            "notes": purchase.notes
        })

    payment_rows = [
        {
            "payment_id": payment.payment_id,
            "date": payment.date,
            "amount_cents": payment.amount_cents,
            "method": payment.method,
            "note": payment.note
        }
        for payment in ledger.payments
        if payment.person_id == person_id
    ]

    charges_cents = sum(row["amount_cents"] for row in charge_rows)
    payments_cents = sum(row["amount_cents"] for row in payment_rows)

    return {
        "person_id": person_id,
        "person_name": person_name(ledger.people, person_id),
        "charge_rows": charge_rows,
        "payment_rows": payment_rows,
        "totals": {
            "charges_cents": charges_cents,
            "payments_cents": payments_cents,
            "balance_cents": charges_cents - payments_cents
        }
    }


def export_rows(statement: dict) -> list[dict]:
    """
    Flatten a statement into rows for tabular rendering.

    Charges come first, then payments. Payment amounts are negated so a
    running total over the amount column ends at the balance.

    Args:
        statement: Output of build_statement().

    Returns:
        list[dict]: Rows with keys type, date, description, amount
            ("7.01" style string), amount_cents, status_or_method, notes.
    """
    rows = []

    for charge in statement["charge_rows"]:
        rows.append({
            "type": CHARGE_TYPE,
            "date": charge["date"],
            "description": charge["title"],
            "amount_cents": charge["amount_cents"],
            "amount": cents_to_amount_str(charge["amount_cents"]),
            "status_or_method": charge["status_label"],
            "notes": charge["notes"] or ""
        })

    for payment in statement["payment_rows"]:
        rows.append({
            "type": PAYMENT_TYPE,
            "date": payment["date"],
            "description": PAYMENT_TYPE,
            "amount_cents": -payment["amount_cents"],
            "amount": cents_to_amount_str(-payment["amount_cents"]),
            "status_or_method": payment["method"] or "",
            "notes": payment["note"] or ""
        })

    return rows


def purchase_breakdown_named(purchase: Purchase, people) -> list[dict]:
    """
    Allocation of one purchase with display names.

    Args:
        purchase: The purchase to allocate.
        people: Iterable of Person objects used for name lookup.

    Returns:
        list[dict]: One entry per participant in first-appearance order:
            - person_id: string
            - name: string ("Unknown" for IDs not in People)
            - amount_cents: int
    """
    return [
        {
            "person_id": person_id,
            "name": person_name(people, person_id),
            "amount_cents": amount
        }
        for person_id, amount in allocate_purchase(purchase).items()
    ]
