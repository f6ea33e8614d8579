"""
Balances Module

This module aggregates purchases and payments into per-person totals.

Sign convention:
    balance = owed - paid
        - Positive = the person still owes the tracker owner
        - Negative = the person has overpaid
        - Zero     = settled exactly

Data Model:
    Input - Ledger snapshot (see ledger.py)

    Output - balances (dict keyed by person_id, in People order):
        - owed_cents: int (sum of the person's allocations over all purchases)
        - paid_cents: int (sum of the person's payments)
        - balance_cents: int (owed_cents - paid_cents)

Functions:
    total_owed_by_person: Sum of allocations per person ID.
    total_paid_by_person: Sum of payments per person ID.
    calculate_balances: Owed/paid/balance for every person in the group.
"""

from collections import defaultdict

from ledger import Ledger
from splitter import allocate_purchase


def total_owed_by_person(purchases) -> dict[str, int]:
    """
    Sum every purchase allocation per person.

    Open and settled purchases count the same; status is informational.
    """
    totals = defaultdict(int)
    for purchase in purchases:
        for person_id, amount in allocate_purchase(purchase).items():
            totals[person_id] += amount
    return dict(totals)


def total_paid_by_person(payments) -> dict[str, int]:
    """Sum payment amounts grouped by the paying person."""
    totals = defaultdict(int)
    for payment in payments:
        totals[payment.person_id] += payment.amount_cents
    return dict(totals)


def calculate_balances(ledger: Ledger) -> dict[str, dict]:
    """
    Calculate owed, paid and balance for every person in the group.

    Args:
        ledger: Snapshot of people, purchases and payments.

    Returns:
        dict: Keyed by person_id, each containing:
            - owed_cents: int
            - paid_cents: int
            - balance_cents: int (owed - paid)

    Notes:
        - People with no purchases and no payments appear with zeros
        - IDs that are not in People (deleted members) are not listed
        - An empty snapshot yields {}
    """
    owed = total_owed_by_person(ledger.purchases)
    paid = total_paid_by_person(ledger.payments)

    result = {}
    for person in ledger.people:
        person_owed = owed.get(person.person_id, 0)
        person_paid = paid.get(person.person_id, 0)
        result[person.person_id] = {
            "owed_cents": person_owed,
            "paid_cents": person_paid,
            "balance_cents": person_owed - person_paid
        }

    return result
