"""
Ledger Module

This module defines the ledger snapshot: the full set of people, purchases
and payments for one account at one point in time.

A snapshot is never changed in place. Every operation below returns a new
Ledger, and callers replace their old snapshot with it as a whole.

Data Model:
    Stored as a single document:
        - people: list of person dicts
        - purchases: list of purchase dicts (newest first)
        - payments: list of payment dicts (newest first)

Functions:
    add_person: Return a snapshot with a new person appended.
    add_purchase: Return a snapshot with a purchase placed first.
    add_payment: Return a snapshot with a payment placed first.
    toggle_purchase_status: Return a snapshot with one purchase flipped open/settled.
"""

from typing import Iterable, Optional

from people import Person, build_person
from purchases import Purchase, STATUS_OPEN, STATUS_SETTLED
from payments import Payment


class Ledger:
    """
    Immutable snapshot of one account's data.

    Attributes:
        people (tuple[Person]): Group members in the order they were added.
        purchases (tuple[Purchase]): Purchases, newest first.
        payments (tuple[Payment]): Payments, newest first.
    """

    def __init__(
        self,
        people: Iterable[Person] = (),
        purchases: Iterable[Purchase] = (),
        payments: Iterable[Payment] = ()
    ):
        self.people = tuple(people)
        self.purchases = tuple(purchases)
        self.payments = tuple(payments)

    def find_person(self, person_id: str) -> Optional[Person]:
        for person in self.people:
            if person.person_id == person_id:
                return person
        return None

    def find_purchase(self, purchase_id: str) -> Optional[Purchase]:
        for purchase in self.purchases:
            if purchase.purchase_id == purchase_id:
                return purchase
        return None

    def to_dict(self) -> dict:
        """Convert the snapshot to a dictionary for Firestore storage."""
        return {
            "people": [p.to_dict() for p in self.people],
            "purchases": [p.to_dict() for p in self.purchases],
            "payments": [p.to_dict() for p in self.payments]
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Ledger":
        """
        Create a Ledger from a stored dictionary.

        Missing collections load as empty and purchases saved before the
        status tag existed load as open.
        """
        data = data or {}
        return cls(
            people=[Person.from_dict(p) for p in data.get("people") or []],
            purchases=[Purchase.from_dict(p) for p in data.get("purchases") or []],
            payments=[Payment.from_dict(p) for p in data.get("payments") or []]
        )

    def __repr__(self) -> str:
        return (
            f"Ledger(people={len(self.people)}, purchases={len(self.purchases)}, "
            f"payments={len(self.payments)})"
        )


EMPTY_LEDGER = Ledger()


def add_person(ledger: Ledger, name: str) -> Ledger:
    """
    Add a person to the group.

    Args:
        ledger: Current snapshot.
        name: Name as typed by the user.

    Returns:
        Ledger: New snapshot with the person appended.

    Raises:
        ValueError: If the name is blank.
    """
    person = build_person(name)
    return Ledger(ledger.people + (person,), ledger.purchases, ledger.payments)


def add_purchase(ledger: Ledger, purchase: Purchase) -> Ledger:
    """Return a new snapshot with the purchase placed first (newest first)."""
    return Ledger(ledger.people, (purchase,) + ledger.purchases, ledger.payments)


def add_payment(ledger: Ledger, payment: Payment) -> Ledger:
    """Return a new snapshot with the payment placed first (newest first)."""
    return Ledger(ledger.people, ledger.purchases, (payment,) + ledger.payments)


def toggle_purchase_status(ledger: Ledger, purchase_id: str) -> Ledger:
    """
    Flip one purchase between open and settled.

    Args:
        ledger: Current snapshot.
        purchase_id: ID of the purchase to flip.

    Returns:
        Ledger: New snapshot. An unknown ID leaves the purchases unchanged.

    Notes:
        - Status is a manual tag; balances ignore it
    """
    purchases = []
    for purchase in ledger.purchases:
        if purchase.purchase_id == purchase_id:
            new_status = STATUS_SETTLED if purchase.status == STATUS_OPEN else STATUS_OPEN
            purchase = purchase.with_status(new_status)
        purchases.append(purchase)

    return Ledger(ledger.people, purchases, ledger.payments)
