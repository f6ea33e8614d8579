"""
Payments Module

This module handles payments made by group members back to the tracker
owner.

Data Model:
    Payment stored inside the ledger snapshot under "payments":
        - id: string (UUID)
        - personId: string
        - amountCents: int (> 0)
        - date: string (YYYY-MM-DD)
        - note: string (omitted when absent)
        - method: string (omitted when absent), e.g. "Venmo"

Functions:
    build_payment: Validate form input and create a new Payment.
"""

from typing import Optional

from money import parse_to_cents
from utils import generate_id, today_str, validate_date, clean_optional_text


class Payment:
    """
    Represents money received from one person.

    Attributes:
        payment_id (str): Unique identifier.
        person_id (str): Person who paid.
        amount_cents (int): Amount in cents.
        date (str): Payment date (YYYY-MM-DD).
        note (str | None): Optional note.
        method (str | None): Optional payment method label.
    """

    def __init__(
        self,
        payment_id: str,
        person_id: str,
        amount_cents: int,
        date: str,
        note: Optional[str] = None,
        method: Optional[str] = None
    ):
        self.payment_id = payment_id
        self.person_id = person_id
        self.amount_cents = int(amount_cents)
        self.date = date
        self.note = note
        self.method = method

    def to_dict(self) -> dict:
        """Convert payment to dictionary for Firestore storage."""
        data = {
            "id": self.payment_id,
            "personId": self.person_id,
            "amountCents": self.amount_cents,
            "date": self.date
        }
        if self.note is not None:
            data["note"] = self.note
        if self.method is not None:
            data["method"] = self.method
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Payment":
        """Create a Payment instance from a dictionary."""
        return cls(
            payment_id=data.get("id"),
            person_id=data.get("personId"),
            amount_cents=data.get("amountCents", 0),
            date=data.get("date", ""),
            note=data.get("note"),
            method=data.get("method")
        )

    def __repr__(self) -> str:
        return f"Payment(id='{self.payment_id}', person='{self.person_id}', amount_cents={self.amount_cents})"


def build_payment(
    person_id: str,
    amount_text,
    date: Optional[str] = None,
    note: Optional[str] = None,
    method: Optional[str] = None
) -> Payment:
    """
    Validate payment form input and create a new Payment.

    Args:
        person_id: ID of the paying person (required).
        amount_text: Amount as money text, e.g. "$20".
        date: Payment date (YYYY-MM-DD); defaults to today.
        note: Optional note.
        method: Optional method label.

    Returns:
        Payment: The created payment.

    Raises:
        ValueError: If no person is selected, the amount is not positive,
            or the date is malformed.
    """
    if not isinstance(person_id, str) or not person_id.strip():
        raise ValueError("Select a person for the payment.")

    amount_cents = parse_to_cents(amount_text)
    if amount_cents <= 0:
        raise ValueError("Enter a valid payment amount.")

    payment_date = validate_date(date) if date else today_str()

    return Payment(
        payment_id=generate_id(),
        person_id=person_id,
        amount_cents=amount_cents,
        date=payment_date,
        note=clean_optional_text(note),
        method=clean_optional_text(method)
    )
