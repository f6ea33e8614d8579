"""
Purchases Module

This module handles purchase records for the group money tracker.

Features:
    - Itemised purchases with per-item participants
    - Shared tax/fees on top of the items
    - Manual open/settled status tag
    - Entry validation before a purchase is saved

Data Model:
    Purchase stored inside the ledger snapshot under "purchases":
        - id: string (UUID)
        - title: string
        - date: string (YYYY-MM-DD)
        - items: list of item dicts (entry order preserved)
            - id: string
            - description: string
            - priceCents: int (>= 0)
            - participantIds: list of person IDs
        - taxAndFeesCents: int (>= 0)
        - notes: string (omitted when absent)
        - receiptRef: string (omitted when absent)
        - status: "open" or "settled"

Functions:
    build_item: Create an Item from user-entered fields.
    build_purchase: Validate form input and create a new Purchase.
"""

from typing import Iterable, Optional

from money import parse_to_cents
from utils import generate_id, today_str, validate_date, clean_optional_text


STATUS_OPEN = "open"
STATUS_SETTLED = "settled"
VALID_STATUSES = {STATUS_OPEN, STATUS_SETTLED}

DEFAULT_ITEM_DESCRIPTION = "Item"


class Item:
    """
    One line on a purchase.

    Attributes:
        item_id (str): Unique identifier.
        description (str): Free text.
        price_cents (int): Price in cents.
        participant_ids (tuple[str]): People sharing the item, in the order
            they were ticked; duplicates collapse to one.
    """

    def __init__(
        self,
        item_id: str,
        description: str,
        price_cents: int,
        participant_ids: Iterable[str] = ()
    ):
        self.item_id = item_id
        self.description = description
        self.price_cents = int(price_cents)
        self.participant_ids = tuple(dict.fromkeys(participant_ids))

    def to_dict(self) -> dict:
        return {
            "id": self.item_id,
            "description": self.description,
            "priceCents": self.price_cents,
            "participantIds": list(self.participant_ids)
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Item":
        return cls(
            item_id=data.get("id"),
            description=data.get("description", ""),
            price_cents=data.get("priceCents", 0),
            participant_ids=data.get("participantIds", [])
        )

    def __repr__(self) -> str:
        return f"Item(id='{self.item_id}', price_cents={self.price_cents}, participants={list(self.participant_ids)})"


class Purchase:
    """
    A shared purchase.

    Attributes:
        purchase_id (str): Unique identifier.
        title (str): Short title, e.g. "Snacks".
        date (str): Purchase date (YYYY-MM-DD).
        items (tuple[Item]): Items in entry order.
        fee_cents (int): Tax and fees shared among all participants.
        notes (str | None): Optional notes.
        receipt_ref (str | None): Optional reference to a stored receipt.
        status (str): "open" or "settled"; informational only.
    """

    def __init__(
        self,
        purchase_id: str,
        title: str,
        date: str,
        items: Iterable[Item],
        fee_cents: int = 0,
        notes: Optional[str] = None,
        receipt_ref: Optional[str] = None,
        status: str = STATUS_OPEN
    ):
        self.purchase_id = purchase_id
        self.title = title
        self.date = date
        self.items = tuple(items)
        self.fee_cents = int(fee_cents)
        self.notes = notes
        self.receipt_ref = receipt_ref
        self.status = status

    @property
    def status_label(self) -> str:
        """Human-readable status ("Open" / "Settled")."""
        return "Open" if self.status == STATUS_OPEN else "Settled"

    def with_status(self, status: str) -> "Purchase":
        """Return a copy of this purchase carrying a different status."""
        if status not in VALID_STATUSES:
            raise ValueError(f"status must be one of {sorted(VALID_STATUSES)}, got: {status}")
        return Purchase(
            purchase_id=self.purchase_id,
            title=self.title,
            date=self.date,
            items=self.items,
            fee_cents=self.fee_cents,
            notes=self.notes,
            receipt_ref=self.receipt_ref,
            status=status
        )

    def to_dict(self) -> dict:
        """
        Convert purchase to dictionary for Firestore storage.

        Optional fields with no value are left out entirely.
        """
        data = {
            "id": self.purchase_id,
            "title": self.title,
            "date": self.date,
            "items": [item.to_dict() for item in self.items],
            "taxAndFeesCents": self.fee_cents,
            "status": self.status
        }
        if self.notes is not None:
            data["notes"] = self.notes
        if self.receipt_ref is not None:
            data["receiptRef"] = self.receipt_ref
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Purchase":
        """
        Create a Purchase from a stored dictionary.

        Missing status loads as open; receipts stored under the older
        "receiptDataUrl" key load as receipt_ref.
        """
        return cls(
            purchase_id=data.get("id"),
            title=data.get("title", ""),
            date=data.get("date", ""),
            items=[Item.from_dict(item) for item in data.get("items", [])],
            fee_cents=data.get("taxAndFeesCents", 0),
            notes=data.get("notes"),
            receipt_ref=data.get("receiptRef") or data.get("receiptDataUrl"),
            status=data.get("status") or STATUS_OPEN
        )

    def __repr__(self) -> str:
        return f"Purchase(id='{self.purchase_id}', title='{self.title}', items={len(self.items)}, status='{self.status}')"


def build_item(
    description: str,
    price,
    participant_ids: Iterable[str] = ()
) -> Item:
    """
    Create an item from form input.

    Args:
        description: Free text; blank becomes "Item".
        price: Money text (e.g. "5.99") or integer cents.
        participant_ids: IDs of the people sharing this item.

    Returns:
        Item: The new item with a fresh ID.
    """
    if isinstance(price, int) and not isinstance(price, bool):
        price_cents = max(0, price)
    else:
        price_cents = parse_to_cents(price)

    return Item(
        item_id=generate_id(),
        description=(description or "").strip() or DEFAULT_ITEM_DESCRIPTION,
        price_cents=price_cents,
        participant_ids=participant_ids
    )


def build_purchase(
    title: str,
    items: list[Item],
    date: Optional[str] = None,
    fees_text: str = "",
    notes: Optional[str] = None,
    receipt_ref: Optional[str] = None
) -> Purchase:
    """
    Validate purchase form input and create a new open Purchase.

    Args:
        title: Purchase title (required).
        items: Items built with build_item (at least one).
        date: Purchase date (YYYY-MM-DD); defaults to today.
        fees_text: Tax and fees as money text; unparseable text counts as 0.
        notes: Optional notes.
        receipt_ref: Optional receipt reference.

    Returns:
        Purchase: The created purchase.

    Raises:
        ValueError: If the title is blank, there are no items, or the
            date is malformed.
    """
    if not isinstance(title, str) or not title.strip():
        raise ValueError("Please enter a purchase title.")

    if not items:
        raise ValueError("Please add at least one item.")

    purchase_date = validate_date(date) if date else today_str()

    return Purchase(
        purchase_id=generate_id(),
        title=title.strip(),
        date=purchase_date,
        items=items,
        fee_cents=parse_to_cents(fees_text),
        notes=clean_optional_text(notes),
        receipt_ref=clean_optional_text(receipt_ref),
        status=STATUS_OPEN
    )
