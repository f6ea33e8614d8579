"""
Splitter Module

This module handles the per-purchase cost allocation for the group money
tracker.

Features:
    - Equal splitting of each item among the people who shared it
    - Exact splitting of shared tax/fees among everyone on the purchase
    - Integer-cent arithmetic throughout

Rules:
    Item shares:
        Each item is split independently: every participant gets
        round_half_up(price_cents / participant_count). Because each item
        rounds on its own, the shares of one item can differ from its price
        by up to (participant_count - 1) cents. Items nobody shares are not
        charged to anyone.

    Fee shares:
        Fees are split among the participant set (everyone who shares at
        least one item) with the largest-remainder method: everyone gets
        floor(fee / n) and the leftover cents go one each to participants
        in the order they first appear on the purchase. Fee shares always
        sum to the fee exactly.

Data Model:
    Input - Purchase (see purchases.py)

    Output - allocation (dict keyed by person_id, insertion ordered):
        - value: int cents owed for this purchase (items + fees)

Functions:
    participant_order: Ordered, de-duplicated participant set of a purchase.
    split_item: Per-person share of one item.
    split_fee: Largest-remainder split of the shared fee.
    allocate_purchase: Full per-person allocation of one purchase.
"""

from decimal import Decimal, ROUND_HALF_UP

from purchases import Item, Purchase


def participant_order(purchase: Purchase) -> list[str]:
    """
    Collect everyone who shares at least one item.

    Args:
        purchase: The purchase to scan.

    Returns:
        list[str]: Person IDs in order of first appearance while scanning
            items in entry order.
    """
    seen = {}
    for item in purchase.items:
        for person_id in item.participant_ids:
            seen.setdefault(person_id, None)
    return list(seen)


def split_item(item: Item) -> int:
    """
    Per-person share of one item in cents.

    Args:
        item: Item with a price and participant IDs.

    Returns:
        int: round_half_up(price / participant_count), or 0 if nobody
            shares the item.
    """
    count = len(item.participant_ids)
    if count == 0:
        return 0

    share = Decimal(item.price_cents) / Decimal(count)
    return int(share.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def split_fee(fee_cents: int, participants: list[str]) -> dict[str, int]:
    """
    Split a fee exactly among participants.

    Args:
        fee_cents: Fee in cents.
        participants: Ordered participant IDs; earlier IDs receive the
            leftover cents first.

    Returns:
        dict[str, int]: Fee share per participant, summing to fee_cents.
            Empty when there are no participants.
    """
    if not participants:
        return {}

    base, remainder = divmod(fee_cents, len(participants))

    shares = {}
    for index, person_id in enumerate(participants):
        shares[person_id] = base + (1 if index < remainder else 0)
    return shares


def allocate_purchase(purchase: Purchase) -> dict[str, int]:
    """
    Compute what each participant owes for one purchase.

    Args:
        purchase: The purchase to allocate.

    Returns:
        dict[str, int]: Cents owed per person ID (item shares plus fee
            share), ordered by first appearance. People who share no item
            are absent; a purchase with no participants yields {}.

    Notes:
        - Pure function; the purchase is not modified
        - Purchase status is ignored
    """
    participants = participant_order(purchase)

    # Everyone in the participant set gets an entry, even if it stays 0
    allocation = {person_id: 0 for person_id in participants}

    for item in purchase.items:
        per_person = split_item(item)
        for person_id in item.participant_ids:
            allocation[person_id] += per_person

    for person_id, fee_share in split_fee(purchase.fee_cents, participants).items():
        allocation[person_id] += fee_share

    return allocation
