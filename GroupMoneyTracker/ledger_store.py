"""
Ledger Store Module

This module loads and saves ledger snapshots in Firebase Firestore.

Features:
    - One document per account holding the whole snapshot
    - Whole-document writes, so readers never see a half-applied change
    - Migration of older documents on load (see ledger.Ledger.from_dict)

Firestore Structure:
    users/{account_id}/app/state
        - people: list
        - purchases: list
        - payments: list
        - updated_at: timestamp (ISO, UTC)

Functions:
    load_ledger: Load the snapshot for an account.
    save_ledger: Replace the stored snapshot for an account.
"""

import logging
from datetime import datetime, timezone

from config.firebase_config import get_db
from ledger import Ledger, EMPTY_LEDGER


logger = logging.getLogger(__name__)

STATE_DOC_ID = "state"


def _get_timestamp() -> str:
    """Get current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def _validate_account_id(account_id: str) -> None:
    """
    Validate that account_id is a non-empty string.

    Raises:
        ValueError: If account_id is invalid.
    """
    if not isinstance(account_id, str) or not account_id.strip():
        raise ValueError("account_id must be a non-empty string")


def _state_ref(account_id: str):
    db = get_db()
    if db is None:
        raise RuntimeError("Firestore is not available")

    return db.collection("users").document(account_id) \
             .collection("app").document(STATE_DOC_ID)


def load_ledger(account_id: str) -> Ledger:
    """
    Load the ledger snapshot for an account.

    Args:
        account_id: Opaque account identifier (the signed-in user's UID).

    Returns:
        Ledger: Stored snapshot, or an empty ledger if none was saved yet.

    Raises:
        ValueError: If account_id is invalid.
        RuntimeError: If Firestore is not available.
    """
    _validate_account_id(account_id)
    doc_ref = _state_ref(account_id)

    try:
        snapshot = doc_ref.get()
    except Exception:
        logger.exception("Error loading state for account %s", account_id)
        raise

    if not snapshot.exists:
        logger.info("No stored state for account %s, starting empty", account_id)
        return EMPTY_LEDGER

    return Ledger.from_dict(snapshot.to_dict())


def save_ledger(account_id: str, ledger: Ledger) -> dict:
    """
    Replace the stored snapshot for an account.

    Args:
        account_id: Opaque account identifier.
        ledger: The new snapshot.

    Returns:
        dict: Confirmation with document path and timestamp.

    Raises:
        ValueError: If account_id is invalid.
        RuntimeError: If Firestore is not available.

    Notes:
        - Overwrites the whole document (idempotent)
        - Optional fields with no value are not written
    """
    _validate_account_id(account_id)
    doc_ref = _state_ref(account_id)

    timestamp = _get_timestamp()
    doc_data = ledger.to_dict()
    doc_data["updated_at"] = timestamp

    try:
        doc_ref.set(doc_data)
    except Exception:
        logger.exception("Error saving state for account %s", account_id)
        raise

    logger.debug("Saved %r for account %s", ledger, account_id)
    return {
        "saved": True,
        "path": f"users/{account_id}/app/{STATE_DOC_ID}",
        "updated_at": timestamp
    }
