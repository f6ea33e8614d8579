"""
GroupMoneyTracker - FastAPI Web Backend

This module serves as the main entry point for the group money tracker API.
Each signed-in user owns one ledger of people, purchases and payments.

Features:
    - RESTful API for people, purchases and payments
    - Firebase ID-token sign-in; the token's UID selects the ledger
    - Per-purchase breakdowns, per-person balances and statements
    - CSV and PDF statement downloads

Endpoints:
    GET  /ledger                                 - Full ledger snapshot
    POST /people                                 - Add a person
    POST /purchases                              - Add a purchase
    POST /purchases/{purchase_id}/toggle-status  - Flip open/settled
    GET  /purchases/{purchase_id}/breakdown      - Who owes what for one purchase
    POST /payments                               - Record a payment
    GET  /balances                               - Owed/paid/balance per person
    GET  /people/{person_id}/statement           - Statement (JSON)
    GET  /people/{person_id}/statement.csv       - Statement (CSV download)
    GET  /people/{person_id}/statement.pdf       - Statement (PDF download)
    GET  /health                                 - Health check

Usage:
    uvicorn main:app --reload
"""

import logging
import os
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth as firebase_auth
from pydantic import BaseModel, Field

from balances import calculate_balances
from config.firebase_config import get_app
from ledger import add_person, add_purchase, add_payment, toggle_purchase_status
from ledger_store import load_ledger, save_ledger
from money import format_currency
from payments import build_payment
from purchases import build_item, build_purchase
from statement import build_statement, purchase_breakdown_named
from statement_export import (
    content_disposition,
    statement_filename,
    statement_to_csv,
    statement_to_pdf
)


LOG_LEVEL = os.getenv("MONEY_TRACKER_LOG_LEVEL", "INFO")

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Pydantic Models for Request/Response Validation
# =============================================================================

class PersonCreate(BaseModel):
    """Request model for adding a person."""
    name: str = Field(..., description="Display name")


class ItemCreate(BaseModel):
    """One item line of a purchase."""
    description: str = Field("", description="Item description (blank -> 'Item')")
    price: str = Field(..., description="Price as money text, e.g. '5.99'")
    participant_ids: list[str] = Field(default_factory=list, description="People sharing this item")


class PurchaseCreate(BaseModel):
    """Request model for adding a purchase."""
    title: str = Field("", description="Purchase title")
    date: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$", description="Purchase date (YYYY-MM-DD)")
    fees: str = Field("", description="Tax and fees as money text")
    notes: Optional[str] = None
    receipt_ref: Optional[str] = Field(None, description="Reference to an uploaded receipt")
    items: list[ItemCreate] = Field(default_factory=list)


class PaymentCreate(BaseModel):
    """Request model for recording a payment."""
    person_id: str = Field("", description="ID of the paying person")
    amount: str = Field(..., description="Amount as money text, e.g. '20.00'")
    date: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$", description="Payment date (YYYY-MM-DD)")
    note: Optional[str] = None
    method: Optional[str] = None


class BalanceResponse(BaseModel):
    """Owed/paid/balance for one person."""
    person_id: str
    name: str
    owed_cents: int
    paid_cents: int
    balance_cents: int
    balance: str


class BreakdownEntry(BaseModel):
    person_id: str
    name: str
    amount_cents: int
    amount: str


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Group Money Tracker",
    description="Track shared purchases, payments and who still owes what",
    version="1.0.0"
)

security = HTTPBearer()


def get_account_id(creds: HTTPAuthorizationCredentials = Depends(security)) -> str:
    """
    Verify the Firebase ID token and return the signed-in user's UID.

    Raises:
        HTTPException: 401 if the token is invalid.
    """
    try:
        decoded = firebase_auth.verify_id_token(creds.credentials, app=get_app())
    except Exception:
        logger.warning("Rejected invalid ID token")
        raise HTTPException(status_code=401, detail="Invalid token")

    uid = decoded.get("uid")
    if not uid:
        raise HTTPException(status_code=401, detail="Invalid token payload")
    return uid


# =============================================================================
# Helper Functions
# =============================================================================

def _load(account_id: str):
    """Load the account's ledger, mapping storage errors to HTTP errors."""
    try:
        return load_ledger(account_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception:
        raise HTTPException(status_code=500, detail="Could not load ledger")


def _save(account_id: str, ledger) -> None:
    """Replace the account's stored ledger, mapping storage errors to HTTP errors."""
    try:
        save_ledger(account_id, ledger)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception:
        raise HTTPException(status_code=500, detail="Could not save ledger")


def _statement_for(account_id: str, person_id: str) -> dict:
    ledger = _load(account_id)
    if ledger.find_person(person_id) is None:
        raise HTTPException(status_code=404, detail=f"Person {person_id} not found")
    return build_statement(ledger, person_id)


# =============================================================================
# API Endpoints
# =============================================================================

@app.get("/ledger")
async def get_ledger(account_id: str = Depends(get_account_id)):
    """Return the caller's full ledger snapshot."""
    return _load(account_id).to_dict()


@app.post("/people", status_code=201)
async def create_person(person_data: PersonCreate, account_id: str = Depends(get_account_id)):
    """
    Add a person to the group.

    Request flow:
        1. Load the ledger
        2. Build a new snapshot with the person appended
        3. Save the new snapshot and return the person
    """
    ledger = _load(account_id)
    try:
        ledger = add_person(ledger, person_data.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _save(account_id, ledger)
    return ledger.people[-1].to_dict()


@app.post("/purchases", status_code=201)
async def create_purchase(purchase_data: PurchaseCreate, account_id: str = Depends(get_account_id)):
    """
    Add a purchase.

    Request flow:
        1. Parse item prices and fees from money text
        2. Validate title and items (build_purchase)
        3. Place the purchase first in a new snapshot and save it
    """
    ledger = _load(account_id)
    try:
        items = [
            build_item(item.description, item.price, item.participant_ids)
            for item in purchase_data.items
        ]
        purchase = build_purchase(
            title=purchase_data.title,
            items=items,
            date=purchase_data.date,
            fees_text=purchase_data.fees,
            notes=purchase_data.notes,
            receipt_ref=purchase_data.receipt_ref
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _save(account_id, add_purchase(ledger, purchase))
    return purchase.to_dict()


@app.post("/purchases/{purchase_id}/toggle-status")
async def toggle_status(purchase_id: str, account_id: str = Depends(get_account_id)):
    """Flip a purchase between open and settled."""
    ledger = _load(account_id)
    if ledger.find_purchase(purchase_id) is None:
        raise HTTPException(status_code=404, detail=f"Purchase {purchase_id} not found")

    ledger = toggle_purchase_status(ledger, purchase_id)
    _save(account_id, ledger)
    return ledger.find_purchase(purchase_id).to_dict()


@app.get("/purchases/{purchase_id}/breakdown", response_model=list[BreakdownEntry])
async def get_breakdown(purchase_id: str, account_id: str = Depends(get_account_id)):
    """Who owes what for one purchase (items plus fee share)."""
    ledger = _load(account_id)
    purchase = ledger.find_purchase(purchase_id)
    if purchase is None:
        raise HTTPException(status_code=404, detail=f"Purchase {purchase_id} not found")

    return [
        BreakdownEntry(amount=format_currency(entry["amount_cents"]), **entry)
        for entry in purchase_breakdown_named(purchase, ledger.people)
    ]


@app.post("/payments", status_code=201)
async def create_payment(payment_data: PaymentCreate, account_id: str = Depends(get_account_id)):
    """
    Record a payment.

    Request flow:
        1. Validate person and amount (build_payment)
        2. Reject people who are not in the group
        3. Place the payment first in a new snapshot and save it
    """
    ledger = _load(account_id)
    try:
        payment = build_payment(
            person_id=payment_data.person_id,
            amount_text=payment_data.amount,
            date=payment_data.date,
            note=payment_data.note,
            method=payment_data.method
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    # Payments can only be recorded for people in the group
    if ledger.find_person(payment.person_id) is None:
        raise HTTPException(status_code=400, detail="Select a person for the payment.")

    _save(account_id, add_payment(ledger, payment))
    return payment.to_dict()


@app.get("/balances", response_model=list[BalanceResponse])
async def get_balances(account_id: str = Depends(get_account_id)):
    """Owed, paid and balance for every person, in group order."""
    ledger = _load(account_id)
    balances = calculate_balances(ledger)

    return [
        BalanceResponse(
            person_id=person.person_id,
            name=person.name,
            balance=format_currency(balances[person.person_id]["balance_cents"]),
            **balances[person.person_id]
        )
        for person in ledger.people
    ]


@app.get("/people/{person_id}/statement")
async def get_statement(person_id: str, account_id: str = Depends(get_account_id)):
    """Statement of charges, payments and totals for one person."""
    return _statement_for(account_id, person_id)


@app.get("/people/{person_id}/statement.csv")
async def get_statement_csv(person_id: str, account_id: str = Depends(get_account_id)):
    """Download a person's statement as CSV."""
    statement = _statement_for(account_id, person_id)
    return Response(
        content=statement_to_csv(statement),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": content_disposition(statement_filename(statement, "csv"))}
    )


@app.get("/people/{person_id}/statement.pdf")
async def get_statement_pdf(person_id: str, account_id: str = Depends(get_account_id)):
    """Download a person's statement as PDF."""
    statement = _statement_for(account_id, person_id)
    try:
        pdf = statement_to_pdf(statement)
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(statement_filename(statement, "pdf"))}
    )


# =============================================================================
# Health Check Endpoint
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint to verify API is running."""
    return {"status": "healthy", "service": "Group Money Tracker"}


# =============================================================================
# Run with: python main.py
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
