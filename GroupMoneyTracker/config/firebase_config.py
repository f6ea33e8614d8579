"""
Firebase Configuration

Builds the Firestore client shared by the storage and API modules.

Environment:
    FIREBASE_CREDENTIALS: Path to a service-account JSON file. When unset,
        application default credentials are used.
    FIREBASE_PROJECT_ID: Optional project ID override.

Functions:
    get_app: Initialise (once) and return the firebase_admin app.
    get_db: Return a Firestore client, or None if Firebase is unavailable.
"""

import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore


logger = logging.getLogger(__name__)

FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS")
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

_db = None


def get_app():
    """Initialise the default firebase_admin app on first use and return it."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    if FIREBASE_CREDENTIALS:
        cred = credentials.Certificate(FIREBASE_CREDENTIALS)
    else:
        cred = credentials.ApplicationDefault()

    options = {"projectId": FIREBASE_PROJECT_ID} if FIREBASE_PROJECT_ID else None
    return firebase_admin.initialize_app(cred, options)


def get_db():
    """
    Get the Firestore client.

    Returns:
        firestore.Client | None: The client, or None when Firebase could
            not be initialised (missing credentials, bad key file, ...).
    """
    global _db
    if _db is not None:
        return _db

    try:
        _db = firestore.client(app=get_app())
    except Exception:
        logger.exception("Could not initialise Firestore")
        return None

    return _db
