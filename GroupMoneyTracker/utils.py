"""
Utilities Module

This module provides small helpers shared by the group money tracker.

Features:
    - Unique identifiers for people, items, purchases and payments
    - ISO date defaults and validation
    - Person name lookup tolerant of deleted people

Functions:
    generate_id: Generate a unique identifier for records.
    today_str: Today's date in YYYY-MM-DD format.
    validate_date: Validate a YYYY-MM-DD date string.
    clean_optional_text: Trim text, mapping blank to None.
    person_name: Resolve a person ID to a display name.
"""

import uuid
from datetime import date, datetime
from typing import Optional


UNKNOWN_PERSON = "Unknown"


def generate_id() -> str:
    """
    Generate a unique identifier.

    Returns:
        str: Random UUID4 string.
    """
    return str(uuid.uuid4())


def today_str() -> str:
    """Get today's date as ISO string."""
    return date.today().isoformat()


def validate_date(date_str: str, field_name: str = "date") -> str:
    """
    Validate date string format (YYYY-MM-DD).

    Args:
        date_str: Date string to validate.
        field_name: Name of the field for error messages.

    Returns:
        str: The validated date string.

    Raises:
        ValueError: If date format is invalid.
    """
    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} must be in YYYY-MM-DD format, got: {date_str}")
    return date_str


def clean_optional_text(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; blank or missing text becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def person_name(people, person_id: str) -> str:
    """
    Resolve a person ID to a display name.

    Args:
        people: Iterable of Person objects.
        person_id: ID to look up.

    Returns:
        str: The person's name, or "Unknown" if no such person exists.
    """
    for person in people:
        if person.person_id == person_id:
            return person.name
    return UNKNOWN_PERSON
