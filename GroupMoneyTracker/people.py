"""
People Module

This module defines the person record for the group money tracker.

Data Model:
    Person stored inside the ledger snapshot under "people":
        - id: string (UUID)
        - name: string

Functions:
    build_person: Validate a name and create a new Person.
"""

from utils import generate_id


class Person:
    """
    Represents one member of the group.

    Attributes:
        person_id (str): Unique identifier.
        name (str): Display name.
    """

    def __init__(self, person_id: str, name: str):
        self.person_id = person_id
        self.name = name

    def to_dict(self) -> dict:
        """Convert person to dictionary for Firestore storage."""
        return {"id": self.person_id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> "Person":
        """Create a Person instance from a dictionary."""
        return cls(person_id=data.get("id"), name=data.get("name", ""))

    def __repr__(self) -> str:
        return f"Person(id='{self.person_id}', name='{self.name}')"


def build_person(name: str) -> Person:
    """
    Create a new person from a user-entered name.

    Args:
        name: Name as typed; surrounding whitespace is removed.

    Returns:
        Person: The new person with a fresh ID.

    Raises:
        ValueError: If the name is blank.
    """
    if not isinstance(name, str) or not name.strip():
        raise ValueError("Please enter a name.")
    return Person(person_id=generate_id(), name=name.strip())
