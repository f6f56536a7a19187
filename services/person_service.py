"""
services/person_service.py
---------------------------
Business logic for searching and registering persons.
"""

from typing import Optional

from errors import InvalidInput
from models.person import Person
from models.user import SessionUser
from repositories.person_repo import PersonRepository
from security.permissions import Action, ensure_permitted


class PersonService:
    """Person search and registration, gated by the caller's role."""

    def __init__(self, repo: Optional[PersonRepository] = None):
        self.repo = repo or PersonRepository()

    def search(
        self,
        user: SessionUser,
        term: Optional[str] = None,
        station_id: Optional[int] = None,
        limit: int = 20,
    ) -> list[Person]:
        """Search persons by name, national ID or city, optionally by station."""
        ensure_permitted(user.role, Action.PERSONS_READ)
        return self.repo.search(term=(term or "").strip() or None, station_id=station_id, limit=limit)

    def add_person(self, user: SessionUser, person: Person) -> Person:
        """
        Register a person.

        Raises:
            Forbidden: The caller's role cannot create persons.
            InvalidInput: Missing names, or the national ID is already recorded.
        """
        ensure_permitted(user.role, Action.PERSONS_CREATE)
        if not person.first_name or not person.last_name:
            raise InvalidInput("First name and last name are required")
        if person.national_id and self.repo.exists_with_national_id(person.national_id):
            raise InvalidInput("Person with this National ID already exists")
        return self.repo.add(person)
