"""
repositories/person_repo.py
----------------------------
Data access layer for persons.
"""

from typing import Optional

from models.person import Person
from repositories.base import BaseRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class PersonRepository(BaseRepository):
    """Repository for CRUD operations on the persons table."""

    def add(self, person: Person) -> Person:
        """Insert a person and populate its ``id``."""
        sql = """
            INSERT INTO persons
            (first_name, middle_name, last_name, national_id, gender, contact_number, city, state)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?) RETURNING id, created_at
        """
        rows = self.db.execute(sql, [
            person.first_name, person.middle_name, person.last_name,
            person.national_id, person.gender, person.contact_number,
            person.city, person.state,
        ])
        person.id = rows[0]["id"]
        person.created_at = rows[0].get("created_at")
        logger.info(f"Added person #{person.id}")
        return person

    def exists_with_national_id(self, national_id: str) -> bool:
        row = self.db.query_one("SELECT id FROM persons WHERE national_id = ?", [national_id])
        return row is not None

    def search(
        self, term: Optional[str] = None, station_id: Optional[int] = None, limit: int = 200
    ) -> list[Person]:
        """
        Case-insensitive search on names, national ID and city.

        Args:
            term: Search text; empty returns the most recent persons.
            station_id: Only persons linked to a case at this station.
            limit: Maximum number of rows.
        """
        sql = """
            SELECT DISTINCT p.id, p.first_name, p.middle_name, p.last_name, p.national_id,
                   p.gender, p.contact_number, p.city, p.state, p.created_at
            FROM persons p
        """
        params: list = []
        conditions: list[str] = []

        if station_id is not None:
            sql += """
                JOIN case_persons cp ON cp.person_id = p.id
                JOIN cases c ON cp.case_id = c.case_id
            """
            conditions.append("c.station_id = ?")
            params.append(station_id)

        if term:
            pattern = f"%{term.lower()}%"
            conditions.append(
                "(LOWER(p.first_name) LIKE ? OR LOWER(p.middle_name) LIKE ? "
                "OR LOWER(p.last_name) LIKE ? "
                "OR LOWER(CONCAT(p.first_name, ' ', p.last_name)) LIKE ? "
                "OR LOWER(p.national_id) LIKE ? OR LOWER(p.city) LIKE ?)"
            )
            params.extend([pattern] * 6)

        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        sql += " ORDER BY p.created_at DESC LIMIT ?"
        params.append(limit)

        return [
            Person(
                id=r["id"],
                first_name=r["first_name"],
                middle_name=r.get("middle_name"),
                last_name=r["last_name"],
                national_id=r.get("national_id"),
                gender=r.get("gender"),
                contact_number=r.get("contact_number"),
                city=r.get("city"),
                state=r.get("state"),
                created_at=r.get("created_at"),
            )
            for r in self.db.execute(sql, params)
        ]
