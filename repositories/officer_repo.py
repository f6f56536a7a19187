"""
repositories/officer_repo.py
-----------------------------
Data access layer for officers.
"""

from typing import Optional

from models.officer import Officer
from repositories.base import BaseRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class OfficerRepository(BaseRepository):
    """Repository for operations on the officers table."""

    def add(self, officer: Officer) -> Officer:
        """Insert an officer and populate its ``id``."""
        row = self.db.query_one(
            """
            INSERT INTO officers
            (badge_number, first_name, middle_name, last_name, rank, station_id, service_status)
            VALUES (?, ?, ?, ?, ?, ?, ?) RETURNING id
            """,
            [
                officer.badge_number, officer.first_name, officer.middle_name,
                officer.last_name, officer.rank, officer.station_id, officer.service_status,
            ],
        )
        officer.id = row["id"]
        logger.info(f"Added officer #{officer.id} ({officer.badge_number})")
        return officer

    def badge_exists(self, badge_number: str) -> bool:
        row = self.db.query_one("SELECT id FROM officers WHERE badge_number = ?", [badge_number])
        return row is not None

    def first_at_station(self, station_id: int) -> Optional[int]:
        """ID of the first officer posted at a station, used as default registrar."""
        row = self.db.query_one(
            "SELECT id FROM officers WHERE station_id = ? ORDER BY id LIMIT 1",
            [station_id],
        )
        return row["id"] if row else None

    def search(
        self, term: Optional[str] = None, station_id: Optional[int] = None, limit: int = 50
    ) -> list[Officer]:
        """
        List officers, optionally at one station and matching a search term.

        Every word of ``term`` must match the officer's name, badge number or
        station name.
        """
        sql = """
            SELECT o.id, o.badge_number, o.first_name, o.middle_name, o.last_name,
                   o.rank, o.station_id, o.service_status, s.station_name
            FROM officers o
            LEFT JOIN police_stations s ON o.station_id = s.id
            WHERE 1=1
        """
        params: list = []
        if station_id is not None:
            sql += " AND o.station_id = ?"
            params.append(station_id)
        for word in (term or "").split():
            sql += (
                " AND (o.first_name ILIKE ? OR o.middle_name ILIKE ? OR o.last_name ILIKE ?"
                " OR o.badge_number ILIKE ? OR s.station_name ILIKE ?)"
            )
            params.extend([f"%{word}%"] * 5)
        sql += " ORDER BY o.rank, o.first_name LIMIT ?"
        params.append(limit)

        return [
            Officer(
                id=r["id"],
                badge_number=r["badge_number"],
                first_name=r["first_name"],
                middle_name=r.get("middle_name"),
                last_name=r["last_name"],
                rank=r["rank"],
                station_id=r.get("station_id"),
                service_status=r.get("service_status") or "Active",
                station_name=r.get("station_name"),
            )
            for r in self.db.execute(sql, params)
        ]
