"""
repositories/station_repo.py
-----------------------------
Data access layer for police stations.
"""

from typing import Optional

from repositories.base import BaseRepository


class StationRepository(BaseRepository):
    """Repository for reads on the police_stations table."""

    def get_code(self, station_id: int) -> Optional[str]:
        """Return the station's short code, or None if the station does not exist."""
        row = self.db.query_one(
            "SELECT station_code FROM police_stations WHERE id = ?",
            [station_id],
        )
        return row["station_code"] if row else None

