"""
repositories/case_repo.py
--------------------------
Data access layer for cases (FIRs) and their tracking records.
All SQL queries related to the `cases` and `fir_track_records` tables live here.
"""

from typing import Optional

from errors import DuplicateIdentifier, QueryRejected
from models.case import Case
from repositories.base import BaseRepository
from utils.logger import get_logger

logger = get_logger(__name__)

UNIQUE_VIOLATION = "23505"

_CASE_COLUMNS = """
    SELECT c.case_id AS id, c.fir_no AS fir_number, c.station_id, c.crime_type,
           c.crime_section, c.case_status AS status, c.case_priority AS priority,
           c.summary AS incident_description, c.fir_date_time AS registered_date,
           c.incident_date_time AS incident_date, c.incident_location,
           s.station_name, s.station_code,
           CONCAT(ro.first_name, ' ', ro.last_name) AS registered_by_name
    FROM cases c
    LEFT JOIN police_stations s ON c.station_id = s.id
    LEFT JOIN officers ro ON c.officer_id = ro.id
"""


class CaseRepository(BaseRepository):
    """Repository for operations on the cases table."""

    # ── CREATE ────────────────────────────────────────────

    def create(self, case: Case) -> Case:
        """
        Insert a new case.

        The UNIQUE constraint on ``fir_no`` is the final arbiter of identifier
        uniqueness; losing that race surfaces as ``DuplicateIdentifier``.

        Returns:
            The same Case with its ``id`` populated.

        Raises:
            DuplicateIdentifier: If ``fir_no`` is already taken.
        """
        sql = """
            INSERT INTO cases
            (fir_no, fir_date_time, station_id, officer_id, crime_type, crime_section,
             incident_date_time, incident_location, incident_district,
             case_priority, case_status, summary)
            VALUES (?, NOW(), ?, ?, ?, ?, ?, ?, ?, ?, ?, ?) RETURNING case_id
        """
        try:
            rows = self.db.execute(sql, [
                case.fir_no, case.station_id, case.officer_id,
                case.crime_type, case.crime_section,
                case.incident_date, case.incident_location, case.incident_district,
                case.priority, case.status, case.summary,
            ])
        except QueryRejected as e:
            if e.sqlstate == UNIQUE_VIOLATION:
                logger.warning(f"FIR number {case.fir_no} was taken by a concurrent insert")
                raise DuplicateIdentifier(case.fir_no) from e
            raise
        case.id = rows[0]["case_id"]
        logger.info(f"Registered case #{case.id} as {case.fir_no}")
        return case

    def add_track_record(
        self,
        case_id: int,
        action_type: str,
        description: str,
        performed_by_user_id: int,
        old_status: Optional[str] = None,
        new_status: Optional[str] = None,
    ) -> None:
        """Append an entry to the case's audit trail."""
        sql = """
            INSERT INTO fir_track_records
            (case_id, action_type, action_description, old_status, new_status, performed_by_user_id)
            VALUES (?, ?, ?, ?, ?, ?)
        """
        self.db.execute(sql, [
            case_id, action_type, description, old_status, new_status, performed_by_user_id,
        ])

    # ── READ ──────────────────────────────────────────────

    def count_for_station_year(self, station_id: int, year: int) -> int:
        """Number of cases registered at a station in a calendar year."""
        row = self.db.query_one(
            "SELECT COUNT(*) AS count FROM cases "
            "WHERE station_id = ? AND EXTRACT(YEAR FROM fir_date_time) = ?",
            [station_id, year],
        )
        return int(row["count"]) if row else 0

    def fir_exists(self, fir_no: str) -> bool:
        """True if any case, at any station, already uses ``fir_no``."""
        row = self.db.query_one("SELECT case_id FROM cases WHERE fir_no = ?", [fir_no])
        return row is not None

    def get_by_fir(self, fir_no: str) -> Optional[Case]:
        row = self.db.query_one(_CASE_COLUMNS + " WHERE c.fir_no = ?", [fir_no])
        return Case.from_row(row) if row else None

    def list_cases(
        self,
        station_id: Optional[int] = None,
        fir_no: Optional[str] = None,
        year: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[Case]:
        """
        List cases, newest first.

        Args:
            station_id: Restrict to one station.
            fir_no: Exact FIR number match (FIR numbers are unique).
            year: Registration year.
            limit: Maximum number of rows.
        """
        sql = _CASE_COLUMNS + " WHERE 1=1"
        params: list = []
        if station_id is not None:
            sql += " AND c.station_id = ?"
            params.append(station_id)
        if fir_no:
            sql += " AND c.fir_no = ?"
            params.append(fir_no)
        if year is not None:
            sql += " AND EXTRACT(YEAR FROM c.fir_date_time) = ?"
            params.append(year)
        sql += " ORDER BY c.fir_date_time DESC"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        return [Case.from_row(r) for r in self.db.execute(sql, params)]
