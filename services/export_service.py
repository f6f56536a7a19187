"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of registered cases.
"""

import io
from typing import Optional

import pandas as pd

from config import EXPORT_MAX_ROWS
from models.case import Case
from models.user import SessionUser
from repositories.case_repo import CaseRepository
from security.permissions import Action, ensure_permitted
from utils.logger import get_logger

logger = get_logger(__name__)


class ExportService:
    """Generates downloadable case registers in CSV and Excel formats."""

    def __init__(self, repo: Optional[CaseRepository] = None, max_rows: int = EXPORT_MAX_ROWS):
        self.repo = repo or CaseRepository()
        self.max_rows = max_rows

    def export_year_csv(self, user: SessionUser, year: int) -> io.BytesIO:
        """
        Export a year's cases as a CSV file.

        Args:
            user: The caller; non-Admins only export their own station.
            year: Registration year.

        Returns:
            A BytesIO buffer containing the CSV data.
        """
        df = self._frame(user, year)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} cases as CSV for user {user.id}")
        return buffer

    def export_year_excel(self, user: SessionUser, year: int) -> io.BytesIO:
        """
        Export a year's cases as an Excel (.xlsx) file, with a per-status summary sheet.
        """
        df = self._frame(user, year)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Cases", index=False)

            if not df.empty:
                summary = df.groupby("Status")["FIR No"].count().reset_index()
                summary.columns = ["Status", "Cases"]
                summary.to_excel(writer, sheet_name="Summary", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} cases as Excel for user {user.id}")
        return buffer

    def _frame(self, user: SessionUser, year: int) -> pd.DataFrame:
        ensure_permitted(user.role, Action.CASES_READ)
        station_id = None if user.is_admin else user.station_id
        cases = self.repo.list_cases(station_id=station_id, year=year, limit=self.max_rows)
        return pd.DataFrame([_row(c) for c in cases], columns=_COLUMNS)


_COLUMNS = ["FIR No", "Registered", "Station", "Crime Type", "Status", "Priority", "Registered By"]


def _row(case: Case) -> dict:
    return {
        "FIR No": case.fir_no,
        "Registered": case.fir_date_time.isoformat() if case.fir_date_time else "",
        "Station": case.station_name or "",
        "Crime Type": case.crime_type,
        "Status": case.status,
        "Priority": case.priority,
        "Registered By": case.registered_by_name or "",
    }
