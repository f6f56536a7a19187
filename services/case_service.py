"""
services/case_service.py
-------------------------
Business logic for listing and registering cases (FIRs).
Every entry point checks the caller's capability before reaching the database.
"""

from datetime import datetime
from typing import Optional

from errors import InvalidInput
from models.case import Case
from models.user import SessionUser
from repositories.case_repo import CaseRepository
from repositories.officer_repo import OfficerRepository
from security.permissions import Action, ensure_permitted
from services.fir_allocator import FirNumberAllocator
from utils.logger import get_logger

logger = get_logger(__name__)


class CaseService:
    """
    Handles all business logic related to cases.

    Registration workflow:
        1. Check ``cases.create`` for the caller's role.
        2. Resolve the station (non-Admins always file at their own station).
        3. Use the supplied FIR number or allocate one, and verify it is unused.
        4. Resolve the registering officer.
        5. Insert the case, then its initial tracking record.

    A ``DuplicateIdentifier`` from steps 3 or 5 is not retried here; the
    caller decides whether to start a fresh attempt.
    """

    def __init__(
        self,
        cases: Optional[CaseRepository] = None,
        officers: Optional[OfficerRepository] = None,
        allocator: Optional[FirNumberAllocator] = None,
    ):
        self.cases = cases or CaseRepository()
        self.officers = officers or OfficerRepository()
        self.allocator = allocator or FirNumberAllocator(cases=self.cases)

    # ── READ ──────────────────────────────────────────────

    def list_cases(
        self, user: SessionUser, fir_no: Optional[str] = None, limit: int = 20
    ) -> list[Case]:
        """List cases visible to ``user``; non-Admins only see their own station."""
        ensure_permitted(user.role, Action.CASES_READ)
        station_id = None if user.is_admin else user.station_id
        return self.cases.list_cases(
            station_id=station_id,
            fir_no=fir_no.strip() if fir_no else None,
            limit=limit,
        )

    def get_case(self, user: SessionUser, fir_no: str) -> Optional[Case]:
        """Fetch one case by FIR number, or None if absent or at another station."""
        ensure_permitted(user.role, Action.CASES_READ)
        case = self.cases.get_by_fir(fir_no.strip())
        if case is None:
            return None
        if not user.is_admin and user.station_id and case.station_id != user.station_id:
            return None
        return case

    # ── CREATE ────────────────────────────────────────────

    def register_case(self, user: SessionUser, data: dict, now: Optional[datetime] = None) -> Case:
        """
        Register a new case.

        Args:
            user: The caller.
            data: Form fields: crime_type, incident_date, incident_location,
                incident_description, and optionally station_id, officer_id,
                fir_no, crime_section, incident_district, priority, status.
            now: Registration time (defaults to the current time).

        Returns:
            The persisted Case with ``id`` and ``fir_no`` set.

        Raises:
            Forbidden: The caller's role cannot create cases.
            InvalidInput: Required data is missing.
            InvalidScope: The station does not exist.
            DuplicateIdentifier: The FIR number is already taken.
        """
        ensure_permitted(user.role, Action.CASES_CREATE)

        station_id = self._resolve_station(user, data)
        if not data.get("crime_type"):
            raise InvalidInput("Crime type is required")
        if not data.get("incident_date"):
            raise InvalidInput("Incident date is required")

        fir_no = (data.get("fir_no") or "").strip()
        if fir_no:
            self.allocator.ensure_unused(fir_no)
        else:
            year = (now or datetime.now()).year
            fir_no = self.allocator.allocate(station_id, year)

        officer_id = (
            _as_int(data.get("officer_id"))
            or user.officer_id
            or self.officers.first_at_station(station_id)
        )
        if not officer_id:
            raise InvalidInput("No officer available for this station. Please add an officer first.")

        case = Case(
            fir_no=fir_no,
            station_id=station_id,
            officer_id=officer_id,
            crime_type=data["crime_type"],
            crime_section=data.get("crime_section") or None,
            incident_date=data["incident_date"],
            incident_location=data.get("incident_location"),
            incident_district=data.get("incident_district") or "Unknown",
            priority=data.get("priority") or "Medium",
            status=data.get("status") or "Registered",
            summary=data.get("incident_description"),
        )
        self.cases.create(case)

        self.cases.add_track_record(
            case.id,
            "Status Change",
            f"FIR {fir_no} registered",
            user.id,
            old_status=None,
            new_status="Registered",
        )
        return case

    @staticmethod
    def _resolve_station(user: SessionUser, data: dict) -> int:
        if not user.is_admin and user.station_id:
            return user.station_id
        station_id = _as_int(data.get("station_id"))
        if not station_id:
            raise InvalidInput("Station is required")
        return station_id


def _as_int(value) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"Expected a number, got '{value}'")
