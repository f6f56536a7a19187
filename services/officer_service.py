"""
services/officer_service.py
----------------------------
Business logic for listing and registering officers.
"""

from typing import Optional

from errors import Forbidden, InvalidInput
from models.officer import Officer
from models.user import SessionUser
from repositories.officer_repo import OfficerRepository
from security.permissions import Action, ensure_permitted
from utils.logger import get_logger

logger = get_logger(__name__)


class OfficerService:
    """
    Officer roster, gated by the caller's role.

    Non-Admins only see and register officers at their own station; asking
    for another station is refused rather than silently narrowed.
    """

    def __init__(self, repo: Optional[OfficerRepository] = None):
        self.repo = repo or OfficerRepository()

    def list_officers(
        self,
        user: SessionUser,
        term: Optional[str] = None,
        station_id: Optional[int] = None,
        limit: int = 50,
    ) -> list[Officer]:
        """
        Raises:
            Forbidden: The role cannot read officers, or a non-Admin asked
                for another station.
            InvalidInput: ``station_id`` is not a positive number.
        """
        ensure_permitted(user.role, Action.OFFICERS_READ)
        if station_id is not None and station_id <= 0:
            raise InvalidInput("Invalid station_id")
        scope = self._scope(user, station_id, Action.OFFICERS_READ)
        return self.repo.search(term=(term or "").strip() or None, station_id=scope, limit=limit)

    def add_officer(self, user: SessionUser, officer: Officer) -> Officer:
        """
        Register an officer.

        Raises:
            Forbidden: The role cannot create officers, or a non-Admin named
                another station.
            InvalidInput: Missing fields, or the badge number is already taken.
        """
        ensure_permitted(user.role, Action.OFFICERS_CREATE)
        officer.station_id = self._scope(user, officer.station_id, Action.OFFICERS_CREATE)
        if officer.station_id is None:
            raise InvalidInput("Station ID is required")

        officer.badge_number = (officer.badge_number or "").strip()
        officer.first_name = (officer.first_name or "").strip()
        officer.last_name = (officer.last_name or "").strip()
        if not (officer.badge_number and officer.first_name and officer.last_name and officer.rank):
            raise InvalidInput("Badge number, first name, last name and rank are required")
        if self.repo.badge_exists(officer.badge_number):
            raise InvalidInput("Badge number already exists")

        return self.repo.add(officer)

    @staticmethod
    def _scope(user: SessionUser, station_id: Optional[int], action: Action) -> Optional[int]:
        if user.is_admin or not user.station_id:
            return station_id
        if station_id is not None and station_id != user.station_id:
            logger.warning(
                f"User {user.id} asked for station {station_id} outside their own ({user.station_id})"
            )
            raise Forbidden(user.role.value, action.value)
        return user.station_id
