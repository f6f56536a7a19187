"""
repositories/user_repo.py
--------------------------
Data access layer for user records.
"""

from typing import Optional

from models.user import SessionUser
from repositories.base import BaseRepository
from security.permissions import Role
from utils.logger import get_logger

logger = get_logger(__name__)


class UserRepository(BaseRepository):
    """Repository for reads on the users table."""

    def get_by_telegram_id(self, telegram_id: int) -> Optional[SessionUser]:
        """
        Fetch an active user by their Telegram ID.

        Returns:
            SessionUser or None if unknown, inactive or carrying an unknown role.
        """
        row = self.db.query_one(
            "SELECT id, username, role, station_id, officer_id FROM users "
            "WHERE telegram_id = ? AND is_active = TRUE",
            [telegram_id],
        )
        if not row:
            return None
        try:
            role = Role(row["role"])
        except ValueError:
            logger.warning(f"User {row['id']} has unknown role '{row['role']}'")
            return None
        return SessionUser(
            id=row["id"],
            username=row["username"],
            role=role,
            station_id=row.get("station_id"),
            officer_id=row.get("officer_id"),
        )

    def record_login(self, user_id: int) -> None:
        self.db.execute("UPDATE users SET last_login = NOW() WHERE id = ?", [user_id])
