"""
models/user.py
--------------
The authenticated caller, as resolved from the users table.
"""

from dataclasses import dataclass
from typing import Optional

from security.permissions import Role


@dataclass(frozen=True)
class SessionUser:
    """
    Attributes:
        id: users.id
        username: Login name.
        role: Capability role.
        station_id: Home station (None for Admins).
        officer_id: Linked officer record, if any.
    """
    id: int
    username: str
    role: Role
    station_id: Optional[int] = None
    officer_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
