"""
security/permissions.py
-----------------------
Capability gate: a static (role, action) -> allow/deny table.

Every service method consults this before touching the database.
"""

from enum import Enum
from typing import Union

from errors import Forbidden
from utils.logger import get_logger

logger = get_logger(__name__)


class Role(str, Enum):
    ADMIN = "Admin"
    STATION_ADMIN = "StationAdmin"
    OFFICER = "Officer"


class Action(str, Enum):
    CASES_READ = "cases.read"
    CASES_CREATE = "cases.create"
    CASES_UPDATE = "cases.update"
    PERSONS_READ = "persons.read"
    PERSONS_CREATE = "persons.create"
    PERSONS_UPDATE = "persons.update"
    OFFICERS_READ = "officers.read"
    OFFICERS_CREATE = "officers.create"
    OFFICERS_UPDATE = "officers.update"
    STATIONS_READ = "stations.read"
    STATIONS_CREATE = "stations.create"
    STATIONS_UPDATE = "stations.update"
    USERS_READ = "users.read"
    USERS_CREATE = "users.create"
    EVIDENCE_READ = "evidence.read"
    EVIDENCE_CREATE = "evidence.create"


_A = Action

# Admins oversee but do not register FIRs, persons or evidence.
_MATRIX: dict[Role, dict[Action, bool]] = {
    Role.ADMIN: {
        _A.CASES_READ: True, _A.CASES_CREATE: False, _A.CASES_UPDATE: False,
        _A.PERSONS_READ: True, _A.PERSONS_CREATE: False, _A.PERSONS_UPDATE: False,
        _A.OFFICERS_READ: True, _A.OFFICERS_CREATE: True, _A.OFFICERS_UPDATE: True,
        _A.STATIONS_READ: True, _A.STATIONS_CREATE: True, _A.STATIONS_UPDATE: True,
        _A.USERS_READ: True, _A.USERS_CREATE: True,
        _A.EVIDENCE_READ: True, _A.EVIDENCE_CREATE: False,
    },
    Role.STATION_ADMIN: {
        _A.CASES_READ: True, _A.CASES_CREATE: True, _A.CASES_UPDATE: True,
        _A.PERSONS_READ: True, _A.PERSONS_CREATE: True, _A.PERSONS_UPDATE: True,
        _A.OFFICERS_READ: True, _A.OFFICERS_CREATE: True, _A.OFFICERS_UPDATE: True,
        _A.STATIONS_READ: True, _A.STATIONS_CREATE: False, _A.STATIONS_UPDATE: False,
        _A.USERS_READ: False, _A.USERS_CREATE: False,
        _A.EVIDENCE_READ: True, _A.EVIDENCE_CREATE: True,
    },
    Role.OFFICER: {
        _A.CASES_READ: True, _A.CASES_CREATE: True, _A.CASES_UPDATE: True,
        _A.PERSONS_READ: True, _A.PERSONS_CREATE: True, _A.PERSONS_UPDATE: True,
        _A.OFFICERS_READ: True, _A.OFFICERS_CREATE: False, _A.OFFICERS_UPDATE: False,
        _A.STATIONS_READ: True, _A.STATIONS_CREATE: False, _A.STATIONS_UPDATE: False,
        _A.USERS_READ: False, _A.USERS_CREATE: False,
        _A.EVIDENCE_READ: True, _A.EVIDENCE_CREATE: True,
    },
}


def _check_exhaustive() -> None:
    missing = [
        f"{role.value}:{action.value}"
        for role in Role
        for action in Action
        if action not in _MATRIX.get(role, {})
    ]
    if missing:
        raise RuntimeError(f"Permission matrix is missing entries: {', '.join(missing)}")


_check_exhaustive()


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def permitted(role: Union[Role, str], action: Union[Action, str]) -> bool:
    """
    Decide whether ``role`` may perform ``action``.

    Unknown roles or actions are denied.
    """
    r = _coerce(Role, role)
    a = _coerce(Action, action)
    if r is None or a is None:
        return False
    return _MATRIX[r][a]


def ensure_permitted(role: Union[Role, str], action: Union[Action, str]) -> None:
    """
    Raise ``Forbidden`` unless ``role`` may perform ``action``.

    Raises:
        Forbidden: On denial.
    """
    if not permitted(role, action):
        role_name = role.value if isinstance(role, Role) else str(role)
        action_name = action.value if isinstance(action, Action) else str(action)
        logger.warning(f"Denied '{action_name}' for role '{role_name}'")
        raise Forbidden(role_name, action_name)
