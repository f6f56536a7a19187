"""
models/officer.py
-----------------
Domain model for a police officer.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Officer:
    badge_number: str
    first_name: str
    last_name: str
    rank: str
    station_id: Optional[int]
    middle_name: Optional[str] = None
    service_status: str = "Active"
    id: Optional[int] = None
    station_name: Optional[str] = None

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.middle_name, self.last_name) if p)

    def __str__(self) -> str:
        station = f" @ {self.station_name}" if self.station_name else ""
        return f"{self.rank} {self.full_name} [{self.badge_number}]{station}"
