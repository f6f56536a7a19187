"""
models/person.py
----------------
Domain model for a person recorded against cases.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Person:
    first_name: str
    last_name: str
    middle_name: Optional[str] = None
    national_id: Optional[str] = None
    gender: Optional[str] = None
    contact_number: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)

    def __str__(self) -> str:
        suffix = f" ({self.national_id})" if self.national_id else ""
        return f"#{self.id} {self.full_name}{suffix}"
