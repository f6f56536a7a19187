"""
models/case.py
--------------
Domain model for a registered case (FIR).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

FIR_SEQUENCE_WIDTH = 4


def format_fir_number(station_code: str, year: int, sequence: int) -> str:
    """Compose ``CODE/YEAR/NNNN``; sequences past 9999 simply grow wider."""
    return f"{station_code}/{year}/{sequence:0{FIR_SEQUENCE_WIDTH}d}"


@dataclass
class Case:
    """
    Represents a single First Information Report.

    Attributes:
        fir_no: Globally unique business identifier (CODE/YEAR/NNNN).
        station_id: Owning police station.
        crime_type: Offence category.
        incident_date: When the incident happened.
        incident_location: Where it happened.
        summary: Free-text description.
        officer_id: Registering officer.
        crime_section: Legal section, if known.
        incident_district: District of the incident.
        priority: 'Low' | 'Medium' | 'High' | 'Critical'.
        status: Lifecycle status ('Registered', 'Under Investigation', ...).
        id: Database primary key (None for new records).
        fir_date_time: Registration timestamp.
        station_name: Joined from police_stations when listing.
        station_code: Joined from police_stations when listing.
        registered_by_name: Joined officer name when listing.
    """
    fir_no: str
    station_id: Optional[int]
    crime_type: str
    incident_date: Optional[datetime] = None
    incident_location: Optional[str] = None
    summary: Optional[str] = None
    officer_id: Optional[int] = None
    crime_section: Optional[str] = None
    incident_district: str = "Unknown"
    priority: str = "Medium"
    status: str = "Registered"
    id: Optional[int] = None
    fir_date_time: Optional[datetime] = None
    station_name: Optional[str] = None
    station_code: Optional[str] = None
    registered_by_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "Case":
        return cls(
            id=row.get("id"),
            fir_no=row["fir_number"],
            station_id=row.get("station_id"),
            crime_type=row.get("crime_type") or "",
            crime_section=row.get("crime_section"),
            status=row.get("status") or "Registered",
            priority=row.get("priority") or "Medium",
            summary=row.get("incident_description"),
            fir_date_time=row.get("registered_date"),
            incident_date=row.get("incident_date"),
            incident_location=row.get("incident_location"),
            station_name=row.get("station_name"),
            station_code=row.get("station_code"),
            registered_by_name=row.get("registered_by_name"),
        )

    def __str__(self) -> str:
        registered = self.fir_date_time.date().isoformat() if self.fir_date_time else "-"
        return f"{self.fir_no} | {self.crime_type} | {self.status} | {registered}"
