"""
services/fir_allocator.py
--------------------------
Allocates FIR numbers of the form ``CODE/YEAR/NNNN``.

Allocation is optimistic: the sequence is derived from the number of cases
already registered for the station in that year, then checked against every
FIR number on record. Nothing is reserved or locked. Two writers that count
at the same moment compute the same candidate; the UNIQUE constraint on
``cases.fir_no`` lets exactly one insert through and the other is reported
as ``DuplicateIdentifier``, after which the caller starts a fresh attempt.
"""

from typing import Optional

from errors import DuplicateIdentifier, InvalidScope
from models.case import format_fir_number
from repositories.case_repo import CaseRepository
from repositories.station_repo import StationRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class FirNumberAllocator:
    """Builds collision-checked FIR numbers for a station and year."""

    def __init__(
        self,
        stations: Optional[StationRepository] = None,
        cases: Optional[CaseRepository] = None,
    ):
        self.stations = stations or StationRepository()
        self.cases = cases or CaseRepository()

    def allocate(self, station_id: int, year: int) -> str:
        """
        Compute the next FIR number for ``station_id`` in ``year``.

        Raises:
            InvalidScope: If the station does not exist.
            DuplicateIdentifier: If the candidate is already in use.
        """
        code = self.stations.get_code(station_id)
        if code is None:
            raise InvalidScope(f"Invalid Station ID {station_id}")

        count = self.cases.count_for_station_year(station_id, year)
        fir_no = format_fir_number(code, year, count + 1)

        self.ensure_unused(fir_no)
        logger.info(f"Allocated FIR number {fir_no} for station {station_id}")
        return fir_no

    def ensure_unused(self, fir_no: str) -> None:
        """
        Raises:
            DuplicateIdentifier: If any case already uses ``fir_no``.
        """
        if self.cases.fir_exists(fir_no):
            raise DuplicateIdentifier(fir_no)
