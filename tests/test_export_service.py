"""Tests for case register exports."""

from datetime import datetime

import pandas as pd
import pytest

from models.case import Case
from services.export_service import ExportService


class FakeCaseRepo:
    def __init__(self, cases):
        self.cases = cases
        self.calls: list[dict] = []

    def list_cases(self, station_id=None, fir_no=None, year=None, limit=None):
        self.calls.append({"station_id": station_id, "year": year, "limit": limit})
        return list(self.cases)


@pytest.fixture
def repo():
    return FakeCaseRepo([
        Case(fir_no="KTM/2026/0001", station_id=1, crime_type="Theft",
             fir_date_time=datetime(2026, 1, 5, 9, 0), station_name="Kathmandu"),
        Case(fir_no="KTM/2026/0002", station_id=1, crime_type="Fraud", status="Closed",
             fir_date_time=datetime(2026, 2, 1, 14, 0), station_name="Kathmandu"),
    ])


def test_csv_export(repo, officer):
    buffer = ExportService(repo, max_rows=100).export_year_csv(officer, 2026)
    df = pd.read_csv(buffer, encoding="utf-8-sig")

    assert list(df["FIR No"]) == ["KTM/2026/0001", "KTM/2026/0002"]
    assert repo.calls == [{"station_id": 1, "year": 2026, "limit": 100}]


def test_admin_export_is_not_station_scoped(repo, admin):
    ExportService(repo).export_year_csv(admin, 2026)
    assert repo.calls[0]["station_id"] is None


def test_excel_export_has_summary(repo, station_admin):
    buffer = ExportService(repo).export_year_excel(station_admin, 2026)
    sheets = pd.read_excel(buffer, sheet_name=None, engine="openpyxl")

    assert set(sheets) == {"Cases", "Summary"}
    summary = dict(zip(sheets["Summary"]["Status"], sheets["Summary"]["Cases"]))
    assert summary == {"Closed": 1, "Registered": 1}


def test_empty_year_exports_headers_only(officer):
    buffer = ExportService(FakeCaseRepo([])).export_year_excel(officer, 2019)
    sheets = pd.read_excel(buffer, sheet_name=None, engine="openpyxl")
    assert set(sheets) == {"Cases"}
    assert sheets["Cases"].empty
