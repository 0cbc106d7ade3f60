"""
Pytest configuration for fieldledger.

Provides fixtures for:
- Settings isolation (no leakage from the developer's environment or cache)
- Root logger restoration after tests that configure logging
- Sample job records, as models and as a JSON file for CLI tests
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Generator, List

import pytest

from fieldledger.config import get_settings
from fieldledger.domain.models import DatedRecord, FinancialRecord

_SETTINGS_ENV = (
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
    "LEDGER_TIMEZONE",
    "LEDGER_EXPENSE_RATIO",
    "LEDGER_PARTS_RATIO",
    "LEDGER_HOURS_PER_WEEK",
    "LEDGER_WEEKS_PER_MONTH",
    "LEDGER_HOURS_PER_RECORD",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Clear ledger env vars and the cached Settings around every test.
    """
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logger() -> Generator[None, None, None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def jobs() -> List[FinancialRecord]:
    """
    A small month of jobs across three technicians and two payment bases.
    """
    return [
        FinancialRecord(
            id="J1",
            amount=1000.0,
            group_key="Alex",
            payment_basis="percentage",
            rate=20.0,
            status="completed",
            occurs_at="2024-03-05T09:00:00",
            title="Garage Door Repair",
            job_source="Google Ads",
        ),
        FinancialRecord(
            id="J2",
            amount=500.0,
            group_key="Maria",
            payment_basis="flatPerJob",
            rate=50.0,
            status="Pending",
            occurs_at=date(2024, 3, 12),
            title="HVAC Tune-up",
            job_source="Referral",
        ),
        FinancialRecord(
            id="J3",
            amount=2000.0,
            group_key="Alex",
            payment_basis="percentage",
            rate=25.0,
            status="paid",
            occurs_at=datetime(2024, 2, 28, 14, 30),
            title="Water Heater Install",
            job_source="Google Ads",
        ),
        FinancialRecord(
            id="J4",
            amount=300.0,
            group_key="Sam",
            payment_basis="flatPerJob",
            rate=60.0,
            status="cancelled",
            occurs_at="not a date",
            title="Drain Cleaning",
            job_source="Website",
        ),
    ]


@pytest.fixture
def calendar_entries() -> List[DatedRecord]:
    return [
        DatedRecord(id="T1", occurs_at="2024-01-30T08:00:00", title="Site visit"),
        DatedRecord(id="T2", occurs_at="2024-02-01", title="Install"),
        DatedRecord(id="T3", occurs_at=date(2024, 2, 29), title="Follow-up call"),
        DatedRecord(id="T4", occurs_at="2024-02-29T17:45:00Z", title="Invoice review"),
        DatedRecord(id="T5", occurs_at="", title="Unscheduled"),
        DatedRecord(id="T6", occurs_at="2024-03-01T00:00:00", title="Inspection"),
    ]


@pytest.fixture
def jobs_file(tmp_path: Path, jobs: List[FinancialRecord]) -> Path:
    path = tmp_path / "jobs.json"
    payload = [job.model_dump(mode="json") for job in jobs]
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def calendar_file(tmp_path: Path, calendar_entries: List[DatedRecord]) -> Path:
    path = tmp_path / "calendar.json"
    payload = {"records": [entry.model_dump(mode="json") for entry in calendar_entries]}
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path
