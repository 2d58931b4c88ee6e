from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List, Optional

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'services.directory'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    # Settings are cached; tests change env between runs
    monkeypatch.setenv("RUN_ENV", "test")
    monkeypatch.setenv("AUDIT_TRACE", "false")
    from config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


SAMPLE_COMPANIES = [
    {"id": 1, "name": "Acme Corp", "location": "New York, NY", "industry": "Technology", "employees": "101-500",
     "revenue": "$10M - $50M", "website": "acme.com", "founded": "1998", "status": "Active"},
    {"id": 2, "name": "Globex", "location": "Austin, TX", "industry": "Energy", "employees": "1000+",
     "revenue": "$100M+", "website": "globex.com", "founded": "1985", "status": "Active"},
    {"id": 3, "name": "Initech Corporation", "location": "Austin, TX", "industry": "Technology", "employees": "51-100",
     "revenue": "$1M - $10M", "website": "initech.io", "founded": "2005", "status": "Inactive"},
    {"id": 4, "name": "Umbrella Health", "location": "Boston, MA", "industry": "Healthcare", "employees": "501-1000",
     "revenue": "$50M - $100M", "website": "umbrella.health", "founded": "1990", "status": "Active"},
    {"id": 5, "name": "Hooli", "location": "Palo Alto, CA", "industry": "Technology", "employees": "1000+",
     "revenue": "$100M+", "website": "hooli.xyz", "founded": "2004", "status": "Active"},
    {"id": 6, "name": "Vandelay Industries", "location": "New York, NY", "industry": "Manufacturing", "employees": "11-50",
     "revenue": "<$1M", "website": "vandelay.com", "founded": "1994", "status": "Inactive"},
    {"id": 7, "name": "Stark Logistics", "location": "Chicago, IL", "industry": "Logistics", "employees": "101-500",
     "revenue": "$10M - $50M", "website": "starklog.com", "founded": "2011", "status": "Active"},
]


@pytest.fixture
def sample_rows():
    return [dict(c) for c in SAMPLE_COMPANIES]


class FakeCompanyStore:
    """In-memory stand-in for the REST store; ``fail_next`` makes the next call raise."""

    def __init__(self, companies: Optional[List[dict]] = None):
        from models.company_record import CompanyRecord

        self.records = {c["id"]: CompanyRecord.model_validate(c) for c in (companies or [])}
        self.calls: List[tuple] = []
        self.fail_next: Optional[Exception] = None

    def _maybe_fail(self) -> None:
        if self.fail_next is not None:
            err, self.fail_next = self.fail_next, None
            raise err

    def list_companies(self):
        self.calls.append(("list",))
        self._maybe_fail()
        return list(self.records.values())

    def create_company(self, company):
        self.calls.append(("create", company.name))
        self._maybe_fail()
        new_id = max(self.records, default=0) + 1
        created = company.model_copy(update={"id": new_id})
        self.records[new_id] = created
        return created

    def update_company(self, company_id, company):
        self.calls.append(("update", company_id))
        self._maybe_fail()
        updated = company.model_copy(update={"id": company_id})
        self.records[company_id] = updated
        return updated

    def delete_company(self, company_id):
        self.calls.append(("delete", company_id))
        self._maybe_fail()
        self.records.pop(company_id, None)


@pytest.fixture
def fake_store():
    return FakeCompanyStore(SAMPLE_COMPANIES)
