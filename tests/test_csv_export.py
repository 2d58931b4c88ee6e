from __future__ import annotations

import csv
import io

from models.company_record import CompanyRecord
from services.csv_export import HEADERS, companies_to_csv, escape_field, write_companies_csv


def _parse(text: str):
    return list(csv.reader(io.StringIO(text)))


def test_header_order_is_fixed():
    assert companies_to_csv([]) == "Name,Location,Industry,Employees,Revenue,Website,Founded,Status"
    assert HEADERS[5] == "Website"


def test_name_with_comma_and_quotes_round_trips():
    company = CompanyRecord(id=1, name='Acme, "Inc"', location="Austin, TX", industry="Technology",
                            employees="11-50", revenue="<$1M", website="acme.com", founded="1999")
    text = companies_to_csv([company])
    line = text.split("\n")[1]
    assert line.startswith('"Acme, ""Inc""",')
    rows = _parse(text)
    assert rows[1][0] == 'Acme, "Inc"'
    assert rows[1][1] == "Austin, TX"
    assert len(rows[1]) == len(HEADERS)


def test_website_is_always_wrapped_with_apostrophe():
    assert escape_field("acme.com", is_website=True) == "\"'acme.com\""
    rows = _parse(companies_to_csv([{"name": "Acme", "website": "acme.com"}]))
    assert rows[1][5] == "'acme.com"


def test_plain_and_missing_fields():
    assert escape_field("Technology") == "Technology"
    assert escape_field(None) == ""
    assert escape_field("two\nlines") == '"two\nlines"'
    assert escape_field("carriage\rreturn") == '"carriage\rreturn"'
    rows = _parse(companies_to_csv([{"name": "Old\rMac", "location": "Austin, TX"}]))
    assert rows[1][:2] == ["Old\rMac", "Austin, TX"]
    rows = _parse(companies_to_csv([{"name": "Solo"}]))
    assert rows[1] == ["Solo", "", "", "", "", "'", "", ""]


def test_write_companies_csv_creates_parent_dir(tmp_path):
    out = tmp_path / "exports" / "companies.csv"
    path = write_companies_csv([CompanyRecord(id=1, name="Hooli", website="hooli.xyz")], str(out))
    assert path == str(out)
    rows = _parse(out.read_text(encoding="utf-8"))
    assert rows[0] == HEADERS
    assert rows[1][0] == "Hooli" and rows[1][5] == "'hooli.xyz" and rows[1][7] == "Active"


def test_write_companies_csv_uses_configured_default(tmp_path, monkeypatch):
    target = tmp_path / "default.csv"
    monkeypatch.setenv("EXPORT_PATH", str(target))
    from config.settings import get_settings
    get_settings.cache_clear()
    assert write_companies_csv([]) == str(target)
    assert target.exists()
