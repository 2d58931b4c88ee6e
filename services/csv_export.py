from __future__ import annotations

import logging
import os
from typing import Any, Iterable, List, Optional

from models.columns import get_value, stringify


HEADERS: List[str] = ["Name", "Location", "Industry", "Employees", "Revenue", "Website", "Founded", "Status"]
FIELDS: List[str] = ["name", "location", "industry", "employees", "revenue", "website", "founded", "status"]


def escape_field(value: Any, is_website: bool = False) -> str:
    text = stringify(value) or ""
    if is_website:
        # Leading apostrophe keeps spreadsheets from turning the cell into a link
        return "\"'" + text.replace('"', '""') + '"'
    if any(ch in text for ch in (",", '"', "\n", "\r")):
        return '"' + text.replace('"', '""') + '"'
    return text


def companies_to_csv(rows: Iterable[Any]) -> str:
    """Render processed (not paginated) rows as CSV text, header first."""
    lines = [",".join(HEADERS)]
    for row in rows:
        lines.append(",".join(escape_field(get_value(row, f), is_website=(f == "website")) for f in FIELDS))
    return "\n".join(lines)


def ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(path)
    if parent and not os.path.isdir(parent):
        os.makedirs(parent, exist_ok=True)


def write_companies_csv(rows: Iterable[Any], path: Optional[str] = None) -> str:
    from config.settings import get_settings

    out_path = (path or get_settings().export_path or "").strip()
    if not out_path:
        out_path = os.path.join(os.getcwd(), "companies_directory.csv")
    ensure_parent_dir(out_path)

    rows = list(rows)
    with open(out_path, mode="w", newline="", encoding="utf-8") as f:
        f.write(companies_to_csv(rows))
    logging.info(f"Exported {len(rows)} companies to {out_path}", extra={"action": "export", "status": "ok"})
    return out_path
