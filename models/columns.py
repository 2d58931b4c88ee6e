from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class FieldType(str, Enum):
    STRING = "string"
    NUMERIC = "numeric"
    DATE = "date"


@dataclass(frozen=True)
class ColumnSpec:
    key: str
    label: str
    field_type: FieldType = FieldType.STRING
    filterable: bool = False
    sortable: bool = True
    visible: bool = True


COMPANY_COLUMNS: List[ColumnSpec] = [
    ColumnSpec("id", "ID", FieldType.NUMERIC, visible=False),
    ColumnSpec("name", "Company Name", filterable=True),
    ColumnSpec("location", "Location", filterable=True),
    ColumnSpec("industry", "Industry", filterable=True),
    ColumnSpec("employees", "Employees"),
    ColumnSpec("revenue", "Revenue"),
    ColumnSpec("website", "Website"),
    ColumnSpec("founded", "Founded", FieldType.DATE),
    ColumnSpec("status", "Status"),
]


def columns_by_key(columns: Optional[List[ColumnSpec]] = None) -> Dict[str, ColumnSpec]:
    return {c.key: c for c in (columns if columns is not None else COMPANY_COLUMNS)}


def get_value(row: Any, key: str) -> Any:
    """Read a field from a mapping or a model-like object; missing -> None."""
    if isinstance(row, Mapping):
        return row.get(key)
    return getattr(row, key, None)


def row_values(row: Any) -> List[Any]:
    if isinstance(row, Mapping):
        return list(row.values())
    if hasattr(row, "model_dump"):
        return list(row.model_dump().values())
    return list(vars(row).values())


def stringify(value: Any) -> Optional[str]:
    """String form used by search, filters and filter options.

    None stays None so that missing values never match a filter.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


_YEAR_RE = re.compile(r"^\d{4}$")


def _parse_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip().replace(",", ""))
    except ValueError:
        return None


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        if _YEAR_RE.match(text):
            return date(int(text), 1, 1)
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def sort_key(value: Any, field_type: FieldType) -> tuple:
    """Comparable key for one cell; never raises.

    Strings compare natively with missing values as "". Numbers and dates put
    missing or unparseable values before every present value.
    """
    if field_type is FieldType.STRING:
        return (1, stringify(value) or "")
    parsed = None
    if value is not None and value != "":
        parsed = _parse_number(value) if field_type is FieldType.NUMERIC else _parse_date(value)
    if parsed is None:
        return (0,)
    return (1, parsed)
