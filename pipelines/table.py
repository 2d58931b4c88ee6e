from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from models.columns import COMPANY_COLUMNS, ColumnSpec, columns_by_key, get_value, stringify
from models.view_state import ViewState
from pipelines.runner import Pipeline, TableContext
from pipelines.steps import FilterRows, PaginateRows, SearchRows, SortRows


@dataclass(frozen=True)
class PageView:
    rows: List[Any]
    page: int
    page_size: int
    total_pages: int
    total_count: int
    processed: List[Any]

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def _context(rows: Sequence[Any], state: ViewState, columns: Optional[List[ColumnSpec]]) -> TableContext:
    return TableContext(
        rows=list(rows),
        state=state,
        columns=columns_by_key(columns if columns is not None else COMPANY_COLUMNS),
    )


def process_rows(rows: Sequence[Any], state: ViewState, columns: Optional[List[ColumnSpec]] = None) -> List[Any]:
    """Search, filter and sort ``rows`` for ``state``; the input is left untouched."""
    ctx = Pipeline([SearchRows(), FilterRows(), SortRows()]).run(_context(rows, state, columns))
    return ctx.rows


def build_page(rows: Sequence[Any], state: ViewState, columns: Optional[List[ColumnSpec]] = None) -> PageView:
    ctx = Pipeline([SearchRows(), FilterRows(), SortRows(), PaginateRows()]).run(_context(rows, state, columns))
    return PageView(
        rows=ctx.rows,
        page=ctx.meta["page"],
        page_size=state.page_size,
        total_pages=ctx.meta["total_pages"],
        total_count=ctx.meta["total_count"],
        processed=ctx.meta["processed"],
    )


def filter_options(rows: Sequence[Any], field_name: str) -> List[str]:
    """Distinct string values of ``field_name`` over the full data set.

    First-appearance order; missing values are skipped.
    """
    seen: Dict[str, None] = {}
    for row in rows:
        text = stringify(get_value(row, field_name))
        if text is not None and text not in seen:
            seen[text] = None
    return list(seen)
