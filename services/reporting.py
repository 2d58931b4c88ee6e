from __future__ import annotations

from typing import Iterable, List, Optional

from models.columns import COMPANY_COLUMNS, ColumnSpec, get_value, stringify
from models.view_state import SortDirection, ViewState
from pipelines.table import PageView


MAX_CELL_WIDTH = 28
_SORT_MARKS = {SortDirection.ASC: " ^", SortDirection.DESC: " v"}


def _truncate(text: str, width: int = MAX_CELL_WIDTH) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


def _cell(row, column: ColumnSpec) -> str:
    text = stringify(get_value(row, column.key)) or ""
    if column.key == "status" and text:
        return f"[{text}]"
    return _truncate(text)


def _header(column: ColumnSpec, view: ViewState) -> str:
    label = column.label
    if view.sort_key == column.key:
        label += _SORT_MARKS.get(view.sort_direction, "")
    if view.applied(column.key):
        label += " *"
    return label


def render_table(page: PageView, view: ViewState, columns: Optional[List[ColumnSpec]] = None) -> str:
    """Plain-text table for one page, id first, then the visible columns."""
    cols = [c for c in (columns if columns is not None else COMPANY_COLUMNS) if c.visible]
    headers = ["ID"] + [_header(c, view) for c in cols]
    body = [[stringify(get_value(row, "id")) or "-"] + [_cell(row, c) for c in cols] for row in page.rows]

    widths = [len(h) for h in headers]
    for line in body:
        widths = [max(w, len(v)) for w, v in zip(widths, line)]

    def _fmt(values: Iterable[str]) -> str:
        return "  ".join(v.ljust(w) for v, w in zip(values, widths)).rstrip()

    out = [_fmt(headers), _fmt("-" * w for w in widths)]
    if body:
        out.extend(_fmt(line) for line in body)
    else:
        out.append("No data matches the current filters")
        out.append("Try adjusting your search or filters")
    return "\n".join(out)


def render_footer(page: PageView) -> str:
    prev_mark = "< Previous" if page.has_previous else "  Previous"
    next_mark = "Next >" if page.has_next else "Next"
    return (
        f"{prev_mark} | Page {page.page} of {page.total_pages} | {next_mark}"
        f"    Rows per page: {page.page_size}    Matching: {page.total_count}"
    )


def render_view_summary(view: ViewState) -> str:
    parts = []
    if view.search_term:
        parts.append(f'search="{view.search_term}"')
    for field_name, values in view.active_filters.items():
        parts.append(f"{field_name} in {{{', '.join(sorted(values))}}}")
    if view.sort_key and view.sort_direction is not SortDirection.NONE:
        parts.append(f"sort={view.sort_key} {view.sort_direction.value}")
    return "Filters: " + ("; ".join(parts) if parts else "none")


def render_page(page: PageView, view: ViewState, columns: Optional[List[ColumnSpec]] = None) -> str:
    return "\n".join([render_view_summary(view), render_table(page, view, columns), render_footer(page)])


def render_filter_menu(field_name: str, options: List[str], selected: Iterable[str]) -> str:
    chosen = set(selected)
    lines = [f"Filter: {field_name}"]
    if not options:
        lines.append("  (no values)")
    for value in options:
        mark = "x" if value in chosen else " "
        lines.append(f"  [{mark}] {value}")
    return "\n".join(lines)


def render_load_error(message: Optional[str]) -> str:
    return "\n".join([
        "=" * 60,
        "Error Loading Data",
        "=" * 60,
        message or "An error occurred",
        "Retry to reload the directory.",
    ])
