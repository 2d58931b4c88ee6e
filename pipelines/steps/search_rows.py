from __future__ import annotations

from models.columns import row_values, stringify
from pipelines.runner import TableContext


class SearchRows:
    """Keep rows where any field contains the search term, ignoring case."""

    def run(self, ctx: TableContext) -> TableContext:
        term = ctx.state.search_term
        if not term:
            return ctx
        needle = term.lower()

        def _matches(row) -> bool:
            for value in row_values(row):
                text = stringify(value)
                if text and needle in text.lower():
                    return True
            return False

        ctx.rows = [row for row in ctx.rows if _matches(row)]
        return ctx
