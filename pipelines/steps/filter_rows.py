from __future__ import annotations

from models.columns import get_value, stringify
from pipelines.runner import TableContext


class FilterRows:
    """Apply the committed per-field filters; fields are ANDed, values ORed."""

    def run(self, ctx: TableContext) -> TableContext:
        active = ctx.state.active_filters
        if not active:
            return ctx

        def _allowed(row) -> bool:
            for field_name, allowed in active.items():
                if stringify(get_value(row, field_name)) not in allowed:
                    return False
            return True

        ctx.rows = [row for row in ctx.rows if _allowed(row)]
        return ctx
