from __future__ import annotations

from models.columns import FieldType, get_value, sort_key
from models.view_state import SortDirection
from pipelines.runner import TableContext


class SortRows:
    def run(self, ctx: TableContext) -> TableContext:
        key = ctx.state.sort_key
        direction = ctx.state.sort_direction
        if not key or direction is SortDirection.NONE:
            return ctx
        column = ctx.columns.get(key)
        field_type = column.field_type if column else FieldType.STRING
        # sorted() is stable in both directions, so ties keep input order
        ctx.rows = sorted(
            ctx.rows,
            key=lambda row: sort_key(get_value(row, key), field_type),
            reverse=direction is SortDirection.DESC,
        )
        return ctx
