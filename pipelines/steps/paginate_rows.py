from __future__ import annotations

import math

from pipelines.runner import TableContext


def total_pages(count: int, page_size: int) -> int:
    return max(1, math.ceil(count / page_size))


class PaginateRows:
    """Slice the processed rows down to the current page.

    The requested page is clamped to ``[1, total_pages]``; the processed rows
    stay available in ``ctx.meta["processed"]`` for export.
    """

    def run(self, ctx: TableContext) -> TableContext:
        size = ctx.state.page_size
        count = len(ctx.rows)
        pages = total_pages(count, size)
        page = min(max(1, ctx.state.page), pages)
        start = (page - 1) * size
        ctx.meta["processed"] = ctx.rows
        ctx.meta["total_count"] = count
        ctx.meta["total_pages"] = pages
        ctx.meta["page"] = page
        ctx.rows = ctx.rows[start:start + size]
        return ctx
