from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Protocol

from models.columns import COMPANY_COLUMNS, ColumnSpec, columns_by_key
from models.view_state import ViewState


@dataclass
class TableContext:
    rows: list = field(default_factory=list)
    state: ViewState = field(default_factory=ViewState)
    columns: Dict[str, ColumnSpec] = field(default_factory=lambda: columns_by_key(COMPANY_COLUMNS))
    meta: dict = field(default_factory=dict)


class Step(Protocol):
    def run(self, ctx: TableContext) -> TableContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: TableContext) -> TableContext:
        for step in self.steps:
            ctx = step.run(ctx)
        return ctx
