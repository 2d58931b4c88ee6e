from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Tuple, Union


class SortDirection(str, Enum):
    NONE = "none"
    ASC = "asc"
    DESC = "desc"


FilterMap = Mapping[str, frozenset]


@dataclass(frozen=True)
class ViewState:
    """Everything that shapes the rendered table, as one immutable value.

    ``filters`` holds the applied selections and ``pending_filters`` the
    uncommitted edits of an open filter menu. Both map a filterable field to
    the set of allowed string values; an empty set means no restriction.
    """

    filterable_fields: Tuple[str, ...] = ()
    filters: FilterMap = field(default_factory=dict)
    pending_filters: FilterMap = field(default_factory=dict)
    open_filter: Optional[str] = None
    search_term: str = ""
    sort_key: Optional[str] = None
    sort_direction: SortDirection = SortDirection.NONE
    page: int = 1
    page_size: int = 5
    page_size_options: Tuple[int, ...] = (5, 10, 20)

    def applied(self, field_name: str) -> frozenset:
        return self.filters.get(field_name, frozenset())

    def pending(self, field_name: str) -> frozenset:
        return self.pending_filters.get(field_name, frozenset())

    @property
    def active_filters(self) -> dict:
        return {k: v for k, v in self.filters.items() if v}


# --- Actions ---

@dataclass(frozen=True)
class SetSearchTerm:
    term: str


@dataclass(frozen=True)
class ToggleSort:
    key: str


@dataclass(frozen=True)
class SetSort:
    key: Optional[str]
    direction: SortDirection


@dataclass(frozen=True)
class OpenFilter:
    field: str


@dataclass(frozen=True)
class CloseFilter:
    pass


@dataclass(frozen=True)
class TogglePendingValue:
    field: str
    value: str


@dataclass(frozen=True)
class ApplyFilter:
    field: str


@dataclass(frozen=True)
class ClearFilter:
    field: str


@dataclass(frozen=True)
class ToggleAppliedValue:
    """Flip a value in both buffers at once (no apply step)."""

    field: str
    value: str


@dataclass(frozen=True)
class SetPage:
    page: int
    total_pages: Optional[int] = None


@dataclass(frozen=True)
class NextPage:
    total_pages: int


@dataclass(frozen=True)
class PreviousPage:
    pass


@dataclass(frozen=True)
class SetPageSize:
    size: int


@dataclass(frozen=True)
class ResetView:
    pass


@dataclass(frozen=True)
class SetFilterableFields:
    fields: Tuple[str, ...]


@dataclass(frozen=True)
class DataChanged:
    pass


Action = Union[
    SetSearchTerm,
    ToggleSort,
    SetSort,
    OpenFilter,
    CloseFilter,
    TogglePendingValue,
    ApplyFilter,
    ClearFilter,
    ToggleAppliedValue,
    SetPage,
    NextPage,
    PreviousPage,
    SetPageSize,
    ResetView,
    SetFilterableFields,
    DataChanged,
]
