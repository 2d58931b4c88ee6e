from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, Optional, Sequence

from models.view_state import (
    Action,
    ApplyFilter,
    ClearFilter,
    CloseFilter,
    DataChanged,
    NextPage,
    OpenFilter,
    PreviousPage,
    ResetView,
    SetFilterableFields,
    SetPage,
    SetPageSize,
    SetSearchTerm,
    SetSort,
    SortDirection,
    ToggleAppliedValue,
    TogglePendingValue,
    ToggleSort,
    ViewState,
)


def _empty_filters(fields: Iterable[str]) -> Dict[str, frozenset]:
    return {f: frozenset() for f in fields}


def initial_state(
    filterable_fields: Sequence[str] = (),
    page_size: int = 5,
    page_size_options: Sequence[int] = (5, 10, 20),
) -> ViewState:
    if page_size not in page_size_options:
        raise ValueError(f"page_size {page_size} not in {tuple(page_size_options)}")
    fields = tuple(filterable_fields)
    return ViewState(
        filterable_fields=fields,
        filters=_empty_filters(fields),
        pending_filters=_empty_filters(fields),
        page_size=page_size,
        page_size_options=tuple(page_size_options),
    )


def next_sort_direction(state: ViewState, key: str) -> SortDirection:
    """none -> asc -> desc -> none on the same column; a new column starts at asc."""
    if state.sort_key != key:
        return SortDirection.ASC
    if state.sort_direction is SortDirection.ASC:
        return SortDirection.DESC
    if state.sort_direction is SortDirection.DESC:
        return SortDirection.NONE
    return SortDirection.ASC


def _with(mapping, key: str, values: frozenset) -> Dict[str, frozenset]:
    updated = dict(mapping)
    updated[key] = values
    return updated


def _toggle(values: frozenset, value: str) -> frozenset:
    return values - {value} if value in values else values | {value}


def reduce(state: ViewState, action: Action) -> ViewState:
    """Return the view state that results from applying ``action``.

    Never mutates ``state``. Actions naming a field that is not filterable
    leave the state unchanged.
    """
    if isinstance(action, SetSearchTerm):
        if action.term == state.search_term:
            return state
        return replace(state, search_term=action.term, page=1)

    if isinstance(action, ToggleSort):
        return replace(state, sort_key=action.key, sort_direction=next_sort_direction(state, action.key))

    if isinstance(action, SetSort):
        direction = action.direction if action.key else SortDirection.NONE
        return replace(state, sort_key=action.key, sort_direction=direction)

    if isinstance(action, ResetView):
        fields = state.filterable_fields
        return replace(
            state,
            filters=_empty_filters(fields),
            pending_filters=_empty_filters(fields),
            open_filter=None,
            search_term="",
            sort_key=None,
            sort_direction=SortDirection.NONE,
            page=1,
        )

    if isinstance(action, SetFilterableFields):
        fields = tuple(action.fields)
        return replace(
            state,
            filterable_fields=fields,
            filters=_empty_filters(fields),
            pending_filters=_empty_filters(fields),
            open_filter=None,
            search_term="",
            sort_key=None,
            sort_direction=SortDirection.NONE,
            page=1,
        )

    if isinstance(action, DataChanged):
        return replace(state, page=1)

    if isinstance(action, CloseFilter):
        return replace(state, open_filter=None)

    if isinstance(action, SetPage):
        page = max(1, int(action.page))
        if action.total_pages is not None:
            page = min(page, max(1, action.total_pages))
        return replace(state, page=page)

    if isinstance(action, NextPage):
        return replace(state, page=max(1, min(state.page + 1, action.total_pages)))

    if isinstance(action, PreviousPage):
        return replace(state, page=max(state.page - 1, 1))

    if isinstance(action, SetPageSize):
        if action.size not in state.page_size_options:
            raise ValueError(f"page size {action.size} not in {state.page_size_options}")
        return replace(state, page_size=action.size, page=1)

    field_name: Optional[str] = getattr(action, "field", None)
    if field_name not in state.filterable_fields:
        return state

    if isinstance(action, OpenFilter):
        if state.open_filter == field_name:
            return replace(state, open_filter=None)
        return replace(
            state,
            open_filter=field_name,
            pending_filters=_with(state.pending_filters, field_name, state.applied(field_name)),
        )

    if isinstance(action, TogglePendingValue):
        values = _toggle(state.pending(field_name), action.value)
        return replace(state, pending_filters=_with(state.pending_filters, field_name, values))

    if isinstance(action, ApplyFilter):
        return replace(
            state,
            filters=_with(state.filters, field_name, state.pending(field_name)),
            open_filter=None,
            page=1,
        )

    if isinstance(action, ClearFilter):
        return replace(
            state,
            filters=_with(state.filters, field_name, frozenset()),
            pending_filters=_with(state.pending_filters, field_name, frozenset()),
            open_filter=None,
            page=1,
        )

    if isinstance(action, ToggleAppliedValue):
        values = _toggle(state.applied(field_name), action.value)
        return replace(
            state,
            filters=_with(state.filters, field_name, values),
            pending_filters=_with(state.pending_filters, field_name, _toggle(state.pending(field_name), action.value)),
            page=1,
        )

    return state
