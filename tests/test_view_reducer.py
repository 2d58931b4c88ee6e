from __future__ import annotations

import pytest

from models.view_state import (
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
)
from services.view_reducer import initial_state, reduce


FIELDS = ("name", "location", "industry")


def _run(state, *actions):
    for action in actions:
        state = reduce(state, action)
    return state


def test_initial_state_has_empty_buffers_for_each_field():
    state = initial_state(FIELDS, page_size=10)
    assert state.filters == {f: frozenset() for f in FIELDS}
    assert state.pending_filters == {f: frozenset() for f in FIELDS}
    assert state.page == 1 and state.page_size == 10
    assert state.sort_direction is SortDirection.NONE


def test_initial_state_rejects_unknown_page_size():
    with pytest.raises(ValueError):
        initial_state(FIELDS, page_size=7)


def test_sort_toggle_cycles_on_same_column():
    state = initial_state(FIELDS)
    seen = []
    for _ in range(5):
        state = reduce(state, ToggleSort("name"))
        seen.append(state.sort_direction)
    assert seen == [
        SortDirection.ASC,
        SortDirection.DESC,
        SortDirection.NONE,
        SortDirection.ASC,
        SortDirection.DESC,
    ]


def test_sort_toggle_on_other_column_starts_ascending():
    state = _run(initial_state(FIELDS), ToggleSort("name"), ToggleSort("name"), ToggleSort("founded"))
    assert state.sort_key == "founded"
    assert state.sort_direction is SortDirection.ASC


def test_set_sort_without_key_clears_direction():
    state = reduce(initial_state(FIELDS), SetSort(None, SortDirection.DESC))
    assert state.sort_key is None and state.sort_direction is SortDirection.NONE


def test_pending_edits_do_not_touch_applied_until_apply():
    state = _run(
        initial_state(FIELDS),
        OpenFilter("industry"),
        TogglePendingValue("industry", "Technology"),
        TogglePendingValue("industry", "Energy"),
    )
    assert state.open_filter == "industry"
    assert state.pending("industry") == {"Technology", "Energy"}
    assert state.applied("industry") == frozenset()

    state = reduce(state, TogglePendingValue("industry", "Energy"))
    state = reduce(state, ApplyFilter("industry"))
    assert state.applied("industry") == {"Technology"}
    assert state.open_filter is None


def test_opening_filter_copies_applied_into_pending():
    state = _run(
        initial_state(FIELDS),
        OpenFilter("location"),
        TogglePendingValue("location", "Austin, TX"),
        ApplyFilter("location"),
        OpenFilter("location"),
        TogglePendingValue("location", "Boston, MA"),
        CloseFilter(),
    )
    # closing the menu leaves applied untouched
    assert state.applied("location") == {"Austin, TX"}
    state = reduce(state, OpenFilter("location"))
    assert state.pending("location") == {"Austin, TX"}


def test_open_filter_twice_closes_menu():
    state = _run(initial_state(FIELDS), OpenFilter("name"), OpenFilter("name"))
    assert state.open_filter is None


def test_clear_resets_both_buffers_for_field_only():
    state = _run(
        initial_state(FIELDS),
        ToggleAppliedValue("industry", "Technology"),
        ToggleAppliedValue("location", "Austin, TX"),
        ClearFilter("industry"),
    )
    assert state.applied("industry") == frozenset()
    assert state.pending("industry") == frozenset()
    assert state.applied("location") == {"Austin, TX"}


def test_toggle_applied_value_flips_membership():
    state = _run(initial_state(FIELDS), ToggleAppliedValue("name", "Hooli"))
    assert state.applied("name") == {"Hooli"}
    assert state.pending("name") == {"Hooli"}
    state = reduce(state, ToggleAppliedValue("name", "Hooli"))
    assert state.applied("name") == frozenset()


def test_non_filterable_field_actions_are_ignored():
    state = initial_state(FIELDS)
    for action in (OpenFilter("revenue"), TogglePendingValue("revenue", "x"), ApplyFilter("revenue"),
                   ClearFilter("revenue"), ToggleAppliedValue("revenue", "x")):
        assert reduce(state, action) is state


def test_page_resets_on_search_filter_size_and_data_change():
    base = reduce(initial_state(FIELDS), SetPage(3))
    assert base.page == 3
    assert reduce(base, SetSearchTerm("acme")).page == 1
    assert reduce(base, ToggleAppliedValue("name", "Acme Corp")).page == 1
    assert reduce(base, ApplyFilter("name")).page == 1
    assert reduce(base, ClearFilter("name")).page == 1
    assert reduce(base, SetPageSize(10)).page == 1
    assert reduce(base, DataChanged()).page == 1


def test_page_kept_on_sort_and_pending_edits():
    base = reduce(initial_state(FIELDS), SetPage(2))
    assert reduce(base, ToggleSort("name")).page == 2
    assert reduce(base, TogglePendingValue("name", "Hooli")).page == 2
    assert reduce(base, SetSearchTerm("")).page == 2


def test_next_and_previous_are_bounded():
    state = initial_state(FIELDS)
    state = _run(state, NextPage(2), NextPage(2), NextPage(2))
    assert state.page == 2
    state = _run(state, PreviousPage(), PreviousPage())
    assert state.page == 1
    assert reduce(state, SetPage(-4)).page == 1


def test_invalid_page_size_is_rejected():
    with pytest.raises(ValueError):
        reduce(initial_state(FIELDS), SetPageSize(7))


def test_reset_clears_search_filters_and_sort_but_keeps_page_size():
    state = _run(
        initial_state(FIELDS),
        SetPageSize(20),
        SetSearchTerm("corp"),
        ToggleAppliedValue("industry", "Technology"),
        OpenFilter("location"),
        TogglePendingValue("location", "Austin, TX"),
        ToggleSort("name"),
        SetPage(2),
        ResetView(),
    )
    assert state.search_term == ""
    assert state.active_filters == {}
    assert all(not v for v in state.pending_filters.values())
    assert state.sort_key is None and state.sort_direction is SortDirection.NONE
    assert state.open_filter is None
    assert state.page == 1
    assert state.page_size == 20


def test_changing_filterable_fields_resets_buffers():
    state = _run(initial_state(FIELDS), ToggleAppliedValue("industry", "Technology"),
                 SetFilterableFields(("status",)))
    assert state.filterable_fields == ("status",)
    assert state.filters == {"status": frozenset()}
    assert state.pending_filters == {"status": frozenset()}
    assert reduce(state, ToggleAppliedValue("industry", "Technology")) is state


def test_reduce_never_mutates_input():
    state = initial_state(FIELDS)
    filters_before = dict(state.filters)
    reduce(state, ToggleAppliedValue("name", "Hooli"))
    reduce(state, OpenFilter("name"))
    assert state.filters == filters_before
    assert state.open_filter is None


def test_set_page_is_clamped_to_known_page_count():
    state = initial_state(FIELDS)
    assert reduce(state, SetPage(99, total_pages=2)).page == 2
    assert reduce(state, SetPage(99, total_pages=0)).page == 1
    state = reduce(state, SetPage(99, total_pages=2))
    assert reduce(state, PreviousPage()).page == 1
