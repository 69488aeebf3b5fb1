"""Tests for the parameter interpreter."""

import pytest

from services.resource.capabilities import CapabilityDescriptor, EngineConfig, FilterSpec
from services.resource.notifications import NotificationBag
from services.resource.params import (
    interpret,
    normalize_filter,
    normalize_page,
    normalize_per_page,
    normalize_search,
    normalize_sort_column,
    normalize_sort_direction,
)
from utils.query_params import ListQueryParams, RawFilter

CONFIG = EngineConfig()

DESCRIPTOR = CapabilityDescriptor(
    filterable={
        "status": FilterSpec(allowed_values=["active", "inactive"]),
        "category": FilterSpec(parameter="cat"),
    },
    sortable=("name",),
)


@pytest.mark.parametrize("raw, expected", [(None, 1), ("3", 3), (" 2 ", 2), ("4.0", 4)])
def test_page_accepts_numbers(raw, expected):
    assert normalize_page(raw) == (expected, [])


@pytest.mark.parametrize("raw", ["0", "-1", "abc", "", "nan"])
def test_page_falls_back_to_first(raw):
    page, notes = normalize_page(raw)
    assert page == 1
    assert len(notes) == 1
    assert notes[0].field == "page"


def test_per_page_default_when_absent():
    assert normalize_per_page(None, CONFIG) == (15, [])


@pytest.mark.parametrize("raw, expected, fragment", [
    ("150", 100, "exceeds maximum of 100"),
    ("0", 1, "below minimum of 1"),
    ("-20", 1, "below minimum of 1"),
    ("many", 15, "Using default value of 15"),
])
def test_per_page_corrections(raw, expected, fragment):
    per_page, notes = normalize_per_page(raw, CONFIG)
    assert per_page == expected
    assert len(notes) == 1
    assert fragment in notes[0].message


def test_per_page_within_range():
    assert normalize_per_page("100", CONFIG) == (100, [])
    assert normalize_per_page("1", CONFIG) == (1, [])


def test_sort_column():
    sortable = frozenset({"id", "name"})
    assert normalize_sort_column(None, sortable, CONFIG) == (None, [])
    assert normalize_sort_column("  ", sortable, CONFIG) == (None, [])
    assert normalize_sort_column("name", sortable, CONFIG) == ("name", [])

    column, notes = normalize_sort_column("password", sortable, CONFIG)
    assert column == "id"
    assert notes[0].message == "Sort column 'password' not found, using default 'id'"


def test_sort_direction():
    assert normalize_sort_direction(None, CONFIG) == ("asc", [])
    assert normalize_sort_direction("DESC", CONFIG) == ("desc", [])

    direction, notes = normalize_sort_direction("up", CONFIG)
    assert direction == "asc"
    assert len(notes) == 1


def test_search():
    assert normalize_search(None, CONFIG) == (None, [])
    assert normalize_search("   ", CONFIG) == (None, [])
    assert normalize_search("  lamp ", CONFIG) == ("lamp", [])

    term, notes = normalize_search(" x ", CONFIG)
    assert term is None
    assert "too short" in notes[0].message


class TestFilter:
    def test_generic_form(self):
        applied, notes = normalize_filter([RawFilter(raw="status:active")], DESCRIPTOR)
        assert applied.to_dict() == {"field": "status", "value": "active"}
        assert notes == []

    def test_value_may_contain_colons(self):
        applied, _ = normalize_filter([RawFilter(raw="category:a:b")], DESCRIPTOR)
        assert applied.value == "a:b"

    def test_dedicated_parameter(self):
        applied, _ = normalize_filter([RawFilter(parameter="cat", raw="tools")], DESCRIPTOR)
        assert applied.to_dict() == {"field": "category", "value": "tools"}

    def test_malformed(self):
        applied, notes = normalize_filter([RawFilter(raw="statusactive")], DESCRIPTOR)
        assert applied is None
        assert notes[0].message == "Filter format statusactive not recognized, filter ignored"

    def test_unknown_field(self):
        applied, notes = normalize_filter([RawFilter(raw="colour:red")], DESCRIPTOR)
        assert applied is None
        assert notes[0].message == "Invalid filter field: colour"
        assert notes[0].field == "filter"

    def test_ignored_values_are_silent(self):
        for raw in ("status:all", "status:", "status:deleted"):
            applied, notes = normalize_filter([RawFilter(raw=raw)], DESCRIPTOR)
            assert applied is None
            assert notes == []

    def test_last_accepted_occurrence_wins(self):
        applied, _ = normalize_filter(
            [RawFilter(raw="status:active"), RawFilter(parameter="cat", raw="tools")], DESCRIPTOR
        )
        assert applied.field == "category"

    def test_rejected_occurrence_keeps_previous(self):
        applied, notes = normalize_filter(
            [RawFilter(raw="status:active"), RawFilter(raw="colour:red"), RawFilter(raw="status:all")],
            DESCRIPTOR,
        )
        assert applied.to_dict() == {"field": "status", "value": "active"}
        assert len(notes) == 1

    def test_no_declared_filters(self):
        applied, notes = normalize_filter([RawFilter(raw="status:active")], CapabilityDescriptor())
        assert applied is None
        assert len(notes) == 1


def test_interpret_collects_every_correction():
    params = ListQueryParams.from_items(
        [("page", "zero"), ("per_page", "500"), ("sort", "secret"), ("dir", "up"),
         ("search", "a"), ("filter", "colour:red")],
        filter_parameters=frozenset({"cat"}),
    )
    bag = NotificationBag()

    normalized = interpret(params, DESCRIPTOR, CONFIG, bag)

    assert normalized.page == 1
    assert normalized.per_page == 100
    assert normalized.sort_column == "id"
    assert normalized.sort_dir == "asc"
    assert normalized.sort_requested is True
    assert normalized.search_term is None
    assert normalized.applied_filter is None
    assert [n["field"] for n in bag.to_list()] == ["page", "per_page", "search", "filter", "sort", "dir"]


def test_interpret_without_parameters():
    bag = NotificationBag()

    normalized = interpret(ListQueryParams(), DESCRIPTOR, CONFIG, bag)

    assert normalized.page == 1
    assert normalized.per_page == 15
    assert normalized.sort_column is None
    assert normalized.sort_requested is False
    assert len(bag) == 0


def test_sortable_set_includes_implicit_columns():
    params = ListQueryParams.from_items([("sort", "created_at")])

    normalized = interpret(params, DESCRIPTOR, CONFIG, NotificationBag())

    assert normalized.sort_column == "created_at"
