"""Tests for raw list-parameter extraction."""

from utils.query_params import ListQueryParams


def test_scalar_keys_use_last_value():
    params = ListQueryParams.from_items([("page", "1"), ("page", "3"), ("sort", "name")])

    assert params.page == "3"
    assert params.sort == "name"
    assert params.per_page is None


def test_filters_keep_query_order():
    params = ListQueryParams.from_items(
        [("filter", "type:digital"), ("status", "draft"), ("filter", "type:service"), ("other", "x")],
        filter_parameters=frozenset({"status"}),
    )

    assert [(f.parameter, f.raw) for f in params.filters] == [
        (None, "type:digital"),
        ("status", "draft"),
        (None, "type:service"),
    ]


def test_url_query_excludes_paging_keys():
    params = ListQueryParams.from_items(
        [("page", "2"), ("search", "red lamp"), ("per_page", "5"), ("filter", "type:digital")],
        url_path="/api/v1/products",
    )

    assert params.url_query == "search=red+lamp&filter=type%3Adigital"
    assert params.url_path == "/api/v1/products"


def test_url_query_is_none_without_other_keys():
    params = ListQueryParams.from_items([("page", "2"), ("per_page", "5")])

    assert params.url_query is None
