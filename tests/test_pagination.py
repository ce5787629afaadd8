"""
Unit tests for the pagination driver.
"""

import pytest

from conftest import ServerResponse
from kubectl_tekton.errors import PaginationError
from kubectl_tekton.modules.client import iter_items, iter_pages
from kubectl_tekton.modules.models import ListRecordsRequest

PATH = "/namespace/demo/results/-/records"


def test_empty_single_page(results_server, client):
    """Test that an empty listing takes exactly one call."""
    results_server.register("GET", PATH, ServerResponse(json_body={}))

    pages = list(iter_pages(client.records.list, ListRecordsRequest(parent="namespace/demo/results/-")))

    assert len(pages) == 1
    assert pages[0].items == []
    assert pages[0].next_page_token == ""
    assert results_server.call_count == 1


def test_follows_continuation_token(results_server, client):
    """Test that a token is echoed back and items keep server order."""
    results_server.register(
        "GET", PATH,
        ServerResponse(json_body={"records": [{"name": "second"}]}),
        params={"pageToken": "page2"},
    )
    results_server.register(
        "GET", PATH,
        ServerResponse(json_body={"records": [{"name": "first"}], "nextPageToken": "page2"}),
        params={"pageToken": ""},
    )

    items = list(iter_items(client.records.list, ListRecordsRequest(parent="namespace/demo/results/-")))

    assert [r.name for r in items] == ["first", "second"]
    assert [c.params["pageToken"] for c in results_server.calls] == ["", "page2"]


def test_first_request_starts_without_token(results_server, client):
    """Test that a stale token on the caller's request is not sent."""
    results_server.register("GET", PATH, ServerResponse(json_body={}))
    request = ListRecordsRequest(parent="namespace/demo/results/-", page_token="stale")

    list(iter_pages(client.records.list, request))

    assert results_server.calls[0].params["pageToken"] == ""
    assert request.page_token == "stale"


def test_filter_and_size_carried_to_every_page(results_server, client):
    """Test that only the token changes between pages."""
    results_server.register(
        "GET", PATH, ServerResponse(json_body={}), params={"pageToken": "t2"}
    )
    results_server.register(
        "GET", PATH, ServerResponse(json_body={"nextPageToken": "t2"}), params={"pageToken": ""}
    )
    request = ListRecordsRequest(parent="namespace/demo/results/-", filter="f", page_size=25)

    list(iter_pages(client.records.list, request))

    for call in results_server.calls:
        assert call.params["filter"] == "f"
        assert call.params["pageSize"] == "25"


def test_repeated_token(results_server, client):
    """Test that a token handed out twice stops the listing."""
    results_server.register("GET", PATH, ServerResponse(json_body={"nextPageToken": "again"}))

    with pytest.raises(PaginationError, match="again"):
        list(iter_pages(client.records.list, ListRecordsRequest(parent="namespace/demo/results/-")))

    assert results_server.call_count == 2


def test_lazy(results_server, client):
    """Test that no request is made until a page is asked for."""
    results_server.register("GET", PATH, ServerResponse(json_body={"nextPageToken": "more"}))

    pages = iter_pages(client.records.list, ListRecordsRequest(parent="namespace/demo/results/-"))
    assert results_server.call_count == 0

    next(pages)
    assert results_server.call_count == 1
