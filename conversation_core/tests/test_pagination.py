import pytest

from conversation_core.domain.exceptions import ApiError, PaginationLimitError
from conversation_core.domain.models import ListConversationsParameters
from conversation_core.resources.pagination import PageFetcher, PageIterator
from conversation_core.resources.registry import CONVERSATIONS, MEMBERS, get_resource_config


class TransportStub:
    """按顺序返回预置响应体的 Transport。"""

    def __init__(self, bodies):
        self._bodies = list(bodies)
        self.calls = []

    def request(self, method, path, params=None, body=None):
        self.calls.append((method, path, params))
        item = self._bodies.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _conv(cid):
    return {"id": cid, "name": cid}


def _iterator(transport, filters=None, max_pages=None):
    fetcher = PageFetcher(transport, CONVERSATIONS, CONVERSATIONS.path())
    return PageIterator(fetcher, filters or ListConversationsParameters(), max_pages)


def test_fetch_issues_exactly_one_request(make_page):
    transport = TransportStub([make_page("conversations", [_conv("a")], next_href="/v1/conversations?cursor=n")])
    fetcher = PageFetcher(transport, CONVERSATIONS, "/v1/conversations")
    page = fetcher.fetch(ListConversationsParameters(page_size=5))
    assert [c.id for c in page.items] == ["a"]
    assert transport.calls == [("GET", "/v1/conversations", {"page_size": 5})]


def test_iterates_all_pages_in_order(make_page):
    transport = TransportStub([
        make_page("conversations", [_conv("a"), _conv("b")], next_href="https://api.nexmo.com/v1/conversations?cursor=next"),
        make_page("conversations", [_conv("c")]),
    ])
    ids = [c.id for c in _iterator(transport)]
    assert ids == ["a", "b", "c"]
    assert len(transport.calls) == 2
    assert transport.calls[1][2] == {"cursor": "next"}


def test_next_page_is_fetched_lazily(make_page):
    transport = TransportStub([
        make_page("conversations", [_conv("a"), _conv("b")], next_href="/v1/conversations?cursor=p2"),
        make_page("conversations", [_conv("c")]),
    ])
    it = _iterator(transport)
    assert len(transport.calls) == 0
    assert next(it).id == "a"
    assert next(it).id == "b"
    assert len(transport.calls) == 1
    assert next(it).id == "c"
    assert len(transport.calls) == 2
    with pytest.raises(StopIteration):
        next(it)
    assert len(transport.calls) == 2


def test_empty_page_with_next_link_still_advances(make_page):
    transport = TransportStub([
        make_page("conversations", [], next_href="/v1/conversations?cursor=c2"),
        make_page("conversations", [_conv("x")]),
    ])
    assert [c.id for c in _iterator(transport)] == ["x"]
    assert transport.calls[1][2] == {"cursor": "c2"}


def test_caller_filters_are_not_mutated(make_page):
    filters = ListConversationsParameters(page_size=2, order="desc")
    transport = TransportStub([
        make_page("conversations", [_conv("a")], next_href="/v1/conversations?cursor=opaque%2Btoken"),
        make_page("conversations", [_conv("b")]),
    ])
    list(_iterator(transport, filters))
    assert filters.cursor is None
    assert transport.calls[0][2] == {"page_size": 2, "order": "desc"}
    assert transport.calls[1][2] == {"page_size": 2, "order": "desc", "cursor": "opaque+token"}


def test_empty_cursor_terminates(make_page):
    transport = TransportStub([make_page("conversations", [_conv("a")], next_href="/v1/conversations?cursor=")])
    assert [c.id for c in _iterator(transport)] == ["a"]
    assert len(transport.calls) == 1


def test_malformed_envelope_is_empty_page():
    transport = TransportStub([{"page_size": 10}])
    assert list(_iterator(transport)) == []


def test_max_pages_bound(make_page):
    transport = TransportStub([
        make_page("conversations", [_conv("a")], next_href="/v1/conversations?cursor=1"),
        make_page("conversations", [_conv("b")], next_href="/v1/conversations?cursor=2"),
    ])
    it = _iterator(transport, max_pages=2)
    assert next(it).id == "a"
    assert next(it).id == "b"
    with pytest.raises(PaginationLimitError):
        next(it)
    assert it.pages_fetched == 2
    with pytest.raises(StopIteration):
        next(it)


def test_errors_propagate_unchanged(make_page):
    error = ApiError(code="API_ERROR", message="boom", http_status=500)
    transport = TransportStub([
        make_page("conversations", [_conv("a")], next_href="/v1/conversations?cursor=1"),
        error,
    ])
    it = _iterator(transport)
    assert next(it).id == "a"
    with pytest.raises(ApiError) as exc_info:
        next(it)
    assert exc_info.value is error


def test_registry_paths():
    assert MEMBERS.path(conversation_id="CON-1") == "/v1/conversations/CON-1/members"
    assert MEMBERS.item_path("me", conversation_id="CON-1") == "/v1/conversations/CON-1/members/me"
    assert get_resource_config("Conversations") is CONVERSATIONS
    with pytest.raises(KeyError):
        get_resource_config("users")
