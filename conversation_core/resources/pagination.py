"""游标分页。

- PageFetcher: 对集合路径发起一次 GET，返回一页领域对象。
- PageIterator: 反复调用 PageFetcher，把所有页拼成一个惰性、保序的迭代器。

游标是服务端 next 链接查询串中的 cursor 参数，只负责原样回传，从不解析其内容。
调用方传入的过滤参数对象是不可变的，游标状态只保存在迭代器内部。
"""

from collections import deque
from dataclasses import replace
from typing import Any, Deque, Generic, Iterator, Optional, TypeVar

import httpx

from conversation_core.domain.exceptions import PaginationLimitError
from conversation_core.domain.models import Page
from conversation_core.infrastructure.logging.logger import logger
from conversation_core.resources.registry import ResourceConfig
from conversation_core.resources.transcoding import filters_to_wire, wire_to_page
from conversation_core.transport.base import Transport

T = TypeVar("T")


class PageFetcher(Generic[T]):
    """绑定到某个集合路径的单页请求器。

    fetch 每调用一次恰好发一次请求：不重试、不翻页，传输层异常原样抛出。
    """

    def __init__(self, transport: Transport, resource: ResourceConfig, path: str):
        self._transport = transport
        self._resource = resource
        self._path = path

    def fetch(self, filters: Any = None) -> Page[T]:
        data = self._transport.request("GET", self._path, params=filters_to_wire(filters))
        return wire_to_page(data, self._resource.embedded_key, self._resource.read_item)


def next_cursor(page: Page) -> Optional[str]:
    """从 next 链接的查询串中取出 cursor；没有 next 链接或 cursor 为空时返回 None。"""

    next_link = page.links.next_link
    if next_link is None:
        return None
    return httpx.URL(next_link.href).params.get("cursor") or None


class PageIterator(Iterator[T]):
    """跨页的惰性迭代器。

    行为约定：
    1. 第一页使用调用方的过滤参数（其中的 cursor 若有，也原样使用）。
    2. 当前页的 item 全部交给调用方之后，才会请求下一页；内存里最多只有一页。
    3. 没有 next 链接时，当前页耗尽即结束；空页但带 next 链接时继续翻页。
    4. 调用方不再取值，就不会再发任何请求。只能单次、向前遍历，不可重启。

    max_pages 为可选的安全上限，超过时抛出 PaginationLimitError。
    """

    def __init__(self, fetcher: PageFetcher[T], filters: Any = None, max_pages: Optional[int] = None):
        self._fetcher = fetcher
        self._filters = filters
        self._max_pages = max_pages
        self._cursor: Optional[str] = None
        self._buffer: Deque[T] = deque()
        self._pages_fetched = 0
        self._exhausted = False

    def __iter__(self) -> "PageIterator[T]":
        return self

    def __next__(self) -> T:
        while not self._buffer:
            if self._exhausted:
                raise StopIteration
            self._fetch_next_page()
        return self._buffer.popleft()

    @property
    def pages_fetched(self) -> int:
        return self._pages_fetched

    def _fetch_next_page(self) -> None:
        if self._max_pages is not None and self._pages_fetched >= self._max_pages:
            self._exhausted = True
            raise PaginationLimitError(
                code="PAGINATION_LIMIT",
                message=f"Stopped after {self._pages_fetched} pages (max_pages={self._max_pages})",
            )
        filters = self._filters
        if self._cursor is not None:
            filters = replace(filters, cursor=self._cursor)
        page = self._fetcher.fetch(filters)
        self._pages_fetched += 1
        self._buffer.extend(page.items)
        self._cursor = next_cursor(page)
        if self._cursor is None:
            self._exhausted = True
        logger.debug(
            f"fetched page {self._pages_fetched}",
            extra={"extra": {"items": len(page.items), "has_next": self._cursor is not None}},
        )
