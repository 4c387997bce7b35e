"""
Auto-pagination for list and search endpoints.

List endpoints return pages in one of two shapes:

    {"data": [...], "has_more": true, "next_cursor": "..."}     # CursorPage
    {"items": [...], "total": 42, "limit": 10, "offset": 0}     # OffsetPage

Each shape has a Page adapter that knows how to compute the continuation
for the next page. ListObject drives the walk without caring which shape
it is looking at.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


class Page:
    """
    A single page of a list result.

    Subclasses read the items and the "more pages" signal out of the raw
    payload and compute the continuation parameters for the next request.

    Attributes:
        payload: Decoded response body
        params: Query/body parameters the page was requested with
    """

    def __init__(self, payload: Any, params: Optional[Dict[str, Any]] = None):
        self.payload = payload
        self.params = dict(params or {})

    @property
    def items(self) -> List[Any]:
        raise NotImplementedError

    def next_continuation(self) -> Optional[Dict[str, Any]]:
        """Parameters that fetch the next page, or None on the last page."""
        raise NotImplementedError


class CursorPage(Page):
    """
    Page with a ``has_more`` flag.

    The next page is addressed by ``next_cursor`` when the API returns one,
    and by a page counter otherwise.
    """

    list_key = "data"

    @property
    def items(self) -> List[Any]:
        if isinstance(self.payload, list):
            return self.payload
        if not isinstance(self.payload, dict):
            return []
        return self.payload.get(self.list_key) or []

    @property
    def has_more(self) -> bool:
        return isinstance(self.payload, dict) and bool(self.payload.get("has_more"))

    def next_continuation(self) -> Optional[Dict[str, Any]]:
        if not self.has_more:
            return None

        next_cursor = self.payload.get("next_cursor")
        if next_cursor:
            return {"cursor": next_cursor}

        return {"page": int(self.params.get("page") or 1) + 1}


class OffsetPage(Page):
    """
    Page described by ``total``/``limit``/``offset`` counters.

    The counters are read from the top level of the payload or from a
    nested ``pagination`` object. Items live under ``items`` unless the
    resource sets ``list_key`` (e.g. 'opportunities').
    """

    list_key = "items"

    def __init__(self, payload: Any, params: Optional[Dict[str, Any]] = None, list_key: Optional[str] = None):
        super().__init__(payload, params)
        if list_key:
            self.list_key = list_key

    @property
    def items(self) -> List[Any]:
        if isinstance(self.payload, list):
            return self.payload
        if not isinstance(self.payload, dict):
            return []
        items = self.payload.get(self.list_key)
        if items is None:
            items = self.payload.get("items")
        return items or []

    def _counter(self, name: str) -> Optional[int]:
        if not isinstance(self.payload, dict):
            return None
        source = self.payload.get("pagination") or self.payload
        value = source.get(name)
        if value is None:
            value = self.params.get(name)
        try:
            return int(value) if value is not None else None
        except (TypeError, ValueError):
            return None

    @property
    def total(self) -> int:
        total = self._counter("total")
        return total if total is not None else len(self.items)

    @property
    def limit(self) -> int:
        limit = self._counter("limit")
        return limit if limit else len(self.items)

    @property
    def offset(self) -> int:
        return self._counter("offset") or 0

    @property
    def has_more(self) -> bool:
        return bool(self.items) and self.offset + len(self.items) < self.total

    def next_continuation(self) -> Optional[Dict[str, Any]]:
        if not self.has_more:
            return None
        return {"offset": self.offset + len(self.items), "limit": self.limit}


def make_page_class(base: type, list_key: str) -> type:
    """Build a Page subclass reading items from a resource specific key."""
    return type(f"{list_key.title().replace('_', '')}{base.__name__}", (base,), {"list_key": list_key})


class ListObject:
    """
    Result of a list or search call.

    Holds the first page and a function that fetches any later page from
    its continuation parameters. Every auto-paging walk starts again from
    the first page; pages are fetched one at a time, and only after the
    previous page's items have been handed out.

    Example:
        orders = client.orders.list({"status": "OPEN"})
        for order in orders.auto_paging_iter():
            print(order["id"])

        first_fifty = orders.auto_paging_to_array(limit=50)
    """

    def __init__(
        self,
        first_page: Page,
        fetch_page: Callable[[Dict[str, Any]], Page],
        item_mapper: Optional[Callable[[Any], Any]] = None,
    ):
        self._first_page = first_page
        self._fetch_page = fetch_page
        self._item_mapper = item_mapper

    def _items(self, page: Page) -> List[Any]:
        if self._item_mapper is None:
            return page.items
        return [self._item_mapper(item) for item in page.items]

    @property
    def data(self) -> List[Any]:
        """Items of the first page."""
        return self._items(self._first_page)

    @property
    def page(self) -> Page:
        return self._first_page

    @property
    def payload(self) -> Any:
        """Raw body of the first page."""
        return self._first_page.payload

    @property
    def has_more(self) -> bool:
        return self._first_page.next_continuation() is not None

    def __iter__(self) -> Iterator[Any]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def iter_pages(self) -> Iterator[Page]:
        """
        Yield pages in order, fetching each one lazily.

        An empty page that still reports more results ends the walk.
        """
        page = self._first_page
        while True:
            yield page
            continuation = page.next_continuation()
            if continuation is None:
                return
            if not page.items:
                logger.warning("Empty page reported more results; stopping pagination")
                return
            logger.debug(f"Fetching next page with {continuation}")
            page = self._fetch_page(continuation)

    def auto_paging_iter(self) -> Iterator[Any]:
        """Yield every item across all pages in server order."""
        for page in self.iter_pages():
            for item in self._items(page):
                yield item

    def auto_paging_to_array(self, limit: int) -> List[Any]:
        """
        Collect items across pages, up to ``limit``.

        Args:
            limit: Maximum number of items to return. Zero or negative
                returns an empty list without fetching anything.

        Returns:
            At most ``limit`` items in server order
        """
        if limit is None or limit <= 0:
            return []

        results: List[Any] = []
        for page in self.iter_pages():
            items = self._items(page)
            results.extend(items)
            if len(results) >= limit:
                break

        return results[:limit]

    def auto_paging_each(self, callback: Callable[[Any], Any]) -> None:
        """
        Call ``callback`` once per item across all pages.

        Iteration stops as soon as the callback returns ``False`` (other
        falsy values such as None keep going). No further page is fetched
        after a stop.

        Args:
            callback: Function receiving each item
        """
        for item in self.auto_paging_iter():
            if callback(item) is False:
                return
