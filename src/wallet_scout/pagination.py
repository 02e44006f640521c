"""Cursor-paginated aggregation"""

from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from loguru import logger

from .models import Page

Query = Dict[str, Any]
FetchPage = Callable[[Query], Awaitable[Union[Page, Mapping[str, Any]]]]


def as_page(response: Union[Page, Mapping[str, Any]]) -> Page:
    """Accept either a Page or a plain ``{"items", "cursor"}`` mapping"""
    if isinstance(response, Page):
        return response
    return Page(items=list(response.get("items") or []), cursor=response.get("cursor") or None)


class PageAggregator:
    """
    Drains a cursor-based source into one ordered list.

    Pages are fetched strictly one after another: each cursor comes from the
    previous response, so the next request cannot be issued earlier. A failing
    fetch propagates and discards everything collected so far.
    """

    def __init__(self, fetch_page: FetchPage, cursor_key: str = "pageKey"):
        self.fetch_page = fetch_page
        self.cursor_key = cursor_key

    def _next_query(self, initial_query: Query, cursor: str) -> Query:
        query = dict(initial_query)
        query[self.cursor_key] = cursor
        return query

    async def drain(self, initial_query: Optional[Query] = None) -> List[Any]:
        """Fetch every page starting from `initial_query` and return all items in order"""
        initial_query = dict(initial_query or {})
        items: List[Any] = []
        pages = 0

        page = as_page(await self.fetch_page(initial_query))
        while True:
            pages += 1
            items.extend(page.items)
            logger.debug(f"Page {pages}: {len(page.items)} items, cursor={'Yes' if page.cursor else 'None'}")
            if not page.has_more:
                break
            page = as_page(await self.fetch_page(self._next_query(initial_query, page.cursor)))

        logger.debug(f"Drained {len(items)} items across {pages} pages")
        return items


async def drain(
    initial_query: Optional[Query],
    fetch_page: FetchPage,
    cursor_key: str = "pageKey",
) -> List[Any]:
    """Shortcut for ``PageAggregator(fetch_page, cursor_key).drain(initial_query)``"""
    return await PageAggregator(fetch_page, cursor_key).drain(initial_query)
