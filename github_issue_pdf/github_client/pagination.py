"""Walking page-numbered GitHub list endpoints to completion."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from ..config import DEFAULT_PAGE_SIZE
from ..exceptions import FetchCancelledError, FetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Page:
    """One page of a list endpoint."""

    items: list[dict[str, Any]]
    has_next: bool


@dataclass
class PageCursor:
    """Position of one in-flight fetch. Starts at page 1."""

    page: int = 1
    has_more: bool = True

    def advance(self) -> None:
        self.page += 1


@dataclass
class FetchResult(Generic[T]):
    """Outcome of a fetch: either every item, or the error that stopped it."""

    target: str
    items: list[T] = field(default_factory=list)
    error: FetchError | None = None
    pages: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


PageLoader = Callable[[int, int], Awaitable[Page]]


class PaginatedFetcher:
    """Collects every page of a list endpoint into one ordered list.

    Pages are requested strictly one after another; page N+1 is only
    requested once page N has been processed.
    """

    def __init__(self, per_page: int = DEFAULT_PAGE_SIZE):
        self.per_page = per_page

    async def fetch(
        self,
        load_page: PageLoader,
        transform: Callable[[dict[str, Any]], T],
        target: str,
        cancel: asyncio.Event | None = None,
    ) -> FetchResult[T]:
        """Fetch all pages of one target.

        Args:
            load_page: Coroutine function taking ``(page, per_page)``
            transform: Projection applied to every raw item, in API order
            target: Human readable name of what is fetched, for messages
            cancel: Optional token; once set no further page is requested

        Returns:
            FetchResult with all items, or with ``error`` set and no items
        """
        cursor = PageCursor()
        collected: list[T] = []

        while cursor.has_more:
            if cancel is not None and cancel.is_set():
                logger.info("Fetch of %s cancelled before page %d", target, cursor.page)
                return FetchResult(
                    target=target,
                    error=FetchCancelledError(target),
                    pages=cursor.page - 1,
                )
            try:
                page = await load_page(cursor.page, self.per_page)
                collected.extend(transform(item) for item in page.items)
            except Exception as e:
                logger.error(
                    "Fetching %s failed on page %d", target, cursor.page, exc_info=True
                )
                return FetchResult(
                    target=target,
                    error=FetchError(target, e),
                    pages=cursor.page - 1,
                )

            logger.debug(
                "Fetched page %d of %s (%d items)", cursor.page, target, len(page.items)
            )
            cursor.has_more = page.has_next
            if cursor.has_more:
                cursor.advance()

        return FetchResult(target=target, items=collected, pages=cursor.page)
