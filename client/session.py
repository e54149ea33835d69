"""
Feed session and controller for the infinite-scroll portfolio feed.

Single-threaded asyncio model: one fetch in flight per query generation,
pages appended strictly in page order, and results of superseded queries
dropped on arrival instead of being merged into the new feed.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from client.events import FilterChannel
from client.gate import CategoryGate
from client.scroll import Box, ScrollTrigger
from utils.catalog import ALL_CATEGORY, CategoryDirectory, FeedPage

logger = logging.getLogger(__name__)

FetchPage = Callable[[str, int], Awaitable[FeedPage]]


@dataclass(frozen=True)
class FeedQuery:
    category: str
    page_index: int
    generation: int


class FeedSession:
    def __init__(
        self,
        fetch_page: FetchPage,
        category: str = ALL_CATEGORY,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self._fetch_page = fetch_page
        self._on_change = on_change
        self.category = category
        self.items: List[Dict[str, Any]] = []
        self.has_more = True
        self.page_index = -1  # last page appended to items
        self.error: Optional[BaseException] = None
        self._generation = 0
        self._inflight: Optional[FeedQuery] = None

    @property
    def pending(self) -> bool:
        return self._inflight is not None

    @property
    def loaded(self) -> bool:
        return self.page_index >= 0

    @property
    def is_empty(self) -> bool:
        """Category has no entries at all: an explicit "no items" state, not an error."""
        return self.loaded and not self.items and not self.pending and self.error is None

    def start(self) -> "asyncio.Task[bool]":
        return self._restart()

    def select_category(self, category: str) -> Optional["asyncio.Task[bool]"]:
        if category == self.category and self._generation > 0:
            return None
        logger.info(f"feed category changed: {self.category!r} -> {category!r}")
        self.category = category
        return self._restart()

    def request_next_page(self) -> Optional["asyncio.Task[bool]"]:
        if self._generation == 0:
            return self._restart()
        if self._inflight is not None or not self.has_more or self.error is not None:
            return None
        return self._issue(FeedQuery(self.category, self.page_index + 1, self._generation))

    def retry(self) -> Optional["asyncio.Task[bool]"]:
        if self.error is None or self._inflight is not None:
            return None
        self.error = None
        return self._issue(FeedQuery(self.category, self.page_index + 1, self._generation))

    def _restart(self) -> "asyncio.Task[bool]":
        self._generation += 1
        self.items = []
        self.has_more = True
        self.page_index = -1
        self.error = None
        self._inflight = None
        return self._issue(FeedQuery(self.category, 0, self._generation))

    def _issue(self, query: FeedQuery) -> "asyncio.Task[bool]":
        # Marked in flight before the task first runs so repeated triggers see it
        self._inflight = query
        self._changed()
        return asyncio.get_running_loop().create_task(self._run(query))

    async def _run(self, query: FeedQuery) -> bool:
        try:
            page = await self._fetch_page(query.category, query.page_index)
        except Exception as ex:
            if self._inflight != query:
                logger.debug(f"dropping failure of superseded query {query}")
                return False
            logger.warning(f"feed page {query.page_index} for {query.category!r} failed: {ex}")
            self._inflight = None
            self.error = ex
            self._changed()
            return False

        if self._inflight != query:
            logger.debug(f"dropping stale page {query.page_index} for {query.category!r}")
            return False

        self._inflight = None
        self.items.extend(page.items)
        self.page_index = query.page_index
        self.has_more = page.has_more
        self._changed()
        return True

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()


class FeedController:
    """Single owner of the active category: wires the session, scroll trigger, gate and filter channel."""

    def __init__(
        self,
        fetch_page: FetchPage,
        directory: CategoryDirectory,
        verify: Callable[[str, str], Awaitable[bool]],
        channel: Optional[FilterChannel] = None,
        trigger: Optional[ScrollTrigger] = None,
    ):
        self.directory = directory
        self.channel = channel or FilterChannel()
        self.trigger = trigger or ScrollTrigger()
        self.session = FeedSession(fetch_page, on_change=self._rewire)
        self.gate = CategoryGate(directory.is_protected, verify, self._apply)
        self._tasks: Set[asyncio.Task] = set()
        self._closed = False
        self._unsubscribe = self.channel.subscribe(self.select)

    @property
    def category(self) -> str:
        return self.session.category

    def filter_options(self) -> List[str]:
        return self.directory.list_filter_options()

    def start(self) -> "asyncio.Task[bool]":
        return self._track(self.session.start())

    def select(self, category: str) -> bool:
        return self.gate.select(category)

    async def submit_password(self, password: str):
        return await self.gate.submit(password)

    def close_prompt(self) -> None:
        self.gate.close()

    def on_scroll(self, sentinel: Box, viewport: Box) -> Optional[asyncio.Task]:
        return self.trigger.notify(sentinel, viewport)

    def retry(self) -> Optional[asyncio.Task]:
        return self._track(self.session.retry())

    async def settle(self) -> None:
        """Wait until every fetch started by this controller has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        self._closed = True
        self.trigger.detach()
        self._unsubscribe()
        for task in list(self._tasks):
            task.cancel()

    def _apply(self, category: str) -> None:
        self._track(self.session.select_category(category))

    def _load_more(self) -> Optional[asyncio.Task]:
        return self._track(self.session.request_next_page())

    def _track(self, task: Optional[asyncio.Task]) -> Optional[asyncio.Task]:
        if task is not None:
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        return task

    def _rewire(self) -> None:
        if self._closed:
            return
        self.trigger.attach(self._load_more, has_more=self.session.has_more, pending=self.session.pending)
