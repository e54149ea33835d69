import asyncio

from client.events import FilterChannel
from client.scroll import Box, ScrollTrigger, intersection_ratio
from client.session import FeedController, FeedSession
from utils.catalog import ALL_CATEGORY, CategoryDirectory, CategoryInfo, FeedFetchError, FeedPage

VIEWPORT = Box(top=0, height=800)
NEAR = Box(top=850, height=1)  # inside the 100px lookahead
FAR = Box(top=2000, height=1)


class FakeFeed:
    """In-memory feed backend recording every page request."""

    def __init__(self, counts, page_size=12):
        self.entries = {
            name: [{"id": f"{name}-{i}", "category": name} for i in range(n)] for name, n in counts.items()
        }
        self.page_size = page_size
        self.calls = []
        self.hold = {}
        self.fail = set()

    async def fetch_page(self, category, page_index):
        self.calls.append((category, page_index))
        gate = self.hold.get((category, page_index))
        if gate is not None:
            await gate.wait()
        if (category, page_index) in self.fail:
            raise FeedFetchError("backend down")
        if category == ALL_CATEGORY:
            rows = [e for name, es in self.entries.items() if name != "Medical" for e in es]
        else:
            rows = self.entries.get(category, [])
        start = page_index * self.page_size
        return FeedPage.from_items(rows[start:start + self.page_size], self.page_size)


async def _never(category, password):
    return False


def _directory():
    return CategoryDirectory([CategoryInfo("Food", 1), CategoryInfo("Medical", 2, is_password_protected=True)])


def test_fifteen_entries_load_in_two_pages():
    feed = FakeFeed({"Food": 15})

    async def run():
        session = FeedSession(feed.fetch_page, category="Food")
        await session.start()
        assert len(session.items) == 12 and session.has_more

        task = session.request_next_page()
        assert session.request_next_page() is None  # already in flight
        await task
        assert len(session.items) == 15
        assert not session.has_more
        assert session.request_next_page() is None
        return session

    session = asyncio.run(run())
    assert feed.calls == [("Food", 0), ("Food", 1)]
    assert len({i["id"] for i in session.items}) == 15


def test_category_switch_discards_stale_page():
    feed = FakeFeed({"Food": 5, "Clothing": 3})

    async def run():
        release = asyncio.Event()
        feed.hold[("Food", 0)] = release
        session = FeedSession(feed.fetch_page, category="Food")
        old = session.start()
        await asyncio.sleep(0)
        new = session.select_category("Clothing")
        assert await new
        release.set()
        assert await old is False
        return session

    session = asyncio.run(run())
    assert [i["category"] for i in session.items] == ["Clothing"] * 3
    assert session.page_index == 0


def test_selecting_current_category_does_not_reload():
    feed = FakeFeed({"Food": 3})

    async def run():
        session = FeedSession(feed.fetch_page, category="Food")
        await session.start()
        assert session.select_category("Food") is None

    asyncio.run(run())
    assert feed.calls == [("Food", 0)]


def test_failed_page_keeps_items_and_retries():
    feed = FakeFeed({"Food": 20})
    feed.fail.add(("Food", 1))

    async def run():
        session = FeedSession(feed.fetch_page, category="Food")
        await session.start()
        assert await session.request_next_page() is False
        assert isinstance(session.error, FeedFetchError)
        assert len(session.items) == 12
        assert session.request_next_page() is None

        feed.fail.clear()
        assert await session.retry()
        assert session.error is None
        return session

    session = asyncio.run(run())
    assert len(session.items) == 20
    assert not session.has_more


def test_empty_category_is_distinct_from_error():
    feed = FakeFeed({"Food": 0})

    async def run():
        session = FeedSession(feed.fetch_page, category="Food")
        await session.start()
        return session

    session = asyncio.run(run())
    assert session.is_empty
    assert session.error is None
    assert not session.has_more


def test_intersection_ratio_threshold():
    trigger = ScrollTrigger(root_margin=100, threshold=0.1)
    tall = Box(top=895, height=100)  # 5px inside the grown viewport
    assert intersection_ratio(tall, VIEWPORT, 100) == 0.05
    assert not trigger.is_visible(tall, VIEWPORT)
    assert trigger.is_visible(Box(top=880, height=100), VIEWPORT)
    assert not trigger.is_visible(FAR, VIEWPORT)


def test_scroll_loads_each_page_once():
    feed = FakeFeed({"Food": 15})

    async def run():
        controller = FeedController(feed.fetch_page, _directory(), _never)
        controller.start()
        await controller.settle()
        controller.select("Food")
        await controller.settle()
        assert controller.trigger.attached
        assert len(controller.session.items) == 12

        assert controller.on_scroll(FAR, VIEWPORT) is None
        task = controller.on_scroll(NEAR, VIEWPORT)
        assert task is not None
        # Repeated observations while the page is loading must not refetch
        assert controller.on_scroll(NEAR, VIEWPORT) is None
        controller.on_scroll(FAR, VIEWPORT)
        assert controller.on_scroll(NEAR, VIEWPORT) is None
        await controller.settle()

        assert len(controller.session.items) == 15
        assert not controller.session.has_more
        assert controller.on_scroll(NEAR, VIEWPORT) is None
        return controller

    asyncio.run(run())
    assert feed.calls == [(ALL_CATEGORY, 0), ("Food", 0), ("Food", 1)]


def test_navigation_publishes_through_channel():
    feed = FakeFeed({"Food": 2})
    channel = FilterChannel()

    async def run():
        controller = FeedController(feed.fetch_page, _directory(), _never, channel=channel)
        controller.start()
        channel.publish("Food")
        await controller.settle()
        assert controller.category == "Food"

        channel.publish("Medical")
        assert controller.gate.prompting
        assert controller.category == "Food"

        controller.close()
        assert channel.subscriber_count == 0
        assert not controller.trigger.attached

    asyncio.run(run())


def test_filter_options():
    controller = FeedController(FakeFeed({}).fetch_page, _directory(), _never)
    assert controller.filter_options() == [ALL_CATEGORY, "Food", "Medical"]


def test_close_cancels_inflight_fetch():
    feed = FakeFeed({"Food": 5})

    async def run():
        release = asyncio.Event()
        feed.hold[(ALL_CATEGORY, 0)] = release
        controller = FeedController(feed.fetch_page, _directory(), _never)
        controller.start()
        await asyncio.sleep(0)
        controller.close()
        release.set()
        await controller.settle()
        return controller

    controller = asyncio.run(run())
    assert controller.session.items == []
    assert not controller.session.loaded
