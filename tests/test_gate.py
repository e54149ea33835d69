import asyncio

from client.gate import CategoryGate, GateResult, GateState, WRONG_PASSWORD_MESSAGE, EMPTY_PASSWORD_MESSAGE
from client.session import FeedController
from utils.catalog import ALL_CATEGORY, CategoryDirectory, CategoryInfo, FeedPage


def _directory():
    return CategoryDirectory([
        CategoryInfo("Real Estate", 1),
        CategoryInfo("Medical", 2, is_password_protected=True),
    ])


class Recorder:
    def __init__(self, password="abc123", error=None):
        self.password = password
        self.error = error
        self.checks = []
        self.fetches = []

    async def verify(self, category, password):
        self.checks.append((category, password))
        if self.error:
            raise self.error
        return password == self.password

    async def fetch_page(self, category, page_index):
        self.fetches.append((category, page_index))
        return FeedPage(items=[{"id": f"{category}-{page_index}"}], has_more=False)


def test_protected_category_unlocks_after_correct_password():
    rec = Recorder()

    async def run():
        controller = FeedController(rec.fetch_page, _directory(), rec.verify)
        controller.start()
        await controller.settle()

        assert controller.select("Medical") is False
        assert controller.gate.prompting
        assert controller.category == ALL_CATEGORY

        assert await controller.submit_password("wrong") is GateResult.REJECTED
        assert controller.gate.prompting
        assert controller.gate.failure == WRONG_PASSWORD_MESSAGE
        assert controller.gate.credential == ""
        assert controller.category == ALL_CATEGORY

        assert await controller.submit_password("abc123") is GateResult.VERIFIED
        await controller.settle()
        assert controller.gate.state is GateState.IDLE
        assert controller.category == "Medical"

        # A stray submit after success must not trigger another filter change
        assert await controller.submit_password("abc123") is GateResult.IGNORED

    asyncio.run(run())
    assert rec.checks == [("Medical", "wrong"), ("Medical", "abc123")]
    assert rec.fetches == [(ALL_CATEGORY, 0), ("Medical", 0)]


def test_unprotected_selection_is_immediate():
    requested = []
    gate = CategoryGate(_directory().is_protected, Recorder().verify, requested.append)
    assert gate.select("Real Estate") is True
    assert gate.select(ALL_CATEGORY) is True
    assert requested == ["Real Estate", ALL_CATEGORY]
    assert gate.state is GateState.IDLE


def test_verification_error_counts_as_wrong_password():
    requested = []
    rec = Recorder(error=ConnectionError("unreachable"))
    gate = CategoryGate(_directory().is_protected, rec.verify, requested.append)
    gate.select("Medical")
    result = asyncio.run(gate.submit("abc123"))
    assert result is GateResult.REJECTED
    assert gate.failure == WRONG_PASSWORD_MESSAGE
    assert gate.prompting
    assert requested == []


def test_empty_password_is_not_checked():
    rec = Recorder()
    gate = CategoryGate(_directory().is_protected, rec.verify, lambda name: None)
    gate.select("Medical")
    assert asyncio.run(gate.submit("   ")) is GateResult.REJECTED
    assert gate.failure == EMPTY_PASSWORD_MESSAGE
    assert rec.checks == []


def test_unlimited_retries():
    requested = []
    rec = Recorder()
    gate = CategoryGate(_directory().is_protected, rec.verify, requested.append)
    gate.select("Medical")

    async def run():
        for attempt in range(5):
            assert await gate.submit(f"guess-{attempt}") is GateResult.REJECTED
        return await gate.submit("abc123")

    assert asyncio.run(run()) is GateResult.VERIFIED
    assert requested == ["Medical"]


def test_close_leaves_filter_unchanged():
    requested = []
    gate = CategoryGate(_directory().is_protected, Recorder().verify, requested.append)
    gate.select("Medical")
    gate.credential = "half-typed"
    gate.close()
    assert gate.state is GateState.IDLE
    assert gate.target is None and gate.credential == ""
    assert asyncio.run(gate.submit("abc123")) is GateResult.IGNORED
    assert requested == []


def test_close_during_check_discards_result():
    requested = []

    async def run():
        release = asyncio.Event()

        async def slow_verify(category, password):
            await release.wait()
            return True

        gate = CategoryGate(_directory().is_protected, slow_verify, requested.append)
        gate.select("Medical")
        pending = asyncio.ensure_future(gate.submit("abc123"))
        await asyncio.sleep(0)
        assert await gate.submit("abc123") is GateResult.IGNORED  # check already running
        gate.close()
        release.set()
        return await pending

    assert asyncio.run(run()) is GateResult.IGNORED
    assert requested == []


def test_direct_selection_closes_open_prompt():
    rec = Recorder()

    async def run():
        controller = FeedController(rec.fetch_page, _directory(), rec.verify)
        controller.start()
        await controller.settle()

        controller.select("Medical")
        assert controller.gate.prompting
        assert controller.select("Real Estate") is True
        assert controller.gate.state is GateState.IDLE
        assert controller.gate.target is None

        # The user's newer choice stands
        assert await controller.submit_password("abc123") is GateResult.IGNORED
        await controller.settle()
        return controller

    controller = asyncio.run(run())
    assert controller.category == "Real Estate"
    assert rec.checks == []
