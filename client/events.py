"""
Filter request channel.

Navigation links and the category gate publish "show this category"
requests here; the feed controller is the only subscriber that acts on them
and the only owner of the active category.
"""
import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

FilterHandler = Callable[[str], None]


class FilterChannel:
    def __init__(self):
        self._handlers: List[FilterHandler] = []

    def subscribe(self, handler: FilterHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def publish(self, category: str) -> None:
        if not category:
            return
        logger.debug(f"filter requested: {category}")
        for handler in list(self._handlers):
            handler(category)

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)
