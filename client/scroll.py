"""
Scroll trigger for the infinite feed.

Models a viewport intersection observer watching a sentinel placed after the
last rendered entry. Geometry is one-dimensional (vertical scroll).
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from core.config import SCROLL_ROOT_MARGIN_PX, SCROLL_THRESHOLD

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Box:
    top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height


def intersection_ratio(sentinel: Box, viewport: Box, root_margin: float = 0.0) -> float:
    """Fraction of the sentinel inside the viewport grown by root_margin on both edges."""
    lo = viewport.top - root_margin
    hi = viewport.bottom + root_margin
    if sentinel.height <= 0:
        return 1.0 if lo <= sentinel.top <= hi else 0.0
    overlap = min(sentinel.bottom, hi) - max(sentinel.top, lo)
    if overlap <= 0:
        return 0.0
    return min(1.0, overlap / sentinel.height)


@dataclass
class _Binding:
    on_visible: Callable[[], Any]
    has_more: bool
    pending: bool


class ScrollTrigger:
    def __init__(self, root_margin: float = SCROLL_ROOT_MARGIN_PX, threshold: float = SCROLL_THRESHOLD):
        self.root_margin = root_margin
        self.threshold = threshold
        self._binding: Optional[_Binding] = None
        self._visible = False

    @property
    def attached(self) -> bool:
        return self._binding is not None

    def attach(self, on_visible: Callable[[], Any], *, has_more: bool, pending: bool) -> None:
        # At most one observer at a time: re-wiring replaces the previous one.
        # A fresh observer reports the sentinel state again on its first observation.
        self.detach()
        self._binding = _Binding(on_visible=on_visible, has_more=has_more, pending=pending)

    def detach(self) -> None:
        self._binding = None
        self._visible = False

    def is_visible(self, sentinel: Box, viewport: Box) -> bool:
        ratio = intersection_ratio(sentinel, viewport, self.root_margin)
        return ratio > 0 and ratio >= self.threshold

    def notify(self, sentinel: Box, viewport: Box) -> Any:
        """Feed one scroll/layout observation. Returns whatever the callback returned, or None."""
        visible = self.is_visible(sentinel, viewport)
        entered = visible and not self._visible
        self._visible = visible
        if not entered:
            return None
        binding = self._binding
        if binding is None or not binding.has_more or binding.pending:
            return None
        logger.debug("sentinel visible, requesting next page")
        return binding.on_visible()

