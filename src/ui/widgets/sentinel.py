"""Infinite-scroll sentinel: fires a load-more signal when the list end scrolls into view."""

from collections.abc import Callable
from typing import ClassVar

from textual.containers import VerticalScroll
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Static

import structlog

from src.models.state import ListState

log = structlog.stdlib.get_logger()


class ViewportTrigger:
    """Decides when sentinel visibility should request the next page.

    The trigger is armed by ``rearm()`` only for states that are ready for
    more (``READY`` with pages left, outside favorites-only mode). While
    armed, the first ``observe(True)`` fires the callback and disarms, so
    each eligible state produces at most one request. ``teardown()`` stops
    all further firing.
    """

    def __init__(self, on_trigger: Callable[[], None]) -> None:
        self._on_trigger = on_trigger
        self._armed: bool = False
        self._active: bool = True
        self._last_state: ListState | None = None

    @property
    def armed(self) -> bool:
        return self._armed

    @property
    def active(self) -> bool:
        return self._active

    def rearm(self, state: ListState) -> bool:
        """Re-evaluate arming for a new list state.

        Returns:
            Whether the sentinel should be present for this state
        """
        if not self._active:
            return False
        if state is self._last_state:
            return self._armed
        self._last_state = state
        self._armed = state.is_ready_for_more
        return self._armed

    def observe(self, visible: bool) -> bool:
        """Report sentinel visibility; returns True if the trigger fired."""
        if not (self._active and self._armed and visible):
            return False
        self._armed = False
        log.debug("Sentinel visible, requesting next page")
        self._on_trigger()
        return True

    def teardown(self) -> None:
        self._active = False
        self._armed = False
        self._last_state = None


class LoadMoreSentinel(Static):
    """Marker at the end of the results; only displayed while more pages can load."""

    DEFAULT_CSS: ClassVar[str] = """
    LoadMoreSentinel {
        height: 1;
        color: $text-muted;
        text-align: center;
        display: none;
    }
    """

    def __init__(self, id: str | None = None) -> None:
        super().__init__("· · ·", id=id)


class ResultsScroll(VerticalScroll):
    """Scroll container that watches its ``LoadMoreSentinel``.

    The sentinel sits after the results, so it is in view exactly when the
    scroll position is within ``threshold`` rows of the bottom. That also
    covers content shorter than the viewport.
    """

    class SentinelVisible(Message):
        """Posted when the armed sentinel scrolls into view."""

    def __init__(
        self,
        *children: Widget,
        threshold: int = 1,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self.threshold: int = threshold
        self.trigger: ViewportTrigger = ViewportTrigger(self._request_next_page)
        super().__init__(*children, name=name, id=id, classes=classes)

    def _request_next_page(self) -> None:
        self.post_message(self.SentinelVisible())

    def sentinel_in_view(self) -> bool:
        sentinels = self.query(LoadMoreSentinel)
        if not sentinels or not sentinels.first().display:
            return False
        return self.max_scroll_y - self.scroll_y <= self.threshold

    def check_sentinel(self) -> None:
        if self.trigger.active:
            self.trigger.observe(self.sentinel_in_view())

    def rearm(self, state: ListState) -> None:
        """Show or hide the sentinel for ``state`` and re-check visibility after layout.

        After a failed page the sentinel stays armed but waits for the next
        scroll, so a sentinel that is still in view does not retry in a loop.
        """
        armed = self.trigger.rearm(state)
        for sentinel in self.query(LoadMoreSentinel):
            sentinel.display = armed
        if armed and state.last_error is None:
            _ = self.call_after_refresh(self.check_sentinel)

    def watch_scroll_y(self, old_value: float, new_value: float) -> None:
        super().watch_scroll_y(old_value, new_value)
        self.check_sentinel()

    def on_unmount(self) -> None:
        self.trigger.teardown()
