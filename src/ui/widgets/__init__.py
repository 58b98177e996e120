"""Custom widgets for the TUI application."""

from .carousel import GameCarousel, next_index, prev_index
from .sentinel import LoadMoreSentinel, ResultsScroll, ViewportTrigger

__all__ = [
    "GameCarousel",
    "LoadMoreSentinel",
    "ResultsScroll",
    "ViewportTrigger",
    "next_index",
    "prev_index",
]
