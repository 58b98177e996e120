"""Landing-page data: trending and upcoming games, and filter facets."""

import asyncio
from datetime import date
from typing import Protocol

import structlog

from ..models.game import Game, Genre, Platform
from ..models.state import DiscoveryFeed
from .errors import get_error_service

log = structlog.stdlib.get_logger()

FEED_LIMIT = 10


class DiscoverySource(Protocol):
    async def list_trending(self, today: date | None = None) -> list[Game]: ...

    async def list_upcoming(self, today: date | None = None) -> list[Game]: ...

    async def list_genres(self) -> list[Genre]: ...

    async def list_platforms(self) -> list[Platform]: ...


class DiscoveryService:
    """Loads the discovery feed and the genre/platform facets."""

    def __init__(self, source: DiscoverySource) -> None:
        self._source: DiscoverySource = source
        self.genres: list[Genre] = []
        self.platforms: list[Platform] = []

    async def load_feed(self, today: date | None = None) -> DiscoveryFeed:
        """Fetch trending and upcoming games together.

        A failure of either request yields an empty feed with the error
        message set; the failure is logged, never raised.
        """
        try:
            trending, upcoming = await asyncio.gather(
                self._source.list_trending(today),
                self._source.list_upcoming(today),
            )
        except Exception as e:
            error = get_error_service().convert(e, "load_feed", "discovery")
            log.error("Failed to load trending data", error=error.message)
            return DiscoveryFeed(error=error.message)

        feed = DiscoveryFeed(
            trending=tuple(trending[:FEED_LIMIT]),
            upcoming=tuple(upcoming[:FEED_LIMIT]),
        )
        log.info("Discovery feed loaded", trending=len(feed.trending), upcoming=len(feed.upcoming))
        return feed

    async def load_facets(self) -> bool:
        """Fetch genres and platforms for the filter pickers.

        Returns:
            True if both facet lists were loaded
        """
        try:
            platforms, genres = await asyncio.gather(
                self._source.list_platforms(),
                self._source.list_genres(),
            )
        except Exception as e:
            error = get_error_service().convert(e, "load_facets", "discovery")
            log.error("Failed to load filter data", error=error.message)
            return False

        self.platforms = platforms
        self.genres = genres
        log.info("Filter facets loaded", genres=len(genres), platforms=len(platforms))
        return True

    def genre_names(self, genre_ids: frozenset[str]) -> list[str]:
        return [g.name for g in self.genres if str(g.id) in genre_ids]

    def platform_names(self, platform_ids: frozenset[str]) -> list[str]:
        return [p.name for p in self.platforms if str(p.id) in platform_ids]
