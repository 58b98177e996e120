"""Tests for the discovery feed and filter facets."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.models.game import Game, Genre, Platform
from src.services.discovery import FEED_LIMIT, DiscoveryService
from src.services.errors import NetworkError


def make_games(count: int, start: int = 1) -> list[Game]:
    return [Game(id=i, name=f"Game {i}") for i in range(start, start + count)]


def make_source() -> AsyncMock:
    source = AsyncMock()
    source.list_trending.return_value = make_games(15)
    source.list_upcoming.return_value = make_games(3, start=100)
    source.list_genres.return_value = [
        Genre(id=4, name="Action", slug="action"),
        Genre(id=51, name="Indie", slug="indie"),
    ]
    source.list_platforms.return_value = [
        Platform(id=4, name="PC", slug="pc"),
        Platform(id=187, name="PlayStation 5", slug="playstation5"),
    ]
    return source


class TestDiscoveryFeed:
    """Tests for load_feed."""

    @pytest.mark.asyncio
    async def test_feed_is_capped(self) -> None:
        service = DiscoveryService(make_source())

        feed = await service.load_feed()

        assert len(feed.trending) == FEED_LIMIT
        assert [g.id for g in feed.upcoming] == [100, 101, 102]
        assert feed.error is None
        assert feed.loading is False

    @pytest.mark.asyncio
    async def test_today_is_forwarded(self) -> None:
        source = make_source()
        service = DiscoveryService(source)
        today = date(2024, 3, 15)

        _ = await service.load_feed(today)

        source.list_trending.assert_awaited_once_with(today)
        source.list_upcoming.assert_awaited_once_with(today)

    @pytest.mark.asyncio
    async def test_failure_gives_empty_feed_with_message(self) -> None:
        source = make_source()
        source.list_upcoming.side_effect = NetworkError("Connection failed")
        service = DiscoveryService(source)

        feed = await service.load_feed()

        assert feed.trending == ()
        assert feed.upcoming == ()
        assert feed.error == "Connection failed"


class TestFacets:
    """Tests for load_facets and name lookups."""

    @pytest.mark.asyncio
    async def test_facets_loaded(self) -> None:
        service = DiscoveryService(make_source())

        assert await service.load_facets() is True
        assert [g.name for g in service.genres] == ["Action", "Indie"]
        assert len(service.platforms) == 2

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_facets(self) -> None:
        source = make_source()
        service = DiscoveryService(source)
        _ = await service.load_facets()

        source.list_genres.side_effect = NetworkError("Request timed out")

        assert await service.load_facets() is False
        assert len(service.genres) == 2

    @pytest.mark.asyncio
    async def test_names_for_selected_ids(self) -> None:
        service = DiscoveryService(make_source())
        _ = await service.load_facets()

        assert service.genre_names(frozenset({"51"})) == ["Indie"]
        assert service.platform_names(frozenset({"4", "187"})) == ["PC", "PlayStation 5"]
        assert service.genre_names(frozenset({"999"})) == []
