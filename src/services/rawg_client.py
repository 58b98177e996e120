"""Client for the RAWG video game metadata API."""

from datetime import date, timedelta
from typing import Any

import structlog

from ..models.config import DEFAULT_BASE_URL, DEFAULT_PAGE_SIZE
from ..models.game import Game, GameDetails, Genre, Platform, Screenshot, Trailer
from ..models.query import GameQuery, Ordering
from ..models.state import Page
from .errors import ConfigurationError
from .http_client import HttpClientService

log = structlog.stdlib.get_logger()

TRENDING_WINDOW_DAYS = 30
FACET_PLATFORM_PAGE_SIZE = 50


def _add_one_year(day: date) -> date:
    try:
        return day.replace(year=day.year + 1)
    except ValueError:
        # Feb 29 rolls over to Mar 1
        return day.replace(year=day.year + 1, month=3, day=1)


def trending_window(today: date) -> str:
    """Date range covering the trailing thirty days, inclusive of today."""
    start = today - timedelta(days=TRENDING_WINDOW_DAYS)
    return f"{start.isoformat()},{today.isoformat()}"


def upcoming_window(today: date) -> str:
    """Date range from today to one year out."""
    return f"{today.isoformat()},{_add_one_year(today).isoformat()}"


class RawgApiService:
    """Fetch collaborator for the game catalog.

    Every call is authenticated with the static API key passed as the ``key``
    query parameter. Failures propagate as ``NetworkError`` from the HTTP layer;
    a missing key raises ``ConfigurationError`` before any request is sent.
    """

    def __init__(
        self,
        http_client: HttpClientService,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.http_client: HttpClientService = http_client
        self.base_url: str = base_url.rstrip("/")
        self.page_size: int = page_size
        self._api_key: str = api_key

        log.info("RAWG API service initialized", base_url=self.base_url, page_size=page_size)

    async def _fetch(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        if not self._api_key:
            raise ConfigurationError(
                "No RAWG API key configured",
                setting="api_key",
                expected="a key from https://rawg.io/apidocs (RAWG_API_KEY or --api-key)",
            )

        query: dict[str, str] = {"key": self._api_key}
        for name, value in (params or {}).items():
            if value is None or value == "":
                continue
            query[name] = str(value)

        data = await self.http_client.get_json(f"{self.base_url}{endpoint}", params=query)
        return data if isinstance(data, dict) else {}

    async def list_games(
        self,
        query: GameQuery,
        page: int = 1,
        page_size: int | None = None,
    ) -> Page:
        """Fetch one page of games matching the query."""
        params: dict[str, Any] = {
            "page": page,
            "page_size": page_size or self.page_size,
            **query.to_params(),
        }
        log.debug("Listing games", page=page, **query.to_params())

        data = await self._fetch("/games", params)
        items = tuple(Game.from_api(g) for g in _results(data))
        count = data.get("count")
        return Page(
            items=items,
            has_next=bool(data.get("next")),
            count=count if isinstance(count, int) else None,
        )

    async def get_game(self, game_id: int) -> GameDetails:
        """Fetch extended metadata for one game."""
        data = await self._fetch(f"/games/{game_id}")
        return GameDetails.from_api(data)

    async def get_screenshots(self, game_id: int) -> list[Screenshot]:
        data = await self._fetch(f"/games/{game_id}/screenshots")
        return [Screenshot.from_api(s) for s in _results(data)]

    async def get_trailers(self, game_id: int) -> list[Trailer]:
        data = await self._fetch(f"/games/{game_id}/movies")
        return [Trailer.from_api(t) for t in _results(data)]

    async def list_trending(self, today: date | None = None) -> list[Game]:
        """Games added within the trailing thirty days, most recently added first."""
        data = await self._fetch("/games", {
            "dates": trending_window(today or date.today()),
            "ordering": Ordering.ADDED_DESC.value,
            "page_size": DEFAULT_PAGE_SIZE,
        })
        return [Game.from_api(g) for g in _results(data)]

    async def list_upcoming(self, today: date | None = None) -> list[Game]:
        """Games releasing between today and one year out, soonest first."""
        data = await self._fetch("/games", {
            "dates": upcoming_window(today or date.today()),
            "ordering": Ordering.RELEASED_ASC.value,
            "page_size": DEFAULT_PAGE_SIZE,
        })
        return [Game.from_api(g) for g in _results(data)]

    async def list_genres(self) -> list[Genre]:
        data = await self._fetch("/genres")
        return [Genre.from_api(g) for g in _results(data)]

    async def list_platforms(self) -> list[Platform]:
        data = await self._fetch("/platforms", {"page_size": FACET_PLATFORM_PAGE_SIZE})
        return [Platform.from_api(p) for p in _results(data)]


def _results(data: dict[str, Any]) -> list[dict[str, Any]]:
    results = data.get("results")
    if not isinstance(results, list):
        return []
    return [r for r in results if isinstance(r, dict)]
