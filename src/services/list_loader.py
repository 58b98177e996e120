"""Paginated game list loading with infinite-scroll semantics.

The loader owns a single ``ListState`` and walks it through the phases

    IDLE -> LOADING_INITIAL -> READY <-> LOADING_MORE -> EXHAUSTED
                            \\-> ERRORED (retry re-enters LOADING_INITIAL)

Every query change bumps a generation counter. A fetch remembers the
generation it was issued under and its result is dropped on arrival if the
counter has moved on, so a slow response for an old query can never leak
into the list of a newer one.
"""

from collections.abc import Callable, Container
from dataclasses import replace
from typing import Protocol

import structlog

from ..models.config import DEFAULT_PAGE_SIZE
from ..models.game import Game
from ..models.query import GameQuery
from ..models.state import ListState, LoadPhase, Page
from .errors import AppError, get_error_service

log = structlog.stdlib.get_logger()

ListListener = Callable[[ListState], None]


class GameSource(Protocol):
    """Anything that can fetch a page of games (``RawgApiService`` in production)."""

    async def list_games(self, query: GameQuery, page: int = 1, page_size: int | None = None) -> Page: ...


class GameListLoader:
    """Pagination state machine for the game list.

    At most one fetch is outstanding per query: ``load_more()`` is a no-op
    unless the list is ``READY`` with more pages, and a new query supersedes
    whatever was in flight.
    """

    def __init__(self, source: GameSource, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        """Initialize the list loader.

        Args:
            source: Fetch collaborator providing ``list_games``
            page_size: Items requested per page
        """
        self._source: GameSource = source
        self.page_size: int = page_size
        self._state: ListState = ListState()
        self._generation: int = 0
        self._listeners: list[ListListener] = []

    @property
    def state(self) -> ListState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: ListListener) -> Callable[[], None]:
        """Register a callback invoked with every new state.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: ListState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            log.debug(
                "Discarding response for superseded query",
                issued_generation=generation,
                current_generation=self._generation,
            )
            return True
        return False

    async def set_query(self, query: GameQuery) -> None:
        """Switch to a new query: reset the list and load its first page.

        In favorites-only mode the list is reset but nothing is fetched.
        """
        self._generation += 1

        if self._state.favorites_only:
            log.info("Query changed while showing favorites, fetch deferred")
            self._set_state(ListState(query=query, phase=LoadPhase.IDLE, favorites_only=True))
            return

        self._set_state(ListState(query=query, phase=LoadPhase.LOADING_INITIAL))
        await self._load_first_page(self._generation)

    async def retry(self) -> None:
        """Reload the first page of the current query."""
        log.info("Retrying game list", phase=self._state.phase.value)
        await self.set_query(self._state.query)

    async def load_more(self) -> bool:
        """Fetch the next page if the list is ready for it.

        Returns:
            True if a page was appended, False if the call was a no-op,
            the fetch failed, or its result was superseded
        """
        state = self._state
        if not state.is_ready_for_more:
            log.debug(
                "Load more ignored",
                phase=state.phase.value,
                has_more=state.has_more,
                favorites_only=state.favorites_only,
            )
            return False

        generation = self._generation
        next_page = state.page + 1
        self._set_state(replace(state, phase=LoadPhase.LOADING_MORE))
        log.info("Loading more games", page=next_page, loaded=len(state.items))

        try:
            page = await self._source.list_games(state.query, next_page, self.page_size)
        except Exception as e:
            if self._is_stale(generation):
                return False
            error = self._to_app_error(e, "load_more")
            # Existing items stay usable; the next trigger may try again
            log.warning("Failed to load more games", page=next_page, error=error.message)
            self._set_state(replace(self._state, phase=LoadPhase.READY, last_error=error))
            return False

        if self._is_stale(generation):
            return False

        current = self._state
        self._set_state(replace(
            current,
            items=current.items + page.items,
            page=next_page,
            has_more=page.has_next,
            phase=LoadPhase.READY if page.has_next else LoadPhase.EXHAUSTED,
            last_error=None,
            total_count=page.count if page.count is not None else current.total_count,
        ))
        log.info(
            "Games page appended",
            page=next_page,
            received=len(page.items),
            total_loaded=len(self._state.items),
            has_more=page.has_next,
        )
        return True

    async def set_favorites_only(self, enabled: bool) -> None:
        """Turn the favorites-only display filter on or off.

        While enabled no fetch is started. Turning it off resumes loading if
        the current query has not been fetched yet.
        """
        if enabled == self._state.favorites_only:
            return

        self._set_state(replace(self._state, favorites_only=enabled))
        log.info("Favorites-only mode changed", enabled=enabled)

        if not enabled and self._state.phase is LoadPhase.IDLE:
            self._generation += 1
            self._set_state(replace(self._state, phase=LoadPhase.LOADING_INITIAL))
            await self._load_first_page(self._generation)

    def visible_items(self, favorites: Container[int]) -> tuple[Game, ...]:
        """Items to display: everything loaded, or only favorites in favorites-only mode.

        Favorites are never fetched by id, so favorites-only mode shows
        nothing until matching games have been loaded by a regular query.
        """
        items = self._state.items
        if not self._state.favorites_only:
            return items
        return tuple(game for game in items if game.id in favorites)

    async def _load_first_page(self, generation: int) -> None:
        query = self._state.query
        log.info("Loading games", **query.to_params())

        try:
            page = await self._source.list_games(query, 1, self.page_size)
        except Exception as e:
            if self._is_stale(generation):
                return
            error = self._to_app_error(e, "load_games")
            log.error("Failed to load games", error=error.message, details=error.technical_details)
            self._set_state(replace(
                self._state,
                phase=LoadPhase.ERRORED,
                items=(),
                last_error=error,
            ))
            return

        if self._is_stale(generation):
            return

        self._set_state(replace(
            self._state,
            items=page.items,
            page=1,
            has_more=page.has_next,
            phase=LoadPhase.READY if page.has_next else LoadPhase.EXHAUSTED,
            last_error=None,
            total_count=page.count,
        ))
        log.info("Games loaded", received=len(page.items), has_more=page.has_next, total=page.count)

    @staticmethod
    def _to_app_error(error: Exception, operation: str) -> AppError:
        return get_error_service().convert(error, operation, "list_loader")
