"""On-demand loading of the detail view for one selected game."""

import asyncio
from collections.abc import Callable
from typing import Any, Protocol

import structlog

from ..models.game import Game, GameDetails, Screenshot, Trailer
from ..models.state import DetailState
from .errors import get_error_service

log = structlog.stdlib.get_logger()

DetailListener = Callable[[DetailState], None]


class DetailSource(Protocol):
    async def get_game(self, game_id: int) -> GameDetails: ...

    async def get_screenshots(self, game_id: int) -> list[Screenshot]: ...

    async def get_trailers(self, game_id: int) -> list[Trailer]: ...


class GameDetailLoader:
    """Fetches extended metadata, screenshots and trailers for a selection.

    The three requests run concurrently and are joined before the loading
    flag clears. Parts that failed are logged and left empty. A newer
    selection (or ``close()``) supersedes any group still in flight.
    """

    def __init__(self, source: DetailSource) -> None:
        self._source: DetailSource = source
        self._state: DetailState = DetailState()
        self._generation: int = 0
        self._listeners: list[DetailListener] = []

    @property
    def state(self) -> DetailState:
        return self._state

    def subscribe(self, listener: DetailListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: DetailState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    async def select(self, game: Game) -> bool:
        """Load details for ``game``.

        Returns:
            True if the results were applied, False if a newer selection won
        """
        self._generation += 1
        generation = self._generation
        self._set_state(DetailState(game=game, loading=True))
        log.info("Loading game details", game_id=game.id, name=game.name)

        results: list[Any] = await asyncio.gather(
            self._source.get_game(game.id),
            self._source.get_screenshots(game.id),
            self._source.get_trailers(game.id),
            return_exceptions=True,
        )

        if generation != self._generation:
            log.debug("Discarding details for superseded selection", game_id=game.id)
            return False

        details, screenshots, trailers = results
        errors: list[str] = []
        for part, result in zip(("details", "screenshots", "trailers"), results):
            if isinstance(result, BaseException):
                error = get_error_service().convert(
                    result if isinstance(result, Exception) else Exception(str(result)),
                    f"load_{part}",
                    "detail_loader",
                )
                log.warning("Failed to load game detail part", game_id=game.id, part=part, error=error.message)
                errors.append(f"{part}: {error.message}")

        self._set_state(DetailState(
            game=game,
            details=details if isinstance(details, GameDetails) else None,
            screenshots=tuple(screenshots) if isinstance(screenshots, list) else (),
            trailers=tuple(trailers) if isinstance(trailers, list) else (),
            loading=False,
            errors=tuple(errors),
        ))
        log.info(
            "Game details loaded",
            game_id=game.id,
            screenshots=len(self._state.screenshots),
            trailers=len(self._state.trailers),
            failed_parts=len(errors),
        )
        return True

    def close(self) -> None:
        """Clear the selection; late responses for it are ignored."""
        self._generation += 1
        self._set_state(DetailState())
        log.debug("Detail view closed")
