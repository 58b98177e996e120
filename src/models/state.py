"""State models for the list loader, detail loader and discovery feed."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from .game import Game, GameDetails, Screenshot, Trailer
from .query import GameQuery

if TYPE_CHECKING:
    from src.services.errors import AppError


class LoadPhase(Enum):
    """Phases of the paginated list."""
    IDLE = "idle"
    LOADING_INITIAL = "loading_initial"
    READY = "ready"
    LOADING_MORE = "loading_more"
    EXHAUSTED = "exhausted"
    ERRORED = "errored"


@dataclass(frozen=True)
class Page:
    """One fetch worth of results plus the continuation flag."""
    items: tuple[Game, ...]
    has_next: bool
    count: int | None = None  # Total reported by the server


@dataclass(frozen=True)
class ListState:
    """Snapshot of the paginated game list."""
    query: GameQuery = field(default_factory=GameQuery)
    phase: LoadPhase = LoadPhase.IDLE
    items: tuple[Game, ...] = ()
    page: int = 1
    has_more: bool = True
    last_error: "AppError | None" = None
    favorites_only: bool = False
    total_count: int | None = None

    @property
    def loading_initial(self) -> bool:
        return self.phase is LoadPhase.LOADING_INITIAL

    @property
    def loading_more(self) -> bool:
        return self.phase is LoadPhase.LOADING_MORE

    @property
    def is_loading(self) -> bool:
        return self.loading_initial or self.loading_more

    @property
    def is_ready_for_more(self) -> bool:
        """Ready for the next trigger: idle between fetches with pages left."""
        return self.phase is LoadPhase.READY and self.has_more and not self.favorites_only


@dataclass(frozen=True)
class DetailState:
    """Detail view contents for the selected game."""
    game: Game | None = None
    details: GameDetails | None = None
    screenshots: tuple[Screenshot, ...] = ()
    trailers: tuple[Trailer, ...] = ()
    loading: bool = False
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class DiscoveryFeed:
    """Trending and upcoming games shown on the landing view."""
    trending: tuple[Game, ...] = ()
    upcoming: tuple[Game, ...] = ()
    loading: bool = False
    error: str | None = None
