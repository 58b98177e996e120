"""Main Textual application with screen management and reactive state."""

from dataclasses import dataclass, replace
from typing import ClassVar

from typing_extensions import override
from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.reactive import reactive
from textual.widgets import Footer, Header

import structlog

from src.models.config import AppConfig
from src.models.query import GameQuery
from src.services.detail_loader import GameDetailLoader
from src.services.discovery import DiscoveryService
from src.services.errors import StorageError
from src.services.favorites import FavoritesStore
from src.services.list_loader import GameListLoader


log = structlog.stdlib.get_logger()


@dataclass(frozen=True)
class AppState:
    """Application-wide values the screens render from."""

    current_config: AppConfig | None = None
    favorites_count: int = 0


class PlayHubApp(App[None]):
    """Terminal catalog for browsing and favoriting games.

    The app owns the long-lived services and hands them to screens; screens
    never construct services themselves.
    """

    CSS: ClassVar[str] = """
    Screen {
        background: $surface;
    }

    .title {
        text-align: center;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("q", "quit", "Quit", show=True, priority=True),
        Binding("escape", "go_back", "Back", show=True),
        Binding("?", "show_help", "Help", show=True),
    ]

    app_state: reactive[AppState] = reactive(AppState, init=False)

    _navigation_stack: list[str]

    def __init__(
        self,
        list_loader: GameListLoader,
        detail_loader: GameDetailLoader,
        favorites: FavoritesStore,
        discovery: DiscoveryService,
        config: AppConfig | None = None,
        initial_query: GameQuery | None = None,
    ) -> None:
        """Initialize the application with its services.

        Args:
            list_loader: Paginated game list
            detail_loader: Detail view loader
            favorites: Favorites store (loaded on mount)
            discovery: Trending/upcoming feed and filter facets
            config: Resolved configuration (file, environment and CLI overrides)
            initial_query: Query to load first (defaults to the popular list)
        """
        super().__init__()
        self.title = "PlayHub"  # type: ignore[assignment]
        self.sub_title = "Discover games from the RAWG database"  # type: ignore[assignment]
        self.list_loader = list_loader
        self.detail_loader = detail_loader
        self.favorites = favorites
        self.discovery = discovery
        self._config = config
        self.initial_query = initial_query or GameQuery()
        self._navigation_stack = []
        self.app_state = AppState()

        log.info("PlayHubApp initialized")

    @property
    def navigation_stack(self) -> list[str]:
        """Get the current navigation stack."""
        return self._navigation_stack.copy()

    @override
    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()

    async def on_mount(self) -> None:
        """Load favorites, then show the browse screen."""
        log.info("Application mounted")

        config = self._config
        if config is not None and not config.api_key:
            self.notify(
                "No RAWG API key configured. Set RAWG_API_KEY or pass --api-key.",
                severity="warning",
                timeout=10,
            )

        if not self.favorites.load():
            self.notify("Could not read saved favorites, starting with none", severity="warning")

        self.app_state = AppState(current_config=config, favorites_count=self.favorites.count)

        await self.push_screen_with_tracking("browse")

    async def push_screen_with_tracking(self, screen_name: str) -> None:
        """Push a registered screen and track it in the navigation stack."""
        from src.ui.screens import get_screen_by_name

        screen = get_screen_by_name(screen_name)
        if screen:
            self._navigation_stack.append(screen_name)
            await self.push_screen(screen)
            log.info("Screen pushed", screen=screen_name, stack_depth=len(self._navigation_stack))
        else:
            log.warning("Unknown screen requested", screen=screen_name)

    async def action_go_back(self) -> None:
        """Navigate back to the previous tracked screen."""
        if len(self._navigation_stack) > 1:
            current = self._navigation_stack.pop()
            log.info("Navigating back", from_screen=current, stack_depth=len(self._navigation_stack))
            _ = self.pop_screen()
        else:
            log.debug("Already at root screen, cannot go back")

    async def action_show_help(self) -> None:
        self.notify(
            "/: search  enter: details  f: favorite  v: favorites view  m: load more  r: retry  q: quit"
        )

    def toggle_favorite(self, game_id: int) -> bool | None:
        """Toggle a favorite and refresh the shared count.

        Returns:
            New membership, or None if it could not be saved
        """
        try:
            now_favorite = self.favorites.toggle(game_id)
        except StorageError as e:
            log.error("Failed to save favorites", error=e.message, details=e.technical_details)
            self.notify(e.message, severity="error")
            return None

        self.app_state = replace(self.app_state, favorites_count=self.favorites.count)
        return now_favorite
