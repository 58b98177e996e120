"""Browse screen: search, filters, discovery carousels and the infinite game list."""

from collections.abc import Callable
from typing import ClassVar

from typing_extensions import override
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Select, Static
from textual.worker import Worker, WorkerState

from rich.text import Text
import structlog

from src.models.game import Game
from src.models.query import GameQuery, Ordering, ScoreBand
from src.models.state import DiscoveryFeed, ListState, LoadPhase
from src.services.errors import AppError
from src.ui.formatting import game_row
from src.ui.widgets import GameCarousel, LoadMoreSentinel, ResultsScroll

from .base import BaseScreen

log = structlog.stdlib.get_logger()

PLATFORM_PICKER_LIMIT = 20


def results_heading(query: GameQuery, favorites_only: bool) -> str:
    """Title shown above the results table."""
    if favorites_only:
        return "♥ Your Favorites"
    search = query.search.strip()
    if search:
        return f'Results for "{search}"'
    if query.has_filters:
        return "Filtered Games"
    return "Popular Games"


def status_message(state: ListState, visible_count: int) -> str:
    """One-line status for the results list, empty when nothing needs saying."""
    if state.phase is LoadPhase.LOADING_INITIAL:
        return "Loading games..."
    if state.phase is LoadPhase.LOADING_MORE:
        return "Loading more games..."
    if state.phase is LoadPhase.ERRORED:
        detail = state.last_error.message if state.last_error else ""
        return f"Oops! Something went wrong. {detail}".strip()
    if visible_count == 0:
        if state.favorites_only:
            return "No favorites yet. Press f on a game to add it here."
        if state.phase is LoadPhase.IDLE:
            return ""
        return "No games found. Try adjusting your search or filters."
    if state.last_error is not None:
        return "Couldn't load more games. Press m to try again."
    if state.phase is LoadPhase.EXHAUSTED and not state.favorites_only:
        return "You've seen all the games!"
    if state.total_count is not None and not state.favorites_only:
        return f"Showing {visible_count} of {state.total_count:,}"
    return ""


def show_discovery(query: GameQuery, favorites_only: bool) -> bool:
    """Trending and upcoming strips only accompany the unfiltered list."""
    return query.is_default and not favorites_only


class BrowseScreen(BaseScreen):
    """Main catalog screen.

    This screen provides:
    - Search box and sort/score/genre/platform filters
    - Trending and upcoming carousels for the unfiltered view
    - Results table that loads the next page when scrolled to the end
    - Favorites toggle and favorites-only view
    """

    SCREEN_TITLE: ClassVar[str] = "Browse Games"
    SCREEN_NAME: ClassVar[str] = "browse"

    CSS: ClassVar[str] = """
    #browse-container {
        height: 100%;
        padding: 0 1;
    }

    #search-row {
        height: 3;
    }

    #search-input {
        width: 1fr;
    }

    #search-row Button {
        margin-left: 1;
    }

    #filter-bar {
        height: 3;
        display: none;
    }

    #filter-bar.visible {
        display: block;
    }

    #filter-bar Select {
        width: 26;
        margin-right: 1;
    }

    #filter-bar Button {
        margin-right: 1;
    }

    #active-filters {
        color: $text-muted;
        height: auto;
    }

    #results-heading {
        text-style: bold;
        color: $primary;
        margin-top: 1;
    }

    #discovery {
        height: auto;
    }

    #results {
        height: 1fr;
        border: solid $primary-darken-2;
    }

    #games-table {
        height: auto;
    }

    #list-status {
        height: auto;
        color: $text-muted;
        text-align: center;
    }

    #btn-retry {
        display: none;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=False),
        Binding("slash", "focus_search", "Search", show=True),
        Binding("f", "toggle_favorite", "Favorite", show=True),
        Binding("v", "toggle_favorites_view", "Favorites", show=True),
        Binding("m", "load_more", "More", show=True),
        Binding("r", "retry", "Retry", show=False),
    ]

    _rendered: tuple[Game, ...]
    _notified_error: AppError | None
    _unsubscribe_list: Callable[[], None] | None

    def __init__(self) -> None:
        super().__init__()
        self._rendered = ()
        self._notified_error = None
        self._unsubscribe_list = None

    @override
    def compose(self) -> ComposeResult:
        with Container(id="browse-container"):
            with Horizontal(id="search-row"):
                yield Input(placeholder="Search games...", id="search-input")
                yield Button("Search", id="btn-search", variant="primary")
                yield Button("♥ Favorites (0)", id="btn-favorites")
                yield Button("Filters", id="btn-filters")

            with Horizontal(id="filter-bar"):
                yield Select(
                    [(o.label, o) for o in Ordering],
                    value=Ordering.RELEVANCE,
                    allow_blank=False,
                    id="ordering-select",
                )
                yield Select(
                    [(b.label, b) for b in ScoreBand],
                    value=ScoreBand.ANY,
                    allow_blank=False,
                    id="score-select",
                )
                yield Button("Genres", id="btn-genres")
                yield Button("Platforms", id="btn-platforms")
                yield Button("Clear Filters", id="btn-clear", variant="warning")
            yield Static("", id="active-filters", markup=False)

            with Vertical(id="discovery"):
                yield GameCarousel("🔥 Trending Now", id="trending")
                yield GameCarousel("🕒 Coming Soon", show_release=True, id="upcoming")

            yield Static("", id="results-heading", markup=False)
            with ResultsScroll(id="results", threshold=2):
                yield DataTable(id="games-table")
                yield LoadMoreSentinel(id="sentinel")
            yield Static("", id="list-status", markup=False)
            yield Button("Try Again", id="btn-retry", variant="primary")

    @override
    async def on_mount(self) -> None:
        await super().on_mount()
        table = self.query_one("#games-table", DataTable)
        table.add_columns("♥", "Name", "Rating", "Metacritic", "Released", "Platforms")
        table.cursor_type = "row"

        app = self.catalog_app
        self._unsubscribe_list = app.list_loader.subscribe(self._on_list_state)
        self.watch(app, "app_state", self._on_app_state)

        self.query_one("#search-input", Input).value = app.initial_query.search
        self._render_list(app.list_loader.state)
        _ = self.run_worker(self._load_discovery(), name="discovery", group="discovery", exit_on_error=False)
        _ = self.run_worker(
            self._change_query(app.initial_query), name="list-query", group="list", exit_on_error=False
        )

    @override
    async def on_unmount(self) -> None:
        if self._unsubscribe_list is not None:
            self._unsubscribe_list()
            self._unsubscribe_list = None
        await super().on_unmount()

    @property
    def query_state(self) -> GameQuery:
        return self.catalog_app.list_loader.state.query

    # ---- loading -------------------------------------------------------

    async def _load_discovery(self) -> None:
        discovery = self.catalog_app.discovery
        feed = await discovery.load_feed()
        self._render_feed(feed)
        if not await discovery.load_facets():
            self.notify_warning("Could not load genres and platforms")
        self._render_active_filters()

    async def _change_query(self, query: GameQuery) -> None:
        """Apply a new query; a search or filter change also leaves favorites view."""
        loader = self.catalog_app.list_loader
        await loader.set_query(query)
        if loader.state.favorites_only:
            await loader.set_favorites_only(False)

    def _apply_query(self, query: GameQuery) -> None:
        if query == self.query_state and not self.catalog_app.list_loader.state.favorites_only:
            return
        log.info("Query changed", **query.to_params())
        _ = self.run_worker(self._change_query(query), name="list-query", group="list", exit_on_error=False)

    def _request_more(self) -> None:
        _ = self.run_worker(
            self.catalog_app.list_loader.load_more(), name="list-more", group="list", exit_on_error=False
        )

    # ---- rendering -----------------------------------------------------

    def _on_list_state(self, state: ListState) -> None:
        if not self.is_mounted:
            return
        self._render_list(state)

    def _on_app_state(self) -> None:
        count = self.catalog_app.app_state.favorites_count
        self.query_one("#btn-favorites", Button).label = f"♥ Favorites ({count})"

    def _render_list(self, state: ListState, force: bool = False) -> None:
        app = self.catalog_app
        visible = app.list_loader.visible_items(app.favorites.ids)
        self._render_rows(visible, force)

        self.query_one("#results-heading", Static).update(
            results_heading(state.query, state.favorites_only)
        )
        self.query_one("#list-status", Static).update(status_message(state, len(visible)))
        self.query_one("#btn-retry", Button).display = state.phase is LoadPhase.ERRORED
        self.query_one("#discovery", Vertical).display = show_discovery(state.query, state.favorites_only)
        self.query_one("#filter-bar", Horizontal).set_class(
            not state.query.is_default or state.favorites_only, "visible"
        )
        self.query_one("#btn-favorites", Button).variant = "error" if state.favorites_only else "default"
        self._render_active_filters()

        if state.last_error is not None and state.phase is LoadPhase.READY:
            if state.last_error is not self._notified_error:
                self._notified_error = state.last_error
                self.notify_warning(f"Couldn't load more games: {state.last_error.message}")

        self.query_one("#results", ResultsScroll).rearm(state)

    def _render_rows(self, visible: tuple[Game, ...], force: bool = False) -> None:
        """Append new rows, or rebuild the table when the list was replaced."""
        table = self.query_one("#games-table", DataTable)
        favorites = self.catalog_app.favorites
        start = len(self._rendered)
        if force or len(visible) < start or visible[:start] != self._rendered:
            table.clear()
            start = 0
        # Row keys are positions; RAWG can repeat a game across pages
        for position, game in enumerate(visible[start:], start=start):
            cells = game_row(game, favorites.is_favorite(game.id))
            _ = table.add_row(*(Text(cell) for cell in cells), key=str(position))
        self._rendered = visible

    def _render_feed(self, feed: DiscoveryFeed) -> None:
        trending = self.query_one("#trending", GameCarousel)
        upcoming = self.query_one("#upcoming", GameCarousel)
        if feed.error:
            trending.set_games((), "Couldn't load trending games")
            upcoming.set_games((), "Couldn't load upcoming games")
            return
        trending.set_games(feed.trending, "No trending games right now")
        upcoming.set_games(feed.upcoming, "No upcoming releases found")

    def _render_active_filters(self) -> None:
        query = self.query_state
        discovery = self.catalog_app.discovery
        parts: list[str] = []
        if query.genres:
            parts.append("Genres: " + ", ".join(discovery.genre_names(query.genres) or sorted(query.genres)))
        if query.platforms:
            parts.append(
                "Platforms: " + ", ".join(discovery.platform_names(query.platforms) or sorted(query.platforms))
            )
        if query.metacritic:
            parts.append(f"Score: {ScoreBand(query.metacritic).label}")
        self.query_one("#active-filters", Static).update(" · ".join(parts))

    def _selected_game(self) -> Game | None:
        table = self.query_one("#games-table", DataTable)
        if table.row_count == 0:
            return None
        position = table.cursor_row
        if 0 <= position < len(self._rendered):
            return self._rendered[position]
        return None

    def _open_details(self, game: Game) -> None:
        from .detail import GameDetailScreen

        log.info("Opening game details", game_id=game.id, name=game.name)
        _ = self.app.push_screen(GameDetailScreen(game), callback=self._on_details_closed)

    def _on_details_closed(self, _result: None = None) -> None:
        # Favorites may have changed inside the detail view
        self._render_list(self.catalog_app.list_loader.state, force=True)

    def _pick_facet(self, facet: str) -> None:
        from .facet_picker import FacetPickerScreen

        discovery = self.catalog_app.discovery
        query = self.query_state
        if facet == "genres":
            options = [(g.name, str(g.id)) for g in discovery.genres]
            selected = query.genres
        else:
            options = [(p.name, str(p.id)) for p in discovery.platforms[:PLATFORM_PICKER_LIMIT]]
            selected = query.platforms

        if not options:
            self.notify_warning(f"No {facet} available yet")
            return

        def apply(result: frozenset[str] | None) -> None:
            if result is None:
                return
            current = self.query_state
            if facet == "genres":
                self._apply_query(current.with_genres(result))
            else:
                self._apply_query(current.with_platforms(result))

        _ = self.app.push_screen(FacetPickerScreen(facet.title(), options, selected), callback=apply)

    # ---- events --------------------------------------------------------

    def on_results_scroll_sentinel_visible(self, event: ResultsScroll.SentinelVisible) -> None:
        event.stop()
        self._request_more()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "btn-search":
            search = self.query_one("#search-input", Input).value
            self._apply_query(self.query_state.with_search(search))
        elif button_id == "btn-favorites":
            await self.action_toggle_favorites_view()
        elif button_id == "btn-filters":
            bar = self.query_one("#filter-bar", Horizontal)
            bar.set_class(not bar.has_class("visible"), "visible")
        elif button_id == "btn-genres":
            self._pick_facet("genres")
        elif button_id == "btn-platforms":
            self._pick_facet("platforms")
        elif button_id == "btn-clear":
            self._reset_filter_widgets()
            self._apply_query(self.query_state.cleared())
        elif button_id == "btn-retry":
            await self.action_retry()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search-input":
            self._apply_query(self.query_state.with_search(event.value))

    def on_select_changed(self, event: Select.Changed) -> None:
        value = event.value
        if event.select.id == "ordering-select" and isinstance(value, Ordering):
            if value.value != self.query_state.ordering:
                self._apply_query(self.query_state.with_ordering(value))
        elif event.select.id == "score-select" and isinstance(value, ScoreBand):
            if value.value != self.query_state.metacritic:
                self._apply_query(self.query_state.with_metacritic(value))

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.row_key.value is None:
            return
        position = int(event.row_key.value)
        if 0 <= position < len(self._rendered):
            self._open_details(self._rendered[position])

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        """Report workers that died with an unexpected exception."""
        if event.state == WorkerState.ERROR and isinstance(event.worker.error, Exception):
            _ = self.handle_exception(event.worker.error, event.worker.name or "worker")

    def on_game_carousel_game_chosen(self, event: GameCarousel.GameChosen) -> None:
        self._open_details(event.game)

    def _reset_filter_widgets(self) -> None:
        self.query_one("#search-input", Input).value = ""
        with self.prevent(Select.Changed):
            self.query_one("#ordering-select", Select).value = Ordering.RELEVANCE
            self.query_one("#score-select", Select).value = ScoreBand.ANY

    # ---- actions -------------------------------------------------------

    def action_focus_search(self) -> None:
        _ = self.query_one("#search-input", Input).focus()

    def action_toggle_favorite(self) -> None:
        game = self._selected_game()
        if game is None:
            return
        now_favorite = self.catalog_app.toggle_favorite(game.id)
        if now_favorite is None:
            return
        self.notify_success(f"{'Added' if now_favorite else 'Removed'} {game.name}")
        self._render_list(self.catalog_app.list_loader.state, force=True)

    async def action_toggle_favorites_view(self) -> None:
        loader = self.catalog_app.list_loader
        enabled = not loader.state.favorites_only
        log.info("Toggling favorites view", enabled=enabled)
        _ = self.run_worker(
            loader.set_favorites_only(enabled), name="favorites-view", group="list", exit_on_error=False
        )

    def action_load_more(self) -> None:
        self._request_more()

    async def action_retry(self) -> None:
        loader = self.catalog_app.list_loader
        if loader.state.phase is LoadPhase.ERRORED:
            _ = self.run_worker(loader.retry(), name="list-retry", group="list", exit_on_error=False)
        elif loader.state.last_error is not None:
            self._request_more()
