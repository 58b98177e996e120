"""Modal detail view for one game: metadata, description, trailers and screenshots."""

from collections.abc import Callable
from typing import ClassVar

from typing_extensions import override
from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, LoadingIndicator, Static

import structlog

from src.models.game import Game
from src.models.state import DetailState
from src.ui.formatting import (
    format_release_date,
    metacritic_tier,
    platform_icon,
    strip_html_tags,
)

from .base import get_catalog_app

log = structlog.stdlib.get_logger()

MAX_TRAILERS = 4
MAX_SCREENSHOTS = 8
NO_DESCRIPTION = "No description available."

_TIER_COLORS: dict[str, str] = {
    "score-high": "green",
    "score-mid": "yellow",
    "score-low": "red",
}


def get_detail_display_info(game: Game, state: DetailState) -> dict[str, str]:
    """Collect the text shown in the detail view.

    Extended fields fall back to the list-level ``game`` until (or unless)
    the details request succeeds.

    Args:
        game: The selected game as it appeared in the list
        state: Current detail loader state

    Returns:
        Dictionary of display strings keyed by field
    """
    details = state.details
    source = details or game

    rating = f"★ {source.rating:.1f} / {source.rating_top or 5}"
    if source.ratings_count:
        rating += f" ({source.ratings_count:,} ratings)"

    if source.metacritic is not None:
        color = _TIER_COLORS[metacritic_tier(source.metacritic) or "score-low"]
        metacritic = f"[{color}]{source.metacritic}[/{color}]"
    else:
        metacritic = "N/A"

    if state.loading and details is None:
        description = "Loading..."
    elif details and details.description_raw:
        description = strip_html_tags(details.description_raw).strip() or NO_DESCRIPTION
    else:
        description = NO_DESCRIPTION

    return {
        "title": source.name,
        "released": format_release_date(source.released),
        "rating": rating,
        "metacritic": metacritic,
        "genres": ", ".join(g.name for g in source.genres) or "Unknown",
        "platforms": "  ".join(f"{platform_icon(p.name)} {p.name}" for p in source.platforms) or "Unknown",
        "developers": ", ".join(c.name for c in details.developers) if details else "",
        "publishers": ", ".join(c.name for c in details.publishers) if details else "",
        "esrb": details.esrb_rating.name if details and details.esrb_rating else "",
        "website": (details.website or "") if details else "",
        "metacritic_url": (details.metacritic_url or "") if details else "",
        "reddit_url": (details.reddit_url or "") if details else "",
        "description": description,
    }


def trailer_lines(state: DetailState) -> list[str]:
    return [
        f"▶ {trailer.name or 'Trailer'}: {trailer.best_url or trailer.preview or 'unavailable'}"
        for trailer in state.trailers[:MAX_TRAILERS]
    ]


def screenshot_lines(state: DetailState) -> list[str]:
    return [f"🖼 {shot.image}" for shot in state.screenshots[:MAX_SCREENSHOTS] if shot.image]


class GameDetailScreen(ModalScreen[None]):
    """Overlay with the selected game's details.

    Mounting starts the detail load; unmounting closes the selection so a
    response that arrives afterwards is dropped.
    """

    CSS: ClassVar[str] = """
    GameDetailScreen {
        align: center middle;
    }

    #detail-dialog {
        width: 90%;
        height: 90%;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    #detail-title {
        text-style: bold;
        color: $primary;
    }

    #detail-meta {
        height: auto;
        margin-bottom: 1;
    }

    #detail-buttons {
        height: 3;
    }

    #detail-buttons Button {
        margin-right: 1;
    }

    .section-title {
        text-style: bold;
        color: $secondary;
        margin-top: 1;
    }

    #detail-errors {
        color: $warning;
    }

    #detail-loading {
        height: 3;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "close", "Close", show=True),
        Binding("f", "toggle_favorite", "Favorite", show=True),
        Binding("w", "open_website", "Website", show=True),
    ]

    _unsubscribe: Callable[[], None] | None

    def __init__(self, game: Game) -> None:
        super().__init__()
        self.game: Game = game
        self._unsubscribe = None

    @override
    def compose(self) -> ComposeResult:
        with Vertical(id="detail-dialog"):
            yield Static(self.game.name, id="detail-title", markup=False)
            yield Static("", id="detail-meta")
            with Horizontal(id="detail-buttons"):
                yield Button("♡ Favorite", id="btn-detail-favorite")
                yield Button("Website", id="btn-website", disabled=True)
                yield Button("Close", id="btn-close")
            yield LoadingIndicator(id="detail-loading")
            with VerticalScroll(id="detail-body"):
                yield Static("", id="detail-errors", markup=False)
                yield Static("About", classes="section-title")
                yield Static("", id="detail-description", markup=False)
                yield Static("Trailers", classes="section-title", id="trailers-title")
                yield Static("", id="detail-trailers", markup=False)
                yield Static("Screenshots", classes="section-title", id="screenshots-title")
                yield Static("", id="detail-screenshots", markup=False)

    def on_mount(self) -> None:
        loader = get_catalog_app(self.app).detail_loader
        self._unsubscribe = loader.subscribe(self._on_detail_state)
        self._render_favorite()
        self._render_state(DetailState(game=self.game, loading=True))
        _ = self.run_worker(loader.select(self.game), name="detail", group="detail")

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        get_catalog_app(self.app).detail_loader.close()

    def _on_detail_state(self, state: DetailState) -> None:
        if state.game is None or state.game.id != self.game.id or not self.is_mounted:
            return
        self._render_state(state)

    def _render_state(self, state: DetailState) -> None:
        info = get_detail_display_info(self.game, state)

        meta = [
            f"Released: {info['released']}    Rating: {info['rating']}    Metacritic: {info['metacritic']}",
            f"Genres: {escape(info['genres'])}",
            f"Platforms: {escape(info['platforms'])}",
        ]
        for label, key in (("Developers", "developers"), ("Publishers", "publishers"), ("ESRB", "esrb")):
            if info[key]:
                meta.append(f"{label}: {escape(info[key])}")
        links = [info[key] for key in ("website", "metacritic_url", "reddit_url") if info[key]]
        if links:
            meta.append(f"Links: {escape('  '.join(links))}")

        self.query_one("#detail-title", Static).update(info["title"])
        self.query_one("#detail-meta", Static).update("\n".join(meta))
        self.query_one("#detail-description", Static).update(info["description"])
        self.query_one("#btn-website", Button).disabled = not info["website"]
        self.query_one("#detail-loading", LoadingIndicator).display = state.loading

        trailers = trailer_lines(state)
        self.query_one("#trailers-title", Static).display = bool(trailers)
        self.query_one("#detail-trailers", Static).update("\n".join(trailers))

        screenshots = screenshot_lines(state)
        self.query_one("#screenshots-title", Static).display = bool(screenshots)
        self.query_one("#detail-screenshots", Static).update("\n".join(screenshots))

        self.query_one("#detail-errors", Static).update(
            "\n".join(f"⚠ Couldn't load {error}" for error in state.errors)
        )

    def _render_favorite(self) -> None:
        is_favorite = get_catalog_app(self.app).favorites.is_favorite(self.game.id)
        button = self.query_one("#btn-detail-favorite", Button)
        button.label = "♥ Favorited" if is_favorite else "♡ Favorite"
        button.variant = "error" if is_favorite else "default"

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "btn-detail-favorite":
            self.action_toggle_favorite()
        elif event.button.id == "btn-website":
            self.action_open_website()
        elif event.button.id == "btn-close":
            self.action_close()

    def action_toggle_favorite(self) -> None:
        if get_catalog_app(self.app).toggle_favorite(self.game.id) is not None:
            self._render_favorite()

    def action_open_website(self) -> None:
        details = get_catalog_app(self.app).detail_loader.state.details
        if details and details.website:
            log.info("Opening game website", game_id=self.game.id, url=details.website)
            self.app.open_url(details.website)

    def action_close(self) -> None:
        self.dismiss(None)
