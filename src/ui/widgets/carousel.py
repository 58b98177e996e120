"""Wrap-around carousel for the trending and upcoming game strips."""

from typing import ClassVar

from typing_extensions import override
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Button, Static

from src.models.game import Game
from src.ui.formatting import format_rating, format_release_date

VISIBLE_CARDS = 3


def next_index(current: int, length: int, visible: int = VISIBLE_CARDS) -> int:
    """Advance one card, wrapping to the start once the last window is shown."""
    return 0 if current + 1 >= length - (visible - 1) else current + 1


def prev_index(current: int, length: int, visible: int = VISIBLE_CARDS) -> int:
    """Step back one card, wrapping from the start to the last full window."""
    return max(0, length - visible) if current == 0 else current - 1


class GameCarousel(Widget):
    """Horizontal strip showing three games at a time."""

    DEFAULT_CSS: ClassVar[str] = """
    GameCarousel {
        height: auto;
        margin-bottom: 1;
    }

    GameCarousel .carousel-header {
        height: 3;
    }

    GameCarousel .carousel-title {
        width: 1fr;
        text-style: bold;
        color: $secondary;
        padding: 1 0 0 0;
    }

    GameCarousel .carousel-cards {
        height: auto;
    }

    GameCarousel .carousel-card {
        width: 1fr;
        height: 4;
        margin: 0 1 0 0;
    }

    GameCarousel .carousel-empty {
        color: $text-muted;
    }
    """

    index: reactive[int] = reactive(0, init=False)

    class GameChosen(Message):
        """A card in the carousel was pressed."""

        def __init__(self, game: Game) -> None:
            super().__init__()
            self.game = game

    def __init__(
        self,
        title: str,
        show_release: bool = False,
        id: str | None = None,
    ) -> None:
        super().__init__(id=id)
        self._title: str = title
        self._show_release: bool = show_release
        self._games: tuple[Game, ...] = ()

    @property
    def games(self) -> tuple[Game, ...]:
        return self._games

    @override
    def compose(self) -> ComposeResult:
        with Horizontal(classes="carousel-header"):
            yield Static(self._title, classes="carousel-title")
            yield Button("◀", id="carousel-prev")
            yield Button("▶", id="carousel-next")
        with Horizontal(classes="carousel-cards"):
            for slot in range(VISIBLE_CARDS):
                yield Button("", id=f"card-{slot}", classes="carousel-card")
        yield Static("", classes="carousel-empty")

    def on_mount(self) -> None:
        self._render_cards()

    def set_games(self, games: tuple[Game, ...], empty_message: str = "Nothing to show") -> None:
        self._games = games
        self.index = 0
        self.query_one(".carousel-empty", Static).update("" if games else empty_message)
        self._render_cards()

    def watch_index(self) -> None:
        self._render_cards()

    def _card_label(self, game: Game) -> str:
        detail = format_release_date(game.released, long=False) if self._show_release else format_rating(game)
        return f"{game.name[:28]}\n{detail}"

    def _render_cards(self) -> None:
        for slot in range(VISIBLE_CARDS):
            card = self.query_one(f"#card-{slot}", Button)
            position = self.index + slot
            if position < len(self._games):
                card.label = Text(self._card_label(self._games[position]))
                card.display = True
            else:
                card.display = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        button_id = event.button.id or ""
        if button_id == "carousel-next":
            self.index = next_index(self.index, len(self._games))
        elif button_id == "carousel-prev":
            self.index = prev_index(self.index, len(self._games))
        elif button_id.startswith("card-"):
            position = self.index + int(button_id.removeprefix("card-"))
            if position < len(self._games):
                self.post_message(self.GameChosen(self._games[position]))
