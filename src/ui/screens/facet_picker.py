"""Modal multi-select for genre and platform filters."""

from typing import ClassVar

from typing_extensions import override
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, SelectionList, Static


class FacetPickerScreen(ModalScreen[frozenset[str] | None]):
    """Pick any number of facet ids; dismisses with the selection, or None on cancel."""

    CSS: ClassVar[str] = """
    FacetPickerScreen {
        align: center middle;
    }

    #picker-dialog {
        width: 60;
        height: 80%;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    #picker-title {
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }

    #picker-list {
        height: 1fr;
    }

    #picker-buttons {
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #picker-buttons Button {
        margin: 0 1;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "cancel", "Cancel", show=True),
    ]

    def __init__(
        self,
        title: str,
        options: list[tuple[str, str]],
        selected: frozenset[str],
    ) -> None:
        """Initialize the picker.

        Args:
            title: Facet name shown in the dialog header
            options: (label, id) pairs
            selected: Ids that start checked
        """
        super().__init__()
        self._title: str = title
        self._options: list[tuple[str, str]] = options
        self._selected: frozenset[str] = selected

    @override
    def compose(self) -> ComposeResult:
        with Vertical(id="picker-dialog"):
            yield Static(f"Filter by {self._title}", id="picker-title")
            yield SelectionList[str](
                *[(label, value, value in self._selected) for label, value in self._options],
                id="picker-list",
            )
            with Horizontal(id="picker-buttons"):
                yield Button("Apply", id="btn-apply", variant="primary")
                yield Button("Clear", id="btn-clear-facet", variant="warning")
                yield Button("Cancel", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "btn-apply":
            selection = self.query_one("#picker-list", SelectionList)
            self.dismiss(frozenset(str(value) for value in selection.selected))
        elif event.button.id == "btn-clear-facet":
            self.dismiss(frozenset())
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
