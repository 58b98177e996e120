"""User interface components using Textual framework."""

from .app import AppState, PlayHubApp
from .screens import (
    BaseScreen,
    BrowseScreen,
    get_registered_screens,
    get_screen_by_name,
    register_screen,
)

__all__ = [
    "AppState",
    "BaseScreen",
    "BrowseScreen",
    "PlayHubApp",
    "get_registered_screens",
    "get_screen_by_name",
    "register_screen",
]
