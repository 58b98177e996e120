"""Screen components for the TUI application."""

from .base import BaseScreen, get_catalog_app
from .browse import BrowseScreen
from .detail import GameDetailScreen
from .facet_picker import FacetPickerScreen

# Screen registry for navigation; modal screens take arguments and are pushed directly
_SCREEN_REGISTRY: dict[str, type[BaseScreen]] = {
    "browse": BrowseScreen,
}


def get_screen_by_name(name: str) -> BaseScreen | None:
    """Get a screen instance by its registered name.

    Args:
        name: The registered name of the screen

    Returns:
        A new instance of the screen, or None if not found
    """
    screen_class = _SCREEN_REGISTRY.get(name)
    if screen_class:
        return screen_class()
    return None


def register_screen(name: str, screen_class: type[BaseScreen]) -> None:
    _SCREEN_REGISTRY[name] = screen_class


def get_registered_screens() -> list[str]:
    return list(_SCREEN_REGISTRY.keys())


__all__ = [
    "BaseScreen",
    "BrowseScreen",
    "FacetPickerScreen",
    "GameDetailScreen",
    "get_catalog_app",
    "get_registered_screens",
    "get_screen_by_name",
    "register_screen",
]
