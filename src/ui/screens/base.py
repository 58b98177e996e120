"""Base screen class with common functionality for all screens."""

from typing import TYPE_CHECKING, ClassVar

from textual.app import App
from textual.binding import Binding
from textual.screen import Screen

import structlog

from src.services.errors import (
    ErrorSeverity,
    UserFriendlyError,
    get_error_service,
    handle_error,
)

if TYPE_CHECKING:
    from src.ui.app import PlayHubApp

log = structlog.stdlib.get_logger()


def get_catalog_app(app: App[None]) -> "PlayHubApp":
    """Return ``app`` as a PlayHubApp.

    Raises:
        RuntimeError: If the screen is running under some other app
    """
    from src.ui.app import PlayHubApp

    if isinstance(app, PlayHubApp):
        return app
    raise RuntimeError("Screen is not attached to a PlayHubApp")


class BaseScreen(Screen[None]):
    """Base class for full-size application screens.

    This class provides:
    - Common key bindings (escape for back navigation)
    - Access to the parent application and its services
    - Notification and error display helpers
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
    ]

    SCREEN_TITLE: ClassVar[str] = "Screen"
    SCREEN_NAME: ClassVar[str] = "base"

    _is_active: bool

    def __init__(self, name: str | None = None) -> None:
        super().__init__(name=name or self.SCREEN_NAME)
        self._is_active = False

    @property
    def catalog_app(self) -> "PlayHubApp":
        return get_catalog_app(self.app)

    @property
    def screen_is_active(self) -> bool:
        return self._is_active

    async def on_mount(self) -> None:
        log.info("Screen mounted", screen=self.SCREEN_NAME, title=self.SCREEN_TITLE)
        self._is_active = True

    async def on_unmount(self) -> None:
        log.info("Screen unmounted", screen=self.SCREEN_NAME)
        self._is_active = False

    def on_screen_resume(self) -> None:
        log.debug("Screen resumed", screen=self.SCREEN_NAME)
        self._is_active = True

    def on_screen_suspend(self) -> None:
        log.debug("Screen suspended", screen=self.SCREEN_NAME)
        self._is_active = False

    async def action_go_back(self) -> None:
        await self.catalog_app.action_go_back()

    def notify_error(self, message: str) -> None:
        self.notify(message, severity="error")
        log.error("User notification", message=message, screen=self.SCREEN_NAME)

    def notify_success(self, message: str) -> None:
        self.notify(message, severity="information")
        log.info("User notification", message=message, screen=self.SCREEN_NAME)

    def notify_warning(self, message: str) -> None:
        self.notify(message, severity="warning")
        log.warning("User notification", message=message, screen=self.SCREEN_NAME)

    def handle_exception(
        self,
        error: Exception,
        operation: str,
        context: dict[str, str | int | float | bool] | None = None,
    ) -> UserFriendlyError:
        """Log an exception and show its user-friendly message.

        Args:
            error: The exception that occurred
            operation: Description of the operation that failed
            context: Additional context information

        Returns:
            UserFriendlyError with message and suggested actions
        """
        user_error = handle_error(
            error=error,
            operation=operation,
            component=self.SCREEN_NAME,
            context=context,
        )

        message = get_error_service().create_user_message(user_error, include_suggestions=False)
        if user_error.severity == ErrorSeverity.WARNING:
            self.notify_warning(message)
        else:
            self.notify_error(message)

        return user_error
