"""Main entry point for the PlayHub game catalog.

This module provides the application entry point with:
- Command-line argument parsing
- Application initialization and dependency injection
- Graceful shutdown handling
"""

import argparse
import asyncio
import signal
import sys
from dataclasses import replace
from pathlib import Path

import structlog
from textual.app import App

from src.models import AppConfig, GameQuery, LoadPhase
from src.services.config import ConfigurationService
from src.services.detail_loader import GameDetailLoader
from src.services.discovery import DiscoveryService
from src.services.favorites import FavoritesStore, FileSlotStorage
from src.services.http_client import HttpClientService
from src.services.list_loader import GameListLoader
from src.services.logging import setup_logging
from src.services.rawg_client import RawgApiService


log = structlog.stdlib.get_logger()

VERSION = "0.1.0"


class ApplicationContext:
    """Container for application services and state.

    This class manages the lifecycle of all application services
    and provides dependency injection for the UI components.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        api_key: str | None = None,
    ) -> None:
        """Initialize the application context.

        Args:
            config_path: Path to configuration file
            api_key: API key overriding the configured one
        """
        self._config_path: Path | None = config_path
        self._api_key: str | None = api_key

        # Services (initialized lazily)
        self._config_service: ConfigurationService | None = None
        self._http_client: HttpClientService | None = None
        self._rawg_api: RawgApiService | None = None
        self._favorites: FavoritesStore | None = None
        self._list_loader: GameListLoader | None = None
        self._detail_loader: GameDetailLoader | None = None
        self._discovery: DiscoveryService | None = None

        self._config: AppConfig | None = None
        self._shutdown_requested: bool = False
        self._running_app: App[None] | None = None
        self._app_loop: asyncio.AbstractEventLoop | None = None

    @property
    def config_service(self) -> ConfigurationService:
        if self._config_service is None:
            self._config_service = ConfigurationService(config_path=self._config_path)
        return self._config_service

    @property
    def config(self) -> AppConfig:
        """Get the current configuration, with the CLI API key applied."""
        if self._config is None:
            config = self.config_service.load_config()
            if self._api_key:
                config = replace(config, api_key=self._api_key)
            self._config = config
        return self._config

    @property
    def http_client(self) -> HttpClientService:
        if self._http_client is None:
            self._http_client = HttpClientService(
                timeout=self.config.request_timeout,
                max_retries=self.config.max_retries,
            )
        return self._http_client

    @property
    def rawg_api(self) -> RawgApiService:
        if self._rawg_api is None:
            self._rawg_api = RawgApiService(
                http_client=self.http_client,
                api_key=self.config.api_key,
                base_url=self.config.base_url,
                page_size=self.config.page_size,
            )
        return self._rawg_api

    @property
    def favorites(self) -> FavoritesStore:
        if self._favorites is None:
            self._favorites = FavoritesStore(FileSlotStorage(self.config.data_directory))
        return self._favorites

    @property
    def list_loader(self) -> GameListLoader:
        if self._list_loader is None:
            self._list_loader = GameListLoader(self.rawg_api, page_size=self.config.page_size)
        return self._list_loader

    @property
    def detail_loader(self) -> GameDetailLoader:
        if self._detail_loader is None:
            self._detail_loader = GameDetailLoader(self.rawg_api)
        return self._detail_loader

    @property
    def discovery(self) -> DiscoveryService:
        if self._discovery is None:
            self._discovery = DiscoveryService(self.rawg_api)
        return self._discovery

    def attach_app(self, app: App[None]) -> None:
        """Register the running TUI so a shutdown request can exit it."""
        self._running_app = app
        self._app_loop = asyncio.get_running_loop()

    def detach_app(self) -> None:
        self._running_app = None
        self._app_loop = None

    def request_shutdown(self) -> bool:
        """Request graceful shutdown of the application.

        Returns:
            True if a running TUI was asked to exit; False when there is
            none and the caller must stop the process itself
        """
        self._shutdown_requested = True
        log.info("Shutdown requested")
        if self._running_app is not None and self._app_loop is not None:
            # Safe from a signal handler: only wakes the loop
            self._app_loop.call_soon_threadsafe(self._running_app.exit)
            return True
        return False

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_requested

    async def cleanup(self) -> None:
        """Close open connections; outstanding fetches are superseded."""
        log.info("Cleaning up application resources")

        if self._detail_loader is not None:
            self._detail_loader.close()

        if self._http_client is not None:
            await self._http_client.close()

        log.info("Application cleanup complete")


class ParsedArgs:
    """Type-safe container for parsed command-line arguments."""

    def __init__(
        self,
        config: Path | None,
        log_level: str,
        log_dir: Path | None,
        api_key: str | None,
        no_tui: bool,
        search: str | None,
    ) -> None:
        self.config: Path | None = config
        self.log_level: str = log_level
        self.log_dir: Path | None = log_dir
        self.api_key: str | None = api_key
        self.no_tui: bool = no_tui
        self.search: str | None = search


def parse_arguments(argv: list[str] | None = None) -> ParsedArgs:
    """Parse command-line arguments.

    Args:
        argv: Argument list (defaults to ``sys.argv[1:]``)

    Returns:
        Parsed arguments container
    """
    parser = argparse.ArgumentParser(
        prog="playhub",
        description="Browse, search and favorite games from the RAWG database in your terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  playhub                               Start the TUI application
  playhub --api-key KEY                 Use an API key for this session
  playhub --no-tui --search zelda       Print the first page of results
  playhub --config ./my-config.json     Use custom config file
        """
    )

    _ = parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {VERSION}"
    )

    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: ~/.config/playhub/config.json)"
    )

    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level (default: INFO)"
    )

    _ = parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for log files (default: ./logs when running the TUI)"
    )

    _ = parser.add_argument(
        "--api-key",
        default=None,
        help="RAWG API key (overrides the config file and RAWG_API_KEY)"
    )

    _ = parser.add_argument(
        "--no-tui",
        action="store_true",
        help="Run without the TUI (for testing or scripting)"
    )

    _ = parser.add_argument(
        "--search",
        default=None,
        help="With --no-tui: print the first page of games matching this text"
    )

    ns = parser.parse_args(argv)

    config_val: Path | None = ns.config
    log_level_val: str = ns.log_level if ns.log_level else "INFO"
    log_dir_val: Path | None = ns.log_dir
    api_key_val: str | None = ns.api_key
    no_tui_val: bool = bool(ns.no_tui)
    search_val: str | None = ns.search

    return ParsedArgs(
        config=config_val,
        log_level=log_level_val,
        log_dir=log_dir_val,
        api_key=api_key_val,
        no_tui=no_tui_val,
        search=search_val,
    )


def setup_signal_handlers(context: ApplicationContext) -> None:
    """Set up signal handlers for graceful shutdown.

    SIGTERM exits a running TUI; without one it interrupts the process the
    same way Ctrl+C does.

    Args:
        context: Application context for shutdown coordination
    """
    def signal_handler(signum: int, frame: object) -> None:
        _ = frame  # Unused but required by signal handler signature
        signal_name = signal.Signals(signum).name
        log.info("Received signal", signal=signal_name)
        if not context.request_shutdown():
            raise KeyboardInterrupt

    _ = signal.signal(signal.SIGTERM, signal_handler)

    log.debug("Signal handlers registered")


async def run_headless(context: ApplicationContext, search: str | None) -> int:
    """Print the first page of a query without starting the TUI.

    Returns:
        Exit code (0 for success, 1 if the page could not be loaded)
    """
    print("PlayHub - Non-TUI mode")
    print(f"Configuration loaded from: {context.config_service.config_path}")
    print(f"Data directory: {context.config.data_directory}")

    if search is None:
        print("Use --search TEXT to list matching games, or --help for available options")
        return 0

    try:
        if not context.favorites.load():
            print("Warning: saved favorites could not be read", file=sys.stderr)
        loader = context.list_loader
        await loader.set_query(GameQuery(search=search))
        state = loader.state

        if state.phase is LoadPhase.ERRORED:
            message = state.last_error.message if state.last_error else "Unknown error"
            print(f"Error: {message}", file=sys.stderr)
            return 1

        if not state.items:
            print("No games found.")
            return 0

        for game in state.items:
            marker = "♥" if context.favorites.is_favorite(game.id) else " "
            released = game.released or "TBA"
            print(f"{marker} {game.id:>7}  {game.name}  ({released})  ★ {game.rating:.1f}")
        total = f" of {state.total_count}" if state.total_count is not None else ""
        print(f"Showing {len(state.items)}{total} games")
        return 0
    finally:
        await context.cleanup()


async def run_tui(context: ApplicationContext, search: str | None = None) -> int:
    """Run the TUI application.

    Args:
        context: Application context with initialized services
        search: Optional search text for the first list

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    from src.ui.app import PlayHubApp

    log.info("Starting TUI application")

    try:
        app = PlayHubApp(
            list_loader=context.list_loader,
            detail_loader=context.detail_loader,
            favorites=context.favorites,
            discovery=context.discovery,
            config=context.config,
            initial_query=GameQuery(search=search or ""),
        )

        context.attach_app(app)
        await app.run_async()

        log.info("TUI application exited normally")
        return 0

    except Exception as e:
        log.error("TUI application error", error=str(e), exc_info=True)
        return 1
    finally:
        context.detach_app()
        await context.cleanup()


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the application."""
    args = parse_arguments(argv)

    log_dir = args.log_dir
    if log_dir is None and not args.no_tui:
        log_dir = Path("logs")

    _ = setup_logging(
        log_level=args.log_level,
        log_dir=log_dir,
        tui_mode=not args.no_tui,
    )

    log.info(
        "Starting PlayHub",
        version=VERSION,
        log_level=args.log_level,
        config_path=str(args.config) if args.config else "default"
    )

    context = ApplicationContext(
        config_path=args.config,
        api_key=args.api_key,
    )

    setup_signal_handlers(context)

    try:
        if args.no_tui:
            log.info("Running in non-TUI mode", search=args.search)
            exit_code = asyncio.run(run_headless(context, args.search))
        else:
            exit_code = asyncio.run(run_tui(context, args.search))

    except KeyboardInterrupt:
        if context.shutdown_requested:
            log.info("Application stopped by signal")
        else:
            log.info("Application interrupted by user")
        exit_code = 130  # Standard exit code for SIGINT

    except Exception as e:
        log.error("Unhandled exception", error=str(e), exc_info=True)
        print(f"Fatal error: {e}", file=sys.stderr)
        exit_code = 1

    log.info("Application exiting", exit_code=exit_code)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
