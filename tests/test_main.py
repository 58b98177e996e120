"""Tests for command-line parsing and the headless entry point."""

import asyncio
import os
import signal
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.main import ApplicationContext, parse_arguments, run_headless, setup_signal_handlers
from src.models.game import Game
from src.models.state import Page
from src.services.config import API_KEY_ENV
from src.services.errors import NetworkError
from src.services.favorites import FAVORITES_SLOT, FavoritesStore, FileSlotStorage, MemorySlotStorage
from src.services.list_loader import GameListLoader


class TestParseArguments:
    def test_defaults(self) -> None:
        args = parse_arguments([])
        assert args.config is None
        assert args.log_level == "INFO"
        assert args.log_dir is None
        assert args.api_key is None
        assert args.no_tui is False
        assert args.search is None

    def test_all_options(self) -> None:
        args = parse_arguments([
            "--config", "cfg.json",
            "--log-level", "DEBUG",
            "--log-dir", "/tmp/logs",
            "--api-key", "abc",
            "--no-tui",
            "--search", "zelda",
        ])
        assert args.config == Path("cfg.json")
        assert args.log_level == "DEBUG"
        assert args.log_dir == Path("/tmp/logs")
        assert args.api_key == "abc"
        assert args.no_tui is True
        assert args.search == "zelda"

    def test_unknown_log_level_is_rejected(self) -> None:
        with pytest.raises(SystemExit):
            _ = parse_arguments(["--log-level", "LOUD"])


def make_context(tmp_path: Path, source: AsyncMock, api_key: str | None = None) -> ApplicationContext:
    context = ApplicationContext(config_path=tmp_path / "config.json", api_key=api_key)
    context._list_loader = GameListLoader(source)
    context._favorites = FavoritesStore(MemorySlotStorage({FAVORITES_SLOT: "[2]"}))
    return context


class TestApplicationContext:
    def test_cli_key_overrides_configuration(self, tmp_path: Path) -> None:
        context = ApplicationContext(config_path=tmp_path / "config.json", api_key="cli-key")
        with patch.dict(os.environ, {API_KEY_ENV: "env-key"}):
            assert context.config.api_key == "cli-key"

    def test_services_are_shared(self, tmp_path: Path) -> None:
        context = ApplicationContext(config_path=tmp_path / "config.json")
        with patch.dict(os.environ, {API_KEY_ENV: ""}):
            assert context.rawg_api is context.rawg_api
            assert context.list_loader is context.list_loader


class TestRunHeadless:
    @pytest.mark.asyncio
    async def test_without_search(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        context = make_context(tmp_path, AsyncMock())
        with patch.dict(os.environ, {API_KEY_ENV: ""}):
            assert await run_headless(context, None) == 0
        assert "--search" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_search_prints_first_page(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        source = AsyncMock()
        source.list_games.return_value = Page(
            items=(Game(id=1, name="Zelda", rating=4.5, released="2017-03-03"), Game(id=2, name="Zelda II")),
            has_next=True,
            count=80,
        )
        context = make_context(tmp_path, source)

        with patch.dict(os.environ, {API_KEY_ENV: ""}):
            assert await run_headless(context, "zelda") == 0

        out = capsys.readouterr().out
        assert "Zelda  (2017-03-03)" in out
        assert any(line.startswith("♥") and "Zelda II  (TBA)" in line for line in out.splitlines())
        assert "Showing 2 of 80 games" in out

    @pytest.mark.asyncio
    async def test_failed_search_exits_nonzero(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        source = AsyncMock()
        source.list_games.side_effect = NetworkError("Connection failed")
        context = make_context(tmp_path, source)

        with patch.dict(os.environ, {API_KEY_ENV: ""}):
            assert await run_headless(context, "zelda") == 1

        assert "Connection failed" in capsys.readouterr().err


@pytest.fixture
def restore_sigterm() -> Iterator[None]:
    previous = signal.getsignal(signal.SIGTERM)
    yield
    _ = signal.signal(signal.SIGTERM, previous)


class TestShutdown:
    """Tests for SIGTERM handling."""

    def test_sigterm_without_tui_interrupts(self, tmp_path: Path, restore_sigterm: None) -> None:
        context = ApplicationContext(config_path=tmp_path / "config.json")
        setup_signal_handlers(context)

        with pytest.raises(KeyboardInterrupt):
            signal.raise_signal(signal.SIGTERM)

        assert context.shutdown_requested

    @pytest.mark.asyncio
    async def test_sigterm_exits_running_tui(self, tmp_path: Path, restore_sigterm: None) -> None:
        context = ApplicationContext(config_path=tmp_path / "config.json")
        app = MagicMock()
        context.attach_app(app)
        setup_signal_handlers(context)

        signal.raise_signal(signal.SIGTERM)
        await asyncio.sleep(0)

        app.exit.assert_called_once_with()
        assert context.shutdown_requested

    @pytest.mark.asyncio
    async def test_detached_context_does_not_exit_app(self, tmp_path: Path) -> None:
        context = ApplicationContext(config_path=tmp_path / "config.json")
        app = MagicMock()
        context.attach_app(app)
        context.detach_app()

        assert context.request_shutdown() is False
        await asyncio.sleep(0)
        app.exit.assert_not_called()


class TestHeadlessFavorites:
    @pytest.mark.asyncio
    async def test_unreadable_favorites_are_not_fatal(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        _ = (data_dir / f"{FAVORITES_SLOT}.json").write_bytes(b"[1, 2\xff\xfe]")
        source = AsyncMock()
        source.list_games.return_value = Page(items=(Game(id=1, name="Zelda"),), has_next=False, count=1)
        context = ApplicationContext(config_path=tmp_path / "config.json")
        context._list_loader = GameListLoader(source)
        context._favorites = FavoritesStore(FileSlotStorage(data_dir))

        with patch.dict(os.environ, {API_KEY_ENV: ""}):
            assert await run_headless(context, "zelda") == 0

        captured = capsys.readouterr()
        assert "saved favorites could not be read" in captured.err
        assert "Zelda" in captured.out
