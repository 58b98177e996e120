"""Tests for the display helpers behind the catalog screens."""

from dataclasses import replace

import pytest
from hypothesis import given, strategies as st

from src.models.game import (
    Company,
    EsrbRating,
    Game,
    GameDetails,
    GenreRef,
    PlatformRef,
    Screenshot,
    Trailer,
)
from src.models.query import GameQuery, Ordering
from src.models.state import DetailState, ListState, LoadPhase
from src.services.errors import NetworkError
from src.ui.formatting import (
    format_rating,
    format_release_date,
    game_row,
    metacritic_tier,
    platform_icon,
    strip_html_tags,
)
from src.ui.screens.browse import results_heading, show_discovery, status_message
from src.ui.screens.detail import (
    MAX_SCREENSHOTS,
    MAX_TRAILERS,
    NO_DESCRIPTION,
    get_detail_display_info,
    screenshot_lines,
    trailer_lines,
)
from src.ui.widgets.carousel import next_index, prev_index


def platforms(*names: str) -> tuple[PlatformRef, ...]:
    return tuple(PlatformRef(id=i, name=name) for i, name in enumerate(names, start=1))


GTA = Game(
    id=3498,
    name="Grand Theft Auto V",
    rating=4.47,
    rating_top=5,
    ratings_count=6543,
    metacritic=92,
    released="2013-09-17",
    platforms=platforms("PC", "PlayStation 5", "Xbox One", "iOS"),
    genres=(GenreRef(id=4, name="Action"), GenreRef(id=3, name="Adventure")),
)


class TestFormatting:
    """Tests for the shared formatting helpers."""

    def test_release_date_long_and_short(self) -> None:
        assert format_release_date("2024-03-05") == "March 5, 2024"
        assert format_release_date("2024-03-05", long=False) == "Mar 5, 2024"

    def test_missing_release_date_is_tba(self) -> None:
        assert format_release_date(None) == "TBA"
        assert format_release_date("") == "TBA"

    def test_unparseable_release_date_is_shown_as_given(self) -> None:
        assert format_release_date("someday") == "someday"

    def test_strip_html_tags(self) -> None:
        assert strip_html_tags("<p>Open <b>world</b></p><br/>") == "Open world"

    @pytest.mark.parametrize(
        ("name", "icon"),
        [
            ("PC", "🖥"),
            ("macOS", "🖥"),
            ("Linux", "🖥"),
            ("Android", "📱"),
            ("iOS", "📱"),
            ("PlayStation 5", "🎮"),
            ("Nintendo Switch", "🎮"),
        ],
    )
    def test_platform_icon(self, name: str, icon: str) -> None:
        assert platform_icon(name) == icon

    @pytest.mark.parametrize(
        ("score", "tier"),
        [(None, None), (100, "score-high"), (75, "score-high"), (74, "score-mid"), (50, "score-mid"), (49, "score-low")],
    )
    def test_metacritic_tier(self, score: int | None, tier: str | None) -> None:
        assert metacritic_tier(score) == tier

    def test_unrated_game_has_blank_rating(self) -> None:
        assert format_rating(Game(id=1, name="New")) == ""
        assert format_rating(GTA) == "★ 4.5"

    def test_game_row(self) -> None:
        row = game_row(GTA, is_favorite=True)
        assert row == ("♥", "Grand Theft Auto V", "★ 4.5", "92", "Sep 17, 2013", "PC, PlayStation 5, Xbox One +1")

    def test_game_row_with_missing_fields(self) -> None:
        row = game_row(Game(id=2, name="x" * 60), is_favorite=False)
        assert row == ("", "x" * 48, "", "", "TBA", "")


class TestCarouselIndex:
    """Tests for carousel wrap-around."""

    def test_next_wraps_after_last_full_window(self) -> None:
        assert next_index(0, 10) == 1
        assert next_index(6, 10) == 7
        assert next_index(7, 10) == 0

    def test_prev_wraps_to_last_full_window(self) -> None:
        assert prev_index(0, 10) == 7
        assert prev_index(3, 10) == 2

    def test_short_strip_stays_put(self) -> None:
        assert next_index(0, 2) == 0
        assert prev_index(0, 2) == 0

    @given(length=st.integers(min_value=3, max_value=30), steps=st.integers(min_value=0, max_value=100))
    def test_index_always_leaves_a_full_window(self, length: int, steps: int) -> None:
        index = 0
        for _ in range(steps):
            index = next_index(index, length)
            assert 0 <= index <= length - 3
        for _ in range(steps):
            index = prev_index(index, length)
            assert 0 <= index <= length - 3


class TestBrowseHelpers:
    """Tests for the browse screen's heading and status lines."""

    def test_headings(self) -> None:
        assert results_heading(GameQuery(), favorites_only=False) == "Popular Games"
        assert results_heading(GameQuery(search=" halo "), favorites_only=False) == 'Results for "halo"'
        assert results_heading(GameQuery().with_ordering(Ordering.NAME_ASC), favorites_only=False) == "Filtered Games"
        assert results_heading(GameQuery(search="halo"), favorites_only=True) == "♥ Your Favorites"

    def test_loading_messages(self) -> None:
        assert status_message(ListState(phase=LoadPhase.LOADING_INITIAL), 0) == "Loading games..."
        assert status_message(ListState(phase=LoadPhase.LOADING_MORE), 20) == "Loading more games..."

    def test_error_message(self) -> None:
        state = ListState(phase=LoadPhase.ERRORED, last_error=NetworkError("Request timed out"))
        assert status_message(state, 0) == "Oops! Something went wrong. Request timed out"

    def test_empty_messages(self) -> None:
        assert status_message(ListState(), 0) == ""
        assert status_message(ListState(phase=LoadPhase.EXHAUSTED, has_more=False), 0).startswith("No games found")
        favorites = ListState(phase=LoadPhase.READY, favorites_only=True)
        assert status_message(favorites, 0).startswith("No favorites yet")

    def test_failed_load_more_keeps_items_and_offers_retry(self) -> None:
        state = ListState(phase=LoadPhase.READY, last_error=NetworkError("Connection failed"), total_count=40)
        assert status_message(state, 20) == "Couldn't load more games. Press m to try again."

    def test_counts(self) -> None:
        assert status_message(ListState(phase=LoadPhase.READY, total_count=12345), 20) == "Showing 20 of 12,345"
        exhausted = ListState(phase=LoadPhase.EXHAUSTED, has_more=False, total_count=25)
        assert status_message(exhausted, 25) == "You've seen all the games!"
        assert status_message(ListState(phase=LoadPhase.READY, favorites_only=True, total_count=25), 2) == ""

    def test_discovery_only_for_default_list(self) -> None:
        assert show_discovery(GameQuery(), favorites_only=False)
        assert not show_discovery(GameQuery(search="halo"), favorites_only=False)
        assert not show_discovery(GameQuery(), favorites_only=True)


class TestDetailHelpers:
    """Tests for the detail view's display info."""

    def test_list_fields_shown_while_loading(self) -> None:
        info = get_detail_display_info(GTA, DetailState(game=GTA, loading=True))

        assert info["title"] == "Grand Theft Auto V"
        assert info["released"] == "September 17, 2013"
        assert info["rating"] == "★ 4.5 / 5 (6,543 ratings)"
        assert info["metacritic"] == "[green]92[/green]"
        assert info["genres"] == "Action, Adventure"
        assert info["platforms"].startswith("🖥 PC")
        assert info["developers"] == ""
        assert info["description"] == "Loading..."

    def test_details_override_list_fields(self) -> None:
        details = GameDetails(
            **{**GTA.__dict__, "name": "GTA V", "metacritic": 55},
            description_raw="<p>Los Santos</p>",
            website="https://www.rockstargames.com/V/",
            developers=(Company(id=1, name="Rockstar North"),),
            publishers=(Company(id=2, name="Rockstar Games"),),
            esrb_rating=EsrbRating(id=4, name="Mature"),
        )
        info = get_detail_display_info(GTA, DetailState(game=GTA, details=details))

        assert info["title"] == "GTA V"
        assert info["metacritic"] == "[yellow]55[/yellow]"
        assert info["description"] == "Los Santos"
        assert info["developers"] == "Rockstar North"
        assert info["publishers"] == "Rockstar Games"
        assert info["esrb"] == "Mature"
        assert info["website"] == "https://www.rockstargames.com/V/"

    def test_missing_values(self) -> None:
        bare = Game(id=7, name="Mystery")
        info = get_detail_display_info(bare, DetailState(game=bare))

        assert info["metacritic"] == "N/A"
        assert info["released"] == "TBA"
        assert info["genres"] == "Unknown"
        assert info["platforms"] == "Unknown"
        assert info["rating"] == "★ 0.0 / 5"
        assert info["description"] == NO_DESCRIPTION

    def test_blank_description_after_stripping(self) -> None:
        details = GameDetails(id=7, name="Mystery", description_raw="<br/>")
        info = get_detail_display_info(details, DetailState(details=details))
        assert info["description"] == NO_DESCRIPTION

    def test_media_lines_are_capped(self) -> None:
        state = DetailState(
            trailers=tuple(
                Trailer(id=i, name=f"Clip {i}", preview=None, data={"480": f"https://v/{i}.mp4"})
                for i in range(10)
            ),
            screenshots=tuple(Screenshot(id=i, image=f"https://s/{i}.jpg") for i in range(20)),
        )

        trailers = trailer_lines(state)
        screenshots = screenshot_lines(state)

        assert len(trailers) == MAX_TRAILERS
        assert trailers[0] == "▶ Clip 0: https://v/0.mp4"
        assert len(screenshots) == MAX_SCREENSHOTS

    def test_trailer_without_video(self) -> None:
        state = DetailState(trailers=(Trailer(id=1, name="", preview=None),))
        assert trailer_lines(state) == ["▶ Trailer: unavailable"]

    def test_state_copy_is_independent(self) -> None:
        state = DetailState(game=GTA, loading=True)
        done = replace(state, loading=False)
        assert get_detail_display_info(GTA, done)["description"] == NO_DESCRIPTION
