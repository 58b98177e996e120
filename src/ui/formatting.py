"""Display helpers shared by the catalog screens."""

import re
from datetime import date

from src.models.game import Game

_TAG_RE = re.compile(r"<[^>]*>")


def format_release_date(released: str | None, long: bool = True) -> str:
    """Render an ISO release date as ``March 5, 2024`` (or ``Mar 5, 2024``).

    Missing dates read as TBA; unparseable ones are shown as given.
    """
    if not released:
        return "TBA"
    try:
        day = date.fromisoformat(released)
    except ValueError:
        return released
    month = f"{day:%B}" if long else f"{day:%b}"
    return f"{month} {day.day}, {day.year}"


def strip_html_tags(text: str) -> str:
    return _TAG_RE.sub("", text)


def platform_icon(platform_name: str) -> str:
    """Glyph for a platform family: computer, mobile or console."""
    name = platform_name.lower()
    if any(key in name for key in ("pc", "windows", "linux", "mac")):
        return "🖥"
    if any(key in name for key in ("mobile", "android", "ios")):
        return "📱"
    return "🎮"


def metacritic_tier(score: int | None) -> str | None:
    """Badge colour class for a Metacritic score."""
    if score is None:
        return None
    if score >= 75:
        return "score-high"
    if score >= 50:
        return "score-mid"
    return "score-low"


def format_rating(game: Game) -> str:
    return f"★ {game.rating:.1f}" if game.rating > 0 else ""


def game_row(game: Game, is_favorite: bool) -> tuple[str, str, str, str, str, str]:
    """Cells for one results table row."""
    platforms = ", ".join(p.name for p in game.platforms[:3])
    if len(game.platforms) > 3:
        platforms += f" +{len(game.platforms) - 3}"
    return (
        "♥" if is_favorite else "",
        game.name[:48],
        format_rating(game),
        str(game.metacritic) if game.metacritic is not None else "",
        format_release_date(game.released, long=False),
        platforms,
    )
