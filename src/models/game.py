"""Game-related data models."""

from dataclasses import dataclass, field
from typing import Any


def _opt_str(value: Any) -> str | None:
    """Return a non-empty string or None."""
    if value is None or value == "":
        return None
    return str(value)


def _opt_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


@dataclass(frozen=True)
class PlatformRef:
    """Platform reference attached to a game."""
    id: int
    name: str
    slug: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PlatformRef":
        # RAWG nests the platform under a "platform" key on game payloads
        inner = data.get("platform", data)
        if not isinstance(inner, dict):
            inner = {}
        return cls(
            id=_opt_int(inner.get("id")) or 0,
            name=str(inner.get("name") or ""),
            slug=str(inner.get("slug") or ""),
        )


@dataclass(frozen=True)
class GenreRef:
    """Genre reference attached to a game."""
    id: int
    name: str
    slug: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "GenreRef":
        return cls(
            id=_opt_int(data.get("id")) or 0,
            name=str(data.get("name") or ""),
            slug=str(data.get("slug") or ""),
        )


@dataclass(frozen=True)
class Screenshot:
    """A single game screenshot."""
    id: int
    image: str
    width: int | None = None
    height: int | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Screenshot":
        return cls(
            id=_opt_int(data.get("id")) or 0,
            image=str(data.get("image") or ""),
            width=_opt_int(data.get("width")),
            height=_opt_int(data.get("height")),
        )


@dataclass(frozen=True)
class Trailer:
    """A game trailer with its preview image and video URLs by resolution."""
    id: int
    name: str
    preview: str | None
    data: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Trailer":
        raw_videos = data.get("data")
        videos = (
            {str(k): str(v) for k, v in raw_videos.items() if v}
            if isinstance(raw_videos, dict) else {}
        )
        return cls(
            id=_opt_int(data.get("id")) or 0,
            name=str(data.get("name") or ""),
            preview=_opt_str(data.get("preview")),
            data=videos,
        )

    @property
    def best_url(self) -> str | None:
        """Highest resolution video URL available."""
        return self.data.get("max") or self.data.get("480")


@dataclass(frozen=True)
class Game:
    """Core game data structure as returned by list endpoints."""
    id: int
    name: str
    background_image: str | None = None
    rating: float = 0.0  # 0-5 scale
    rating_top: int | None = None
    ratings_count: int | None = None
    metacritic: int | None = None  # 0-100 scale, None if not available
    released: str | None = None  # ISO date, None when TBA
    platforms: tuple[PlatformRef, ...] = ()
    genres: tuple[GenreRef, ...] = ()
    short_screenshots: tuple[Screenshot, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Game":
        """Build a game from a RAWG payload, null-guarding display fields."""
        return cls(**_game_fields(data))


@dataclass(frozen=True)
class EsrbRating:
    """ESRB age rating."""
    id: int
    name: str


@dataclass(frozen=True)
class Company:
    """Developer or publisher."""
    id: int
    name: str


@dataclass(frozen=True)
class GameDetails(Game):
    """Extended game metadata from the single-game endpoint."""
    description_raw: str | None = None
    website: str | None = None
    reddit_url: str | None = None
    metacritic_url: str | None = None
    developers: tuple[Company, ...] = ()
    publishers: tuple[Company, ...] = ()
    esrb_rating: EsrbRating | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "GameDetails":
        esrb = data.get("esrb_rating")
        return cls(
            **_game_fields(data),
            description_raw=_opt_str(data.get("description_raw")),
            website=_opt_str(data.get("website")),
            reddit_url=_opt_str(data.get("reddit_url")),
            metacritic_url=_opt_str(data.get("metacritic_url")),
            developers=_companies(data.get("developers")),
            publishers=_companies(data.get("publishers")),
            esrb_rating=(
                EsrbRating(id=_opt_int(esrb.get("id")) or 0, name=str(esrb.get("name") or ""))
                if isinstance(esrb, dict) else None
            ),
        )


@dataclass(frozen=True)
class Platform:
    """Platform facet used by the filter UI."""
    id: int
    name: str
    slug: str
    games_count: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Platform":
        return cls(
            id=_opt_int(data.get("id")) or 0,
            name=str(data.get("name") or ""),
            slug=str(data.get("slug") or ""),
            games_count=_opt_int(data.get("games_count")) or 0,
        )


@dataclass(frozen=True)
class Genre:
    """Genre facet used by the filter UI."""
    id: int
    name: str
    slug: str
    games_count: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Genre":
        return cls(
            id=_opt_int(data.get("id")) or 0,
            name=str(data.get("name") or ""),
            slug=str(data.get("slug") or ""),
            games_count=_opt_int(data.get("games_count")) or 0,
        )


def _companies(value: Any) -> tuple[Company, ...]:
    return tuple(
        Company(id=_opt_int(c.get("id")) or 0, name=str(c.get("name") or ""))
        for c in _list(value) if isinstance(c, dict)
    )


def _game_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": _opt_int(data.get("id")) or 0,
        "name": str(data.get("name") or "Untitled"),
        "background_image": _opt_str(data.get("background_image")),
        "rating": _float(data.get("rating")),
        "rating_top": _opt_int(data.get("rating_top")),
        "ratings_count": _opt_int(data.get("ratings_count")),
        "metacritic": _opt_int(data.get("metacritic")),
        "released": _opt_str(data.get("released")),
        "platforms": tuple(
            PlatformRef.from_api(p) for p in _list(data.get("platforms")) if isinstance(p, dict)
        ),
        "genres": tuple(
            GenreRef.from_api(g) for g in _list(data.get("genres")) if isinstance(g, dict)
        ),
        "short_screenshots": tuple(
            Screenshot.from_api(s) for s in _list(data.get("short_screenshots")) if isinstance(s, dict)
        ),
    }
