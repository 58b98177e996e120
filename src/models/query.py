"""Search query descriptor and the sort/score enumerations it uses."""

from dataclasses import dataclass, replace
from enum import Enum


class Ordering(Enum):
    """Sort orders understood by the games endpoint."""
    RELEVANCE = ""
    RATING_DESC = "-rating"
    RELEASED_DESC = "-released"
    RELEASED_ASC = "released"
    ADDED_DESC = "-added"
    NAME_ASC = "name"
    NAME_DESC = "-name"
    METACRITIC_DESC = "-metacritic"

    @property
    def label(self) -> str:
        return _ORDERING_LABELS[self]


_ORDERING_LABELS: dict[Ordering, str] = {
    Ordering.RELEVANCE: "Relevance",
    Ordering.RATING_DESC: "Highest Rated",
    Ordering.RELEASED_DESC: "Newest",
    Ordering.RELEASED_ASC: "Oldest",
    Ordering.ADDED_DESC: "Recently Added",
    Ordering.NAME_ASC: "Name A-Z",
    Ordering.NAME_DESC: "Name Z-A",
    Ordering.METACRITIC_DESC: "Metacritic Score",
}


class ScoreBand(Enum):
    """Metacritic score bands offered by the filter bar."""
    ANY = ""
    ACCLAIM = "80,100"
    GOOD = "70,79"
    MIXED = "60,69"
    POOR = "50,59"

    @property
    def label(self) -> str:
        return _SCORE_LABELS[self]


_SCORE_LABELS: dict[ScoreBand, str] = {
    ScoreBand.ANY: "Any Score",
    ScoreBand.ACCLAIM: "80+ Universal Acclaim",
    ScoreBand.GOOD: "70-79 Good",
    ScoreBand.MIXED: "60-69 Mixed",
    ScoreBand.POOR: "50-59 Poor",
}


@dataclass(frozen=True)
class GameQuery:
    """Descriptor of "which list": search text, filters and sort order.

    Two queries with the same values compare equal, so a list loader can
    tell whether a user action actually changed the list.
    """
    search: str = ""
    genres: frozenset[str] = frozenset()
    platforms: frozenset[str] = frozenset()
    ordering: str = Ordering.RELEVANCE.value
    metacritic: str = ScoreBand.ANY.value

    @property
    def has_filters(self) -> bool:
        return bool(self.genres or self.platforms or self.ordering or self.metacritic)

    @property
    def is_default(self) -> bool:
        """True when neither search text nor any filter is set."""
        return not self.search.strip() and not self.has_filters

    def to_params(self) -> dict[str, str]:
        """Map the descriptor to query parameters, omitting empty values."""
        params: dict[str, str] = {}
        search = self.search.strip()
        if search:
            params["search"] = search
        if self.genres:
            params["genres"] = ",".join(sorted(self.genres))
        if self.platforms:
            params["platforms"] = ",".join(sorted(self.platforms))
        if self.ordering:
            params["ordering"] = self.ordering
        if self.metacritic:
            params["metacritic"] = self.metacritic
        return params

    def with_search(self, search: str) -> "GameQuery":
        return replace(self, search=search)

    def with_ordering(self, ordering: Ordering | str) -> "GameQuery":
        value = ordering.value if isinstance(ordering, Ordering) else ordering
        return replace(self, ordering=value)

    def with_metacritic(self, band: ScoreBand | str) -> "GameQuery":
        value = band.value if isinstance(band, ScoreBand) else band
        return replace(self, metacritic=value)

    def with_genres(self, genre_ids: "frozenset[str] | set[str] | list[str]") -> "GameQuery":
        return replace(self, genres=frozenset(str(g) for g in genre_ids))

    def with_platforms(self, platform_ids: "frozenset[str] | set[str] | list[str]") -> "GameQuery":
        return replace(self, platforms=frozenset(str(p) for p in platform_ids))

    def toggle_genre(self, genre_id: str) -> "GameQuery":
        return replace(self, genres=self.genres ^ {str(genre_id)})

    def toggle_platform(self, platform_id: str) -> "GameQuery":
        return replace(self, platforms=self.platforms ^ {str(platform_id)})

    def cleared(self) -> "GameQuery":
        """Query with search text and every filter removed."""
        return GameQuery()
