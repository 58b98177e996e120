"""Data models for the PlayHub catalog application."""

from .config import AppConfig
from .game import (
    Company,
    EsrbRating,
    Game,
    GameDetails,
    Genre,
    GenreRef,
    Platform,
    PlatformRef,
    Screenshot,
    Trailer,
)
from .query import GameQuery, Ordering, ScoreBand
from .state import DetailState, DiscoveryFeed, ListState, LoadPhase, Page

__all__ = [
    "AppConfig",
    "Company",
    "DetailState",
    "DiscoveryFeed",
    "EsrbRating",
    "Game",
    "GameDetails",
    "GameQuery",
    "Genre",
    "GenreRef",
    "ListState",
    "LoadPhase",
    "Ordering",
    "Page",
    "Platform",
    "PlatformRef",
    "ScoreBand",
    "Screenshot",
    "Trailer",
]
