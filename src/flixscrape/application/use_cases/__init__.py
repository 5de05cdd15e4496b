from .browse import BrowseUseCase
from .episode_sources import EpisodeSourcesUseCase
from .home_page import HomePageUseCase
from .movie_details import MovieDetailsUseCase

__all__ = [
    "BrowseUseCase",
    "EpisodeSourcesUseCase",
    "HomePageUseCase",
    "MovieDetailsUseCase",
]
