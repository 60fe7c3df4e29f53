"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .movie_dto import MovieSummaryDTO, SyncResultDTO, SyncStatusDTO

__all__ = [
    "MovieSummaryDTO",
    "SyncResultDTO",
    "SyncStatusDTO",
]
