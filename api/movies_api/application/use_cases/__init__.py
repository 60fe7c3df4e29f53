"""
Casos de uso de la capa de aplicacion.
"""
from .movie_sync_use_cases import MovieSyncUseCases, SyncResult, run_movie_sync

__all__ = ["MovieSyncUseCases", "SyncResult", "run_movie_sync"]
