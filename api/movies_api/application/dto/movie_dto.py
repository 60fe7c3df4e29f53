"""
DTOs para peliculas y resultados de sincronizacion.
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field


class SyncResultDTO(BaseModel):
    """Resultado de una corrida de sincronizacion con SWAPI."""

    status: str = Field(..., description="success o no_changes")
    fetched_films: int = Field(..., description="Peliculas obtenidas del catalogo remoto")
    new_films: int = Field(..., description="Peliculas que no estaban importadas")
    inserted_movies: int = Field(..., description="Filas insertadas en la base de datos")
    skipped_duplicates: int = Field(0, description="Duplicadas omitidas en la insercion")
    cache_hits: int = Field(0, description="Requests resueltos desde el cache")
    cache_misses: int = Field(0, description="Requests que fueron a la red")
    trigger: str = Field("manual", description="Origen de la corrida: manual o scheduler")
    started_at: datetime
    finished_at: datetime
    duration_s: float

    class Config:
        from_attributes = True


class SyncStatusDTO(BaseModel):
    """Estado actual del sync y ultima corrida registrada."""

    running: bool
    current_trigger: Optional[str] = None
    running_since: Optional[datetime] = None
    last_result: Optional[SyncResultDTO] = None
    last_error: Optional[str] = None


class MovieSummaryDTO(BaseModel):
    """Pelicula importada, sin las listas de nombres."""

    id: int
    title: str
    episode_id: int
    opening_crawl: str
    director: str
    producer: str
    release_date: date
    external_id: str

    class Config:
        from_attributes = True
