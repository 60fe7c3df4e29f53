"""
Casos de uso para sincronizacion de peliculas con la API de Star Wars.

Fases (estrictamente en orden, ninguna se re-ejecuta):
1. Catalogo: listado completo de peliculas de SWAPI.
2. Diff: una sola lectura de los external_id ya importados.
3. Enriquecimiento: pelicula por pelicula, referencias resueltas a nombres.
4. Persistencia: una sola insercion masiva omitiendo duplicados.

Solo la fase 4 tiene efectos: si algo falla antes, la base queda igual.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from movies_api.application.services.sync_run_guard import SyncRunGuard
from movies_api.core.config import settings
from movies_api.infrastructure.database.session import AsyncSessionLocal
from movies_api.infrastructure.external.swapi.cache import ResolutionCache
from movies_api.infrastructure.external.swapi.catalog import FilmCatalog
from movies_api.infrastructure.external.swapi.resolver import ReferenceResolver
from movies_api.infrastructure.external.swapi.swapi_client import SwapiClient
from movies_api.infrastructure.external.swapi.types import (
    EnrichedFilm,
    RemoteFilm,
    parse_release_date,
)
from movies_api.infrastructure.repositories.movie_repository import MovieRepository
from movies_api.shared.exceptions.base import AppException
from movies_api.shared.exceptions.sync import SyncError


@dataclass(frozen=True)
class SyncResult:
    """Resultado y metricas de una corrida de sincronizacion."""

    status: str
    fetched_films: int
    new_films: int
    inserted_movies: int
    skipped_duplicates: int
    started_at: datetime
    finished_at: datetime
    duration_s: float
    trigger: str = "manual"
    cache_hits: int = 0
    cache_misses: int = 0


def film_to_movie_row(enriched: EnrichedFilm) -> Dict[str, Any]:
    """
    Mapea una pelicula enriquecida a un dict listo para el bulk insert.
    """
    film = enriched.film
    return {
        "title": film.title,
        "episode_id": film.episode_id,
        "opening_crawl": film.opening_crawl,
        "director": film.director,
        "producer": film.producer,
        "release_date": parse_release_date(film.release_date),
        "character_names": list(enriched.character_names),
        "planet_names": list(enriched.planet_names),
        "starship_names": list(enriched.starship_names),
        "vehicle_names": list(enriched.vehicle_names),
        "species_names": list(enriched.species_names),
        "external_id": film.url,
    }


def _error_message(error: Exception) -> str:
    if isinstance(error, AppException):
        return error.message
    return str(error)


class MovieSyncUseCases:
    """
    Orquestador del pipeline SWAPI -> base de datos.

    No tiene exclusion propia: eso lo resuelve run_movie_sync con
    SyncRunGuard, y la unicidad de external_id respalda cualquier carrera
    entre procesos.
    """

    def __init__(
        self,
        db: AsyncSession,
        catalog: FilmCatalog,
        repository: Optional[MovieRepository] = None,
    ):
        self.db = db
        self.catalog = catalog
        self.repository = repository or MovieRepository(db)

    async def sync_with_star_wars_api(self, trigger: str = "manual") -> SyncResult:
        """
        Ejecuta una corrida completa de sincronizacion.

        Raises:
            SyncError: ante cualquier fallo; envuelve el mensaje original.
        """
        logger.info("Iniciando sincronizacion con la API de Star Wars")
        started_at = datetime.now(timezone.utc)
        t0 = time.perf_counter()
        phase = "catalog"

        try:
            films = await self.catalog.list_films()

            phase = "diff"
            new_films = await self._filter_new_films(films)

            if not new_films:
                logger.info("No hay peliculas nuevas. Todas ya existen en la base de datos.")
                return self._build_result(
                    "no_changes", films, new_films, 0, started_at, t0, trigger
                )

            logger.info(f"Se encontraron {len(new_films)} peliculas nuevas para agregar")

            phase = "enrich"
            movies_to_create = await self._prepare_movies_for_creation(new_films)

            phase = "persist"
            inserted = await self._save_movies_to_database(movies_to_create)
        except Exception as e:
            message = _error_message(e)
            logger.error(f"Sincronizacion fallida en fase '{phase}': {message}")
            raise SyncError(message, phase=phase) from e

        result = self._build_result("success", films, new_films, inserted, started_at, t0, trigger)
        logger.success(
            f"Sincronizacion completada: {result.inserted_movies} insertadas, "
            f"{result.skipped_duplicates} duplicadas omitidas ({result.duration_s:.2f}s)"
        )
        return result

    async def _filter_new_films(self, films: List[RemoteFilm]) -> List[RemoteFilm]:
        """
        Filtra las peliculas que ya estan en la base de datos.
        """
        existing_external_ids = await self.repository.list_external_ids()
        return [film for film in films if film.url not in existing_external_ids]

    async def _prepare_movies_for_creation(self, films: List[RemoteFilm]) -> List[Dict[str, Any]]:
        """
        Enriquece cada pelicula nueva, una a la vez.
        """
        movies_to_create: List[Dict[str, Any]] = []

        for film in films:
            logger.info(f"Procesando pelicula nueva: {film.title}")
            enriched = await self.catalog.enrich(film)
            movies_to_create.append(film_to_movie_row(enriched))

        return movies_to_create

    async def _save_movies_to_database(self, movies: List[Dict[str, Any]]) -> int:
        """
        Guarda las peliculas en una sola operacion (omitiendo duplicados).
        """
        if not movies:
            return 0

        logger.info(f"Creando {len(movies)} peliculas nuevas")
        inserted = await self.repository.bulk_insert(movies, skip_duplicates=True)
        await self.db.commit()
        return inserted

    def _build_result(
        self,
        status: str,
        films: List[RemoteFilm],
        new_films: List[RemoteFilm],
        inserted: int,
        started_at: datetime,
        t0: float,
        trigger: str,
    ) -> SyncResult:
        return SyncResult(
            status=status,
            fetched_films=len(films),
            new_films=len(new_films),
            inserted_movies=inserted,
            skipped_duplicates=len(new_films) - inserted,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            duration_s=time.perf_counter() - t0,
            trigger=trigger,
        )


def build_film_catalog(client: SwapiClient) -> FilmCatalog:
    """Arma el agregador con la configuracion de lotes vigente."""
    resolver = ReferenceResolver(
        client,
        batch_size=settings.SWAPI_RESOLVE_BATCH_SIZE,
        batch_cooldown_s=settings.SWAPI_BATCH_COOLDOWN_SECONDS,
    )
    return FilmCatalog(client, resolver)


def build_swapi_client() -> SwapiClient:
    """
    Cliente SWAPI con un cache nuevo: el cache vive lo que dura una corrida.
    """
    return SwapiClient(
        settings.SWAPI_BASE_URL,
        cache=ResolutionCache(max_entries=settings.SWAPI_CACHE_MAX_ENTRIES),
        timeout_s=settings.SWAPI_TIMEOUT_SECONDS,
    )


async def run_movie_sync(
    trigger: str = "manual",
    db: Optional[AsyncSession] = None,
    client: Optional[SwapiClient] = None,
) -> SyncResult:
    """
    Punto de entrada unico del sync (endpoint y scheduler).

    - Ocupa el slot de SyncRunGuard (falla con 409 si ya hay una corrida).
    - Si no se pasa sesion, abre una propia.
    - Registra el resultado o cualquier error (incluida configuracion
      invalida) para el endpoint de estado.
    """
    async with SyncRunGuard.acquire(trigger):
        owns_client = client is None
        try:
            client = client or build_swapi_client()
            catalog = build_film_catalog(client)
            if db is None:
                async with AsyncSessionLocal() as session:
                    result = await MovieSyncUseCases(session, catalog).sync_with_star_wars_api(trigger)
            else:
                result = await MovieSyncUseCases(db, catalog).sync_with_star_wars_api(trigger)
        except Exception as e:
            SyncRunGuard.record_failure(_error_message(e))
            raise
        finally:
            if owns_client and client is not None:
                await client.aclose()

        result = _with_cache_stats(result, client.cache)
        SyncRunGuard.record_success(result)
        return result


def _with_cache_stats(result: SyncResult, cache: ResolutionCache) -> SyncResult:
    return replace(result, cache_hits=cache.hits, cache_misses=cache.misses)
