"""
Catalogo de peliculas de SWAPI.

- list_films: una sola llamada al listado `films/`.
- enrich: resuelve las cinco categorias de referencias en paralelo.
"""

from __future__ import annotations

import asyncio

from loguru import logger

from movies_api.shared.exceptions.sync import CatalogFetchError, FetchError

from .resolver import ReferenceResolver
from .swapi_client import SwapiClient
from .types import EnrichedFilm, FilmPayloadError, RemoteFilm

FILMS_ENDPOINT = "films/"


class FilmCatalog:
    """Agregador: listado de peliculas + resolucion de sus referencias."""

    def __init__(self, client: SwapiClient, resolver: ReferenceResolver) -> None:
        self._client = client
        self._resolver = resolver

    async def list_films(self) -> list[RemoteFilm]:
        """
        Obtiene todas las peliculas de SWAPI.

        Raises:
            CatalogFetchError: si el listado no se pudo obtener o no tiene la
                forma {count, next, previous, results}.
        """
        logger.info("Obteniendo listado de peliculas de Star Wars")
        try:
            payload = await self._client.fetch(FILMS_ENDPOINT)
            results = payload.get("results") if isinstance(payload, dict) else None
            if results is None:
                raise FilmPayloadError("el listado de peliculas no contiene 'results'")
            return [RemoteFilm.from_payload(item) for item in results]
        except (FetchError, FilmPayloadError) as e:
            logger.error(f"Fallo al obtener peliculas de Star Wars: {e}")
            raise CatalogFetchError(e) from e

    async def enrich(self, film: RemoteFilm) -> EnrichedFilm:
        """Resuelve personajes, planetas, naves, vehiculos y especies de una pelicula."""
        logger.info(f"Obteniendo detalles de la pelicula: {film.title}")

        characters, planets, starships, vehicles, species = await asyncio.gather(
            self._resolver.resolve_names(film.characters),
            self._resolver.resolve_names(film.planets),
            self._resolver.resolve_names(film.starships),
            self._resolver.resolve_names(film.vehicles),
            self._resolver.resolve_names(film.species),
        )

        return EnrichedFilm(
            film=film,
            character_names=tuple(characters),
            planet_names=tuple(planets),
            starship_names=tuple(starships),
            vehicle_names=tuple(vehicles),
            species_names=tuple(species),
        )
