"""
Tipos puros del pipeline SWAPI -> Postgres.

Se mantienen libres de I/O para poder testearlos facilmente.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping


class FilmPayloadError(ValueError):
    """El payload de una pelicula no tiene la forma esperada."""


REQUIRED_FILM_FIELDS = ("title", "episode_id")


@dataclass(frozen=True)
class RemoteFilm:
    """
    Representacion cruda de una pelicula tal como la entrega SWAPI.

    `url` es el identificador externo estable. `created`/`edited` se
    conservan pero no se persisten.
    """

    url: str
    title: str
    episode_id: int
    opening_crawl: str
    director: str
    producer: str
    release_date: str
    characters: tuple[str, ...] = ()
    planets: tuple[str, ...] = ()
    starships: tuple[str, ...] = ()
    vehicles: tuple[str, ...] = ()
    species: tuple[str, ...] = ()
    created: str | None = None
    edited: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RemoteFilm":
        """Construye un RemoteFilm desde el JSON (snake_case) de SWAPI."""
        url = payload.get("url")
        if not url:
            raise FilmPayloadError("SWAPI devolvio una pelicula sin 'url'")
        missing = [field for field in REQUIRED_FILM_FIELDS if payload.get(field) in (None, "")]
        if missing:
            raise FilmPayloadError(f"Pelicula {url} incompleta, faltan: {', '.join(missing)}")

        return cls(
            url=url,
            title=payload["title"],
            episode_id=payload["episode_id"],
            opening_crawl=payload.get("opening_crawl", ""),
            director=payload.get("director", ""),
            producer=payload.get("producer", ""),
            release_date=payload.get("release_date", ""),
            characters=tuple(payload.get("characters") or ()),
            planets=tuple(payload.get("planets") or ()),
            starships=tuple(payload.get("starships") or ()),
            vehicles=tuple(payload.get("vehicles") or ()),
            species=tuple(payload.get("species") or ()),
            created=payload.get("created"),
            edited=payload.get("edited"),
        )


@dataclass(frozen=True)
class EnrichedFilm:
    """Pelicula con sus cinco listas de nombres ya resueltas."""

    film: RemoteFilm
    character_names: tuple[str, ...]
    planet_names: tuple[str, ...]
    starship_names: tuple[str, ...]
    vehicle_names: tuple[str, ...]
    species_names: tuple[str, ...]


def parse_release_date(raw: str) -> date:
    """
    Convierte release_date de SWAPI ("1977-05-25") a date.

    Acepta tambien un timestamp ISO completo ("1977-05-25T00:00:00Z") y se
    queda con la fecha; cualquier otro sufijo es invalido.
    """
    if not raw:
        raise FilmPayloadError("release_date vacio")
    date_part, _, _ = raw.partition("T")
    try:
        return date.fromisoformat(date_part)
    except ValueError as e:
        raise FilmPayloadError(f"release_date invalido: {raw!r}") from e
