"""
Tests unitarios para MovieSyncUseCases.

Verifica las fases catalogo -> diff -> enriquecimiento -> persistencia
contra una SWAPI falsa y SQLite en memoria.
"""
from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock

import pytest

from movies_api.application.use_cases.movie_sync_use_cases import (
    MovieSyncUseCases,
    film_to_movie_row,
)
from movies_api.infrastructure.external.swapi.catalog import FilmCatalog
from movies_api.infrastructure.external.swapi.resolver import UNKNOWN_NAME, ReferenceResolver
from movies_api.infrastructure.external.swapi.types import (
    EnrichedFilm,
    FilmPayloadError,
    RemoteFilm,
)
from movies_api.infrastructure.repositories.movie_repository import MovieRepository
from movies_api.shared.exceptions.sync import SyncError
from tests.swapi_fakes import BASE_URL, FakeSwapi, SleepRecorder, make_film, people_url


def _catalog(fake: FakeSwapi) -> FilmCatalog:
    client = fake.client()
    return FilmCatalog(client, ReferenceResolver(client, sleep=SleepRecorder()))


def _new_hope() -> dict:
    return make_film(
        1,
        title="A New Hope",
        episode_id=4,
        release_date="1977-05-25",
        characters=[people_url(1)],
    )


class TestSyncWithStarWarsApi:
    """Tests para MovieSyncUseCases.sync_with_star_wars_api()."""

    @pytest.mark.asyncio
    async def test_imports_new_film_with_resolved_names(self, db_session) -> None:
        fake = FakeSwapi().add_films([_new_hope()]).add_person(1, "Luke Skywalker")

        result = await MovieSyncUseCases(db_session, _catalog(fake)).sync_with_star_wars_api()

        assert result.status == "success"
        assert result.fetched_films == 1
        assert result.inserted_movies == 1
        movies = await MovieRepository(db_session).get_all()
        assert len(movies) == 1
        movie = movies[0]
        assert movie.title == "A New Hope"
        assert movie.episode_id == 4
        assert movie.release_date == date(1977, 5, 25)
        assert movie.character_names == ["Luke Skywalker"]
        assert movie.external_id == f"{BASE_URL}/films/1/"

    @pytest.mark.asyncio
    async def test_only_new_films_are_enriched(self, db_session) -> None:
        await MovieRepository(db_session).bulk_insert([
            film_to_movie_row(EnrichedFilm(RemoteFilm.from_payload(make_film(1)), (), (), (), (), ()))
        ])
        fake = FakeSwapi().add_films([
            make_film(1, characters=[people_url(1)]),
            make_film(2, characters=[people_url(2)]),
        ]).add_person(1, "Luke Skywalker").add_person(2, "Han Solo")

        result = await MovieSyncUseCases(db_session, _catalog(fake)).sync_with_star_wars_api()

        assert result.fetched_films == 2
        assert result.new_films == 1
        assert result.inserted_movies == 1
        assert fake.count(people_url(1)) == 0
        assert fake.count(people_url(2)) == 1

    @pytest.mark.asyncio
    async def test_second_run_is_idempotent(self, db_session) -> None:
        fake = FakeSwapi().add_films([_new_hope()]).add_person(1, "Luke Skywalker")
        use_cases = MovieSyncUseCases(db_session, _catalog(fake))

        await use_cases.sync_with_star_wars_api()
        second = await use_cases.sync_with_star_wars_api()

        assert second.status == "no_changes"
        assert second.inserted_movies == 0
        assert len(await MovieRepository(db_session).get_all()) == 1

    @pytest.mark.asyncio
    async def test_no_new_films_skips_persistence(self, db_session) -> None:
        repository = AsyncMock()
        repository.list_external_ids = AsyncMock(return_value={f"{BASE_URL}/films/1/"})
        repository.bulk_insert = AsyncMock()
        fake = FakeSwapi().add_films([make_film(1)])

        result = await MovieSyncUseCases(
            db_session, _catalog(fake), repository=repository
        ).sync_with_star_wars_api()

        assert result.status == "no_changes"
        repository.bulk_insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_unresolvable_reference_is_stored_as_unknown(self, db_session) -> None:
        film = make_film(1, characters=[people_url(1), people_url(2)])
        fake = FakeSwapi().add_films([film]).add_person(1, "Luke Skywalker").fail(people_url(2))

        await MovieSyncUseCases(db_session, _catalog(fake)).sync_with_star_wars_api()

        movie = (await MovieRepository(db_session).get_all())[0]
        assert movie.character_names == ["Luke Skywalker", UNKNOWN_NAME]

    @pytest.mark.asyncio
    async def test_malformed_reference_url_is_stored_as_unknown(self, db_session) -> None:
        film = make_film(1, characters=[people_url(1), "http://[::1/people/1/"])
        fake = FakeSwapi().add_films([film]).add_person(1, "Luke Skywalker")

        result = await MovieSyncUseCases(db_session, _catalog(fake)).sync_with_star_wars_api()

        assert result.status == "success"
        movie = (await MovieRepository(db_session).get_all())[0]
        assert movie.character_names == ["Luke Skywalker", UNKNOWN_NAME]

    @pytest.mark.asyncio
    async def test_catalog_failure_raises_sync_error_without_writes(self, db_session) -> None:
        fake = FakeSwapi().fail(f"{BASE_URL}/films/", status_code=503)

        with pytest.raises(SyncError) as exc_info:
            await MovieSyncUseCases(db_session, _catalog(fake)).sync_with_star_wars_api()

        assert exc_info.value.phase == "catalog"
        assert "catalogo" in exc_info.value.original_message
        assert exc_info.value.message.startswith("Fallo la sincronizacion con la API de Star Wars:")
        assert await MovieRepository(db_session).get_all() == []

    @pytest.mark.asyncio
    async def test_invalid_release_date_fails_in_enrich_phase(self, db_session) -> None:
        fake = FakeSwapi().add_films([make_film(1, release_date="not-a-date")])

        with pytest.raises(SyncError) as exc_info:
            await MovieSyncUseCases(db_session, _catalog(fake)).sync_with_star_wars_api()

        assert exc_info.value.phase == "enrich"
        assert await MovieRepository(db_session).get_all() == []

    @pytest.mark.asyncio
    async def test_persist_failure_wraps_original_message(self, db_session) -> None:
        repository = AsyncMock()
        repository.list_external_ids = AsyncMock(return_value=set())
        repository.bulk_insert = AsyncMock(side_effect=RuntimeError("db down"))
        fake = FakeSwapi().add_films([make_film(1)])

        with pytest.raises(SyncError) as exc_info:
            await MovieSyncUseCases(
                db_session, _catalog(fake), repository=repository
            ).sync_with_star_wars_api()

        assert exc_info.value.phase == "persist"
        assert exc_info.value.original_message == "db down"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_result_reports_trigger_and_timing(self, db_session) -> None:
        fake = FakeSwapi().add_films([make_film(1)])

        result = await MovieSyncUseCases(
            db_session, _catalog(fake)
        ).sync_with_star_wars_api(trigger="scheduler")

        assert result.trigger == "scheduler"
        assert result.finished_at >= result.started_at
        assert result.duration_s >= 0


class TestFilmToMovieRow:
    """Tests para el mapeo pelicula enriquecida -> fila."""

    def test_maps_all_fields(self) -> None:
        film = RemoteFilm.from_payload(_new_hope())
        enriched = EnrichedFilm(
            film=film,
            character_names=("Luke Skywalker",),
            planet_names=("Tatooine",),
            starship_names=(),
            vehicle_names=(),
            species_names=("Human",),
        )

        row = film_to_movie_row(enriched)

        assert row["title"] == "A New Hope"
        assert row["episode_id"] == 4
        assert row["release_date"] == date(1977, 5, 25)
        assert row["character_names"] == ["Luke Skywalker"]
        assert row["planet_names"] == ["Tatooine"]
        assert row["species_names"] == ["Human"]
        assert row["external_id"] == film.url

    def test_invalid_release_date_raises(self) -> None:
        film = RemoteFilm.from_payload(make_film(1, release_date=""))

        with pytest.raises(FilmPayloadError):
            film_to_movie_row(EnrichedFilm(film, (), (), (), (), ()))
