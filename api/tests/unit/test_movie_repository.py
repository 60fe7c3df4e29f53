"""
Tests unitarios para MovieRepository (SQLite en memoria).
"""
from __future__ import annotations

from datetime import date

import pytest

from movies_api.infrastructure.repositories.movie_repository import MovieRepository


def _row(n: int, **overrides) -> dict:
    row = {
        "title": f"Film {n}",
        "episode_id": n,
        "opening_crawl": "...",
        "director": "George Lucas",
        "producer": "Gary Kurtz",
        "release_date": date(1977, 5, 25),
        "character_names": ["Luke Skywalker"],
        "planet_names": [],
        "starship_names": [],
        "vehicle_names": [],
        "species_names": [],
        "external_id": f"https://swapi.dev/api/films/{n}/",
    }
    row.update(overrides)
    return row


class TestMovieRepository:
    """Tests para las operaciones del pipeline de sync."""

    @pytest.mark.asyncio
    async def test_list_external_ids_empty(self, db_session) -> None:
        repo = MovieRepository(db_session)

        assert await repo.list_external_ids() == set()

    @pytest.mark.asyncio
    async def test_bulk_insert_returns_inserted_count(self, db_session) -> None:
        repo = MovieRepository(db_session)

        inserted = await repo.bulk_insert([_row(1), _row(2)])

        assert inserted == 2
        assert await repo.list_external_ids() == {
            "https://swapi.dev/api/films/1/",
            "https://swapi.dev/api/films/2/",
        }

    @pytest.mark.asyncio
    async def test_bulk_insert_skips_duplicates(self, db_session) -> None:
        repo = MovieRepository(db_session)
        await repo.bulk_insert([_row(1)])

        inserted = await repo.bulk_insert([_row(1, title="Otra"), _row(2)])

        assert inserted == 1
        movies = await repo.get_all()
        assert [m.title for m in movies] == ["Film 1", "Film 2"]

    @pytest.mark.asyncio
    async def test_bulk_insert_empty_is_noop(self, db_session) -> None:
        repo = MovieRepository(db_session)

        assert await repo.bulk_insert([]) == 0
        assert await repo.get_all() == []

    @pytest.mark.asyncio
    async def test_name_lists_round_trip_in_order(self, db_session) -> None:
        repo = MovieRepository(db_session)
        names = ["Luke Skywalker", "Unknown", "Leia Organa"]
        await repo.bulk_insert([_row(1, character_names=names)])

        movie = (await repo.get_all())[0]

        assert movie.character_names == names
        assert movie.release_date == date(1977, 5, 25)

    @pytest.mark.asyncio
    async def test_get_all_orders_by_episode(self, db_session) -> None:
        repo = MovieRepository(db_session)
        await repo.bulk_insert([_row(6), _row(4), _row(5)])

        movies = await repo.get_all()

        assert [m.episode_id for m in movies] == [4, 5, 6]
