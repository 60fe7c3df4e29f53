"""
Integracion one-way: API de Star Wars (SWAPI) -> PostgreSQL.

Capas (cada una solo llama a la de abajo):
- SwapiClient: GET con cache por URL resuelta (sin reintentos).
- ReferenceResolver: URL de referencia -> nombre, en lotes con pausa entre lotes.
- FilmCatalog: listado de peliculas y enriquecimiento de cada una.

La orquestacion (diff contra la base + insercion masiva) vive en
application/use_cases/movie_sync_use_cases.py.
"""
