"""
Dependencias para inyeccion de repositorios.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from movies_api.infrastructure.database.session import get_db
from movies_api.infrastructure.repositories.movie_repository import MovieRepository


async def get_movie_repository(
    session: AsyncSession = Depends(get_db)
) -> MovieRepository:
    """
    Dependencia para obtener el repositorio de peliculas.

    Args:
        session: Sesion de base de datos

    Returns:
        MovieRepository: Instancia del repositorio de peliculas
    """
    return MovieRepository(session)
