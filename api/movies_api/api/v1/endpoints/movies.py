"""
Endpoints de peliculas.
Permite disparar la sincronizacion con la API de Star Wars desde la UI
y consultar lo importado.
"""
from typing import Awaitable, Callable, List

from fastapi import APIRouter, Depends, status
from loguru import logger

from movies_api.api.v1.dependencies.repository_deps import get_movie_repository
from movies_api.api.v1.dependencies.use_case_deps import get_movie_sync_runner
from movies_api.application.dto.movie_dto import MovieSummaryDTO, SyncResultDTO, SyncStatusDTO
from movies_api.application.services.sync_run_guard import SyncRunGuard
from movies_api.application.use_cases.movie_sync_use_cases import SyncResult
from movies_api.infrastructure.repositories.movie_repository import MovieRepository


router = APIRouter(prefix="/movies", tags=["Movies"])


@router.get(
    "",
    response_model=List[MovieSummaryDTO],
    summary="Listar peliculas importadas"
)
async def list_movies(
    repository: MovieRepository = Depends(get_movie_repository)
) -> List[MovieSummaryDTO]:
    """
    Retorna las peliculas importadas, sin las listas de nombres
    (personajes, planetas, naves, vehiculos, especies).
    """
    movies = await repository.get_all()
    return [MovieSummaryDTO.model_validate(movie) for movie in movies]


@router.post(
    "/sync",
    response_model=SyncResultDTO,
    status_code=status.HTTP_200_OK,
    summary="Sincronizar peliculas con la API de Star Wars"
)
async def sync_movies(
    run_sync: Callable[[], Awaitable[SyncResult]] = Depends(get_movie_sync_runner)
) -> SyncResultDTO:
    """
    Ejecuta la sincronizacion con la API de Star Wars.

    La sincronizacion:
    - Obtiene el catalogo remoto y descarta las peliculas ya importadas
    - Resuelve personajes, planetas, naves, vehiculos y especies de las nuevas
    - Inserta todas en una sola operacion, omitiendo duplicados
    - Responde 409 si ya hay una corrida en curso

    Returns:
        SyncResultDTO con las metricas de la corrida
    """
    logger.info("Sincronizacion de peliculas solicitada desde API")
    result = await run_sync()
    return SyncResultDTO.model_validate(result)


@router.get(
    "/sync/status",
    response_model=SyncStatusDTO,
    summary="Estado de la sincronizacion"
)
async def sync_status() -> SyncStatusDTO:
    """Indica si hay una corrida en curso y el resultado de la ultima."""
    last_result = SyncRunGuard.last_result()
    return SyncStatusDTO(
        running=SyncRunGuard.is_running(),
        current_trigger=SyncRunGuard.current_trigger(),
        running_since=SyncRunGuard.started_at(),
        last_result=SyncResultDTO.model_validate(last_result) if last_result else None,
        last_error=SyncRunGuard.last_error(),
    )
