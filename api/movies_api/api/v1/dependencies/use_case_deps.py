"""
Dependencias para inyeccion de casos de uso.
"""
from typing import Awaitable, Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from movies_api.application.use_cases.movie_sync_use_cases import SyncResult, run_movie_sync
from movies_api.infrastructure.database.session import get_db


def get_movie_sync_runner(
    db: AsyncSession = Depends(get_db)
) -> Callable[[], Awaitable[SyncResult]]:
    """
    Dependencia que entrega el disparador manual del sync,
    ligado a la sesion del request.

    Returns:
        Callable: corrutina sin argumentos que ejecuta una corrida
    """
    async def _run() -> SyncResult:
        return await run_movie_sync(trigger="manual", db=db)

    return _run
