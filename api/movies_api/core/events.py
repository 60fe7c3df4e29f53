"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable
from fastapi import FastAPI
from loguru import logger

from movies_api.core.config import settings
from movies_api.infrastructure.database.session import init_db, close_db
from movies_api.infrastructure.scheduler.movie_sync_scheduler import MovieSyncScheduler
from movies_api.application.use_cases.movie_sync_use_cases import run_movie_sync
from movies_api.shared.exceptions.sync import ConfigurationException


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Inicializa recursos al inicio de la aplicacion."""
        try:
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")

            # Validar configuracion critica
            _validate_config()

            # Configurar logging adicional
            logger.add(
                settings.LOG_FILE,
                rotation="500 MB",
                retention="10 days",
                level=settings.LOG_LEVEL
            )

            # Inicializar base de datos (crea tablas si no existen)
            await init_db()
            logger.info("Base de datos inicializada")

            # Job diario de sincronizacion con la API de Star Wars
            app.state.scheduler = None
            if settings.SYNC_SCHEDULER_ENABLED:
                scheduler = MovieSyncScheduler(
                    _scheduled_sync,
                    hour=settings.SYNC_CRON_HOUR,
                    minute=settings.SYNC_CRON_MINUTE,
                    timezone=settings.SYNC_TIMEZONE,
                )
                scheduler.start()
                app.state.scheduler = scheduler
            else:
                logger.warning("Scheduler de sync deshabilitado (SYNC_SCHEDULER_ENABLED=false)")

            logger.success("Aplicacion iniciada correctamente")

        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise

    return startup


async def _scheduled_sync() -> None:
    await run_movie_sync(trigger="scheduler")


def _validate_config() -> None:
    """Valida que la configuracion critica este presente."""
    if not settings.SWAPI_BASE_URL:
        raise ConfigurationException(
            "SWAPI_BASE_URL",
            "SWAPI_BASE_URL no configurada - la sincronizacion de peliculas no puede funcionar"
        )

    if settings.SWAPI_RESOLVE_BATCH_SIZE <= 0:
        raise ConfigurationException("SWAPI_RESOLVE_BATCH_SIZE", "SWAPI_RESOLVE_BATCH_SIZE debe ser > 0")

    if settings.SWAPI_BATCH_COOLDOWN_SECONDS <= 0:
        logger.warning("CONFIG: SWAPI_BATCH_COOLDOWN_SECONDS <= 0, no habra pausa entre lotes")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")

        scheduler = getattr(app.state, "scheduler", None)
        if scheduler:
            await scheduler.shutdown()

        # Cerrar conexiones de base de datos
        await close_db()
        logger.info("Conexiones de base de datos cerradas")

        logger.success("Aplicacion cerrada correctamente")

    return shutdown


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Ciclo de vida de la aplicacion: startup, requests, shutdown."""
    await startup_handler(app)()
    try:
        yield
    finally:
        await shutdown_handler(app)()
