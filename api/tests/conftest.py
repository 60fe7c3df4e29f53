"""
Configuracion de fixtures para pytest.
"""
import os

# Antes de importar la app: base en memoria y SWAPI de prueba
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SWAPI_BASE_URL", "https://swapi.dev/api")
os.environ.setdefault("SYNC_SCHEDULER_ENABLED", "false")

import pytest
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from movies_api.application.services.sync_run_guard import SyncRunGuard
from movies_api.infrastructure.database.session import Base


# URL de base de datos de prueba
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """
    Fixture que proporciona una session factory sobre una base en memoria.
    Reemplaza a AsyncSessionLocal en los flujos que abren su propia sesion.
    """
    # Crear engine de prueba
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    # Crear tablas
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Crear session factory
    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    yield async_session

    # Limpiar
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """
    Fixture que proporciona una sesion de base de datos para tests.
    Crea una base de datos en memoria para cada test.
    """
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def reset_sync_guard():
    """Limpia el historial de corridas antes y despues de cada test."""
    SyncRunGuard.reset()
    yield
    SyncRunGuard.reset()
