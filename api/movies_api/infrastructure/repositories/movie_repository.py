"""
Implementacion del repositorio de peliculas.
Maneja las operaciones de base de datos para la entidad MovieModel
que necesita el pipeline de sincronizacion.
"""
from typing import Any, Dict, List, Set

from loguru import logger
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from movies_api.infrastructure.database.models import MovieModel


class MovieRepository:
    """Repositorio para gestionar peliculas en la base de datos."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_external_ids(self) -> Set[str]:
        """
        Obtiene todos los external_id ya importados en una sola consulta.
        """
        result = await self.db.execute(select(MovieModel.external_id))
        return set(result.scalars().all())

    async def get_all(self) -> List[MovieModel]:
        """
        Obtiene todas las peliculas ordenadas por episodio.
        """
        result = await self.db.execute(
            select(MovieModel).order_by(MovieModel.episode_id, MovieModel.id)
        )
        return result.scalars().all()

    async def bulk_insert(
        self,
        records: List[Dict[str, Any]],
        skip_duplicates: bool = True
    ) -> int:
        """
        Inserta todas las peliculas en una sola sentencia.

        Con skip_duplicates=True los conflictos sobre external_id se omiten
        (INSERT ... ON CONFLICT DO NOTHING), de modo que dos corridas
        concurrentes no fallan ni duplican filas.

        Returns:
            int: Numero de filas realmente insertadas
        """
        if not records:
            return 0

        stmt = self._insert_for_dialect().values(records)
        if skip_duplicates:
            stmt = stmt.on_conflict_do_nothing(index_elements=[MovieModel.external_id])

        result = await self.db.execute(stmt)
        await self.db.flush()

        inserted = result.rowcount if result.rowcount is not None and result.rowcount >= 0 else len(records)
        skipped = len(records) - inserted
        if skipped:
            logger.info(f"Bulk insert: {inserted} insertadas, {skipped} duplicadas omitidas")
        return inserted

    def _insert_for_dialect(self):
        """
        Selecciona la construccion INSERT con soporte de ON CONFLICT
        segun el motor (PostgreSQL en produccion, SQLite en tests).
        """
        dialect_name = self.db.get_bind().dialect.name
        if dialect_name == "postgresql":
            return postgresql.insert(MovieModel)
        if dialect_name == "sqlite":
            return sqlite.insert(MovieModel)
        raise NotImplementedError(
            f"Bulk insert con omision de duplicados no soportado para '{dialect_name}'"
        )
