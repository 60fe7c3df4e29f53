"""
Scheduler del sync diario de peliculas.

El scheduler solo dispara: recibe una corrutina sin argumentos (el punto de
entrada del sync) y la ejecuta en un CronTrigger diario. El pipeline no
sabe nada del scheduler, por lo que se testea sin timers.

En este borde los errores se registran y se descartan: el siguiente
intervalo es el reintento.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger

from movies_api.shared.exceptions.sync import SyncAlreadyRunningException

SYNC_JOB_ID = "movies_swapi_sync"


class MovieSyncScheduler:
    """Envuelve un AsyncIOScheduler con un unico job diario de sync."""

    def __init__(
        self,
        run_sync: Callable[[], Awaitable[object]],
        *,
        hour: int = 0,
        minute: int = 0,
        timezone: str = "UTC",
        scheduler: Optional[AsyncIOScheduler] = None,
    ) -> None:
        self._run_sync = run_sync
        self._trigger = CronTrigger(hour=hour, minute=minute, timezone=timezone)
        self._scheduler = scheduler or AsyncIOScheduler(timezone=timezone)

    @property
    def scheduler(self) -> AsyncIOScheduler:
        return self._scheduler

    async def run_job(self) -> None:
        """Job programado: ejecuta el sync y nunca propaga errores."""
        logger.info("Iniciando sync programado de peliculas de Star Wars")
        try:
            await self._run_sync()
            logger.success("Sync programado de peliculas completado")
        except SyncAlreadyRunningException:
            logger.warning("Sync programado omitido: ya hay una corrida en curso")
        except Exception as e:
            logger.error(f"Fallo el sync programado de peliculas: {e}")

    def start(self) -> None:
        self._scheduler.add_job(
            self.run_job,
            trigger=self._trigger,
            id=SYNC_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        job = self._scheduler.get_job(SYNC_JOB_ID)
        logger.info(f"Scheduler de sync iniciado. Proxima ejecucion: {job.next_run_time}")

    async def shutdown(self) -> None:
        """
        Detiene el scheduler.

        AsyncIOScheduler encola el shutdown en el event loop: se cede un
        turno para que quede aplicado antes de retornar.
        """
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            await asyncio.sleep(0)
            logger.info("Scheduler de sync detenido")
