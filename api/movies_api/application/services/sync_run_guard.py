"""
Guard de corrida de sincronizacion.

Motivacion:
- El sync puede dispararse a mano (endpoint) y por el scheduler diario.
- Sin exclusion, dos corridas simultaneas repiten todo el trabajo de red
  (la unicidad de external_id evita filas duplicadas, pero no el costo).

Caracteristicas:
- Un solo slot por proceso: si ya hay una corrida, la nueva falla de
  inmediato con SyncAlreadyRunningException (no espera).
- Guarda el resultado/error de la ultima corrida para el endpoint de estado.
- Usa `threading.Lock` no bloqueante para no atarse a un event loop.
"""

from __future__ import annotations

import threading
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, AsyncIterator, Optional

from loguru import logger

from movies_api.shared.exceptions.sync import SyncAlreadyRunningException

if TYPE_CHECKING:
    from movies_api.application.use_cases.movie_sync_use_cases import SyncResult


class SyncRunGuard:
    """Slot unico de sincronizacion + registro de la ultima corrida."""

    _lock = threading.Lock()
    _current_trigger: Optional[str] = None
    _started_at: Optional[datetime] = None
    _last_result: Optional["SyncResult"] = None
    _last_error: Optional[str] = None

    @classmethod
    @asynccontextmanager
    async def acquire(cls, trigger: str) -> AsyncIterator[None]:
        """
        Context manager async que ocupa el slot durante la corrida.

        Raises:
            SyncAlreadyRunningException: si otra corrida tiene el slot.
        """
        if not cls._lock.acquire(blocking=False):
            logger.warning(
                f"Sync ya esta corriendo (disparado por '{cls._current_trigger}'). "
                f"Se descarta el disparo '{trigger}'."
            )
            raise SyncAlreadyRunningException(trigger)

        cls._current_trigger = trigger
        cls._started_at = datetime.now(timezone.utc)
        try:
            yield
        finally:
            cls._current_trigger = None
            cls._started_at = None
            cls._lock.release()

    @classmethod
    def is_running(cls) -> bool:
        return cls._lock.locked()

    @classmethod
    def current_trigger(cls) -> Optional[str]:
        return cls._current_trigger

    @classmethod
    def started_at(cls) -> Optional[datetime]:
        return cls._started_at

    @classmethod
    def record_success(cls, result: "SyncResult") -> None:
        cls._last_result = result
        cls._last_error = None

    @classmethod
    def record_failure(cls, error: str) -> None:
        cls._last_error = error

    @classmethod
    def last_result(cls) -> Optional["SyncResult"]:
        return cls._last_result

    @classmethod
    def last_error(cls) -> Optional[str]:
        return cls._last_error

    @classmethod
    def reset(cls) -> None:
        """Olvida el historial de corridas (usado en tests)."""
        cls._last_result = None
        cls._last_error = None
