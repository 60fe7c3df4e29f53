"""
Resolucion de URLs de referencia (personajes, planetas, ...) a nombres.

Reglas:
- Un fallo individual nunca aborta la pelicula: se degrada a "Unknown".
- Las URLs se resuelven en lotes de tamano fijo; dentro de un lote en
  paralelo, y entre lotes se hace una pausa corta para no saturar la API.
- El resultado respeta exactamente el orden de entrada.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Sequence

from loguru import logger

from movies_api.shared.exceptions.sync import FetchError

from .swapi_client import SwapiClient

UNKNOWN_NAME = "Unknown"
DEFAULT_BATCH_SIZE = 5
DEFAULT_BATCH_COOLDOWN_S = 0.2


class ReferenceResolver:
    """Convierte URLs de recursos SWAPI en nombres legibles."""

    def __init__(
        self,
        client: SwapiClient,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_cooldown_s: float = DEFAULT_BATCH_COOLDOWN_S,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size debe ser > 0")
        self._client = client
        self._batch_size = batch_size
        self._batch_cooldown_s = batch_cooldown_s
        self._sleep = sleep

    async def resolve_name(self, url: str) -> str:
        try:
            resource = await self._client.fetch(url, is_absolute=True)
        except FetchError as e:
            logger.warning(f"No se pudo resolver el recurso {url}: {e.cause}")
            return UNKNOWN_NAME

        name = resource.get("name") if isinstance(resource, dict) else None
        if not name:
            logger.warning(f"El recurso {url} no tiene campo 'name'")
            return UNKNOWN_NAME
        return name

    async def resolve_names(self, urls: Sequence[str]) -> list[str]:
        """
        Resuelve todas las URLs en lotes.

        Para 12 URLs y lotes de 5: 3 lotes y 2 pausas (nunca despues del ultimo).
        """
        names: list[str] = []

        for start in range(0, len(urls), self._batch_size):
            batch = urls[start:start + self._batch_size]
            # gather conserva el orden de entrada aunque terminen en otro orden
            names.extend(await asyncio.gather(*(self.resolve_name(url) for url in batch)))

            if start + self._batch_size < len(urls):
                await self._sleep(self._batch_cooldown_s)

        return names
