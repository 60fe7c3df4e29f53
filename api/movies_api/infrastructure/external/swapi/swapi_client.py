"""
Cliente HTTP minimo de la API de Star Wars (SWAPI).

Requisitos cubiertos:
- httpx (async)
- cache por URL resuelta: un segundo GET a la misma URL no toca la red
- sin reintentos: la politica de reintento es del caller (el scheduler
  vuelve a intentar en el siguiente intervalo)
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from loguru import logger

from movies_api.shared.exceptions.sync import ConfigurationException, FetchError

from .cache import ResolutionCache

_MISS = object()


class SwapiClient:
    """
    Cliente de SWAPI con cache de respuestas.

    Importante:
    - `target` relativo se concatena a base_url; con is_absolute=True
      se usa tal cual (las referencias de SWAPI son URLs completas).
    - El cache solo se puebla con respuestas 2xx decodificadas.
    """

    def __init__(
        self,
        base_url: str,
        *,
        cache: Optional[ResolutionCache] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_s: float = 30.0,
    ) -> None:
        if not base_url:
            raise ConfigurationException("SWAPI_BASE_URL")
        self._base_url = base_url.rstrip("/")
        self.cache = cache if cache is not None else ResolutionCache()
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout_s)

    @property
    def base_url(self) -> str:
        return self._base_url

    def resolve_url(self, target: str, is_absolute: bool = False) -> str:
        if is_absolute:
            return target
        return f"{self._base_url}/{target.lstrip('/')}"

    async def fetch(self, target: str, is_absolute: bool = False) -> Any:
        """
        GET de un recurso de SWAPI.

        Raises:
            FetchError: error de transporte, URL invalida, status no-2xx o
                body no JSON.
        """
        url = self.resolve_url(target, is_absolute)

        cached = self.cache.get(url, _MISS)
        if cached is not _MISS:
            return cached

        try:
            response = await self._http.get(url)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.error(f"Fallo request a SWAPI {url}: {e}")
            raise FetchError(url, e) from e

        self.cache.set(url, payload)
        return payload

    async def aclose(self) -> None:
        """Cierra el cliente HTTP solo si fue creado por esta instancia."""
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "SwapiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
