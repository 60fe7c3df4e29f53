"""
Excepciones del pipeline de sincronizacion con la API de Star Wars.

Taxonomia:
- FetchError: fallo de red/HTTP para una URL concreta.
- CatalogFetchError: fallo al obtener el listado de peliculas (fatal para la corrida).
- SyncError: cualquier fallo durante la corrida, envuelve el mensaje original.
- SyncAlreadyRunningException: ya hay una corrida en curso en este proceso.
- ConfigurationException: falta configuracion obligatoria.
"""
from typing import Optional

from movies_api.shared.exceptions.base import AppException


class ConfigurationException(AppException):
    """Excepcion para configuracion obligatoria ausente o invalida."""

    def __init__(self, setting: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"Falta configuracion obligatoria: {setting}",
            status_code=500,
            error_code="CONFIGURATION_ERROR",
            details={"setting": setting}
        )
        self.setting = setting


class FetchError(AppException):
    """
    Fallo de transporte o respuesta no-2xx para una URL.

    Conserva la URL resuelta y la causa original para diagnostico.
    """

    def __init__(self, url: str, cause: BaseException):
        super().__init__(
            message=f"Request a la API externa fallo ({url}): {cause}",
            status_code=502,
            error_code="FETCH_ERROR",
            details={"url": url}
        )
        self.url = url
        self.cause = cause


class CatalogFetchError(AppException):
    """No se pudo obtener el listado de peliculas."""

    def __init__(self, cause: BaseException):
        super().__init__(
            message=f"No se pudo obtener el catalogo de peliculas: {cause}",
            status_code=502,
            error_code="CATALOG_FETCH_ERROR"
        )
        self.cause = cause


class SyncError(AppException):
    """Fallo de una corrida de sincronizacion completa."""

    def __init__(self, message: str, phase: Optional[str] = None):
        super().__init__(
            message=f"Fallo la sincronizacion con la API de Star Wars: {message}",
            status_code=500,
            error_code="SYNC_ERROR",
            details={"phase": phase} if phase else None
        )
        self.original_message = message
        self.phase = phase


class SyncAlreadyRunningException(AppException):
    """Excepcion cuando se dispara una sincronizacion mientras otra esta en curso."""

    def __init__(self, trigger: str):
        super().__init__(
            message="Ya hay una sincronizacion en curso",
            status_code=409,
            error_code="SYNC_ALREADY_RUNNING",
            details={"trigger": trigger}
        )
        self.trigger = trigger
