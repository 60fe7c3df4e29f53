"""
Cache de requests a SWAPI, indexado por URL resuelta.

- Instancia explicita (no singleton de proceso), propiedad del cliente.
- Acotado con desalojo LRU para que no crezca sin limite.
- Protegido con lock: inserciones concurrentes de claves distintas no
  se pisan.
- Nunca se persiste ni se invalida dentro de una corrida.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any, Optional

DEFAULT_MAX_ENTRIES = 2048


class ResolutionCache:
    """Mapa URL -> payload JSON ya decodificado."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries debe ser > 0")
        self._max_entries = max_entries
        self._entries: OrderedDict[str, Any] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, url: str, default: Optional[Any] = None) -> Optional[Any]:
        """Payload cacheado o `default`; un payload `null` cuenta como hit."""
        with self._lock:
            if url not in self._entries:
                self.misses += 1
                return default
            self._entries.move_to_end(url)
            self.hits += 1
            return self._entries[url]

    def set(self, url: str, payload: Any) -> None:
        with self._lock:
            self._entries[url] = payload
            self._entries.move_to_end(url)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def __contains__(self, url: str) -> bool:
        with self._lock:
            return url in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        """Vacia el cache y reinicia contadores (reset por corrida)."""
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
