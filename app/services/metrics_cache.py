"""
Cache em memória para resultados de analytics, com expiração por tempo
"""
import logging
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5 * 60


class MetricsCache:
    """
    Cache chave -> valor com timestamp por entrada.

    A validade é verificada apenas na leitura: entradas expiradas são
    ignoradas e permanecem no dicionário até serem sobrescritas.
    Se max_entries for definido, a entrada gravada há mais tempo é
    descartada quando o limite é ultrapassado.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        max_entries: Optional[int] = None,
    ):
        self.timeout = timeout
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[Any, float]]" = OrderedDict()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Retorna o valor se existir e ainda estiver dentro do timeout."""
        entry = self._entries.get(key)
        if entry is not None:
            value, timestamp = entry
            if self._clock() - timestamp < self.timeout:
                self._hits += 1
                return value

        self._misses += 1
        return None

    def set(self, key: str, value: Any) -> None:
        """Grava (ou sobrescreve) a entrada com o instante atual."""
        self._entries.pop(key, None)
        self._entries[key] = (value, self._clock())

        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted analytics cache entry: {evicted}")

    def clear(self) -> None:
        self._entries.clear()
        logger.info("Analytics cache cleared")

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "timeout_seconds": self.timeout,
            "max_entries": self.max_entries,
        }
