import json
import time
import logging
from typing import Dict, Optional, Tuple
from apps.domain.interfaces.analysis_cache_store import AnalysisCacheStore

logger = logging.getLogger('apps')


class InMemoryAnalysisCacheStore(AnalysisCacheStore):
    """Process-local store used when no Redis URL is configured.

    Entries are kept as JSON text so callers never share mutable state with
    the store. Everything is lost when the process restarts.
    """

    backend_name = 'memory'

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[float, str]] = {}

    def get(self, key: str) -> Optional[Dict]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, payload = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            logger.debug(f'Cache entry {key} expired')
            return None

        try:
            return json.loads(payload)
        except ValueError as e:
            logger.warning(f'Failed to deserialize cache entry {key}: {str(e)}')
            return None

    def set(self, key: str, value: Dict, ttl: int) -> None:
        try:
            payload = json.dumps(value, allow_nan=False)
        except (TypeError, ValueError) as e:
            logger.error(f'Cache store failed for {key}: {str(e)}')
            return

        now = self._clock()
        self._evict_expired(now)
        self._entries[key] = (now + ttl, payload)

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f'Evicted {len(expired)} expired cache entries')

    def ping(self) -> bool:
        return True

    def __len__(self):
        return len(self._entries)
