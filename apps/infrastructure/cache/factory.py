import threading
import logging
from typing import Optional
from django.conf import settings
from apps.domain.interfaces.analysis_cache_store import AnalysisCacheStore
from .memory_store import InMemoryAnalysisCacheStore
from .redis_store import RedisAnalysisCacheStore

logger = logging.getLogger('apps')


class CacheStoreFactory:
    """Owns the process-wide analysis cache store.

    The in-memory backend must outlive single requests, so the factory keeps
    the instance it builds and hands the same one to every caller.
    """

    _instance = None
    _lock = threading.Lock()
    _store: Optional[AnalysisCacheStore] = None

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(CacheStoreFactory, cls).__new__(cls)
        return cls._instance

    def get_store(self) -> AnalysisCacheStore:
        if self._store is None:
            with self._lock:
                if self._store is None:
                    CacheStoreFactory._store = self._create_store()
        return self._store

    def _create_store(self) -> AnalysisCacheStore:
        redis_url = getattr(settings, 'REDIS_URL', None)
        if redis_url:
            logger.info('Using Redis analysis cache')
            return RedisAnalysisCacheStore(redis_url)

        logger.info('REDIS_URL not configured, using in-memory analysis cache')
        return InMemoryAnalysisCacheStore()

    def clear_cache(self):
        with self._lock:
            CacheStoreFactory._store = None
