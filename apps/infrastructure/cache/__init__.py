from .memory_store import InMemoryAnalysisCacheStore
from .redis_store import RedisAnalysisCacheStore
from .factory import CacheStoreFactory

__all__ = ['InMemoryAnalysisCacheStore', 'RedisAnalysisCacheStore', 'CacheStoreFactory']
