import json
import logging
from typing import Dict, Optional
import redis
from apps.domain.interfaces.analysis_cache_store import AnalysisCacheStore

logger = logging.getLogger('apps')


class RedisAnalysisCacheStore(AnalysisCacheStore):
    backend_name = 'redis'

    def __init__(self, redis_url: str, client: Optional[redis.Redis] = None):
        self._client = client or redis.Redis.from_url(redis_url, decode_responses=True)

    def get(self, key: str) -> Optional[Dict]:
        try:
            data = self._client.get(key)
        except redis.RedisError as e:
            logger.warning(f'Cache lookup failed for {key}: {str(e)}')
            return None

        if data is None:
            return None

        try:
            value = json.loads(data)
        except ValueError as e:
            logger.warning(f'Failed to deserialize cache entry {key}: {str(e)}')
            return None

        return value if isinstance(value, dict) else None

    def set(self, key: str, value: Dict, ttl: int) -> None:
        try:
            self._client.set(key, json.dumps(value, allow_nan=False), ex=ttl)
        except (redis.RedisError, TypeError, ValueError) as e:
            logger.error(f'Cache store failed for {key}: {str(e)}')

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            logger.warning(f'Redis ping failed: {str(e)}')
            return False

    def close(self) -> None:
        self._client.close()
