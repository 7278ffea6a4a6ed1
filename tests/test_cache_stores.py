import json
import pytest
import redis
from unittest.mock import Mock
from apps.domain.interfaces.analysis_cache_store import AnalysisCacheStore
from apps.infrastructure.cache.factory import CacheStoreFactory
from apps.infrastructure.cache.memory_store import InMemoryAnalysisCacheStore
from apps.infrastructure.cache.redis_store import RedisAnalysisCacheStore


class TestInMemoryAnalysisCacheStore:
    def test_miss_returns_none(self, memory_store):
        assert memory_store.get('analysis:missing') is None

    def test_set_then_get(self, memory_store, clean_analysis):
        memory_store.set('analysis:abc', clean_analysis, ttl=60)

        assert memory_store.get('analysis:abc') == clean_analysis

    def test_returned_value_is_a_copy(self, memory_store, clean_analysis):
        memory_store.set('analysis:abc', clean_analysis, ttl=60)

        first = memory_store.get('analysis:abc')
        first['executiveSummary'] = 'changed'

        assert memory_store.get('analysis:abc')['executiveSummary'] == clean_analysis['executiveSummary']

    def test_entry_expires(self, memory_store, clock, clean_analysis):
        memory_store.set('analysis:abc', clean_analysis, ttl=60)

        clock.advance(59)
        assert memory_store.get('analysis:abc') is not None

        clock.advance(1)
        assert memory_store.get('analysis:abc') is None
        assert len(memory_store) == 0

    def test_last_write_wins(self, memory_store):
        memory_store.set('analysis:abc', {'executiveSummary': 'first'}, ttl=60)
        memory_store.set('analysis:abc', {'executiveSummary': 'second'}, ttl=60)

        assert memory_store.get('analysis:abc') == {'executiveSummary': 'second'}

    def test_expired_entries_are_swept_on_write(self, memory_store, clock):
        memory_store.set('analysis:old', {'executiveSummary': 'old'}, ttl=60)
        memory_store.set('analysis:fresh', {'executiveSummary': 'fresh'}, ttl=600)

        clock.advance(60)
        memory_store.set('analysis:new', {'executiveSummary': 'new'}, ttl=60)

        assert len(memory_store) == 2
        assert memory_store.get('analysis:fresh') == {'executiveSummary': 'fresh'}

    def test_non_finite_number_is_skipped(self, memory_store):
        memory_store.set('analysis:abc', {'value': float('nan')}, ttl=60)

        assert memory_store.get('analysis:abc') is None

    def test_unserializable_value_is_skipped(self, memory_store):
        memory_store.set('analysis:abc', {'bad': object()}, ttl=60)

        assert memory_store.get('analysis:abc') is None

    def test_ping(self, memory_store):
        assert memory_store.ping() is True


class TestRedisAnalysisCacheStore:
    def test_get_decodes_json(self, clean_analysis):
        client = Mock()
        client.get.return_value = json.dumps(clean_analysis)
        store = RedisAnalysisCacheStore('redis://localhost:6379/0', client=client)

        assert store.get('analysis:abc') == clean_analysis
        client.get.assert_called_once_with('analysis:abc')

    def test_get_miss(self):
        client = Mock()
        client.get.return_value = None
        store = RedisAnalysisCacheStore('redis://localhost:6379/0', client=client)

        assert store.get('analysis:abc') is None

    def test_get_failure_is_a_miss(self):
        client = Mock()
        client.get.side_effect = redis.ConnectionError('connection refused')
        store = RedisAnalysisCacheStore('redis://localhost:6379/0', client=client)

        assert store.get('analysis:abc') is None

    def test_get_invalid_payload_is_a_miss(self):
        client = Mock()
        client.get.return_value = 'not json'
        store = RedisAnalysisCacheStore('redis://localhost:6379/0', client=client)

        assert store.get('analysis:abc') is None

    def test_set_uses_ttl(self, clean_analysis):
        client = Mock()
        store = RedisAnalysisCacheStore('redis://localhost:6379/0', client=client)

        store.set('analysis:abc', clean_analysis, ttl=604800)

        client.set.assert_called_once_with('analysis:abc', json.dumps(clean_analysis), ex=604800)

    def test_set_failure_is_swallowed(self, clean_analysis):
        client = Mock()
        client.set.side_effect = redis.TimeoutError('timed out')
        store = RedisAnalysisCacheStore('redis://localhost:6379/0', client=client)

        store.set('analysis:abc', clean_analysis, ttl=60)

    def test_ping_failure(self):
        client = Mock()
        client.ping.side_effect = redis.ConnectionError('down')
        store = RedisAnalysisCacheStore('redis://localhost:6379/0', client=client)

        assert store.ping() is False


class TestCacheStoreFactory:
    def test_factory_singleton(self):
        assert CacheStoreFactory() is CacheStoreFactory()

    def test_memory_backend_without_redis_url(self):
        store = CacheStoreFactory().get_store()

        assert isinstance(store, InMemoryAnalysisCacheStore)
        assert isinstance(store, AnalysisCacheStore)

    def test_store_is_shared(self):
        assert CacheStoreFactory().get_store() is CacheStoreFactory().get_store()

    def test_redis_backend_with_redis_url(self, settings):
        settings.REDIS_URL = 'redis://localhost:6379/0'

        store = CacheStoreFactory().get_store()

        assert isinstance(store, RedisAnalysisCacheStore)
        assert store.backend_name == 'redis'

    def test_clear_cache(self):
        first = CacheStoreFactory().get_store()
        CacheStoreFactory().clear_cache()

        assert CacheStoreFactory().get_store() is not first
