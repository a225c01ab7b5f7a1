# =============================================================================
# UNIT TESTS - CacheManager against a mocked Redis client
# =============================================================================

import asyncio
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.cache import CATALOG_SCOPE, CacheManager, version_key


@pytest.fixture
def cache():
    manager = CacheManager(retry_delay=0)
    manager.redis_client = AsyncMock()
    manager.connected = True
    return manager


def run(coro):
    return asyncio.run(coro)


class TestCacheManager:
    def test_disconnected_cache_is_a_noop(self):
        manager = CacheManager()

        assert run(manager.get("k")) is None
        assert run(manager.set("k", 1)) is False
        assert run(manager.delete("k")) is False

    def test_connect_is_skipped_when_disabled(self):
        assert run(CacheManager().connect()) is False

    def test_get_decodes_json(self, cache):
        cache.redis_client.get.return_value = '{"id": "abc"}'

        assert run(cache.get("k")) == {"id": "abc"}

    def test_get_miss(self, cache):
        cache.redis_client.get.return_value = None

        assert run(cache.get("k")) is None

    def test_undecodable_entry_is_dropped(self, cache):
        cache.redis_client.get.return_value = "{broken"

        assert run(cache.get("k")) is None
        cache.redis_client.delete.assert_awaited_once_with("k")

    def test_set_uses_default_ttl(self, cache):
        assert run(cache.set("k", ["Python"])) is True

        key, ttl, payload = cache.redis_client.setex.await_args.args
        assert key == "k"
        assert ttl == 300
        assert payload == '["Python"]'

    def test_redis_error_disconnects(self, cache):
        cache.redis_client.get.side_effect = RedisConnectionError("gone")

        assert run(cache.get("k")) is None
        assert cache.connected is False
        assert run(cache.set("k", 1)) is False

    def test_invalidate_quiz_bumps_quiz_and_catalog_versions(self, cache):
        assert run(cache.invalidate_quiz("abc")) is True

        keys = [c.args[0] for c in cache.redis_client.incr.await_args_list]
        assert keys == [version_key("abc"), version_key(CATALOG_SCOPE)]
        cache.redis_client.delete.assert_not_awaited()

    def test_missing_version_starts_at_zero(self, cache):
        cache.redis_client.get.return_value = None

        assert run(cache.get_version("abc")) == 0
        cache.redis_client.get.assert_awaited_once_with(version_key("abc"))

    def test_version_is_parsed(self, cache):
        cache.redis_client.get.return_value = "7"

        assert run(cache.get_version(CATALOG_SCOPE)) == 7

    def test_garbled_version_disables_caching(self, cache):
        cache.redis_client.get.return_value = "seven"

        assert run(cache.get_version("abc")) is None

    def test_version_unavailable_when_disconnected(self):
        assert run(CacheManager().get_version("abc")) is None
        assert run(CacheManager().invalidate_quiz("abc")) is False

    def test_version_lookup_error_disconnects(self, cache):
        cache.redis_client.get.side_effect = RedisConnectionError("gone")

        assert run(cache.get_version("abc")) is None
        assert cache.connected is False
