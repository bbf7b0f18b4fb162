"""IdempotencyStore against fakeredis: key lifecycle and fail-open behaviour."""
import unittest

import fakeredis

from streamgate.services.idempotency import IN_FLIGHT, IdempotencyStore


class TestIdempotencyStore(unittest.TestCase):
    def setUp(self):
        self.redis = fakeredis.FakeRedis(decode_responses=True)
        self.store = IdempotencyStore(client=self.redis)

    def test_first_reserve_wins(self):
        self.assertTrue(self.store.reserve("claim:a:1"))
        self.assertFalse(self.store.reserve("claim:a:1"))
        self.assertEqual(self.store.lookup("claim:a:1"), IN_FLIGHT)

    def test_reserve_sets_ttl(self):
        self.store.reserve("claim:a:1", ttl_seconds=60)
        self.assertTrue(0 < self.redis.ttl("idempotency:claim:a:1") <= 60)

    def test_complete_stores_result(self):
        self.store.reserve("claim:a:1")
        self.store.complete("claim:a:1", "record-1")
        self.assertEqual(self.store.lookup("claim:a:1"), "record-1")
        self.assertFalse(self.store.reserve("claim:a:1"))

    def test_release_frees_key(self):
        self.store.reserve("claim:a:1")
        self.store.release("claim:a:1")
        self.assertIsNone(self.store.lookup("claim:a:1"))
        self.assertTrue(self.store.reserve("claim:a:1"))


class TestIdempotencyStoreRedisDown(unittest.TestCase):
    def setUp(self):
        server = fakeredis.FakeServer()
        server.connected = False
        self.store = IdempotencyStore(client=fakeredis.FakeRedis(server=server))

    def test_reserve_fails_open(self):
        self.assertTrue(self.store.reserve("claim:a:1"))
        self.assertTrue(self.store.reserve("claim:a:1"))

    def test_lookup_complete_release_do_not_raise(self):
        self.assertIsNone(self.store.lookup("claim:a:1"))
        self.store.complete("claim:a:1", "record-1")
        self.store.release("claim:a:1")
