"""Tests for the TTL caches."""
from linear_mcp.cache import DEFAULT_TTL_SECONDS, SnapshotCache, TTLCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestTTLCache:
    """Entries live for exactly the TTL and are evicted lazily."""

    def test_default_ttl_is_five_minutes(self):
        assert TTLCache().ttl_seconds == DEFAULT_TTL_SECONDS == 300.0

    def test_value_returned_before_expiry(self):
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        cache.set("teams", ["Engineering"])

        clock.now += 299.999
        assert cache.get("teams") == ["Engineering"]

    def test_value_absent_at_expiry(self):
        clock = FakeClock()
        cache = TTLCache(clock=clock)
        cache.set("teams", ["Engineering"])

        clock.now += 300.0
        assert cache.get("teams") is None

    def test_expired_entry_is_evicted_on_lookup(self):
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=10, clock=clock)
        cache.set("teams", [])
        assert len(cache) == 1

        clock.now += 11
        assert cache.get("teams") is None
        assert len(cache) == 0

    def test_empty_payload_is_a_hit(self):
        cache = TTLCache(clock=FakeClock())
        cache.set("states:all", [])
        assert cache.get("states:all") == []

    def test_missing_key(self):
        assert TTLCache(clock=FakeClock()).get("projects:all") is None

    def test_write_overwrites_and_resets_expiry(self):
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=10, clock=clock)
        cache.set("teams", ["old"])

        clock.now += 8
        cache.set("teams", ["new"])

        clock.now += 8
        assert cache.get("teams") == ["new"]

    def test_keys_are_independent(self):
        cache = TTLCache(clock=FakeClock())
        cache.set("projects:all", ["a"])
        cache.set("projects:team-1", ["b"])
        assert cache.get("projects:all") == ["a"]
        assert cache.get("projects:team-1") == ["b"]


class TestSnapshotCache:
    """Single-slot cache for the workspace metadata document."""

    def test_round_trip_and_expiry(self):
        clock = FakeClock()
        snapshot = SnapshotCache(ttl_seconds=300, clock=clock)
        assert snapshot.get() is None

        snapshot.set('{"teams": []}')
        clock.now += 299
        assert snapshot.get() == '{"teams": []}'

        clock.now += 1
        assert snapshot.get() is None
