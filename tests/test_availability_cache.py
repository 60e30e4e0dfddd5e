"""
Tests for the per-session availability cache
"""

import pytest

from app.client.availability_cache import DEFAULT_TTL_SECONDS, AvailabilityCache


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return AvailabilityCache(clock=clock)


class TestAvailabilityCache:

    def test_ttl_is_five_minutes(self):
        assert DEFAULT_TTL_SECONDS == 300
        assert AvailabilityCache().ttl == 300

    def test_miss_on_empty_cache(self, cache):
        assert cache.get(1, 2030, 6) is None

    def test_hit_just_before_expiry(self, cache, clock):
        entry = cache.new_entry(['booking'], ['block'])
        cache.set(1, 2030, 6, entry)

        clock.advance(DEFAULT_TTL_SECONDS - 0.001)

        assert cache.get(1, 2030, 6) is entry

    def test_miss_just_after_expiry(self, cache, clock):
        cache.set(1, 2030, 6, cache.new_entry([], []))

        clock.advance(DEFAULT_TTL_SECONDS + 0.001)

        assert cache.get(1, 2030, 6) is None
        # expired entries are evicted, not kept around
        assert len(cache) == 0

    def test_entry_stamped_with_fetch_time(self, cache, clock):
        entry = cache.new_entry([], [], plot={'id': 1})
        assert entry.fetched_at == clock.now
        assert entry.plot == {'id': 1}

    def test_keys_are_per_plot_and_month(self, cache):
        june = cache.new_entry(['june'], [])
        july = cache.new_entry(['july'], [])
        cache.set(1, 2030, 6, june)
        cache.set(1, 2030, 7, july)

        assert cache.get(1, 2030, 6) is june
        assert cache.get(1, 2030, 7) is july
        assert cache.get(2, 2030, 6) is None
        assert cache.get(1, 2031, 6) is None

    def test_set_replaces_entry(self, cache):
        cache.set(1, 2030, 6, cache.new_entry(['old'], []))
        fresh = cache.new_entry(['new'], [])
        cache.set(1, 2030, 6, fresh)

        assert cache.get(1, 2030, 6) is fresh
        assert len(cache) == 1

    def test_invalidate_all(self, cache):
        cache.set(1, 2030, 6, cache.new_entry([], []))
        cache.set(1, 2030, 7, cache.new_entry([], []))

        cache.invalidate_all()

        assert len(cache) == 0
        assert cache.get(1, 2030, 6) is None

    def test_caches_are_independent(self, clock):
        first = AvailabilityCache(clock=clock)
        second = AvailabilityCache(clock=clock)
        first.set(1, 2030, 6, first.new_entry([], []))

        assert second.get(1, 2030, 6) is None
