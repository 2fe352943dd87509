"""
Test cases for the transcript cache and its periodic sweep.
"""

import asyncio
from pathlib import Path

import pytest

from claude_hooks.transcript_cache import CACHE_TTL_SECONDS, TranscriptCache


class TestTranscriptCache:
    @pytest.fixture
    def clock(self):
        return [0.0]

    @pytest.fixture
    def cache(self, clock):
        return TranscriptCache(ttl=300, clock=lambda: clock[0])

    def test_default_ttl_is_five_minutes(self):
        """Test the default TTL."""
        assert CACHE_TTL_SECONDS == 300
        assert TranscriptCache().ttl == 300

    def test_fresh_entry_is_returned(self, cache, clock):
        """Test that an entry younger than the TTL is returned."""
        cache.put("a.jsonl", ["m1", "m2"])
        clock[0] = 299.9

        assert cache.get("a.jsonl") == ("m1", "m2")

    def test_expired_entry_is_absent_and_evicted(self, cache, clock):
        """Test that an entry at the TTL is evicted on lookup."""
        cache.put("a.jsonl", ["m1"])
        clock[0] = 300

        assert cache.get("a.jsonl") is None
        assert len(cache) == 0

    def test_path_objects_and_strings_share_entries(self, cache):
        """Test that str and Path keys are the same entry."""
        cache.put(Path("/tmp/t.jsonl"), ["m"])

        assert cache.get("/tmp/t.jsonl") == ("m",)

    def test_invalidate_one_or_all(self, cache):
        """Test invalidating one path and the whole cache."""
        cache.put("a", [1])
        cache.put("b", [2])

        cache.invalidate("a")
        assert cache.get("a") is None
        assert cache.get("b") == (2,)

        cache.invalidate()
        assert len(cache) == 0

    def test_invalidate_unknown_path_is_noop(self, cache):
        """Test invalidating a path that is not cached."""
        cache.invalidate("never-cached")

    def test_sweep_removes_only_expired(self, cache, clock):
        """Test that a sweep keeps fresh entries."""
        cache.put("old", [1])
        clock[0] = 200
        cache.put("new", [2])
        clock[0] = 350

        assert cache.sweep() == 1
        assert cache.get("new") == (2,)
        assert len(cache) == 1


class TestSweeper:
    @pytest.mark.asyncio
    async def test_sweeper_evicts_expired_entries(self):
        """Test that the background sweeper evicts expired entries."""
        cache = TranscriptCache(ttl=0.05)
        cache.put("a", [1])
        cache.start_sweeper()
        try:
            await asyncio.sleep(0.2)
            assert len(cache) == 0
        finally:
            await cache.stop_sweeper()

    @pytest.mark.asyncio
    async def test_start_is_idempotent_and_stop_is_clean(self):
        """Test repeated start and a clean stop of the sweeper."""
        cache = TranscriptCache(ttl=60)
        cache.start_sweeper()
        first = cache._sweeper
        cache.start_sweeper()

        assert cache._sweeper is first
        assert cache.sweeping

        await cache.stop_sweeper()

        assert not cache.sweeping
        assert first.cancelled()

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        """Test stopping a sweeper that never started."""
        cache = TranscriptCache()
        await cache.stop_sweeper()
        assert not cache.sweeping
