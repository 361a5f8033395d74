"""Tests for the blocked-keyword filter and the rate-limit counters."""

import pytest

from petcrush.common.content_filter import (
    BLOCKED_KEYWORDS,
    SALES_CONTENT_MESSAGE,
    ensure_clean,
    find_blocked_keyword,
)
from petcrush.common.counters import InMemoryCounterStore, RateLimiter, RedisCounterStore
from petcrush.common.exceptions import RateLimited, ValidationFailed


class TestFindBlockedKeyword:

    @pytest.mark.parametrize("keyword", BLOCKED_KEYWORDS)
    def test_every_keyword_flagged_in_any_case(self, keyword):
        assert find_blocked_keyword(f"texto {keyword} texto") is not None
        assert find_blocked_keyword(keyword.upper()) is not None
        assert find_blocked_keyword(keyword.title()) is not None

    @pytest.mark.parametrize("text", [
        "Cachorro dócil, adora crianças",
        "Looking for a playmate in the park",
        "Vacinado e vermifugado",
        "",
        None,
    ])
    def test_clean_text_passes(self, text):
        assert find_blocked_keyword(text) is None

    def test_returns_first_keyword_in_list_order(self):
        # "R$" precedes "$" and "aceito" in the list
        assert find_blocked_keyword("Aceito R$ 500") == "R$"
        assert find_blocked_keyword("cash or PIX") == "pix"

    def test_substring_match_has_no_word_boundaries(self):
        assert find_blocked_keyword("Vendors") == "vendo"


class TestEnsureClean:

    def test_raises_field_level_error(self):
        with pytest.raises(ValidationFailed) as exc:
            ensure_clean("Frete grátis", "about")
        assert exc.value.field == "about"
        assert exc.value.message == SALES_CONTENT_MESSAGE
        assert exc.value.status_code == 400

    def test_clean_and_empty_pass(self):
        ensure_clean("Muito carinhoso", "about")
        ensure_clean(None, "about")


# ════════════════════════════════════════════════════════════════
# Counters
# ════════════════════════════════════════════════════════════════

class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class BrokenRedis:
    async def incr(self, key):
        raise ConnectionError("redis down")

    async def delete(self, key):
        raise ConnectionError("redis down")


class TestCounters:

    @pytest.mark.asyncio
    async def test_fixed_window_resets(self):
        clock = FakeClock()
        store = InMemoryCounterStore(clock=clock)

        assert (await store.incr("k", 60))[0] == 1
        assert (await store.incr("k", 60))[0] == 2
        clock.now += 61
        assert (await store.incr("k", 60))[0] == 1

    @pytest.mark.asyncio
    async def test_limiter_raises_after_limit_then_recovers(self):
        clock = FakeClock()
        limiter = RateLimiter(InMemoryCounterStore(clock=clock), "test", limit=3, window_seconds=60)

        for _ in range(3):
            await limiter.hit("a@example.com")
        with pytest.raises(RateLimited) as exc:
            await limiter.hit("a@example.com")
        assert exc.value.status_code == 429
        assert exc.value.retry_after == 60

        # other identifiers are independent
        await limiter.hit("b@example.com")

        clock.now += 60
        assert await limiter.hit("a@example.com") == 1

    @pytest.mark.asyncio
    async def test_reset_clears_identifier(self):
        limiter = RateLimiter(InMemoryCounterStore(), "test", limit=1, window_seconds=60)
        await limiter.hit("x")
        await limiter.reset("x")
        assert await limiter.hit("x") == 1

    @pytest.mark.asyncio
    async def test_redis_errors_fall_back_to_memory(self):
        store = RedisCounterStore(BrokenRedis())
        assert (await store.incr("k", 60))[0] == 1
        assert (await store.incr("k", 60))[0] == 2
        await store.reset("k")
        assert (await store.incr("k", 60))[0] == 1

    @pytest.mark.asyncio
    async def test_expired_keys_are_swept(self):
        clock = FakeClock()
        store = InMemoryCounterStore(clock=clock, sweep_interval=30)

        for i in range(50):
            await store.incr(f"petcrush:auth:otp-request:user{i}@example.com", 10)
        assert store.size == 50

        clock.now += 31
        await store.incr("petcrush:auth:otp-request:late@example.com", 10)
        assert store.size == 1

    @pytest.mark.asyncio
    async def test_sweep_keeps_live_windows(self):
        clock = FakeClock()
        store = InMemoryCounterStore(clock=clock, sweep_interval=30)

        await store.incr("short", 10)
        await store.incr("long", 300)
        clock.now += 31
        assert (await store.incr("long", 300))[0] == 2
        assert store.size == 1
