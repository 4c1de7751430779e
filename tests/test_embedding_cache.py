# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: test_embedding_cache.py
# -----------------------------------------------------------------------------
import asyncio

import numpy as np
import pytest

from embedding.EmbeddingCache import EmbeddingCache, normalize_key
from embedding.EmbeddingErrors import (
    ComputationFailed,
    NotInitialized,
    ProviderTimeout,
    ProviderUnavailable,
)


def test_normalize_key_trims_and_folds_case():
    assert normalize_key("  Foo BAR \n") == "foo bar"
    with pytest.raises(ValueError):
        normalize_key("   ")
    with pytest.raises(ValueError):
        normalize_key(None)


def test_case_and_whitespace_variants_share_one_entry(fake_provider_cls):
    provider = fake_provider_cls({"foo bar": [3.0, 4.0]})
    cache = EmbeddingCache(provider)

    async def run():
        first = await cache.get_or_compute("Foo Bar")
        second = await cache.get_or_compute(" foo bar ")
        return first, second

    first, second = asyncio.run(run())
    assert first is second
    assert len(provider.calls) == 1
    assert cache.stats()["hits"] == 1
    assert cache.stats()["misses"] == 1


def test_stored_vectors_are_normalised_and_read_only(fake_provider_cls):
    provider = fake_provider_cls({"foo": [3.0, 4.0]})
    cache = EmbeddingCache(provider)

    vec = asyncio.run(cache.get_or_compute("foo"))
    assert vec.dtype == np.float32
    assert np.linalg.norm(vec) == pytest.approx(1.0, abs=1e-6)
    assert vec.tolist() == pytest.approx([0.6, 0.8])
    with pytest.raises(ValueError):
        vec[0] = 1.0


def test_zero_vector_is_kept_as_is(fake_provider_cls):
    provider = fake_provider_cls({"blank-ish": [0.0, 0.0, 0.0]})
    cache = EmbeddingCache(provider)
    vec = asyncio.run(cache.get_or_compute("blank-ish"))
    assert vec.tolist() == [0.0, 0.0, 0.0]


def test_concurrent_requests_for_same_key_call_provider_once(fake_provider_cls):
    provider = fake_provider_cls(delay=0.05)
    cache = EmbeddingCache(provider, max_concurrency=4)

    async def run():
        return await asyncio.gather(*(cache.get_or_compute("Same Text") for _ in range(10)))

    results = asyncio.run(run())
    assert len(provider.calls) == 1
    assert all(r is results[0] for r in results)
    assert cache.stats()["in_flight"] == 0


def test_provider_calls_respect_concurrency_cap(fake_provider_cls):
    provider = fake_provider_cls(delay=0.02)
    cache = EmbeddingCache(provider, max_concurrency=1)

    async def run():
        await asyncio.gather(*(cache.get_or_compute(f"text {i}") for i in range(5)))

    asyncio.run(run())
    assert len(provider.calls) == 5
    assert provider.max_active == 1


def test_higher_cap_allows_parallel_calls(fake_provider_cls):
    provider = fake_provider_cls(delay=0.05)
    cache = EmbeddingCache(provider, max_concurrency=3)

    async def run():
        await asyncio.gather(*(cache.get_or_compute(f"text {i}") for i in range(6)))

    asyncio.run(run())
    assert 1 <= provider.max_active <= 3


def test_failure_is_not_cached_and_retry_succeeds(fake_provider_cls):
    provider = fake_provider_cls(fail_once={"flaky": RuntimeError("boom")})
    cache = EmbeddingCache(provider)

    async def run():
        with pytest.raises(ComputationFailed):
            await cache.get_or_compute("flaky")
        assert "flaky" not in cache
        return await cache.get_or_compute("flaky")

    vec = asyncio.run(run())
    assert vec is not None
    assert len(provider.calls) == 2
    assert cache.stats()["failures"] == 1


def test_provider_errors_pass_through_unwrapped(fake_provider_cls):
    provider = fake_provider_cls(failures={"down": ProviderUnavailable("service down")})
    cache = EmbeddingCache(provider)

    with pytest.raises(ProviderUnavailable):
        asyncio.run(cache.get_or_compute("down"))
    assert "down" not in cache


def test_all_waiters_see_the_same_failure(fake_provider_cls):
    provider = fake_provider_cls(delay=0.03, failures={"bad": RuntimeError("nope")})
    cache = EmbeddingCache(provider)

    async def run():
        return await asyncio.gather(
            *(cache.get_or_compute("bad") for _ in range(3)), return_exceptions=True
        )

    results = asyncio.run(run())
    assert all(isinstance(r, ComputationFailed) for r in results)
    assert len(provider.calls) == 1


def test_not_initialized_provider_is_rejected(fake_provider_cls):
    provider = fake_provider_cls(ready=False)
    cache = EmbeddingCache(provider)

    with pytest.raises(NotInitialized):
        asyncio.run(cache.get_or_compute("anything"))
    assert provider.calls == []


def test_slow_provider_times_out_and_leaves_key_absent(fake_provider_cls):
    provider = fake_provider_cls(delays={"slow": 0.3})
    cache = EmbeddingCache(provider, timeout_s=0.05)

    async def run():
        with pytest.raises(ProviderTimeout):
            await cache.get_or_compute("slow")
        return "slow" in cache

    assert asyncio.run(run()) is False


def test_lru_eviction_when_bounded(fake_provider_cls):
    provider = fake_provider_cls()
    cache = EmbeddingCache(provider, max_entries=2)

    async def run():
        await cache.get_or_compute("a")
        await cache.get_or_compute("b")
        await cache.get_or_compute("a")  # a becomes most recently used
        await cache.get_or_compute("c")

    asyncio.run(run())
    assert len(cache) == 2
    assert "a" in cache
    assert "b" not in cache
    assert "c" in cache


def test_unbounded_cache_keeps_everything(fake_provider_cls):
    provider = fake_provider_cls()
    cache = EmbeddingCache(provider)

    async def run():
        for i in range(50):
            await cache.get_or_compute(f"case {i}")

    asyncio.run(run())
    assert len(cache) == 50


def test_invalidate_forces_recompute(fake_provider_cls):
    provider = fake_provider_cls()
    cache = EmbeddingCache(provider)

    async def run():
        await cache.get_or_compute("Reset password")
        assert cache.invalidate(" reset PASSWORD ")
        assert not cache.invalidate("reset password")
        await cache.get_or_compute("reset password")

    asyncio.run(run())
    assert len(provider.calls) == 2


def test_peek_never_calls_provider(fake_provider_cls):
    provider = fake_provider_cls()
    cache = EmbeddingCache(provider)
    assert cache.peek("missing") is None
    assert provider.calls == []


def test_constructor_validation(fake_provider_cls):
    with pytest.raises(ValueError):
        EmbeddingCache(fake_provider_cls(), max_concurrency=0)
    with pytest.raises(ValueError):
        EmbeddingCache(fake_provider_cls(), max_entries=-1)


def test_cancelled_sole_waiter_drops_queued_computation(fake_provider_cls):
    provider = fake_provider_cls(delay=0.1)
    cache = EmbeddingCache(provider, max_concurrency=1)

    async def run():
        first = asyncio.ensure_future(cache.get_or_compute("first"))
        await asyncio.sleep(0.02)
        queued = asyncio.ensure_future(cache.get_or_compute("second"))
        await asyncio.sleep(0.02)

        queued.cancel()
        with pytest.raises(asyncio.CancelledError):
            await queued
        assert cache.stats()["in_flight"] == 1

        await first
        await asyncio.sleep(0.15)

    asyncio.run(run())
    assert provider.calls == ["first"]
    assert "second" not in cache
    assert cache.stats()["in_flight"] == 0
    assert cache.stats()["failures"] == 0


def test_queued_computation_survives_while_a_waiter_remains(fake_provider_cls):
    provider = fake_provider_cls(delay=0.05)
    cache = EmbeddingCache(provider, max_concurrency=1)

    async def run():
        first = asyncio.ensure_future(cache.get_or_compute("first"))
        await asyncio.sleep(0.01)
        leaving = asyncio.ensure_future(cache.get_or_compute("second"))
        staying = asyncio.ensure_future(cache.get_or_compute("second"))
        await asyncio.sleep(0.01)

        leaving.cancel()
        with pytest.raises(asyncio.CancelledError):
            await leaving
        await first
        return await staying

    vec = asyncio.run(run())
    assert provider.calls == ["first", "second"]
    assert cache.peek("second") is vec


def test_new_request_after_drop_computes_again(fake_provider_cls):
    provider = fake_provider_cls(delay=0.05)
    cache = EmbeddingCache(provider, max_concurrency=1)

    async def run():
        first = asyncio.ensure_future(cache.get_or_compute("first"))
        await asyncio.sleep(0.01)
        queued = asyncio.ensure_future(cache.get_or_compute("second"))
        await asyncio.sleep(0.01)
        queued.cancel()
        with pytest.raises(asyncio.CancelledError):
            await queued

        await asyncio.gather(first, cache.get_or_compute("second"))

    asyncio.run(run())
    assert provider.calls == ["first", "second"]
    assert "second" in cache


def test_same_cache_works_across_event_loops(fake_provider_cls):
    provider = fake_provider_cls(delay=0.02)
    cache = EmbeddingCache(provider, max_concurrency=1)

    async def run(prefix):
        await asyncio.gather(*(cache.get_or_compute(f"{prefix} {i}") for i in range(3)))

    # contention on the slots in both runs
    asyncio.run(run("first loop"))
    asyncio.run(run("second loop"))

    assert len(provider.calls) == 6
    assert provider.max_active == 1
    assert len(cache) == 6


def test_embed_uncached_shares_the_cap_and_is_not_stored(fake_provider_cls):
    provider = fake_provider_cls(delay=0.05)
    cache = EmbeddingCache(provider, max_concurrency=1)

    async def run():
        return await asyncio.gather(
            cache.get_or_compute("cached text"),
            cache.embed_uncached("uncached text"),
        )

    _, vec = asyncio.run(run())
    assert provider.max_active == 1
    assert len(provider.calls) == 2
    assert vec.dtype == np.float32
    assert "uncached text" not in cache
    assert cache.stats()["misses"] == 1


def test_embed_uncached_applies_timeout(fake_provider_cls):
    provider = fake_provider_cls(delays={"slow": 0.3})
    cache = EmbeddingCache(provider, timeout_s=0.05)

    async def run():
        with pytest.raises(ProviderTimeout):
            await cache.embed_uncached("slow")

    asyncio.run(run())
    assert "slow" not in cache


def test_embed_uncached_rejects_uninitialized_provider(fake_provider_cls):
    provider = fake_provider_cls(ready=False)
    cache = EmbeddingCache(provider)

    with pytest.raises(NotInitialized):
        asyncio.run(cache.embed_uncached("anything"))
    assert provider.calls == []
