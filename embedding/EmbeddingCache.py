# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: EmbeddingCache
# -----------------------------------------------------------------------------
import asyncio
import logging
from collections import OrderedDict
from typing import Dict, Optional, Set

import numpy as np

from embedding.EmbeddingErrors import ComputationFailed, NotInitialized, ProviderError, ProviderTimeout
from embedding.EmbeddingProvider import EmbeddingProvider
from utility.logging_utils import get_class_logger


def normalize_key(text: str) -> str:
    """Cache key for a text: surrounding whitespace trimmed, case folded."""
    if not isinstance(text, str):
        raise ValueError(f"text must be a string, got {type(text).__name__}")
    key = text.strip().casefold()
    if not key:
        raise ValueError("text must not be empty")
    return key


def to_embedding(raw) -> np.ndarray:
    """float32, 1-D, L2-normalised (zero vectors left as is), read-only."""
    vec = np.array(raw, dtype=np.float32).ravel()
    norm = float(np.linalg.norm(vec)) if vec.size else 0.0
    if norm > 0.0:
        vec = vec / norm
    vec.setflags(write=False)
    return vec


class EmbeddingCache:
    """
    Process-wide memo of text -> embedding in front of an EmbeddingProvider.

    - at most one provider call in flight per key; concurrent callers await the same task
    - provider calls run in a worker thread, at most `max_concurrency` at a time
    - a call that times out keeps its slot until the worker thread returns
    - failures are never cached; the key stays absent so the next call retries
    - a queued computation is dropped when its last waiter is cancelled before the
      provider call starts; once started it runs to completion and is cached
    - max_entries > 0 turns on LRU eviction, 0 keeps everything
    """

    def __init__(
            self,
            provider: EmbeddingProvider,
            *,
            max_concurrency: int = 1,
            timeout_s: Optional[float] = None,
            max_entries: int = 0,
            logger: Optional[logging.Logger] = None,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")

        self.provider = provider
        self.max_concurrency = max_concurrency
        self.timeout_s = timeout_s or None
        self.max_entries = max_entries
        self.logger = logger or get_class_logger(self.__class__)

        self._entries: "OrderedDict[str, np.ndarray]" = OrderedDict()
        self._inflight: Dict[str, asyncio.Task] = {}
        self._waiters: Dict[asyncio.Task, int] = {}
        self._started: Set[asyncio.Task] = set()

        # Created on first use inside a running loop, see _bind_loop
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._inflight_lock: Optional[asyncio.Lock] = None
        self._slots: Optional[asyncio.Semaphore] = None

        self.hits = 0
        self.misses = 0
        self.provider_calls = 0
        self.failures = 0

    # -------------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, text: str) -> bool:
        try:
            return normalize_key(text) in self._entries
        except ValueError:
            return False

    def peek(self, text: str) -> Optional[np.ndarray]:
        """Cached vector or None; never calls the provider and does not touch LRU order."""
        return self._entries.get(normalize_key(text))

    def invalidate(self, text: str) -> bool:
        """Drop one entry. Returns True if something was removed."""
        return self._entries.pop(normalize_key(text), None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> Dict[str, int]:
        return {
            "entries": len(self._entries),
            "max_entries": self.max_entries,
            "hits": self.hits,
            "misses": self.misses,
            "provider_calls": self.provider_calls,
            "failures": self.failures,
            "in_flight": len(self._inflight),
        }

    # -------------------------------------------------------------------------
    async def get_or_compute(self, text: str) -> np.ndarray:
        key = normalize_key(text)

        hit = self._lookup(key)
        if hit is not None:
            return hit

        if not self.provider.is_ready:
            raise NotInitialized("Embedding provider not initialized. Call init() first.")

        self._bind_loop()
        async with self._inflight_lock:
            # Another request may have finished while we waited for the lock
            hit = self._lookup(key)
            if hit is not None:
                return hit

            task = self._inflight.get(key)
            if task is None:
                self.misses += 1
                task = asyncio.ensure_future(self._compute(key, text))
                self._inflight[key] = task
                task.add_done_callback(lambda t, k=key: self._settle(k, t))
            self._waiters[task] = self._waiters.get(task, 0) + 1

        try:
            # shield: a cancelled waiter must not cancel the shared computation
            return await asyncio.shield(task)
        finally:
            self._leave(key, task)

    async def embed_uncached(self, text: str) -> np.ndarray:
        """
        One provider call under the same concurrency cap and timeout as
        get_or_compute. The vector is returned but never stored, and the
        hit/miss counters are left alone. Used by the deep health check.
        """
        key = normalize_key(text)
        if not self.provider.is_ready:
            raise NotInitialized("Embedding provider not initialized. Call init() first.")

        self._bind_loop()
        slots = await self._acquire_slot()
        raw = await self._run_provider(slots, key, text)
        return self._convert(raw)

    def _bind_loop(self) -> None:
        """asyncio primitives belong to one loop; rebuild them when the running loop changes."""
        loop = asyncio.get_running_loop()
        if self._loop is loop:
            return
        if self._loop is not None:
            self.logger.debug("Event loop changed; resetting in-flight state")
        self._loop = loop
        self._inflight_lock = asyncio.Lock()
        self._slots = asyncio.Semaphore(self.max_concurrency)
        self._inflight.clear()
        self._waiters.clear()
        self._started.clear()

    def _lookup(self, key: str) -> Optional[np.ndarray]:
        vec = self._entries.get(key)
        if vec is not None:
            self.hits += 1
            if self.max_entries:
                self._entries.move_to_end(key)
        return vec

    def _leave(self, key: str, task: asyncio.Task) -> None:
        remaining = self._waiters.get(task, 0) - 1
        if remaining > 0:
            self._waiters[task] = remaining
            return
        self._waiters.pop(task, None)
        if task.done() or task in self._started:
            return

        # Last waiter gone before the provider was called: drop the queued work
        if self._inflight.get(key) is task:
            del self._inflight[key]
        task.cancel()
        self.logger.debug("Dropped queued computation for key=%r; no waiters left", key[:60])

    def _settle(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        self._started.discard(task)
        # Mark the exception as retrieved even if every waiter went away
        if not task.cancelled() and task.exception() is not None:
            self.failures += 1

    def _store(self, key: str, vec: np.ndarray) -> None:
        self._entries[key] = vec
        if self.max_entries:
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self.logger.debug("Evicted LRU embedding for key=%r", evicted[:60])

    async def _compute(self, key: str, text: str) -> np.ndarray:
        slots = await self._acquire_slot()
        # From here on the provider call goes ahead even if every waiter leaves
        self._started.add(asyncio.current_task())
        raw = await self._run_provider(slots, key, text)
        vec = self._convert(raw)
        self._store(key, vec)
        return vec

    async def _acquire_slot(self) -> asyncio.Semaphore:
        slots = self._slots
        await slots.acquire()
        return slots

    async def _run_provider(self, slots: asyncio.Semaphore, key: str, text: str):
        """Run provider.embed in a worker thread. The caller must already hold a slot from `slots`."""
        loop = asyncio.get_running_loop()
        try:
            self.provider_calls += 1
            self.logger.debug(
                "Calling provider '%s' for key=%r (call #%d)",
                getattr(self.provider, "name", type(self.provider).__name__),
                key[:60],
                self.provider_calls,
            )
            fut = loop.run_in_executor(None, self.provider.embed, text)
        except BaseException:
            slots.release()
            raise
        # The slot follows the worker thread, not the waiter
        fut.add_done_callback(lambda f, s=slots: self._release_slot(s, f))

        try:
            return await asyncio.wait_for(asyncio.shield(fut), timeout=self.timeout_s)
        except asyncio.TimeoutError as e:
            self.logger.warning("Provider call timed out after %.2fs for key=%r", self.timeout_s, key[:60])
            raise ProviderTimeout(self.timeout_s, key) from e
        except (ProviderError, NotInitialized):
            raise
        except Exception as e:
            self.logger.warning("Provider call failed for key=%r: %s", key[:60], e)
            raise ComputationFailed(f"Embedding computation failed: {e}") from e

    @staticmethod
    def _convert(raw) -> np.ndarray:
        try:
            return to_embedding(raw)
        except (TypeError, ValueError) as e:
            raise ComputationFailed(f"Provider returned a malformed vector: {e}") from e

    @staticmethod
    def _release_slot(slots: asyncio.Semaphore, fut: asyncio.Future) -> None:
        slots.release()
        if not fut.cancelled():
            fut.exception()
