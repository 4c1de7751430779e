# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-12
# Updated: 2026-10-12
# Description: conftest.py
# -----------------------------------------------------------------------------

import sys
import threading
import time
import zlib
from pathlib import Path

import numpy as np
import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))


def _norm(text: str) -> str:
    return text.strip().casefold()


class FakeEmbeddingProvider:
    """
    Deterministic stand-in for a real model.

    vectors:  text -> vector (keys normalised like the cache does)
    delays:   text -> seconds to sleep inside embed()
    failures: text -> exception instance raised on every call
    fail_once: text -> exception instance raised on the first call only
    Unknown texts get a pseudo-random vector seeded from the text.
    """

    name = "fake"

    def __init__(self, vectors=None, *, dim=4, delay=0.0, delays=None,
                 failures=None, fail_once=None, ready=True):
        self.vectors = {_norm(k): v for k, v in (vectors or {}).items()}
        self.dim = dim
        self.delay = delay
        self.delays = {_norm(k): v for k, v in (delays or {}).items()}
        self.failures = {_norm(k): v for k, v in (failures or {}).items()}
        self.fail_once = {_norm(k): v for k, v in (fail_once or {}).items()}
        self._ready = ready
        self.init_calls = 0
        self.calls = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    @property
    def is_ready(self):
        return self._ready

    @property
    def dimension(self):
        return self.dim

    def init(self):
        self.init_calls += 1
        self._ready = True

    def embed(self, text):
        key = _norm(text)
        with self._lock:
            self.calls.append(text)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            pause = self.delays.get(key, self.delay)
            if pause:
                time.sleep(pause)
            if key in self.fail_once:
                raise self.fail_once.pop(key)
            if key in self.failures:
                raise self.failures[key]
            if key in self.vectors:
                return list(self.vectors[key])
            rng = np.random.default_rng(zlib.crc32(key.encode("utf-8")))
            return rng.normal(size=self.dim).tolist()
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture
def fake_provider_cls():
    return FakeEmbeddingProvider


@pytest.fixture
def printer_vectors():
    # B is almost parallel to A, C is orthogonal to A
    return {
        "printer not working": [1.0, 0.0, 0.0],
        "printer is broken": [0.98, 0.2, 0.0],
        "payroll question": [0.0, 0.0, 1.0],
    }


@pytest.fixture
def printer_corpus():
    return [
        {"ticket_id": "A", "short_desc": "printer not working", "long_desc": ""},
        {"ticket_id": "B", "short_desc": "printer is broken", "long_desc": ""},
        {"ticket_id": "C", "short_desc": "payroll question", "long_desc": ""},
    ]
