# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: RankingService.py
# -----------------------------------------------------------------------------
import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

import numpy as np

from cases.CaseRecord import CaseRecord
from embedding.EmbeddingCache import EmbeddingCache
from embedding.EmbeddingErrors import NotInitialized, ProviderError
from ranking.RankingTypes import RankingResult, ScoredCandidate
from similarity.CosineSimilarity import cosine_similarity, relevance_percent
from utility.logging_utils import get_class_logger


def _validate_top_k(top_k: Any) -> int:
    if isinstance(top_k, bool) or not isinstance(top_k, int):
        raise ValueError(f"top_k must be a positive integer, got {top_k!r}")
    if top_k < 1:
        raise ValueError(f"top_k must be >= 1, got {top_k}")
    return top_k


def _sort_key(item: Tuple[int, ScoredCandidate]) -> Tuple[float, int]:
    idx, cand = item
    sim = cand.similarity
    # NaN sorts last; equal scores keep corpus order
    return (math.inf if math.isnan(sim) else -sim, idx)


@dataclass
class RankingService:
    """
    Related-case ranking:
        - resolves the target case by number (case-insensitive)
        - embeds target and every other case through the shared EmbeddingCache
        - scores by cosine similarity, sorts (ties keep corpus order), truncates to top_k

    One instance per process; the cache it owns is shared by all requests.
    """

    cache: EmbeddingCache
    default_top_k: int = 5
    logger: Optional[logging.Logger] = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        _validate_top_k(self.default_top_k)
        self.logger.info(
            "RankingService initialised (provider=%s default_top_k=%d)",
            getattr(self.cache.provider, "name", type(self.cache.provider).__name__),
            self.default_top_k,
        )

    @property
    def is_ready(self) -> bool:
        return self.cache.provider.is_ready

    async def rank_related(
            self,
            target_id: str,
            corpus: Iterable[Any],
            top_k: Optional[int] = None,
    ) -> RankingResult:
        top_k = self.default_top_k if top_k is None else _validate_top_k(top_k)
        if not self.is_ready:
            raise NotInitialized("Embedding provider not initialized. Call init() first.")

        records: List[CaseRecord] = [CaseRecord.coerce(c) for c in corpus]
        target_key = (target_id or "").strip().casefold()
        target = next((r for r in records if r.key == target_key), None) if target_key else None
        if target is None:
            self.logger.info("rank_related: case '%s' not found in corpus of %d", target_id, len(records))
            return RankingResult.not_found()

        start = time.time()
        target_text = target.embedding_text
        if not target_text.strip():
            raise ValueError(f"case {target.case_number} has no description to compare")

        # A failure here fails the request; there is nothing to compare against
        target_vec = await self.cache.get_or_compute(target_text)

        pool = [(idx, rec) for idx, rec in enumerate(records) if rec.key != target.key]
        tasks = [
            asyncio.ensure_future(self._score_candidate(target_vec, rec))
            for _, rec in pool
        ]
        try:
            outcomes = await asyncio.gather(*tasks)
        except BaseException:
            for t in tasks:
                t.cancel()
            raise

        scored = [(idx, cand) for (idx, _), cand in zip(pool, outcomes) if cand is not None]
        omitted = len(pool) - len(scored)
        scored.sort(key=_sort_key)
        top = tuple(cand for _, cand in scored[:top_k])

        self.logger.info(
            "rank_related: target=%s corpus=%d scored=%d omitted=%d returned=%d (%.1f ms)",
            target.case_number,
            len(records),
            len(scored),
            omitted,
            len(top),
            (time.time() - start) * 1000.0,
        )
        return RankingResult(target=target, candidates=top, omitted=omitted)

    async def _score_candidate(self, target_vec: np.ndarray, rec: CaseRecord) -> Optional[ScoredCandidate]:
        text = rec.embedding_text
        if not text.strip():
            self.logger.warning("Omitting case %s: empty description", rec.case_number)
            return None
        try:
            vec = await self.cache.get_or_compute(text)
        except ProviderError as e:
            self.logger.warning("Omitting case %s: %s", rec.case_number, e)
            return None

        sim = cosine_similarity(target_vec, vec)
        return ScoredCandidate(record=rec, similarity=sim, relevance=relevance_percent(sim))
