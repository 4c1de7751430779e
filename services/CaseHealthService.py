# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-10-19
# Description: CaseHealthService.py
# -----------------------------------------------------------------------------
import asyncio
from dataclasses import dataclass
from typing import Dict

from api.schemas.health import DeepHealthResponse, SmokeTestSummary
from cases.CaseFileStore import CaseFileStore
from embedding.EmbeddingCache import EmbeddingCache
from health.EmbeddingHealth import EmbeddingHealth


@dataclass
class CaseHealthService:
    """
    Runs the smoke checks behind /health/deep:
    provider readiness, a test embedding and case file readability.
    Returns DeepHealthResponse for API layer
    """

    embedding_health: EmbeddingHealth
    cache: EmbeddingCache
    store: CaseFileStore

    async def deep_health(self) -> DeepHealthResponse:
        results: Dict[str, bool] = {
            "provider_ready": bool(self.cache.provider.is_ready),
            "embedding_health": await self.embedding_health.run(),
            # file read blocks; keep it off the event loop
            "case_store": await asyncio.to_thread(self.store.test_connection),
        }

        total = len(results)
        passed = sum(1 for ok in results.values() if ok)
        failed = total - passed

        return DeepHealthResponse(
            status="ok" if failed == 0 else "error",
            results=results,
            summary=SmokeTestSummary(total=total, passed=passed, failed=failed),
            cache=self.cache.stats(),
        )
