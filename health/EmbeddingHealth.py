# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-06
# Updated: 2026-10-19
# Description: EmbeddingHealth
# -----------------------------------------------------------------------------
import time
import logging
from typing import Optional

from embedding.EmbeddingCache import EmbeddingCache
from utility.logging_utils import get_logger


class EmbeddingHealth:
    """
    Smoke test for the configured embedding provider.

    The test embedding goes through EmbeddingCache.embed_uncached, so it
    shares the provider concurrency cap and timeout with ranking requests
    and is never stored in the cache.

    Verifies:
      - The provider is initialised
      - An embedding call completes and returns a non-empty vector
      - The vector dimension matches the expected dimension (if provided)
    """

    def __init__(
        self,
        cache: EmbeddingCache,
        expected_dim: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.cache = cache
        self.expected_dim = expected_dim or None
        self.logger = logger or get_logger(__name__)

    async def run(self) -> bool:
        """
        Run the embedding smoke test.

        Returns:
            True if the embedding call succeeds and (optionally) the dimension matches.
        """
        test_text = "HR case embedding healthcheck"
        provider = self.cache.provider
        name = getattr(provider, "name", type(provider).__name__)
        self.logger.info("Running embedding healthcheck using provider: %s", name)

        if not provider.is_ready:
            self.logger.error("Embedding provider '%s' is not initialised.", name)
            return False

        try:
            start = time.time()
            embedding = await self.cache.embed_uncached(test_text)
            elapsed_ms = (time.time() - start) * 1000.0
        except Exception as e:
            self.logger.exception("Embedding healthcheck FAILED: %s", e)
            return False

        dim = len(embedding)
        if dim == 0:
            self.logger.error("Empty embedding returned.")
            return False

        self.logger.info(
            "Embedding call succeeded in %.1f ms. Returned dimension: %d",
            elapsed_ms,
            dim,
        )

        if self.expected_dim is not None and dim != self.expected_dim:
            self.logger.warning(
                "Dimension mismatch: expected %d, got %d.",
                self.expected_dim,
                dim,
            )
            return False

        self.logger.info("Embedding healthcheck PASSED.")
        return True
