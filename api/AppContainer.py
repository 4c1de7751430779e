# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-10-12
# Description: AppContainer.py
# -----------------------------------------------------------------------------
import asyncio
from typing import Optional

from cases.CaseFileStore import CaseFileStore
from config.Config import Config
from embedding.EmbeddingCache import EmbeddingCache
from embedding.EmbeddingProvider import EmbeddingProvider
from embedding.ProviderFactory import build_provider
from health.EmbeddingHealth import EmbeddingHealth
from ranking.RankingService import RankingService
from services.CaseHealthService import CaseHealthService
from utility.logging_utils import get_class_logger


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.
    Singleton instances are provided via FastAPI dependencies.
    Nothing expensive happens here; the model is loaded by startup().
    """

    def __init__(self, cfg: Optional[Config] = None, provider: Optional[EmbeddingProvider] = None) -> None:
        self.logger = get_class_logger(self.__class__)

        # Configuration
        self.cfg = cfg or Config.from_env()
        self.logger.info("Config: %s", self.cfg.summary())

        # Embedding provider (not loaded yet) + shared cache
        self.provider = provider or build_provider(self.cfg)
        self.cache = EmbeddingCache(
            self.provider,
            max_concurrency=self.cfg.provider_concurrency,
            timeout_s=self.cfg.timeout,
            max_entries=self.cfg.cache_max_entries,
        )

        # Return a singleton RankingService instance
        self.ranking_service = RankingService(
            cache=self.cache,
            default_top_k=self.cfg.default_top_k,
        )

        # Read-only case snapshot source
        self.case_store = CaseFileStore(path=self.cfg.cases_file)

        # Smoke tests / health
        self.embedding_health = EmbeddingHealth(self.cache, expected_dim=self.cfg.expected_dim)
        self.health_service = CaseHealthService(
            embedding_health=self.embedding_health,
            cache=self.cache,
            store=self.case_store,
        )

    async def startup(self) -> None:
        """Load the embedding model off the event loop. Safe to call more than once."""
        await asyncio.to_thread(self.provider.init)


# Singleton container instance
app_container = AppContainer()
