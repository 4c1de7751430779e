# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: ProviderFactory
# -----------------------------------------------------------------------------
from config.Config import Config
from embedding.EmbeddingProvider import EmbeddingProvider
from embedding.OpenAIEmbeddingProvider import OpenAIEmbeddingProvider
from embedding.SentenceTransformerProvider import SentenceTransformerProvider


def build_provider(cfg: Config) -> EmbeddingProvider:
    """Pick the embedding backend named by cfg.embed_provider. Nothing is loaded yet."""
    if cfg.embed_provider == "local":
        return SentenceTransformerProvider(model_name=cfg.embed_model)
    return OpenAIEmbeddingProvider(cfg=cfg)
