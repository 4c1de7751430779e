# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Updated: 2026-10-12
# Description: OpenAIEmbeddingProvider
# -----------------------------------------------------------------------------
import threading
import time
from typing import Any, Optional

import numpy as np
import openai
from openai import AzureOpenAI, OpenAI

from config.Config import Config
from embedding.EmbeddingErrors import (
    ComputationFailed,
    InitializationError,
    NotInitialized,
    ProviderUnavailable,
)
from utility.logging_utils import get_class_logger

# Worth retrying: the request never reached the model or was throttled.
RETRYABLE_ERRORS = (
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class OpenAIEmbeddingProvider:
    """
    Remote embeddings via OpenAI or Azure OpenAI.

    cfg.embed_provider selects the client flavour; for Azure, cfg.embed_model
    is the deployment name.
    """

    def __init__(
            self,
            cfg: Config,
            *,
            client: Any = None,
            max_retries: int = 5,
            initial_delay: float = 0.8,
            backoff: float = 1.7,
            logger=None,
    ):
        self.cfg = cfg
        self.name = cfg.embed_provider
        self.model = cfg.embed_model
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.backoff = backoff
        self.logger = logger or get_class_logger(self.__class__)

        self.client = client
        self._ready = False
        self._dimension: Optional[int] = None
        self._init_lock = threading.Lock()

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def dimension(self) -> Optional[int]:
        return self._dimension

    def init(self) -> None:
        with self._init_lock:
            if self._ready:
                return
            if self.client is None:
                self.client = self._build_client()
            self._ready = True
            self.logger.info("OpenAI embedder ready (provider=%s, model='%s')", self.name, self.model)

    def _build_client(self) -> Any:
        try:
            if self.name == "azure":
                return AzureOpenAI(
                    api_key=self.cfg.openai_azure_api_key,
                    azure_endpoint=self.cfg.openai_azure_endpoint.rstrip("/"),
                    api_version=self.cfg.openai_api_version,
                )
            kwargs = {"api_key": self.cfg.openai_api_key}
            if self.cfg.openai_base_url:
                kwargs["base_url"] = self.cfg.openai_base_url
            return OpenAI(**kwargs)
        except Exception as e:
            self.logger.error("OpenAI client setup failed: %s", e)
            raise InitializationError(f"Could not create {self.name} client: {e}") from e

    def embed(self, text: str) -> np.ndarray:
        if not self._ready:
            raise NotInitialized("OpenAI embedder not initialized. Call init() first.")

        delay = self.initial_delay
        for attempt in range(1, self.max_retries + 1):
            try:
                resp = self.client.embeddings.create(model=self.model, input=[text])
            except RETRYABLE_ERRORS as e:
                self.logger.warning(f"Embedding call failed (attempt {attempt}/{self.max_retries}): {e}")
                if attempt == self.max_retries:
                    raise ProviderUnavailable(f"OpenAI embeddings unavailable: {e}") from e
                time.sleep(delay)
                delay *= self.backoff  # backoff
                continue
            except openai.OpenAIError as e:
                raise ComputationFailed(f"OpenAI embedding request rejected: {e}") from e

            data = getattr(resp, "data", None) or []
            if not data or not data[0].embedding:
                raise ComputationFailed("No embedding data returned in response.")

            arr = np.asarray(data[0].embedding, dtype=np.float32)
            if self._dimension is None:
                self._dimension = int(arr.shape[0])
            return arr

        # Unreachable and include for type checkers
        raise ProviderUnavailable("OpenAI embeddings unavailable")
