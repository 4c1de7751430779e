# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: SentenceTransformerProvider
# -----------------------------------------------------------------------------
import logging
import threading
import time
from typing import Optional

import numpy as np

from embedding.EmbeddingErrors import ComputationFailed, InitializationError, NotInitialized
from utility.logging_utils import get_class_logger


class SentenceTransformerProvider:
    """
    In-process embedding model (default: all-MiniLM-L6-v2, 384-d).

    sentence_transformers is imported in init() so the API can start and be
    tested without torch installed.
    """

    name = "local"

    def __init__(
            self,
            model_name: str = "sentence-transformers/all-MiniLM-L6-v2",
            *,
            device: Optional[str] = None,
            logger: Optional[logging.Logger] = None,
    ):
        self.model_name = model_name
        self.device = device
        self.logger = logger or get_class_logger(self.__class__)
        self._model = None
        self._dimension: Optional[int] = None
        self._init_lock = threading.Lock()

    @property
    def is_ready(self) -> bool:
        return self._model is not None

    @property
    def dimension(self) -> Optional[int]:
        return self._dimension

    def init(self) -> None:
        with self._init_lock:
            if self._model is not None:
                return

            self.logger.info("Loading embedding model '%s' ...", self.model_name)
            start = time.time()
            try:
                from sentence_transformers import SentenceTransformer

                model = SentenceTransformer(self.model_name, device=self.device)
                dim = model.get_sentence_embedding_dimension()
            except Exception as e:
                self.logger.error("Embedding model '%s' failed to load: %s", self.model_name, e)
                raise InitializationError(f"Could not load model {self.model_name!r}: {e}") from e

            self._dimension = int(dim) if dim is not None else None
            self._model = model
            self.logger.info(
                "Embedding model loaded in %.1f ms (dim=%s)",
                (time.time() - start) * 1000.0,
                self._dimension,
            )

    def embed(self, text: str) -> np.ndarray:
        if self._model is None:
            raise NotInitialized("Model not initialized. Call init() first.")
        try:
            vec = self._model.encode(
                text,
                normalize_embeddings=True,
                convert_to_numpy=True,
                show_progress_bar=False,
            )
        except Exception as e:
            raise ComputationFailed(f"Local embedding failed: {e}") from e
        return np.asarray(vec, dtype=np.float32).ravel()
