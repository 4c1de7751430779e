# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: EmbeddingErrors
# -----------------------------------------------------------------------------


class EmbeddingError(RuntimeError):
    """Base class for everything raised by the embedding layer."""


class InitializationError(EmbeddingError):
    """The provider could not load its model / build its client."""


class NotInitialized(EmbeddingError):
    """embed() was called before init() completed."""


class ProviderError(EmbeddingError):
    """
    Transient, per-call provider failure.
    The ranking loop drops the affected candidate instead of failing the request.
    """


class ProviderUnavailable(ProviderError):
    pass


class ComputationFailed(ProviderError):
    pass


class ProviderTimeout(ProviderError):
    def __init__(self, timeout_s: float, key: str = ""):
        self.timeout_s = timeout_s
        self.key = key
        super().__init__(f"Embedding call exceeded {timeout_s:.2f}s (key={key[:60]!r})")
