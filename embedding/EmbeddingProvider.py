# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: EmbeddingProvider
# -----------------------------------------------------------------------------

from typing import Protocol, Sequence, Optional, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Text -> fixed-length vector.

    init() is idempotent and may be slow (model load / client setup).
    embed() is synchronous and may block; callers run it off the event loop.
    """

    name: str

    @property
    def is_ready(self) -> bool:
        ...

    @property
    def dimension(self) -> Optional[int]:
        ...

    def init(self) -> None:
        ...

    def embed(self, text: str) -> Sequence[float]:
        ...
