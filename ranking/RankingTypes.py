# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: RankingTypes.py
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import List, Optional, Tuple

from cases.CaseRecord import CaseRecord


@dataclass(frozen=True)
class ScoredCandidate:
    record: CaseRecord
    similarity: float
    relevance: int  # rounded percentage, 0..100

    @property
    def case_number(self) -> str:
        return self.record.case_number


@dataclass(frozen=True)
class RankingResult:
    """
    target is None when the requested case is not in the corpus.
    omitted counts candidates dropped because their embedding could not be produced.
    """
    target: Optional[CaseRecord]
    candidates: Tuple[ScoredCandidate, ...] = ()
    omitted: int = 0

    @property
    def found(self) -> bool:
        return self.target is not None

    def case_numbers(self) -> List[str]:
        return [c.case_number for c in self.candidates]

    @classmethod
    def not_found(cls) -> "RankingResult":
        return cls(target=None, candidates=())
