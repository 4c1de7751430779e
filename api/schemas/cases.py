# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: cases.py
# -----------------------------------------------------------------------------
import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from cases.CaseRecord import CaseRecord
from ranking.RankingTypes import ScoredCandidate


class CaseOut(BaseModel):
    case_number: str
    short_description: str
    long_description: str
    person_affected: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    assigned_group: Optional[str] = None
    created_at: Optional[str] = None
    submitted_by: Optional[str] = None
    tags: Any = None

    @classmethod
    def from_record(cls, rec: CaseRecord, **extra: Any) -> "CaseOut":
        f = rec.fields
        return cls(
            case_number=rec.case_number,
            short_description=rec.short_description,
            long_description=rec.long_description,
            person_affected=f.get("reported_for"),
            status=f.get("status"),
            priority=f.get("priority"),
            category=f.get("category"),
            assigned_group=f.get("assigned_group"),
            created_at=f.get("created_at"),
            submitted_by=f.get("submitted_by"),
            tags=f.get("tags"),
            **extra,
        )


class RelatedCaseOut(CaseOut):
    similarity: float
    relevance: int

    @classmethod
    def from_candidate(cls, cand: ScoredCandidate) -> "RelatedCaseOut":
        sim = 0.0 if math.isnan(cand.similarity) else round(cand.similarity, 4)
        return cls.from_record(cand.record, similarity=sim, relevance=cand.relevance)


class RelatedCasesResponse(BaseModel):
    main_case: CaseOut
    related_cases: List[RelatedCaseOut]
    top_k: int
    omitted: int = 0


class CaseListResponse(BaseModel):
    cases: List[CaseOut]


class CaseDetailResponse(BaseModel):
    case: Dict[str, Any]
