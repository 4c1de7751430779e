# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-12
# Description: hr cases router
# -----------------------------------------------------------------------------
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

import settings
from api.dependencies import get_case_store, get_ranking_service
from api.schemas.cases import (
    CaseDetailResponse,
    CaseListResponse,
    CaseOut,
    RelatedCaseOut,
    RelatedCasesResponse,
)
from cases.CaseFileStore import CaseFileStore
from embedding.EmbeddingErrors import NotInitialized, ProviderError
from ranking.RankingService import RankingService
from similarity.CosineSimilarity import DimensionMismatch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/hr-cases", tags=["hr-cases"])


def _load_cases(store: CaseFileStore):
    try:
        return store.load()
    except Exception as e:
        logger.exception("Reading cases failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Could not read cases: {e}")


@router.get("", response_model=CaseListResponse)
def list_cases(store: CaseFileStore = Depends(get_case_store)) -> CaseListResponse:
    records = _load_cases(store)[: settings.CASE_LIST_LIMIT]
    return CaseListResponse(cases=[CaseOut.from_record(r) for r in records])


@router.get("/related/{case_number}", response_model=RelatedCasesResponse)
async def get_related_cases(
    case_number: str,
    top_k: Optional[int] = Query(None, ge=1, le=settings.MAX_TOP_K),
    svc: RankingService = Depends(get_ranking_service),
    store: CaseFileStore = Depends(get_case_store),
) -> RelatedCasesResponse:
    logger.info("GET /related/%s called (top_k=%s)", case_number, top_k)
    corpus = await asyncio.to_thread(_load_cases, store)

    try:
        result = await svc.rank_related(case_number, corpus, top_k=top_k)
    except NotInitialized as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ProviderError as e:
        logger.error("Embedding provider failed for case %s: %s", case_number, e)
        raise HTTPException(status_code=502, detail=f"Embedding provider failed: {e}")
    except DimensionMismatch as e:
        logger.exception("Inconsistent embeddings for case %s: %s", case_number, e)
        raise HTTPException(status_code=500, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not result.found:
        raise HTTPException(status_code=404, detail="Case not found")

    return RelatedCasesResponse(
        main_case=CaseOut.from_record(result.target),
        related_cases=[RelatedCaseOut.from_candidate(c) for c in result.candidates],
        top_k=top_k or svc.default_top_k,
        omitted=result.omitted,
    )


@router.get("/{case_number}", response_model=CaseDetailResponse)
def get_case(case_number: str, store: CaseFileStore = Depends(get_case_store)) -> CaseDetailResponse:
    records = _load_cases(store)
    found = next((r for r in records if r.matches(case_number)), None)
    if found is None:
        raise HTTPException(status_code=404, detail="Case not found")
    return CaseDetailResponse(case=found.to_dict())
