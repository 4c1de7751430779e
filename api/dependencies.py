# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-10-19
# Description: dependencies.py
# -----------------------------------------------------------------------------
from api.AppContainer import app_container
from cases.CaseFileStore import CaseFileStore
from ranking.RankingService import RankingService
from services.CaseHealthService import CaseHealthService


def get_health_service() -> CaseHealthService:
    # use the singleton service from the container
    return app_container.health_service


def get_ranking_service() -> RankingService:
    # use the singleton service from the container
    return app_container.ranking_service


def get_case_store() -> CaseFileStore:
    return app_container.case_store
