"""
Statistics endpoint for API v1.

Returns the counts shown on the lab dashboard: members by status,
interns whose internship ends soon, upcoming meetings and the state
of the presentation queue.
"""

from fastapi import APIRouter, Depends

from lab_manager_api.app.core.store import EntityStore, get_store
from lab_manager_api.app.schemas.statistics import LabStatistics
from lab_manager_api.app.services.statistics_service import StatisticsService

router = APIRouter()


@router.get("/", response_model=LabStatistics)
async def get_statistics(store: EntityStore = Depends(get_store)) -> LabStatistics:
    return await StatisticsService.lab_stats(store)
