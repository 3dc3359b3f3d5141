"""Analytics endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...errors import PersistenceError
from ...persistence.database import RouteRepository
from ...schemas.analytics import AnalyticsSummaryResponse
from ...services.analytics.stats import summarize_routes
from ..dependencies import get_repository

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/summary", response_model=AnalyticsSummaryResponse, status_code=status.HTTP_200_OK)
def summary(
    user_id: str = Query(..., min_length=1),
    repository: RouteRepository = Depends(get_repository),
) -> AnalyticsSummaryResponse:
    try:
        routes = repository.list_routes(user_id)
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return AnalyticsSummaryResponse(**summarize_routes(routes))
