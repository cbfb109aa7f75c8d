"""Dashboard statistics and stale-item endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from labinventory.api.v1.inventory.dependencies import ReportServiceDep
from labinventory.api.v1.inventory.schemas import (
    StaleItemResponse,
    StaleListResponse,
    StaleMeta,
    StatsResponse,
)
from labinventory.config import settings
from labinventory.services.reports.report_service import StaleFilter

router = APIRouter(tags=["reports"])


@router.get("/stats", response_model=StatsResponse, operation_id="getStats")
async def get_stats(
    service: ReportServiceDep,
    stale_days: Annotated[int | None, Query(alias="staleDays", ge=1, le=3650)] = None,
) -> StatsResponse:
    """Checked-out and stale counts for the home screen."""
    stats = await service.stats(stale_days or settings.stale_days_default)
    return StatsResponse.from_stats(stats)


@router.get("/stale", response_model=StaleListResponse, operation_id="listStale")
async def list_stale(
    service: ReportServiceDep,
    days: Annotated[int | None, Query(ge=1, le=3650)] = None,
    type_filter: Annotated[StaleFilter, Query(alias="type")] = StaleFilter.ALL,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> StaleListResponse:
    """Items with no activity for ``days`` days, longest idle first."""
    days = days or settings.stale_days_default
    items, total = await service.stale_items(days=days, type_filter=type_filter, limit=limit, offset=offset)
    return StaleListResponse(
        meta=StaleMeta(
            days=days,
            type=type_filter,
            limit=limit,
            offset=offset,
            returned=len(items),
            total_approx=total,
        ),
        items=[StaleItemResponse.from_item(item) for item in items],
    )
