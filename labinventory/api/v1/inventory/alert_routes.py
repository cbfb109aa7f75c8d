"""Alert inbox endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from labinventory.api.v1.inventory.dependencies import AlertServiceDep
from labinventory.api.v1.inventory.schemas import AlertRebuildResponse, AlertResponse, UnreadCountResponse
from labinventory.config import settings
from labinventory.services.alerts.exceptions import AlertNotFound, AlertRebuildConflict

router = APIRouter(tags=["alerts"])


@router.post("/alerts/rebuild", response_model=AlertRebuildResponse, operation_id="rebuildAlerts")
async def rebuild_alerts(
    service: AlertServiceDep,
    days: Annotated[int | None, Query(ge=1, le=3650)] = None,
) -> AlertRebuildResponse:
    """Raise or refresh a STALE alert for every item idle longer than ``days``."""
    days = days or settings.stale_days_default
    try:
        touched = await service.rebuild(days)
    except AlertRebuildConflict as e:
        raise HTTPException(status_code=409, detail=str(e))
    return AlertRebuildResponse(days=days, created_or_updated=touched)


@router.get("/alerts/unread-count", response_model=UnreadCountResponse, operation_id="countUnreadAlerts")
async def count_unread_alerts(service: AlertServiceDep) -> UnreadCountResponse:
    return UnreadCountResponse(count=await service.unread_count())


@router.get("/alerts", response_model=list[AlertResponse], operation_id="listAlerts")
async def list_alerts(
    service: AlertServiceDep,
    is_read: Annotated[bool, Query(alias="isRead")] = False,
) -> list[AlertResponse]:
    """Newest alerts first; snoozed alerts are hidden."""
    alerts = await service.list_alerts(is_read=is_read)
    return [AlertResponse.from_model(alert) for alert in alerts]


@router.post("/alerts/{alert_id}/read", response_model=AlertResponse, operation_id="markAlertRead")
async def mark_alert_read(alert_id: str, service: AlertServiceDep) -> AlertResponse:
    try:
        alert = await service.mark_read(alert_id)
    except AlertNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return AlertResponse.from_model(alert)
