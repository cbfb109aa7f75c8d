"""Consumable API endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from labinventory.api.v1.inventory.dependencies import ConsumableServiceDep
from labinventory.api.v1.inventory.schemas import (
    ConsumableCreateRequest,
    ConsumableResponse,
    QuantityAdjustRequest,
)
from labinventory.services.exceptions import NotFoundError, ValidationError
from labinventory.services.inventory.exceptions import ConsumableNotFound

router = APIRouter(tags=["consumables"])


@router.get("/consumables", response_model=list[ConsumableResponse], operation_id="listConsumables")
async def list_consumables(
    service: ConsumableServiceDep,
    query: str | None = None,
    needs_reorder: Annotated[bool, Query(alias="needsReorder")] = False,
    take: Annotated[int, Query(ge=1, le=500)] = 50,
) -> list[ConsumableResponse]:
    """List consumables, optionally only those below their reorder threshold."""
    consumables = await service.list_consumables(query=query, needs_reorder=needs_reorder, take=take)
    return [ConsumableResponse.from_model(c) for c in consumables]


@router.post("/consumables", response_model=ConsumableResponse, status_code=201, operation_id="createConsumable")
async def create_consumable(
    body: ConsumableCreateRequest,
    service: ConsumableServiceDep,
) -> ConsumableResponse:
    """Register a consumable using a serial reserved with type=CONSUMABLE."""
    try:
        consumable = await service.create_consumable(
            serial=body.serial,
            name=body.name,
            category=body.category,
            unit=body.unit,
            location_id=body.location_id,
            current_qty=body.current_qty,
            reorder_threshold=body.reorder_threshold,
            note=body.note,
        )
    except (ValidationError, NotFoundError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ConsumableResponse.from_model(consumable)


@router.post(
    "/consumables/{consumable_id}/adjust",
    response_model=ConsumableResponse,
    operation_id="adjustConsumable",
)
async def adjust_consumable(
    consumable_id: str,
    body: QuantityAdjustRequest,
    service: ConsumableServiceDep,
) -> ConsumableResponse:
    """Add or remove stock. The quantity never goes below zero."""
    try:
        consumable = await service.adjust_quantity(consumable_id, body.delta, note=body.note)
    except ConsumableNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ConsumableResponse.from_model(consumable)
