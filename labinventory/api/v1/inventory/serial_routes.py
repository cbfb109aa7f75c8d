"""Serial reservation endpoint."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from labinventory.api.v1.inventory.dependencies import SerialServiceDep
from labinventory.api.v1.inventory.schemas import SerialReservationResponse
from labinventory.models.enums import TargetType
from labinventory.services.serials.exceptions import SerialAllocationExhausted

router = APIRouter(tags=["serials"])


@router.post(
    "/serials/reserve",
    response_model=SerialReservationResponse,
    status_code=201,
    operation_id="reserveSerial",
)
async def reserve_serial(
    service: SerialServiceDep,
    target_type: Annotated[TargetType, Query(alias="type")],
) -> SerialReservationResponse:
    """Reserve the next serial for an asset or consumable.

    The reservation must be consumed by POST /assets or POST /consumables
    before it expires.
    """
    try:
        reservation = await service.reserve(target_type)
    except SerialAllocationExhausted as e:
        raise HTTPException(status_code=500, detail=str(e))
    return SerialReservationResponse.from_model(reservation)
