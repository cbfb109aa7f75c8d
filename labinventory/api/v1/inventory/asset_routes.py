"""Asset API endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from labinventory.api.v1.inventory.dependencies import AssetServiceDep
from labinventory.api.v1.inventory.schemas import (
    AssetCreateRequest,
    AssetResponse,
    AssetUpdateRequest,
    CheckoutRequest,
    LocationChangeRequest,
)
from labinventory.models.enums import AssetStatus
from labinventory.services.exceptions import NotFoundError, ValidationError
from labinventory.services.inventory.exceptions import AssetNotFound

router = APIRouter(tags=["assets"])


@router.get("/assets", response_model=list[AssetResponse], operation_id="listAssets")
async def list_assets(
    service: AssetServiceDep,
    query: str | None = None,
    status: AssetStatus | None = None,
    location_id: Annotated[str | None, Query(alias="locationId")] = None,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
    take: Annotated[int, Query(ge=1, le=200)] = 50,
) -> list[AssetResponse]:
    """Search assets by serial, name, category or budget code."""
    assets = await service.list_assets(
        query=query,
        status=status,
        location_id=location_id,
        user_id=user_id,
        take=take,
    )
    return [AssetResponse.from_model(asset) for asset in assets]


@router.post("/assets", response_model=AssetResponse, status_code=201, operation_id="createAsset")
async def create_asset(
    body: AssetCreateRequest,
    service: AssetServiceDep,
) -> AssetResponse:
    """Register an asset using a serial reserved with type=ASSET."""
    try:
        asset = await service.create_asset(
            serial=body.serial,
            name=body.name,
            category=body.category,
            location_id=body.location_id,
            budget_code=body.budget_code,
            purchased_at=body.purchased_at,
            note=body.note,
        )
    except (ValidationError, NotFoundError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AssetResponse.from_model(asset)


@router.get("/assets/{asset_id}", response_model=AssetResponse, operation_id="getAsset")
async def get_asset(
    asset_id: str,
    service: AssetServiceDep,
) -> AssetResponse:
    """Get a single asset."""
    try:
        asset = await service.get_asset(asset_id)
    except AssetNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return AssetResponse.from_model(asset)


@router.put("/assets/{asset_id}", response_model=AssetResponse, operation_id="updateAsset")
async def update_asset(
    asset_id: str,
    body: AssetUpdateRequest,
    service: AssetServiceDep,
) -> AssetResponse:
    """Update asset metadata. Omitted fields are left unchanged."""
    try:
        asset = await service.update_asset(asset_id, body.to_changes())
    except AssetNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AssetResponse.from_model(asset)


@router.post("/assets/{asset_id}/checkout", response_model=AssetResponse, operation_id="checkoutAsset")
async def checkout_asset(
    asset_id: str,
    body: CheckoutRequest,
    service: AssetServiceDep,
) -> AssetResponse:
    """Lend an asset to a user."""
    try:
        asset = await service.checkout(asset_id, user_id=body.user_id, location_id=body.location_id, note=body.note)
    except AssetNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AssetResponse.from_model(asset)


@router.post("/assets/{asset_id}/checkin", response_model=AssetResponse, operation_id="checkinAsset")
async def checkin_asset(
    asset_id: str,
    body: LocationChangeRequest,
    service: AssetServiceDep,
) -> AssetResponse:
    """Return an asset to a storage location."""
    try:
        asset = await service.checkin(asset_id, location_id=body.location_id, note=body.note)
    except AssetNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AssetResponse.from_model(asset)


@router.post("/assets/{asset_id}/move", response_model=AssetResponse, operation_id="moveAsset")
async def move_asset(
    asset_id: str,
    body: LocationChangeRequest,
    service: AssetServiceDep,
) -> AssetResponse:
    """Move an asset without changing its borrower."""
    try:
        asset = await service.move(asset_id, location_id=body.location_id, note=body.note)
    except AssetNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AssetResponse.from_model(asset)
