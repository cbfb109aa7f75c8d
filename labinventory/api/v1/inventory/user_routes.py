"""User API endpoints."""

from fastapi import APIRouter, HTTPException

from labinventory.api.v1.inventory.dependencies import AssetServiceDep, UserServiceDep
from labinventory.api.v1.inventory.schemas import (
    AssetResponse,
    UserAssetsResponse,
    UserCreateRequest,
    UserResponse,
)
from labinventory.services.users.exceptions import UserAlreadyExists, UserNotFound

router = APIRouter(tags=["users"])


@router.get("/users", response_model=list[UserResponse], operation_id="listUsers")
async def list_users(service: UserServiceDep) -> list[UserResponse]:
    """List users by name."""
    users = await service.list_users()
    return [UserResponse.from_model(user) for user in users]


@router.post("/users", response_model=UserResponse, status_code=201, operation_id="createUser")
async def create_user(body: UserCreateRequest, service: UserServiceDep) -> UserResponse:
    """Add a lab member."""
    try:
        user = await service.create_user(body.name, body.role)
    except UserAlreadyExists as e:
        raise HTTPException(status_code=409, detail=str(e))
    return UserResponse.from_model(user)


@router.get("/users/{user_id}/assets", response_model=UserAssetsResponse, operation_id="listUserAssets")
async def list_user_assets(
    user_id: str,
    users: UserServiceDep,
    assets: AssetServiceDep,
) -> UserAssetsResponse:
    """Assets currently checked out to a user."""
    try:
        user = await users.get_user(user_id)
        borrowed = await assets.list_checked_out_by(user_id)
    except UserNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return UserAssetsResponse(
        user=UserResponse.from_model(user),
        count=len(borrowed),
        assets=[AssetResponse.from_model(asset) for asset in borrowed],
    )
