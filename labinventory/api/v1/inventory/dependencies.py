"""FastAPI dependencies for service injection."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from labinventory.db import get_session
from labinventory.services.alerts.alert_service import AlertService
from labinventory.services.inventory.asset_service import AssetService
from labinventory.services.inventory.consumable_service import ConsumableService
from labinventory.services.reports.report_service import ReportService
from labinventory.services.serials.serial_service import SerialService
from labinventory.services.users.user_service import UserService


async def get_serial_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SerialService:
    """Get a SerialService instance with the current session."""
    return SerialService(session)


async def get_asset_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AssetService:
    """Get an AssetService instance with the current session."""
    return AssetService(session)


async def get_consumable_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ConsumableService:
    """Get a ConsumableService instance with the current session."""
    return ConsumableService(session)


async def get_user_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UserService:
    """Get a UserService instance with the current session."""
    return UserService(session)


async def get_report_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ReportService:
    """Get a ReportService instance with the current session."""
    return ReportService(session)


async def get_alert_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AlertService:
    """Get an AlertService instance with the current session."""
    return AlertService(session)


# Type aliases for cleaner endpoint signatures
SerialServiceDep = Annotated[SerialService, Depends(get_serial_service)]
AssetServiceDep = Annotated[AssetService, Depends(get_asset_service)]
ConsumableServiceDep = Annotated[ConsumableService, Depends(get_consumable_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
AlertServiceDep = Annotated[AlertService, Depends(get_alert_service)]
