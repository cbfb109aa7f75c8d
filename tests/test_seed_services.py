from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from labinventory.models.enums import UserRole
from labinventory.models.inventory import Location
from labinventory.models.user import User
from labinventory.services.inventory.location_service import DEFAULT_LOCATIONS, LocationService
from labinventory.services.users.user_service import UserService


async def test_system_actor_is_created_once(session: AsyncSession) -> None:
    service = UserService(session)

    first = await service.get_system_actor_id()
    await session.commit()
    second = await service.get_system_actor_id()

    assert first == second
    actor = await session.get(User, first)
    assert actor is not None
    assert actor.name == "SYSTEM"
    assert actor.role == UserRole.ADMIN


async def test_seed_default_locations_only_on_empty_table(session: AsyncSession) -> None:
    service = LocationService(session)

    assert await service.seed_defaults() == len(DEFAULT_LOCATIONS)
    assert await service.seed_defaults() == 0

    result = await session.execute(select(func.count()).select_from(Location))
    assert result.scalar() == len(DEFAULT_LOCATIONS)
