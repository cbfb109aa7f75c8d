"""Location lookups and seeding.

Locations are master data; this service has no HTTP CRUD surface.
"""

import structlog
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from labinventory.models.inventory import Location
from labinventory.models.types import is_ulid
from labinventory.services.inventory.exceptions import LocationNotFound

logger = structlog.get_logger(__name__)

# (name, note) pairs created on an empty database
DEFAULT_LOCATIONS: tuple[tuple[str, str], ...] = (
    ("Lab shared shelf", "Initial default"),
    ("Personal storage", "Personal desks, lockers, etc."),
)


class LocationService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def require(self, location_id: str) -> Location:
        """Return the location or raise LocationNotFound."""
        if not is_ulid(location_id):
            raise LocationNotFound()
        location = await self.session.get(Location, location_id)
        if location is None:
            raise LocationNotFound()
        return location

    async def seed_defaults(self) -> int:
        """Create DEFAULT_LOCATIONS when no location exists. Returns rows created."""
        result = await self.session.execute(select(func.count()).select_from(Location))
        if (result.scalar() or 0) > 0:
            logger.info("Locations already exist, skipping seed")
            return 0

        self.session.add_all(Location(name=name, note=note) for name, note in DEFAULT_LOCATIONS)
        await self.session.commit()
        logger.info("Seeded default locations", count=len(DEFAULT_LOCATIONS))
        return len(DEFAULT_LOCATIONS)
