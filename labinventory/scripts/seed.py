"""Seed the SYSTEM actor and default locations."""

import asyncio

import click
import structlog

from labinventory.db import async_session_maker, dispose_engine
from labinventory.logging import setup_logging
from labinventory.services.inventory.location_service import LocationService
from labinventory.services.users.user_service import UserService

logger = structlog.get_logger(__name__)


async def _seed(with_locations: bool) -> None:
    try:
        async with async_session_maker() as session:
            actor_id = await UserService(session).get_system_actor_id()
            await session.commit()
            click.echo(f"System actor: {actor_id}")

            if with_locations:
                created = await LocationService(session).seed_defaults()
                click.echo(f"Locations created: {created}")
                logger.info("Seeded database", system_actor_id=actor_id, locations_created=created)
    finally:
        await dispose_engine()


@click.command()
@click.option("--locations/--no-locations", default=True, help="Create default locations on an empty database.")
def main(locations: bool) -> None:
    """Prepare a freshly migrated database for use."""
    setup_logging()
    asyncio.run(_seed(locations))


if __name__ == "__main__":
    main()
