"""Constants and HTTP helpers shared by tests."""

from datetime import UTC, datetime, timedelta
from typing import Any

from httpx import AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from labinventory.models.base import utc_now
from labinventory.models.inventory import Asset, Consumable

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


async def reserve_serial(client: AsyncClient, target_type: str = "ASSET") -> str:
    """Reserve a serial through the API and return it."""
    response = await client.post("/api/v1/serials/reserve", params={"type": target_type})
    assert response.status_code == 201, response.text
    serial: str = response.json()["serial"]
    return serial


async def create_asset(client: AsyncClient, location_id: str, name: str = "Oscilloscope") -> dict[str, Any]:
    """Reserve a serial and register an asset with it."""
    serial = await reserve_serial(client, "ASSET")
    response = await client.post(
        "/api/v1/assets",
        json={"serial": serial, "name": name, "category": "Electronics", "locationId": location_id},
    )
    assert response.status_code == 201, response.text
    body: dict[str, Any] = response.json()
    return body


async def create_consumable(client: AsyncClient, location_id: str, name: str = "Agar") -> dict[str, Any]:
    """Reserve a serial and register a consumable with it."""
    serial = await reserve_serial(client, "CONSUMABLE")
    response = await client.post(
        "/api/v1/consumables",
        json={"serial": serial, "name": name, "category": "Media", "unit": "kg", "locationId": location_id},
    )
    assert response.status_code == 201, response.text
    body: dict[str, Any] = response.json()
    return body


async def backdate(
    session_maker: async_sessionmaker[AsyncSession],
    model: type[Asset] | type[Consumable],
    item_id: str,
    days: int,
) -> None:
    """Move an item's last activity ``days`` days into the past."""
    async with session_maker() as session:
        await session.execute(
            update(model).where(model.id == item_id).values(last_activity_at=utc_now() - timedelta(days=days))
        )
        await session.commit()
