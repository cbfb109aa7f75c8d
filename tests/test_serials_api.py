from datetime import UTC, datetime

import pytest
from httpx import AsyncClient
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from labinventory.models.serial import SerialCounter, SerialReservation
from labinventory.utils.serials import format_serial, year_prefix


async def test_reserve_returns_serial_and_expiry(client: AsyncClient) -> None:
    prefix = year_prefix(datetime.now(UTC))

    response = await client.post("/api/v1/serials/reserve", params={"type": "ASSET"})

    assert response.status_code == 201
    body = response.json()
    assert body["serial"] == format_serial(prefix, 1)
    expires_at = datetime.fromisoformat(body["expiresAt"])
    assert expires_at > datetime.now(UTC)


async def test_reserve_sequence_is_shared_between_types(client: AsyncClient) -> None:
    prefix = year_prefix(datetime.now(UTC))

    asset = await client.post("/api/v1/serials/reserve", params={"type": "ASSET"})
    consumable = await client.post("/api/v1/serials/reserve", params={"type": "CONSUMABLE"})

    assert asset.json()["serial"] == format_serial(prefix, 1)
    assert consumable.json()["serial"] == format_serial(prefix, 2)


@pytest.mark.parametrize("params", [{"type": "WIDGET"}, {"type": "asset"}, {}])
async def test_reserve_rejects_bad_type_without_touching_store(
    client: AsyncClient,
    session_maker: async_sessionmaker[AsyncSession],
    params: dict[str, str],
) -> None:
    response = await client.post("/api/v1/serials/reserve", params=params)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid request."
    assert body["issues"][0]["path"] == "type"

    async with session_maker() as session:
        counters = await session.execute(select(func.count()).select_from(SerialCounter))
        reservations = await session.execute(select(func.count()).select_from(SerialReservation))
    assert counters.scalar() == 0
    assert reservations.scalar() == 0


async def test_reserve_when_year_sequence_is_used_up(
    client: AsyncClient,
    session_maker: async_sessionmaker[AsyncSession],
) -> None:
    prefix = year_prefix(datetime.now(UTC))
    async with session_maker() as session:
        session.add(SerialCounter(prefix=prefix, next_value=1_000_000))
        await session.commit()

    response = await client.post("/api/v1/serials/reserve", params={"type": "ASSET"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to allocate a serial."
