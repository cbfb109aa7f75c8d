from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from labinventory.models.alert import Alert
from labinventory.models.base import utc_now
from labinventory.models.inventory import Asset, Consumable, Location
from labinventory.tasks import alerts as alert_tasks
from tests.helpers import backdate, create_asset, create_consumable


async def _alert_count(session_maker: async_sessionmaker[AsyncSession]) -> int:
    async with session_maker() as session:
        result = await session.execute(select(func.count()).select_from(Alert))
        return result.scalar() or 0


async def _snooze(session_maker: async_sessionmaker[AsyncSession], alert_id: str, delta: timedelta) -> None:
    async with session_maker() as session:
        await session.execute(update(Alert).where(Alert.id == alert_id).values(snooze_until=utc_now() + delta))
        await session.commit()


async def test_rebuild_creates_alert_per_stale_item(
    client: AsyncClient,
    session_maker: async_sessionmaker[AsyncSession],
    location: Location,
) -> None:
    idle_asset = await create_asset(client, location.id, name="Old scale")
    await create_asset(client, location.id, name="Busy scope")
    idle_consumable = await create_consumable(client, location.id, name="Agar")
    await backdate(session_maker, Asset, idle_asset["id"], days=200)
    await backdate(session_maker, Consumable, idle_consumable["id"], days=400)

    response = await client.post("/api/v1/alerts/rebuild")

    assert response.status_code == 200
    assert response.json() == {"days": 180, "createdOrUpdated": 2}

    listed = await client.get("/api/v1/alerts")
    assert listed.status_code == 200
    by_target = {alert["targetId"]: alert for alert in listed.json()}
    assert set(by_target) == {idle_asset["id"], idle_consumable["id"]}

    asset_alert = by_target[idle_asset["id"]]
    assert asset_alert["type"] == "STALE"
    assert asset_alert["targetType"] == "ASSET"
    assert asset_alert["title"] == f"Stale asset: Old scale ({idle_asset['serial']})"
    assert asset_alert["body"].startswith("last update: ")
    assert asset_alert["isRead"] is False
    assert asset_alert["snoozeUntil"] is None
    assert by_target[idle_consumable["id"]]["title"] == f"Stale consumable: Agar ({idle_consumable['serial']})"


async def test_rebuild_respects_days(
    client: AsyncClient,
    session_maker: async_sessionmaker[AsyncSession],
    location: Location,
) -> None:
    asset = await create_asset(client, location.id)
    await backdate(session_maker, Asset, asset["id"], days=40)

    default_window = await client.post("/api/v1/alerts/rebuild")
    short_window = await client.post("/api/v1/alerts/rebuild", params={"days": 30})

    assert default_window.json() == {"days": 180, "createdOrUpdated": 0}
    assert short_window.json() == {"days": 30, "createdOrUpdated": 1}


@pytest.mark.parametrize("days", ["0", "3651", "soon"])
async def test_rebuild_rejects_bad_days(client: AsyncClient, days: str) -> None:
    response = await client.post("/api/v1/alerts/rebuild", params={"days": days})

    assert response.status_code == 400
    assert response.json()["issues"][0]["path"] == "days"


async def test_rebuild_again_keeps_read_flag(
    client: AsyncClient,
    session_maker: async_sessionmaker[AsyncSession],
    location: Location,
) -> None:
    asset = await create_asset(client, location.id)
    await backdate(session_maker, Asset, asset["id"], days=200)
    await client.post("/api/v1/alerts/rebuild")
    alert = (await client.get("/api/v1/alerts")).json()[0]

    read = await client.post(f"/api/v1/alerts/{alert['id']}/read")
    assert read.status_code == 200
    assert read.json()["isRead"] is True

    await backdate(session_maker, Asset, asset["id"], days=300)
    again = await client.post("/api/v1/alerts/rebuild")

    assert again.json()["createdOrUpdated"] == 1
    assert await _alert_count(session_maker) == 1
    assert (await client.get("/api/v1/alerts")).json() == []
    read_alerts = (await client.get("/api/v1/alerts", params={"isRead": "true"})).json()
    assert [a["id"] for a in read_alerts] == [alert["id"]]
    assert read_alerts[0]["body"] != alert["body"]
    assert (await client.get("/api/v1/alerts/unread-count")).json() == {"count": 0}


async def test_unread_count_hides_snoozed_alerts(
    client: AsyncClient,
    session_maker: async_sessionmaker[AsyncSession],
    location: Location,
) -> None:
    first = await create_asset(client, location.id, name="Scale")
    second = await create_asset(client, location.id, name="Stirrer")
    third = await create_asset(client, location.id, name="Pump")
    for asset in (first, second, third):
        await backdate(session_maker, Asset, asset["id"], days=200)
    await client.post("/api/v1/alerts/rebuild")
    alerts = {a["targetId"]: a["id"] for a in (await client.get("/api/v1/alerts")).json()}

    await _snooze(session_maker, alerts[first["id"]], timedelta(days=1))
    await _snooze(session_maker, alerts[second["id"]], -timedelta(minutes=5))

    count = await client.get("/api/v1/alerts/unread-count")
    listed = await client.get("/api/v1/alerts")

    assert count.json() == {"count": 2}
    assert {a["targetId"] for a in listed.json()} == {second["id"], third["id"]}


async def test_list_newest_first(
    client: AsyncClient,
    session_maker: async_sessionmaker[AsyncSession],
    location: Location,
) -> None:
    older = await create_asset(client, location.id, name="Older")
    newer = await create_asset(client, location.id, name="Newer")
    await backdate(session_maker, Asset, older["id"], days=200)
    await backdate(session_maker, Asset, newer["id"], days=200)
    await client.post("/api/v1/alerts/rebuild")
    async with session_maker() as session:
        await session.execute(
            update(Alert).where(Alert.target_id == older["id"]).values(created_at=utc_now() - timedelta(hours=1))
        )
        await session.commit()

    listed = await client.get("/api/v1/alerts")

    assert [a["targetId"] for a in listed.json()] == [newer["id"], older["id"]]


@pytest.mark.parametrize("alert_id", ["01JQ0000000000000000000000", "not-an-id"])
async def test_mark_unknown_alert_read(client: AsyncClient, alert_id: str) -> None:
    response = await client.post(f"/api/v1/alerts/{alert_id}/read")

    assert response.status_code == 404
    assert response.json()["detail"] == "Alert not found."


async def test_rebuild_task(
    client: AsyncClient,
    session_maker: async_sessionmaker[AsyncSession],
    location: Location,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    asset = await create_asset(client, location.id)
    await backdate(session_maker, Asset, asset["id"], days=200)

    @asynccontextmanager
    async def test_db_session() -> AsyncGenerator[AsyncSession]:
        async with session_maker() as session:
            yield session

    monkeypatch.setattr(alert_tasks, "task_db_session", test_db_session)

    touched = await alert_tasks._rebuild_async(180)

    assert touched == 1
    assert (await client.get("/api/v1/alerts/unread-count")).json() == {"count": 1}
