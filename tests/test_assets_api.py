from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from labinventory.models.activity import ActivityLog
from labinventory.models.enums import ActionType
from labinventory.models.inventory import Location
from labinventory.models.serial import SerialReservation
from labinventory.models.user import User
from tests.helpers import create_asset, reserve_serial


async def _actions(session_maker: async_sessionmaker[AsyncSession], target_id: str) -> list[ActionType]:
    async with session_maker() as session:
        result = await session.execute(
            select(ActivityLog.action).where(ActivityLog.target_id == target_id).order_by(ActivityLog.created_at)
        )
        return list(result.scalars().all())


async def test_create_asset_consumes_reservation(
    client: AsyncClient,
    session_maker: async_sessionmaker[AsyncSession],
    location: Location,
) -> None:
    serial = await reserve_serial(client, "ASSET")

    response = await client.post(
        "/api/v1/assets",
        json={
            "serial": serial,
            "name": "Oscilloscope",
            "category": "Electronics",
            "locationId": location.id,
            "budgetCode": "GRANT-42",
            "purchasedAt": "2025-11-03",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["serial"] == serial
    assert body["status"] == "AVAILABLE"
    assert body["budgetCode"] == "GRANT-42"
    assert body["purchasedAt"] == "2025-11-03"
    assert body["currentLocation"] == {"id": location.id, "name": location.name}
    assert body["currentUser"] is None

    async with session_maker() as session:
        assert await session.get(SerialReservation, serial) is None
    assert await _actions(session_maker, body["id"]) == [ActionType.CREATE]


async def test_create_asset_with_unreserved_serial(client: AsyncClient, location: Location) -> None:
    response = await client.post(
        "/api/v1/assets",
        json={"serial": "26999999-2", "name": "Scope", "category": "Electronics", "locationId": location.id},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Serial is not reserved."


async def test_create_asset_with_consumable_serial(
    client: AsyncClient,
    session_maker: async_sessionmaker[AsyncSession],
    location: Location,
) -> None:
    serial = await reserve_serial(client, "CONSUMABLE")

    response = await client.post(
        "/api/v1/assets",
        json={"serial": serial, "name": "Scope", "category": "Electronics", "locationId": location.id},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Serial type mismatch."
    async with session_maker() as session:
        assert await session.get(SerialReservation, serial) is not None


async def test_serial_cannot_be_used_twice(client: AsyncClient, location: Location) -> None:
    asset = await create_asset(client, location.id)

    response = await client.post(
        "/api/v1/assets",
        json={"serial": asset["serial"], "name": "Clone", "category": "Electronics", "locationId": location.id},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Serial is not reserved."


async def test_create_asset_unknown_location_keeps_reservation(
    client: AsyncClient,
    session_maker: async_sessionmaker[AsyncSession],
    location: Location,
) -> None:
    serial = await reserve_serial(client, "ASSET")

    response = await client.post(
        "/api/v1/assets",
        json={"serial": serial, "name": "Scope", "category": "Electronics", "locationId": "nowhere"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Location not found."
    async with session_maker() as session:
        assert await session.get(SerialReservation, serial) is not None


async def test_create_asset_missing_fields(client: AsyncClient) -> None:
    response = await client.post("/api/v1/assets", json={"serial": "26000001-9"})

    assert response.status_code == 400
    paths = {issue["path"] for issue in response.json()["issues"]}
    assert {"name", "category", "locationId"} <= paths


async def test_get_asset(client: AsyncClient, location: Location) -> None:
    asset = await create_asset(client, location.id)

    response = await client.get(f"/api/v1/assets/{asset['id']}")

    assert response.status_code == 200
    assert response.json()["serial"] == asset["serial"]


async def test_get_unknown_asset(client: AsyncClient) -> None:
    response = await client.get("/api/v1/assets/01JQ0000000000000000000000")

    assert response.status_code == 404
    assert response.json()["detail"] == "Asset not found."


async def test_list_assets_filters(client: AsyncClient, location: Location, other_location: Location) -> None:
    scope = await create_asset(client, location.id, name="Oscilloscope")
    await create_asset(client, other_location.id, name="Centrifuge")

    by_query = await client.get("/api/v1/assets", params={"query": "oscillo"})
    by_location = await client.get("/api/v1/assets", params={"locationId": other_location.id})
    by_serial = await client.get("/api/v1/assets", params={"query": scope["serial"]})

    assert [a["name"] for a in by_query.json()] == ["Oscilloscope"]
    assert [a["name"] for a in by_location.json()] == ["Centrifuge"]
    assert [a["id"] for a in by_serial.json()] == [scope["id"]]


async def test_update_asset_metadata(
    client: AsyncClient,
    session_maker: async_sessionmaker[AsyncSession],
    location: Location,
    other_location: Location,
) -> None:
    asset = await create_asset(client, location.id)

    response = await client.put(
        f"/api/v1/assets/{asset['id']}",
        json={"name": "Digital oscilloscope", "locationId": other_location.id, "note": "calibrated"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Digital oscilloscope"
    assert body["category"] == "Electronics"
    assert body["currentLocationId"] == other_location.id
    assert body["note"] == "calibrated"
    assert body["serial"] == asset["serial"]
    assert await _actions(session_maker, asset["id"]) == [ActionType.CREATE, ActionType.EDIT]


async def test_checkout_checkin_cycle(
    client: AsyncClient,
    session_maker: async_sessionmaker[AsyncSession],
    location: Location,
    other_location: Location,
    user: User,
) -> None:
    asset = await create_asset(client, location.id)

    checkout = await client.post(
        f"/api/v1/assets/{asset['id']}/checkout",
        json={"userId": user.id, "locationId": other_location.id, "note": "for the demo"},
    )
    assert checkout.status_code == 200
    assert checkout.json()["status"] == "CHECKED_OUT"
    assert checkout.json()["currentUser"] == {"id": user.id, "name": "Alice"}
    assert checkout.json()["currentLocationId"] == other_location.id

    moved = await client.post(f"/api/v1/assets/{asset['id']}/move", json={"locationId": location.id})
    assert moved.status_code == 200
    assert moved.json()["status"] == "CHECKED_OUT"
    assert moved.json()["currentUserId"] == user.id

    checkin = await client.post(f"/api/v1/assets/{asset['id']}/checkin", json={"locationId": location.id})
    assert checkin.status_code == 200
    assert checkin.json()["status"] == "AVAILABLE"
    assert checkin.json()["currentUser"] is None

    assert await _actions(session_maker, asset["id"]) == [
        ActionType.CREATE,
        ActionType.CHECKOUT,
        ActionType.MOVE,
        ActionType.CHECKIN,
    ]


async def test_checkout_to_unknown_user(client: AsyncClient, location: Location) -> None:
    asset = await create_asset(client, location.id)

    response = await client.post(
        f"/api/v1/assets/{asset['id']}/checkout",
        json={"userId": "01JQ0000000000000000000000", "locationId": location.id},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "User not found."


async def test_checkin_unknown_asset(client: AsyncClient, location: Location) -> None:
    response = await client.post(
        "/api/v1/assets/01JQ0000000000000000000000/checkin",
        json={"locationId": location.id},
    )

    assert response.status_code == 404
