from httpx import AsyncClient

from labinventory.models.inventory import Location
from tests.helpers import create_asset


async def test_create_and_list_users(client: AsyncClient) -> None:
    created = await client.post("/api/v1/users", json={"name": "Bob", "role": "ADMIN"})
    await client.post("/api/v1/users", json={"name": "Alice"})

    assert created.status_code == 201
    assert created.json()["name"] == "Bob"
    assert created.json()["role"] == "ADMIN"

    listed = await client.get("/api/v1/users")
    assert [(u["name"], u["role"]) for u in listed.json()] == [("Alice", "MEMBER"), ("Bob", "ADMIN")]


async def test_same_name_users_are_distinct(client: AsyncClient) -> None:
    first = await client.post("/api/v1/users", json={"name": "Sam Lee"})
    second = await client.post("/api/v1/users", json={"name": "Sam Lee"})

    assert first.status_code == second.status_code == 201
    assert first.json()["id"] != second.json()["id"]


async def test_create_user_requires_name(client: AsyncClient) -> None:
    response = await client.post("/api/v1/users", json={"name": ""})

    assert response.status_code == 400


async def test_user_assets_lists_only_checked_out(client: AsyncClient, location: Location) -> None:
    user = (await client.post("/api/v1/users", json={"name": "Carol"})).json()
    borrowed = await create_asset(client, location.id, name="Multimeter")
    await create_asset(client, location.id, name="Soldering station")
    await client.post(
        f"/api/v1/assets/{borrowed['id']}/checkout",
        json={"userId": user["id"], "locationId": location.id},
    )

    response = await client.get(f"/api/v1/users/{user['id']}/assets")

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == user["id"]
    assert body["count"] == 1
    assert [a["name"] for a in body["assets"]] == ["Multimeter"]


async def test_user_assets_unknown_user(client: AsyncClient) -> None:
    response = await client.get("/api/v1/users/01JQ0000000000000000000000/assets")

    assert response.status_code == 404
    assert response.json()["detail"] == "User not found."
