from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from labinventory import tasks
from labinventory.models.base import utc_now
from labinventory.models.enums import TargetType
from labinventory.models.serial import SerialReservation
from labinventory.tasks import ReservationPurgeMiddleware, reservations


async def test_purge_task_deletes_old_reservations(
    session_maker: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async with session_maker() as session:
        session.add_all(
            [
                SerialReservation(
                    serial="26000001-9",
                    type=TargetType.ASSET,
                    reserved_by="01JQ0000000000000000000000",
                    expires_at=utc_now() - timedelta(days=2),
                ),
                SerialReservation(
                    serial="26000002-0",
                    type=TargetType.CONSUMABLE,
                    reserved_by="01JQ0000000000000000000000",
                    expires_at=utc_now() + timedelta(minutes=5),
                ),
            ]
        )
        await session.commit()

    @asynccontextmanager
    async def test_db_session() -> AsyncGenerator[AsyncSession]:
        async with session_maker() as session:
            yield session

    monkeypatch.setattr(reservations, "task_db_session", test_db_session)

    deleted = await reservations._purge_async(timedelta(hours=24))

    assert deleted == 1
    async with session_maker() as session:
        assert await session.get(SerialReservation, "26000001-9") is None
        assert await session.get(SerialReservation, "26000002-0") is not None


class FakeRedis:
    def __init__(self, acquired: bool):
        self.acquired = acquired
        self.closed = False
        self.set_calls: list[dict[str, Any]] = []

    def __enter__(self) -> "FakeRedis":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def set(self, name: str, value: str, nx: bool = False, ex: int | None = None) -> bool:
        self.set_calls.append({"name": name, "nx": nx, "ex": ex})
        return self.acquired

    def close(self) -> None:
        self.closed = True


@pytest.mark.parametrize(("acquired", "expected_sends"), [(True, 1), (False, 0)])
def test_worker_boot_queues_purge_and_closes_redis(
    monkeypatch: pytest.MonkeyPatch,
    acquired: bool,
    expected_sends: int,
) -> None:
    client = FakeRedis(acquired)
    sends: list[tuple[Any, ...]] = []
    monkeypatch.setattr(tasks.redis, "from_url", lambda url: client)
    monkeypatch.setattr(reservations.purge_expired_reservations, "send", lambda *args: sends.append(args))
    monkeypatch.setattr(ReservationPurgeMiddleware, "_dispatched", False)

    middleware = ReservationPurgeMiddleware()
    middleware.after_worker_boot(tasks.redis_broker, None)  # type: ignore[arg-type]
    middleware.after_worker_boot(tasks.redis_broker, None)  # type: ignore[arg-type]

    assert client.set_calls == [{"name": tasks.PURGE_LOCK_KEY, "nx": True, "ex": tasks.PURGE_LOCK_TTL}]
    assert client.closed is True
    assert len(sends) == expected_sends
