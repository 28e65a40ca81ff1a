import asyncio

import pytest
from pydantic import BaseModel

from dynamowire.async_table import AsyncTable
from dynamowire.conditions import Gt
from dynamowire.keys import Key


class AsyncEvent(BaseModel):
    user_id: str
    ts: int
    kind: str


@pytest.mark.asyncio
async def test_put_and_get(async_events_table: AsyncTable) -> None:
    await async_events_table.put_item(AsyncEvent(user_id="user-1", ts=100, kind="login"))

    result = await async_events_table.get_item("user-1", 100, model=AsyncEvent)

    assert result.item == AsyncEvent(user_id="user-1", ts=100, kind="login")


@pytest.mark.asyncio
async def test_get_item_not_found(async_events_table: AsyncTable) -> None:
    result = await async_events_table.get_item("user-1", 999)

    assert not result.found


@pytest.mark.asyncio
async def test_concurrent_puts_then_query_pages(async_events_table: AsyncTable) -> None:
    await asyncio.gather(
        *(
            async_events_table.put_item({"user_id": "user-1", "ts": ts, "kind": "login"})
            for ts in range(1, 8)
        ),
    )

    seen: list[int] = []
    start_key: Key | None = None
    while True:
        page = await async_events_table.query(
            "user-1",
            range_key_condition=Gt(2),
            limit=2,
            exclusive_start_key=start_key,
        )
        seen.extend(item["ts"] for item in page.items)
        start_key = page.last_evaluated_key
        if start_key is None:
            break

    assert seen == [3, 4, 5, 6, 7]


@pytest.mark.asyncio
async def test_update_and_delete(async_events_table: AsyncTable) -> None:
    await async_events_table.put_item({"user_id": "user-1", "ts": 100, "kind": "login"})

    updated = await async_events_table.update_item("user-1", 100, updates={"kind": "logout"})
    deleted = await async_events_table.delete_item("user-1", 100)

    assert updated.attributes == {"kind": "login"}
    assert deleted.attributes == {"user_id": "user-1", "ts": 100, "kind": "logout"}
    assert not (await async_events_table.get_item("user-1", 100)).found
