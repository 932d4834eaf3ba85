from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from label_ledger.api.v1.dependencies import get_engine
from label_ledger.db import get_session
from label_ledger.main import app


@pytest_asyncio.fixture
async def client(engine: AsyncEngine, session_maker: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncClient]:
    async def override_session() -> AsyncIterator[AsyncSession]:
        async with session_maker() as s:
            yield s

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_engine] = lambda: engine
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


async def _allocate(client: AsyncClient, **overrides: object) -> dict:
    body = {"process_type": "R", "supplier": "Acme", "quantity": 3, "mode": "consecutive", **overrides}
    response = await client.post("/api/v1/batches", json=body)
    assert response.status_code == 201, response.text
    return response.json()


async def test_health(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.json() == {"status": "healthy"}


async def test_list_sequences(client: AsyncClient) -> None:
    response = await client.get("/api/v1/sequences")

    assert response.status_code == 200
    sequences = response.json()["sequences"]
    assert [s["process_type"] for s in sequences] == ["L", "P", "R", "S1", "S2"]
    reception = sequences[2]
    assert reception["display_name"] == "Reception"
    assert (reception["last_number"], reception["next_number"]) == (0, 1)


async def test_allocate(client: AsyncClient) -> None:
    data = await _allocate(client, quantity=2)

    assert data["codes"] == ["PALM-R-000001", "PALM-R-000002"]
    assert (data["start_number"], data["end_number"]) == (1, 2)
    assert data["mode"] == "consecutive"

    identical = await _allocate(client, quantity=3, mode="identical")
    assert identical["codes"] == ["PALM-R-000003"] * 3


@pytest.mark.parametrize(
    ("overrides", "status"),
    [
        ({"process_type": "X"}, 404),
        ({"quantity": 0}, 422),
        ({"quantity": 1001}, 422),
        ({"supplier": "   "}, 422),
        ({"mode": "shuffled"}, 422),
    ],
)
async def test_allocate_rejects_bad_input(client: AsyncClient, overrides: dict, status: int) -> None:
    body = {"process_type": "R", "supplier": "Acme", "quantity": 3, "mode": "consecutive", **overrides}

    response = await client.post("/api/v1/batches", json=body)

    assert response.status_code == status
    sequences = (await client.get("/api/v1/sequences")).json()["sequences"]
    assert all(s["last_number"] == 0 for s in sequences)


async def test_get_batch_returns_regenerated_codes(client: AsyncClient) -> None:
    allocation = await _allocate(client, process_type="S1", quantity=4)

    response = await client.get(f"/api/v1/batches/{allocation['batch_id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["codes"] == allocation["codes"]
    assert data["display_name"] == "Sorting 1"
    assert data["created_at"]


async def test_get_missing_batch(client: AsyncClient) -> None:
    assert (await client.get("/api/v1/batches/999")).status_code == 404


async def test_history(client: AsyncClient) -> None:
    ids = [(await _allocate(client, quantity=1))["batch_id"] for _ in range(3)]

    page_one = (await client.get("/api/v1/batches", params={"page": 1, "page_size": 2})).json()
    beyond = (await client.get("/api/v1/batches", params={"page": 5, "page_size": 2})).json()

    assert [b["id"] for b in page_one["batches"]] == [ids[2], ids[1]]
    assert page_one["total"] == 3
    assert beyond["batches"] == []
    assert beyond["total"] == 3


async def test_history_rejects_bad_paging(client: AsyncClient) -> None:
    assert (await client.get("/api/v1/batches", params={"page": 0})).status_code == 422


async def test_delete_batch_recomputes_counter(client: AsyncClient) -> None:
    await _allocate(client, quantity=5)
    second = await _allocate(client, quantity=5)

    response = await client.delete(f"/api/v1/batches/{second['batch_id']}")

    assert response.status_code == 200
    assert response.json()["last_number"] == 5
    assert (await client.delete(f"/api/v1/batches/{second['batch_id']}")).status_code == 404


async def test_clear_history(client: AsyncClient) -> None:
    await _allocate(client)
    await _allocate(client, process_type="P")

    response = await client.delete("/api/v1/batches")

    assert response.json() == {"deleted": 2}
    sequences = {s["process_type"]: s["last_number"] for s in (await client.get("/api/v1/sequences")).json()["sequences"]}
    assert (sequences["R"], sequences["P"]) == (3, 3)


async def test_reset_sequence(client: AsyncClient) -> None:
    await _allocate(client)
    await _allocate(client, process_type="L")

    response = await client.post("/api/v1/sequences/R/reset")

    assert response.status_code == 200
    assert response.json()["last_number"] == 0
    sequences = {s["process_type"]: s["last_number"] for s in (await client.get("/api/v1/sequences")).json()["sequences"]}
    assert sequences["L"] == 3
    assert (await client.get("/api/v1/batches")).json()["total"] == 2


async def test_reset_unknown_sequence(client: AsyncClient) -> None:
    assert (await client.post("/api/v1/sequences/X/reset")).status_code == 404


async def test_reset_all_sequences(client: AsyncClient) -> None:
    await _allocate(client)

    response = await client.post("/api/v1/sequences/reset")

    assert response.json() == {"reset": 5}


async def test_settings_round_trip(client: AsyncClient) -> None:
    assert (await client.get("/api/v1/settings")).json()["label_width"] == 60

    response = await client.put("/api/v1/settings", json={"label_width": 100, "label_height": 75})

    assert response.status_code == 200
    current = (await client.get("/api/v1/settings")).json()
    assert (current["label_width"], current["label_height"]) == (100, 75)


async def test_settings_rejects_unknown_key(client: AsyncClient) -> None:
    assert (await client.put("/api/v1/settings", json={"printer": "zebra"})).status_code == 422


async def test_backup(client: AsyncClient, tmp_path: Path) -> None:
    await _allocate(client)
    destination = tmp_path / "backup.db"

    response = await client.post("/api/v1/backup", json={"destination": str(destination)})

    assert response.status_code == 200
    assert response.json()["path"] == str(destination.resolve())
    assert destination.is_file()
