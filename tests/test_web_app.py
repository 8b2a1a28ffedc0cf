"""Mini README: HTTP tests for the FastAPI routes.

Exercises the query-string admin surface end to end with FastAPI's test
client, including the error-to-status translation.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from depositboard.accounts import CredentialStore
from depositboard.configuration import DepositBoardSettings
from depositboard.context import DashboardContext
from depositboard.interface import create_application


@pytest.fixture()
def client(tmp_path: Path) -> TestClient:
    settings = DepositBoardSettings(data_directory=tmp_path)
    store = CredentialStore(
        settings.credentials_file, master_account="Esther", master_password="1705"
    )
    store.load()
    board = DashboardContext(store)
    return TestClient(create_application(context=board, settings=settings))


def test_deposit_and_participants(client: TestClient) -> None:
    assert client.get("/add/50", params={"user": "Ana", "admin": "Esther"}).status_code == 200
    response = client.post("/add/30", params={"user": "Ana"})
    assert response.json()["total"]["values"] == [50.0, 30.0]

    participants = client.get("/participants").json()
    assert participants == [{"id": "ana", "name": "Ana", "deposit_count": 2, "total": 80.0}]


def test_invalid_deposit_is_rejected(client: TestClient) -> None:
    response = client.get("/add/abc")

    assert response.status_code == 400
    assert client.get("/participants").json() == []


def test_edit_entry_time(client: TestClient) -> None:
    client.get("/add/10", params={"user": "Ana"})

    response = client.put(
        "/entry", params={"user": "Ana", "index": "0", "newTime": "01/10/2026 08:00:00"}
    )
    assert response.status_code == 200
    entries = client.get("/entries", params={"user": "Ana"}).json()["entries"]
    assert entries[0]["time"] == "01/10/2026 08:00:00"

    assert client.put("/entry", params={"user": "Ana", "index": "x", "newTime": "t"}).status_code == 400
    assert client.put("/entry", params={"user": "Ana", "index": "4", "newTime": "t"}).status_code == 404
    assert client.put("/entry", params={"user": "Ana"}).status_code == 400
    assert client.get("/entries").status_code == 400
    assert client.get("/entries", params={"user": "Bia"}).status_code == 404


def test_rename_and_delete_participant(client: TestClient) -> None:
    client.get("/add/10", params={"user": "Ana"})
    client.get("/add/5", params={"user": "Bia"})

    assert client.put("/users/ana", params={"newName": "Bia"}).status_code == 409
    assert client.put("/users/ana").status_code == 400
    renamed = client.put("/users/ana", params={"newName": "Ana Clara"})
    assert renamed.json() == {"message": "Contributor renamed", "oldName": "Ana", "newName": "Ana Clara"}

    assert client.delete("/users/bia").status_code == 200
    assert client.delete("/users/bia").status_code == 404
    assert [row["name"] for row in client.get("/participants").json()] == ["Ana Clara"]


def test_team_crud(client: TestClient) -> None:
    created = client.post("/team", params={"name": "Ana Lúcia", "description": "Secretária"})
    assert created.json()["id"] == "analucia"
    assert client.post("/team", params={"name": "ana lucia"}).status_code == 409
    assert client.post("/team").status_code == 400

    updated = client.put("/team/analucia", params={"description": "Tesoureira"})
    assert updated.json()["description"] == "Tesoureira"
    assert client.put("/team/nobody", params={"name": "X"}).status_code == 404

    assert client.delete("/team/analucia").status_code == 200
    ids = [member["id"] for member in client.get("/team").json()]
    assert ids == ["esther", "evelyn", "lia"]


def test_reset_and_restore_month(client: TestClient) -> None:
    client.get("/add/10")
    client.get("/add/20")

    reset = client.post("/reset-month", params={"admin": "Esther"}).json()
    month = reset["previousMonth"]
    assert client.get("/history").json() == {"months": [month]}

    client.get("/add/1")
    assert client.post("/restore-month", params={"month": month}).status_code == 200
    assert client.get("/add/0").json()["total"]["values"] == [10.0, 20.0, 0.0]
    assert client.post("/restore-month", params={"month": "1999-01"}).status_code == 404
    assert client.post("/restore-month").status_code == 400


def test_register_and_login(client: TestClient) -> None:
    registered = client.post("/register", json={"name": "Lia", "password": "pw"})
    assert registered.status_code == 201
    assert registered.json()["user"] == {"name": "Lia", "isMaster": False}
    assert client.post("/register", params={"name": "lia", "password": "x"}).status_code == 409
    assert client.post("/register").status_code == 400

    assert client.post("/login", params={"name": "Ester", "password": "1705"}).json()["user"] == {
        "name": "Esther",
        "isMaster": True,
    }
    assert client.post("/login", json={"name": "Lia", "password": "nope"}).status_code == 401


def test_change_password_is_master_only(client: TestClient) -> None:
    denied = client.put("/change-password", params={"admin": "Lia", "newPassword": "x"})
    assert denied.status_code == 403
    assert client.put("/change-password", params={"admin": "Esther"}).status_code == 400

    ok = client.put("/change-password", params={"admin": "Esther", "newPassword": "2026"})
    assert ok.status_code == 200
    assert client.post("/login", params={"name": "Esther", "password": "2026"}).status_code == 200


def test_logs_listing_and_clearing(client: TestClient) -> None:
    client.get("/add/10", params={"admin": "Lia"})

    logs = client.get("/logs").json()
    assert logs[-1]["action"] == "deposit"
    assert logs[-1]["actor"] == "Lia"

    assert client.delete("/logs", params={"admin": "Lia"}).status_code == 403
    assert client.delete("/logs", params={"admin": "esther"}).status_code == 200
    assert [entry["action"] for entry in client.get("/logs").json()] == ["clearLogs"]


def test_rename_participant_rejects_identifier_collision(client: TestClient) -> None:
    client.get("/add/10", params={"user": "Ana"})
    client.get("/add/5", params={"user": "Bia"})

    assert client.put("/users/bia", params={"newName": "Aná"}).status_code == 409
    assert [row["id"] for row in client.get("/participants").json()] == ["ana", "bia"]


class _Connection:
    """Request stand-in whose disconnect flag the test controls."""

    def __init__(self) -> None:
        self.disconnected = False

    async def is_disconnected(self) -> bool:
        return self.disconnected


def test_events_stream_sends_state_keepalive_and_updates(tmp_path: Path) -> None:
    """The SSE route opens with the full state and unsubscribes on disconnect."""

    settings = DepositBoardSettings(data_directory=tmp_path, keepalive_seconds=0.01)
    store = CredentialStore(
        settings.credentials_file, master_account="Esther", master_password="1705"
    )
    store.load()
    board = DashboardContext(store)
    app = create_application(context=board, settings=settings)
    endpoint = next(route.endpoint for route in app.routes if getattr(route, "path", None) == "/events")
    connection = _Connection()

    async def consume():
        response = await endpoint(connection)
        frames = response.body_iterator
        initial = await frames.__anext__()
        idle = await frames.__anext__()
        subscribed = len(board.broadcast)
        board.record_deposit(10, contributor="Ana")
        update = await frames.__anext__()
        connection.disconnected = True
        with pytest.raises(StopAsyncIteration):
            await frames.__anext__()
        return response, initial, idle, subscribed, update

    response, initial, idle, subscribed, update = asyncio.run(consume())

    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache"
    state = json.loads(initial[len("data: "):])
    assert set(state) == {"aggregateLabels", "aggregateValues", "contributors", "roster"}
    assert [member["id"] for member in state["roster"]] == ["esther", "evelyn", "lia"]
    assert idle == ": keep-alive\n\n"
    assert subscribed == 1
    assert json.loads(update[len("data: "):])["contributors"]["Ana"]["values"] == [10.0]
    assert len(board.broadcast) == 0
