import time
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from agentviz.hub import BroadcastCore
from agentviz.main import create_app


@pytest.fixture
def core() -> BroadcastCore:
    return BroadcastCore()


@pytest.fixture
def client(core: BroadcastCore) -> Iterator[TestClient]:
    # one portal for every request so HTTP and WebSocket share the event loop
    with TestClient(create_app(core=core)) as test_client:
        yield test_client


def _wait_for_subscribers(core: BroadcastCore, expected: int, timeout_s: float = 2.0) -> None:
    deadline = time.monotonic() + timeout_s
    while core.subscriber_count != expected and time.monotonic() < deadline:
        time.sleep(0.01)
    assert core.subscriber_count == expected


def test_subscriber_before_events_gets_empty_history_then_live(
    client: TestClient, make_event
) -> None:
    with client.websocket_connect("/ws") as ws:
        assert ws.receive_json() == {"type": "history", "events": []}
        for n in (1, 2, 3):
            assert client.post("/event", json=make_event(n)).status_code == 200
        for n in (1, 2, 3):
            assert ws.receive_json() == {"type": "event", "event": make_event(n)}
    assert client.get("/history").json() == [make_event(1), make_event(2), make_event(3)]


def test_late_subscriber_gets_snapshot(client: TestClient, make_event) -> None:
    for n in range(1, 121):
        client.post("/event", json=make_event(n))
    with client.websocket_connect("/") as ws:
        first = ws.receive_json()
        assert first["type"] == "history"
        assert len(first["events"]) == 100
        assert first["events"] == client.get("/history").json()


def test_every_subscriber_receives_the_event(client: TestClient, make_event) -> None:
    with client.websocket_connect("/ws") as first, client.websocket_connect("/ws") as second:
        first.receive_json()
        second.receive_json()
        client.post("/event", json=make_event(9))
        expected = {"type": "event", "event": make_event(9)}
        assert first.receive_json() == expected
        assert second.receive_json() == expected


def test_closed_subscriber_is_removed(client: TestClient, core: BroadcastCore, make_event) -> None:
    with client.websocket_connect("/ws") as staying:
        staying.receive_json()
        with client.websocket_connect("/ws") as leaving:
            leaving.receive_json()
            _wait_for_subscribers(core, 2)
        _wait_for_subscribers(core, 1)

        response = client.post("/event", json=make_event(1))
        assert response.status_code == 200
        assert staying.receive_json() == {"type": "event", "event": make_event(1)}
    _wait_for_subscribers(core, 0)


def test_reconnect_is_a_fresh_subscriber(client: TestClient, make_event) -> None:
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        client.post("/event", json=make_event(1))
        ws.receive_json()
    client.post("/event", json=make_event(2))
    with client.websocket_connect("/ws") as ws:
        assert ws.receive_json() == {"type": "history", "events": [make_event(1), make_event(2)]}
