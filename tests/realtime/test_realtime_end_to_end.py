# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
End-to-end tests for the realtime channel.

A real uvicorn server runs the combined Socket.IO + FastAPI app on a free
port; real socketio.Client connections receive the pushed events.
"""
import socket
import threading
import time

import pytest
import socketio
import uvicorn
from socketio.exceptions import ConnectionError as SocketConnectionError

from pmhub.client.api_client import PMHubClient
from pmhub.client.store import ClientStore


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def live_server(test_app):
    """Serve the test app with Socket.IO mounted, lifespan included"""
    from pmhub.main import create_socketio_asgi_app

    port = _free_port()
    config = uvicorn.Config(
        create_socketio_asgi_app(test_app),
        host="127.0.0.1",
        port=port,
        log_level="warning",
        lifespan="on",
    )
    server = uvicorn.Server(config)
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    deadline = time.monotonic() + 10
    while not server.started:
        if time.monotonic() > deadline:
            raise RuntimeError("uvicorn did not start")
        time.sleep(0.05)

    yield f"http://127.0.0.1:{port}"

    server.should_exit = True
    thread.join(timeout=10)


class EventRecorder:
    """Collects one event type from a socketio.Client"""

    def __init__(self, client: socketio.Client, event: str):
        self.events = []
        self.received = threading.Event()
        client.on(event, self._record)

    def _record(self, data):
        self.events.append(data)
        self.received.set()


def _connect(url: str, token: str) -> socketio.Client:
    client = socketio.Client()
    client.connect(url, auth={"token": token}, wait_timeout=5)
    return client


@pytest.mark.integration
class TestRealtimeEndToEnd:
    def test_task_update_reaches_every_connected_client_once(
        self, live_server, test_token, pm_token
    ):
        api = PMHubClient(live_server, token=test_token)
        project = api.create_project(
            {"title": "Launch", "start_date": "2024-01-01", "end_date": "2024-06-01"}
        )
        task = api.create_task(project["id"], {"name": "Draft wireframes"})
        # Let the creation event drain before anyone listens
        time.sleep(0.2)

        clients = [_connect(live_server, test_token), _connect(live_server, pm_token)]
        recorders = [EventRecorder(c, "task_update_event") for c in clients]
        try:
            api.update_task(task["id"], {"status": "in_progress"})

            for recorder in recorders:
                assert recorder.received.wait(timeout=5)
            # Leave room for a duplicate delivery to show up
            time.sleep(0.5)

            for recorder in recorders:
                assert len(recorder.events) == 1
                assert recorder.events[0]["id"] == task["id"]
                assert recorder.events[0]["status"] == "in_progress"
        finally:
            for client in clients:
                client.disconnect()

    def test_comment_event_is_broadcast(self, live_server, test_token):
        api = PMHubClient(live_server, token=test_token)
        project = api.create_project(
            {"title": "Launch", "start_date": "2024-01-01", "end_date": "2024-06-01"}
        )
        task = api.create_task(project["id"], {"name": "Draft wireframes"})

        client = _connect(live_server, test_token)
        recorder = EventRecorder(client, "comment_event")
        try:
            comment = api.add_comment(task["id"], "Looks good")

            assert recorder.received.wait(timeout=5)
            assert recorder.events[0]["id"] == comment["id"]
            assert recorder.events[0]["task_id"] == task["id"]
        finally:
            client.disconnect()

    def test_invalid_token_is_refused_at_handshake(self, live_server):
        client = socketio.Client()

        with pytest.raises(SocketConnectionError):
            client.connect(live_server, auth={"token": "garbage"}, wait_timeout=5)

        assert client.connected is False

    def test_missing_token_is_refused_at_handshake(self, live_server):
        client = socketio.Client()

        with pytest.raises(SocketConnectionError):
            client.connect(live_server, wait_timeout=5)

    def test_store_connects_without_stalling(self, live_server, test_token):
        store = ClientStore(live_server)

        started = time.monotonic()
        store.set_auth_token(test_token)
        elapsed = time.monotonic() - started
        try:
            assert elapsed < 0.9
            assert store.connection_error is None
            assert store.is_socket_connected is True
        finally:
            store.set_auth_token("")

        assert store.socket is None
        assert store.is_socket_connected is False
