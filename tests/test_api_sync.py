"""
End-to-end tests for the Emocore API endpoints.

These tests verify logging samples over HTTP, error reporting, listing saved
samples and Server-Sent Events streaming.
"""

import asyncio
import contextlib
import json
import socket
import threading
import time
from datetime import date, timedelta

import httpx
import uvicorn
from fastapi.testclient import TestClient
from httpx_sse import aconnect_sse

from emocore.config import Settings
from emocore.server import create_app
from emocore.store import AuthorizationStatus, InMemoryHealthStore

# MARK: - Sync


class TestAPISync:
    """Integration tests covering the request/response flow."""

    def setup_method(self):
        """Set up a fresh app with a new store for each test."""
        self.store = InMemoryHealthStore()
        self.app = create_app(self.store, Settings())

    def test_complete_workflow(self):
        """Test the complete workflow: log -> list -> log again -> list."""
        past = (date.today() - timedelta(days=3)).isoformat()

        with TestClient(self.app) as client:
            # 1. Nothing saved yet
            initial = client.get("/state-of-mind")
            assert initial.status_code == 200
            assert initial.json() == {"samples": []}

            # 2. Log a past daily mood
            response = client.post(
                "/state-of-mind",
                json={
                    "kind": "daily_mood",
                    "valence": 0.5,
                    "date": f"{past}T08:15:00+00:00",
                    "labels": ["happy", 15],
                    "associations": ["family"],
                },
            )
            assert response.status_code == 201

            result = response.json()
            sample = result["sample"]
            assert result["title"] == "A Pleasant Day"
            assert sample["kind"] == 2
            assert sample["valence_classification"] == 6
            assert sample["labels"] == [17, 15]
            assert sample["associations"] == [5]
            assert sample["date"].startswith(f"{past}T22:00:00")

            # 3. Log a momentary emotion without a date
            response = client.post(
                "/state-of-mind",
                json={"kind": 1, "valence": -1.0},
            )
            assert response.status_code == 201
            assert response.json()["title"] == "A Very Unpleasant Moment"

            # 4. Both are listed, oldest first
            listed = client.get("/state-of-mind").json()["samples"]
            assert [s["id"] for s in listed] == [
                sample["id"],
                response.json()["sample"]["id"],
            ]

    def test_validation_error(self):
        """Test that validation errors report the offending value."""
        with TestClient(self.app) as client:
            response = client.post(
                "/state-of-mind", json={"kind": "momentary_emotion", "valence": 1.5}
            )
            assert response.status_code == 422
            detail = response.json()["detail"]
            assert detail["error"] == "ValenceOutOfRange"
            assert detail["value"] == 1.5

            response = client.post(
                "/state-of-mind",
                json={"kind": 1, "valence": 0.0, "labels": ["happy", "euphoric"]},
            )
            assert response.status_code == 422
            assert response.json()["detail"]["error"] == "UnsupportedLabel"
            assert response.json()["detail"]["value"] == ["euphoric"]

            response = client.post(
                "/state-of-mind",
                json={"kind": 1, "valence": 0.0, "labels": ["\u00b2"]},
            )
            assert response.status_code == 422
            assert response.json()["detail"]["error"] == "UnsupportedLabel"

            assert client.get("/state-of-mind").json() == {"samples": []}

    def test_unauthorized(self):
        store = InMemoryHealthStore(authorization=AuthorizationStatus.SHARING_DENIED)
        with TestClient(create_app(store, Settings())) as client:
            response = client.post("/state-of-mind", json={"kind": 1, "valence": 0.0})
            assert response.status_code == 403
            detail = response.json()["detail"]
            assert detail["error"] == "Unauthorized"
            assert detail["value"] == "sharing_denied"

    def test_unavailable(self):
        store = InMemoryHealthStore(available=False)
        with TestClient(create_app(store, Settings())) as client:
            response = client.post("/state-of-mind", json={"kind": 1, "valence": 0.0})
            assert response.status_code == 503
            assert response.json()["detail"]["error"] == "StoreUnavailable"


# MARK: - Streaming


class TestAPIStream:
    """Integration tests covering sample streaming over SSE."""

    def setup_method(self):
        """Set up a fresh app with a new store for each test."""
        self.store = InMemoryHealthStore()
        self.app = create_app(self.store, Settings())

    async def test_streaming_api(self):
        """Test streaming API with a consumer that collects saved samples."""

        # Start a real HTTP server in a background thread on a free port
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.bind(("127.0.0.1", 0))
        host, port = sock.getsockname()
        sock.close()
        base_url = f"http://{host}:{port}"

        config = uvicorn.Config(
            app=self.app,
            host=host,
            port=port,
            loop="asyncio",
            lifespan="on",
            log_level="warning",
            ws="none",
        )
        server = uvicorn.Server(config)

        def run_server() -> None:
            asyncio.run(server.serve())

        thread = threading.Thread(target=run_server, daemon=True)
        thread.start()

        # Wait for server to be ready
        start = time.time()
        while time.time() - start < 5.0:
            try:
                r = httpx.get(base_url + "/", timeout=0.2)
                if r.status_code == 200:
                    break
            except httpx.HTTPError:
                pass
            time.sleep(0.05)
        else:
            server.should_exit = True
            thread.join(timeout=1.0)
            assert False, "Server did not start in time"

        async with httpx.AsyncClient(
            base_url=base_url, timeout=httpx.Timeout(5.0, read=None)
        ) as client:
            first = await client.post("/state-of-mind", json={"kind": 1, "valence": 0.3})
            assert first.status_code == 201

            received: list[str] = []
            got_existing = asyncio.Event()

            async def consume() -> None:
                async with aconnect_sse(client, "GET", "/state-of-mind/stream") as es:
                    assert es.response.status_code == 200
                    content_type = es.response.headers.get("content-type", "")
                    assert content_type.startswith("text/event-stream")

                    async for sse in es.aiter_sse():
                        assert sse.event != "error", f"SSE error event: {sse.data}"
                        received.append(json.loads(sse.data)["id"])
                        got_existing.set()
                        if len(received) >= 3:
                            break

            consumer_task = asyncio.create_task(consume())

            try:
                await asyncio.wait_for(got_existing.wait(), timeout=3.0)
            except TimeoutError:
                consumer_task.cancel()
                with contextlib.suppress(Exception, asyncio.CancelledError):
                    await consumer_task
                server.should_exit = True
                thread.join(timeout=1.0)
                assert False, "Consumer did not receive the existing sample in time"

            second = await client.post("/state-of-mind", json={"kind": 1, "valence": 0.9})
            third = await client.post(
                "/state-of-mind", json={"kind": "daily_mood", "valence": -0.2}
            )
            assert second.status_code == 201
            assert third.status_code == 201

            try:
                await asyncio.wait_for(consumer_task, timeout=3.0)
            except TimeoutError:
                consumer_task.cancel()
                with contextlib.suppress(Exception, asyncio.CancelledError):
                    await consumer_task
                server.should_exit = True
                thread.join(timeout=1.0)
                assert False, f"Streaming test timed out. Received: {received}"

            assert received == [
                first.json()["sample"]["id"],
                second.json()["sample"]["id"],
                third.json()["sample"]["id"],
            ]

        server.should_exit = True
        thread.join(timeout=2.0)
