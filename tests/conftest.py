"""Pytest configuration and fixtures."""

import asyncio
import json
import tempfile
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from imiccharge.storage import MemoryTokenStore, SQLiteTokenStore


@dataclass
class RecordedRequest:
    """A request as seen by the mock backend."""

    method: str
    path: str
    raw_path: str
    headers: dict[str, str]
    body: Any = None


@dataclass
class Route:
    status: int = 200
    payload: Any = None
    text: str | None = None
    delay: float = 0.0


@dataclass
class MockBackend:
    """In-process stand-in for the imicCharge REST backend."""

    routes: dict[tuple[str, str], Route] = field(default_factory=dict)
    requests: list[RecordedRequest] = field(default_factory=list)
    base_url: str = ""

    def __post_init__(self):
        self.app = web.Application()
        self.app.router.add_route("*", "/{tail:.*}", self._handle)

    def respond(
        self,
        method: str,
        path: str,
        status: int = 200,
        payload: Any = None,
        text: str | None = None,
        delay: float = 0.0,
    ):
        """Register the response for METHOD /path."""
        self.routes[(method, "/" + path.lstrip("/"))] = Route(status, payload, text, delay)

    async def _handle(self, request: web.Request) -> web.StreamResponse:
        raw = await request.text()
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=request.path,
                raw_path=request.raw_path,
                headers=dict(request.headers),
                body=json.loads(raw, parse_float=Decimal) if raw else None,
            )
        )

        route = self.routes.get((request.method, request.path))
        if route is None:
            return web.json_response({"error": "not found"}, status=404)
        if route.delay:
            await asyncio.sleep(route.delay)
        if route.text is not None:
            return web.Response(status=route.status, text=route.text, content_type="application/json")
        if route.payload is None:
            return web.Response(status=route.status)
        return web.json_response(route.payload, status=route.status)


@pytest.fixture
async def backend():
    """Start a mock backend on a random local port."""
    mock = MockBackend()
    server = TestServer(mock.app)
    await server.start_server()
    mock.base_url = str(server.make_url("/"))

    yield mock

    await server.close()


@pytest.fixture
def token_store():
    """Store holding a valid access token."""
    return MemoryTokenStore({"access_token": "tok-123"})


@pytest.fixture
def empty_store():
    """Store without any credentials."""
    return MemoryTokenStore()


@pytest.fixture
def temp_db_path():
    """Path to a temporary SQLite file, removed afterwards."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as tmp:
        db_path = tmp.name

    yield db_path

    for suffix in ("", "-wal", "-shm"):
        Path(db_path + suffix).unlink(missing_ok=True)


@pytest.fixture
async def sqlite_store(temp_db_path):
    """Create a credential store on a temporary SQLite database."""
    store = SQLiteTokenStore(temp_db_path)

    yield store

    await store.close()
