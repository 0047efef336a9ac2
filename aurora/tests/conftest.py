import random
from datetime import date, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from aurora.app.core.config import Settings
from aurora.app.core.state import AppState
from aurora.app.main import create_app


CATALOG = [
    {
        "room_id": "deluxe-king",
        "room_name": "Deluxe King",
        "description": "Corner room with a king bed.",
        "media": {"photos": ["deluxe-king-1.jpg"]},
    },
    {
        "room_id": "garden-twin",
        "room_name": "Garden Twin",
        "description": "Two singles facing the garden.",
    },
]


@pytest.fixture
def future_day():
    """A check-in date safely after today, offset by ``days``."""

    def _future_day(days: int = 0) -> str:
        return (date.today() + timedelta(days=30 + days)).isoformat()

    return _future_day


@pytest.fixture
def state(tmp_path) -> AppState:
    settings = Settings(
        ROOMS_FILE=str(tmp_path / "rooms.json"),
        IMAGES_DIR=str(tmp_path),
        AUTH_MODE="cookie",
        ERROR_RATE=0,
    )
    return AppState(settings, rng=random.Random(1234), catalog=list(CATALOG))


@pytest.fixture
def app(state):
    return create_app(state.settings, state)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def other_client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def login():
    async def _login(client: AsyncClient, username: str = "admin", password: str = "password"):
        return await client.post("/login", data={"username": username, "password": password})

    return _login
