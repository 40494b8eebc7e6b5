import pytest
from httpx import ASGITransport, AsyncClient

from review_service.app import create_app
from review_service.config import PERSISTENCE_MEMORY, Settings
from review_service.store import ReviewStore


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store():
    return ReviewStore()


@pytest.fixture
def app(store):
    return create_app(Settings(persistence=PERSISTENCE_MEMORY), store=store)


@pytest.fixture
async def client(app, anyio_backend):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest.fixture
def database_path(tmp_path):
    return tmp_path / "reviews.db"


@pytest.fixture
def database_url(database_path):
    return f"sqlite+aiosqlite:///{database_path}"
