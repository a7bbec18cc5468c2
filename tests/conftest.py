import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from carrental.auth import create_access_token, hash_password
from carrental.database import create_schema, get_db
from carrental.main import app
from carrental.models import Car, Role, User
from carrental.models.user import AuthProvider
from carrental.repository import Repository
from carrental.services.identity import get_identity_provider

PASSWORD = "Secret123!"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def engine(tmp_path):
    """A fresh SQLite database per test, with tables and roles created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def identity_provider():
    """Stand-in for Google; tests set ``identity`` or ``error``."""
    return FakeIdentityProvider()


@pytest.fixture
async def client(session_factory, identity_provider):
    """HTTP client bound to the test database, one session per request."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class FakeIdentityProvider:
    def __init__(self):
        self.identity = None
        self.error = None
        self.tokens = []

    async def verify(self, id_token):
        self.tokens.append(id_token)
        if self.error is not None:
            raise self.error
        return self.identity


# -------- seed helpers --------
async def make_user(session, email="rider@example.com", password=PASSWORD,
                    fullname="Rider One", role="customer", provider=AuthProvider.LOCAL,
                    google_id=None):
    role_obj = await Repository(Role, session).get_one(name=role)
    return await Repository(User, session).create({
        "email": email,
        "password": hash_password(password) if password else None,
        "fullname": fullname,
        "provider": provider,
        "google_id": google_id,
        "role": role_obj,
    })


async def make_car(session, name="Avanza", price=100.0, is_driver=False, is_available=True):
    return await Repository(Car, session).create({
        "name": name,
        "price": price,
        "is_driver": is_driver,
        "is_available": is_available,
    })


def auth_header(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'id': user.id})}"}
