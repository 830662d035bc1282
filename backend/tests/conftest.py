"""Shared test fixtures - uses a temporary async SQLite file for isolated testing."""

import os
import tempfile
from pathlib import Path

import pytest
from fakeredis import aioredis as fake_aioredis
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from frothpet.db.database import Base, get_db
from frothpet.db.redis import get_redis
from frothpet.models.bag import BagRecord
from frothpet.models.pet import PetRecord
from frothpet.services.chain_service import get_chain_reader

# A file (not :memory:) so concurrent sessions get real connections and locking
TEST_DB_PATH = Path(tempfile.gettempdir()) / f"frothpet_test_{os.getpid()}.db"
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DB_PATH}"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)

WALLET_A = "0xabc0000000000000000000000000000000000001"
WALLET_B = "0xdef0000000000000000000000000000000000002"


async def _override_get_db():
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@pytest.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    # Import all models so Base.metadata knows about them
    import frothpet.models  # noqa: F401

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db():
    """Direct async DB session for service-level tests."""
    async with test_session_factory() as session:
        yield session
        await session.commit()


@pytest.fixture
def session_factory():
    """For tests that need several independent sessions."""
    return test_session_factory


@pytest.fixture
async def redis():
    client = fake_aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def chain():
    """Chain reader the API sees; None means DB-only mode."""
    return None


@pytest.fixture
async def client(redis, chain):
    """Async HTTP test client with test DB, fake Redis and chain overrides."""
    from frothpet.main import app

    async def _override_get_redis():
        return redis

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_redis] = _override_get_redis
    app.dependency_overrides[get_chain_reader] = lambda: chain
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def make_pet(db, token_id="1", owner=WALLET_A, energy=100, **fields) -> PetRecord:
    pet = PetRecord(
        token_id=token_id,
        owner=owner,
        energy=energy,
        name=fields.pop("name", f"Pet #{token_id}"),
        **fields,
    )
    db.add(pet)
    await db.flush()
    return pet


async def make_bag(db, wallet=WALLET_A, burger=0, ayam=0) -> BagRecord:
    bag = BagRecord(wallet_address=wallet, burger=burger, ayam=ayam)
    db.add(bag)
    await db.flush()
    return bag
