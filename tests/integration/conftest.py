import bcrypt
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from src.depends import get_unit_of_work
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.entities import Admin, Tenant


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def app(engine):
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)
    # One session per request, like get_unit_of_work
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    async def override_get_unit_of_work():
        async with Session() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def tenant(db_session, test_data):
    tenant = Tenant(**test_data.get_copy("tenant"))
    db_session.add(tenant)
    await db_session.commit()
    return tenant


@pytest_asyncio.fixture
async def other_tenant(db_session, test_data):
    tenant = Tenant(**test_data.get_copy("other_tenant"))
    db_session.add(tenant)
    await db_session.commit()
    return tenant


@pytest_asyncio.fixture
async def admin_headers(client, db_session, test_data):
    """Seed a platform admin and log in as it"""
    data = test_data.get_copy("admin")
    admin = Admin(
        email=data["email"],
        name=data["name"],
        password_hash=bcrypt.hashpw(data["password"].encode(), bcrypt.gensalt(4)).decode(),
    )
    db_session.add(admin)
    await db_session.commit()

    response = await client.post(
        "/auth/admin/login", json={"email": data["email"], "password": data["password"]}
    )
    assert response.status_code == 200
    token = response.json()["tokens"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def generate_key(client, admin_headers):
    """Factory: generate a registration key through the admin API"""

    async def _generate(tenant_id, account_type="COMPOSTA", **extra):
        response = await client.post(
            "/admin/registration-keys",
            json={"tenant_id": str(tenant_id), "account_type": account_type, **extra},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _generate


@pytest_asyncio.fixture
async def register(client, test_data):
    """Factory: register a user with a plaintext key"""

    async def _register(key, payload="registration"):
        body = test_data.get_copy(payload)
        body["registration_key"] = key
        return await client.post("/auth/register", json=body)

    return _register
