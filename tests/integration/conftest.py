import pytest_asyncio
from dataclasses import dataclass
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.depends import get_session
from src.domain.business import Business, BusinessMember, BusinessRole
from src.domain.client import Client
from src.domain.user_profile import UserProfile

SERVICE_TOKEN = "test-service-token"


class IntegrationTestConfig(ApplicationConfig):
    API_PREFIX = ""
    REQUIRE_VERIFIED_EMAIL = True
    VERIFICATION_BASE_URL = "https://verify.test"
    RETENTION_SERVICE_TOKEN = SERVICE_TOKEN


@dataclass
class SeedData:
    business: Business
    owner: UserProfile
    viewer: UserProfile
    unverified: UserProfile
    client: Client


@pytest_asyncio.fixture(scope="function")
async def engine():
    """Create an in-memory SQLite engine shared by all connections of a test"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def seed(db_session) -> SeedData:
    """Business with a verified owner, a viewer, an unverified member and one client"""
    business = Business(
        name="Acme",
        legal_name="Acme Trading Ltd",
        tax_id="TIN-778812",
        jurisdiction="NG",
        document_prefix="INV",
    )
    owner = UserProfile(email="owner@acme.example", email_verified=True)
    viewer = UserProfile(email="viewer@acme.example", email_verified=True)
    unverified = UserProfile(email="new@acme.example", email_verified=False)
    db_session.add_all([business, owner, viewer, unverified])
    await db_session.flush()

    client = Client(business_id=business.id, name="Globex Corp", email="ap@globex.example")
    db_session.add_all([
        client,
        BusinessMember(business_id=business.id, user_id=owner.id, role=BusinessRole.OWNER),
        BusinessMember(business_id=business.id, user_id=viewer.id, role=BusinessRole.VIEWER),
        BusinessMember(business_id=business.id, user_id=unverified.id, role=BusinessRole.MEMBER),
    ])
    await db_session.commit()

    return SeedData(business=business, owner=owner, viewer=viewer, unverified=unverified, client=client)


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from src.api.app import create_app

    app = create_app(IntegrationTestConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
