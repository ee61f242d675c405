"""
Centralized Test Configuration.
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from dispatch_engine.app.db.session import Base
from dispatch_engine.app.models.agency import Agency
from dispatch_engine.app.models.dispatch import Dispatch
from dispatch_engine.app.models.enums import AgencyType, DispatchStatus
from dispatch_engine.app.models.parcel import Parcel
from dispatch_engine.app.services.agency_directory import directory_for

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def session_factory():
    return TestingSessionLocal


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
async def ctx(db_session):
    """Directory over the shared test session."""
    return directory_for(db_session)


@pytest.fixture
def make_agency(db_session):
    """Factory inserting an agency and returning its ID."""
    async def _make_agency(
        name: str,
        parent_agency_id: int = None,
        agency_type: AgencyType = AgencyType.AGENCY,
        agency_id: int = None
    ) -> int:
        agency = Agency(
            id=agency_id,
            name=name,
            parent_agency_id=parent_agency_id,
            agency_type=agency_type,
        )
        db_session.add(agency)
        await db_session.commit()
        return agency.id

    return _make_agency


@pytest.fixture
def make_parcel(db_session):
    """Factory inserting a parcel and returning it."""
    async def _make_parcel(tracking_number: str, agency_id: int = None, dispatch_id: int = None) -> Parcel:
        parcel = Parcel(tracking_number=tracking_number, agency_id=agency_id, dispatch_id=dispatch_id)
        db_session.add(parcel)
        await db_session.commit()
        return parcel

    return _make_parcel


@pytest.fixture
def make_dispatch(db_session):
    """Factory inserting a dispatch and returning its ID."""
    async def _make_dispatch(
        sender_agency_id: int,
        receiver_agency_id: int = None,
        status: DispatchStatus = DispatchStatus.DRAFT
    ) -> int:
        dispatch = Dispatch(
            sender_agency_id=sender_agency_id,
            receiver_agency_id=receiver_agency_id,
            status=status,
        )
        db_session.add(dispatch)
        await db_session.commit()
        return dispatch.id

    return _make_dispatch


@pytest.fixture
async def network(make_agency):
    """
    Forwarder(1) <- Regional(2) <- Local(3), plus a sibling Local(4) under
    Regional and an unrelated Independent(5) tree.
    """
    forwarder = await make_agency("Forwarder", agency_type=AgencyType.FORWARDER)
    regional = await make_agency("Regional", parent_agency_id=forwarder)
    local = await make_agency("Local", parent_agency_id=regional)
    sibling = await make_agency("Sibling", parent_agency_id=regional)
    independent = await make_agency("Independent")
    return {
        "forwarder": forwarder,
        "regional": regional,
        "local": local,
        "sibling": sibling,
        "independent": independent,
    }
