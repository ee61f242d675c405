"""
Agency directory: the read contract the authorization engine needs from
the database, plus the execution contexts it is obtained through.

Every validator takes a directory as its first argument. Ad hoc callers
get one from autocommit_context(); operations that mutate afterwards get
one from transactional_context() (or directory_for() on a session they
already hold inside a transaction), so the checks and the write they guard
read the same snapshot.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dispatch_engine.app.db.session import AsyncSessionLocal
from dispatch_engine.app.models.agency import Agency
from dispatch_engine.app.models.dispatch import Dispatch
from dispatch_engine.app.models.parcel import Parcel
from dispatch_engine.app.schemas.agency import AgencyRecord


class AgencyDirectory(Protocol):
    """Minimal lookup surface over agency, parcel and dispatch records."""

    async def get_direct_children(self, agency_id: int) -> List[int]:
        ...

    async def get_agency(self, agency_id: int) -> Optional[AgencyRecord]:
        ...

    async def get_parcel_by_tracking_number(self, tracking_number: str) -> Optional[Parcel]:
        ...

    async def get_dispatch(self, dispatch_id: int) -> Optional[Dispatch]:
        ...


class SqlAgencyDirectory:
    """
    AgencyDirectory backed by an AsyncSession.

    The directory never commits, flushes or adds; whether its reads are
    autocommit or part of a unit of work is decided by whoever owns the
    session.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_direct_children(self, agency_id: int) -> List[int]:
        result = await self.session.execute(
            select(Agency.id).where(Agency.parent_agency_id == agency_id)
        )
        return list(result.scalars().all())

    async def get_agency(self, agency_id: int) -> Optional[AgencyRecord]:
        result = await self.session.execute(
            select(
                Agency.id,
                Agency.agency_type,
                Agency.name,
                Agency.parent_agency_id,
            ).where(Agency.id == agency_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return AgencyRecord.model_validate(row)

    async def get_parcel_by_tracking_number(self, tracking_number: str) -> Optional[Parcel]:
        result = await self.session.execute(
            select(Parcel).where(Parcel.tracking_number == tracking_number)
        )
        return result.scalar_one_or_none()

    async def get_dispatch(self, dispatch_id: int) -> Optional[Dispatch]:
        result = await self.session.execute(
            select(Dispatch).where(Dispatch.id == dispatch_id)
        )
        return result.scalar_one_or_none()


def directory_for(session: AsyncSession) -> SqlAgencyDirectory:
    """Bind a directory to a session the caller already manages."""
    return SqlAgencyDirectory(session)


@asynccontextmanager
async def autocommit_context(
    session_factory: async_sessionmaker = AsyncSessionLocal,
) -> AsyncIterator[SqlAgencyDirectory]:
    """
    Directory over a fresh, short-lived session for ad hoc checks.

    Usage:
        async with autocommit_context() as ctx:
            await validate_can_send_to(ctx, sender_id, receiver_id)
    """
    async with session_factory() as session:
        yield SqlAgencyDirectory(session)


@asynccontextmanager
async def transactional_context(session: AsyncSession) -> AsyncIterator[SqlAgencyDirectory]:
    """
    Directory bound to a new transaction on ``session``.

    The caller performs its mutation on the same session inside the block.
    The transaction commits when the block exits cleanly and rolls back
    if a validator (or anything else) raises.

    Usage:
        async with transactional_context(session) as ctx:
            await authorize_parcel_addition(ctx, actor, dispatch_id, tracking_number)
            parcel.dispatch_id = dispatch_id
    """
    async with session.begin():
        yield SqlAgencyDirectory(session)
