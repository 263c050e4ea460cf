# app/roster/repository.py

"""
Repository layer for the roster module.
Every query is filtered by the owning agency.
"""

from typing import List, Optional, Type, Union

from sqlalchemy import desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.roster.models import Agent, Client, Driver, Vehicle
from app.utils.logger import get_logger

logger = get_logger(__name__)

RosterRecord = Union[Client, Driver, Vehicle, Agent]

# Columns matched by the free-text search on each listing
SEARCH_FIELDS = {
    Client: (Client.name, Client.mobile),
    Driver: (Driver.name, Driver.mobile, Driver.license_number),
    Vehicle: (Vehicle.number, Vehicle.model, Vehicle.owner),
    Agent: (Agent.name, Agent.agency_name, Agent.office_city),
}


class RosterRepository:
    """
    Data Access Layer for clients, drivers, vehicles and agents.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, record: RosterRecord) -> RosterRecord:
        """Insert a roster record"""
        self.db.add(record)
        await self.db.flush()
        await self.db.refresh(record)
        return record

    async def get(self, model: Type[RosterRecord], agency_id: str, record_id: int) -> Optional[RosterRecord]:
        """Fetch one record of the agency by id"""
        stmt = select(model).where(model.id == record_id, model.agency_id == agency_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list(
        self, model: Type[RosterRecord], agency_id: str, search: Optional[str] = None
    ) -> List[RosterRecord]:
        """List the agency's records, optionally filtered by a search term"""
        stmt = select(model).where(model.agency_id == agency_id)

        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            stmt = stmt.where(
                or_(*[func.lower(column).like(pattern) for column in SEARCH_FIELDS[model]])
            )

        if model is Client:
            stmt = stmt.order_by(Client.name)
        else:
            stmt = stmt.order_by(desc(model.created_on), desc(model.id))

        result = await self.db.execute(stmt)
        records = list(result.scalars().all())
        logger.debug("Listed roster records", model=model.__tablename__, count=len(records))
        return records

    async def count(self, model: Type[RosterRecord], agency_id: str) -> int:
        """Number of records the agency holds"""
        stmt = select(func.count()).select_from(model).where(model.agency_id == agency_id)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def update(self, record: RosterRecord) -> RosterRecord:
        """Flush changes made to a record"""
        await self.db.flush()
        await self.db.refresh(record)
        return record

    async def delete(self, record: RosterRecord) -> None:
        """Remove a record"""
        await self.db.delete(record)
        await self.db.flush()

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
