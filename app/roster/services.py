# app/roster/services.py

"""
Service layer for the roster module.
"""

from typing import List, Optional

from fastapi import Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_async_db
from app.agencies.utils import TenantContext
from app.roster.exceptions import RosterRecordNotFoundException
from app.roster.models import Agent, Client, Driver, Vehicle
from app.roster.repository import RosterRecord, RosterRepository
from app.roster.schemas import RosterKind
from app.utils.exceptions import StoreOperationException
from app.utils.logger import get_logger

logger = get_logger(__name__)

ROSTER_MODELS = {
    RosterKind.CLIENT: Client,
    RosterKind.DRIVER: Driver,
    RosterKind.VEHICLE: Vehicle,
    RosterKind.AGENT: Agent,
}


def get_roster_repository(db: AsyncSession = Depends(get_async_db)) -> RosterRepository:
    """Dependency to get RosterRepository instance."""
    return RosterRepository(db)


class RosterService:
    """
    CRUD over the agency's roster. Every call takes the tenant context
    and never reaches another agency's records.
    """

    def __init__(self, repo: RosterRepository = Depends(get_roster_repository)):
        self.repo = repo

    async def create(self, tenant: TenantContext, kind: RosterKind, data: BaseModel) -> RosterRecord:
        model = ROSTER_MODELS[kind]
        record = model(agency_id=tenant.uid, **data.model_dump(mode="json"))
        try:
            record = await self.repo.create(record)
            await self.repo.commit()
        except SQLAlchemyError as e:
            await self.repo.rollback()
            logger.error("Failed to create roster record", kind=kind.value, error=str(e), exc_info=True)
            raise StoreOperationException(f"create {kind.value}") from e

        logger.info("Roster record created", kind=kind.value, record_id=record.id, tenant_id=tenant.uid)
        return record

    async def list(
        self, tenant: TenantContext, kind: RosterKind, search: Optional[str] = None
    ) -> List[RosterRecord]:
        return await self.repo.list(ROSTER_MODELS[kind], tenant.uid, search)

    async def get(self, tenant: TenantContext, kind: RosterKind, record_id: int) -> RosterRecord:
        """Fetch a record or raise 404, including for ids owned by other agencies."""
        record = await self.repo.get(ROSTER_MODELS[kind], tenant.uid, record_id)
        if record is None:
            raise RosterRecordNotFoundException(kind.value, record_id)
        return record

    async def update(
        self, tenant: TenantContext, kind: RosterKind, record_id: int, data: BaseModel
    ) -> RosterRecord:
        record = await self.get(tenant, kind, record_id)
        for field, value in data.model_dump(mode="json", exclude_unset=True).items():
            setattr(record, field, value)
        try:
            record = await self.repo.update(record)
            await self.repo.commit()
        except SQLAlchemyError as e:
            await self.repo.rollback()
            logger.error("Failed to update roster record", kind=kind.value, record_id=record_id, exc_info=True)
            raise StoreOperationException(f"update {kind.value}") from e

        logger.info("Roster record updated", kind=kind.value, record_id=record_id, tenant_id=tenant.uid)
        return record

    async def delete(self, tenant: TenantContext, kind: RosterKind, record_id: int) -> None:
        """
        Delete a record. Bookings keep their assignment snapshot, so history
        still shows the driver and vehicle after they leave the roster.
        """
        record = await self.get(tenant, kind, record_id)
        try:
            await self.repo.delete(record)
            await self.repo.commit()
        except SQLAlchemyError as e:
            await self.repo.rollback()
            logger.error("Failed to delete roster record", kind=kind.value, record_id=record_id, exc_info=True)
            raise StoreOperationException(f"delete {kind.value}") from e

        logger.info("Roster record deleted", kind=kind.value, record_id=record_id, tenant_id=tenant.uid)

    async def count(self, tenant: TenantContext, kind: RosterKind) -> int:
        return await self.repo.count(ROSTER_MODELS[kind], tenant.uid)
