# app/agencies/repository.py

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.agencies.models import Agency


class AgencyRepository:
    """
    Data Access Layer for the Agency model.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[Agency]:
        """Fetch an agency by login email."""
        stmt = select(Agency).where(Agency.email == email.lower())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, agency_id: str) -> Optional[Agency]:
        """Fetch an agency by its uid."""
        stmt = select(Agency).where(Agency.id == agency_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, agency: Agency) -> Agency:
        """Create a new agency."""
        self.db.add(agency)
        await self.db.commit()
        return agency

    async def update(self, agency: Agency) -> Agency:
        """Persist changes to an agency."""
        self.db.add(agency)
        await self.db.commit()
        return agency
