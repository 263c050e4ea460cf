# app/agencies/utils.py

import secrets
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_async_db
from app.core.jwt import verify_token
from app.agencies.exceptions import AdminKeyRequiredException, SessionExpiredException
from app.agencies.models import Agency
from app.agencies.repository import AgencyRepository
from app.utils.logger import get_logger, tenant_id_var

logger = get_logger(__name__)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="login")


@dataclass(frozen=True)
class TenantContext:
    """
    The signed-in agency, handed explicitly to every service call that
    reads or writes tenant data.
    """
    uid: str
    email: str
    agency_name: str
    owner_name: str
    plan: str
    address: Optional[str] = None
    mobile: Optional[str] = None

    @classmethod
    def from_agency(cls, agency: Agency) -> "TenantContext":
        """Build the context from a loaded agency record"""
        return cls(
            uid=agency.id,
            email=agency.email,
            agency_name=agency.agency_name,
            owner_name=agency.owner_name,
            plan=agency.plan,
            address=agency.address,
            mobile=agency.mobile,
        )


async def get_tenant_context(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_async_db),
) -> TenantContext:
    """
    Async dependency resolving the bearer token into the tenant context.
    Tokens issued before the agency's last sign-out are rejected.
    """
    payload = verify_token(token)
    uid = payload.get("uid")
    if not uid:
        logger.error("Token payload missing 'uid' field")
        raise SessionExpiredException()

    agency = await AgencyRepository(db).get_by_id(uid)
    if agency is None or agency.token_version != payload.get("ver"):
        logger.warning("Rejected token for stale session", tenant_id=uid)
        raise SessionExpiredException()

    tenant_id_var.set(agency.id)
    return TenantContext.from_agency(agency)


def require_admin_key(x_admin_key: Optional[str] = Header(None)) -> None:
    """Guard for agency provisioning."""
    if not x_admin_key or not secrets.compare_digest(x_admin_key, settings.admin_api_key):
        logger.warning("Agency provisioning attempted without a valid admin key")
        raise AdminKeyRequiredException()
