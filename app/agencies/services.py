# app/agencies/services.py

from datetime import datetime, timezone

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_async_db
from app.core.jwt import REFRESH_SCOPE, create_access_token, create_refresh_token, verify_token
from app.agencies.exceptions import (
    AgencyAlreadyExistsException, InvalidCredentialsException, SessionExpiredException,
)
from app.agencies.models import Agency
from app.agencies.repository import AgencyRepository
from app.agencies.schemas import AgencyCreate, LoginRequest, TokenResponse
from app.utils.security import get_password_hash, verify_password
from app.utils.logger import get_logger

logger = get_logger(__name__)


def get_agency_repository(db: AsyncSession = Depends(get_async_db)) -> AgencyRepository:
    """Dependency to get AgencyRepository instance."""
    return AgencyRepository(db)


def token_claims(agency: Agency) -> dict:
    """Claims carried by every token issued to an agency"""
    return {"sub": agency.email, "uid": agency.id, "ver": agency.token_version}


class AgencyService:
    """
    Business logic layer for agency accounts and their sign-in sessions.
    """

    def __init__(self, repo: AgencyRepository = Depends(get_agency_repository)):
        self.repo = repo

    async def create_agency(self, agency_data: AgencyCreate) -> Agency:
        """Provision a new agency (tenant) account."""
        email = agency_data.email.lower()
        if await self.repo.get_by_email(email):
            logger.warning("Attempt to create duplicate agency", email=email)
            raise AgencyAlreadyExistsException(email)

        agency = Agency(
            agency_name=agency_data.agency_name,
            owner_name=agency_data.owner_name,
            email=email,
            mobile=agency_data.mobile,
            address=agency_data.address,
            plan=agency_data.plan,
            password=get_password_hash(agency_data.password),
            token_version=0,
        )
        agency = await self.repo.create(agency)
        logger.info("Agency created", tenant_id=agency.id, agency_name=agency.agency_name)
        return agency

    async def login(self, login_request: LoginRequest) -> TokenResponse:
        """Authenticate by email and password and issue a token pair."""
        agency = await self.repo.get_by_email(login_request.email)
        if not agency or not verify_password(login_request.password, agency.password):
            logger.warning("Failed login attempt", email=login_request.email)
            raise InvalidCredentialsException()

        agency.last_login = datetime.now(timezone.utc)
        await self.repo.update(agency)
        logger.info("Agency signed in", tenant_id=agency.id)
        return self._issue_tokens(agency)

    async def refresh(self, refresh_token: str) -> TokenResponse:
        """Rotate a token pair using a refresh token."""
        payload = verify_token(refresh_token, scope=REFRESH_SCOPE)
        agency = await self.repo.get_by_id(payload.get("uid", ""))
        if not agency or agency.token_version != payload.get("ver"):
            logger.warning("Invalid refresh token attempt", tenant_id=payload.get("uid"))
            raise SessionExpiredException()
        return self._issue_tokens(agency)

    async def logout(self, agency_id: str) -> None:
        """End every session of the agency by bumping its token version."""
        agency = await self.repo.get_by_id(agency_id)
        if not agency:
            raise SessionExpiredException()
        agency.token_version += 1
        await self.repo.update(agency)
        logger.info("Agency signed out", tenant_id=agency_id, token_version=agency.token_version)

    def _issue_tokens(self, agency: Agency) -> TokenResponse:
        claims = token_claims(agency)
        return TokenResponse(
            access_token=create_access_token(claims),
            refresh_token=create_refresh_token(claims),
        )
