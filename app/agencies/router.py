# app/agencies/router.py

from fastapi import APIRouter, Depends, Header, status

from app.agencies.schemas import AgencyCreate, AgencyResponse, LoginRequest, TokenResponse
from app.agencies.services import AgencyService
from app.agencies.utils import TenantContext, get_tenant_context, require_admin_key
from app.utils.logger import get_logger

router = APIRouter(tags=["Agencies"])
logger = get_logger(__name__)


@router.post(
    "/agencies", response_model=AgencyResponse, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin_key)],
)
async def create_agency(
    agency_data: AgencyCreate,
    agency_service: AgencyService = Depends(),
):
    """Provision a new agency account (admin only)."""
    return await agency_service.create_agency(agency_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_request: LoginRequest,
    agency_service: AgencyService = Depends(),
):
    """Authenticate an agency and return access & refresh tokens."""
    return await agency_service.login(login_request)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_access_token(
    authorization: str = Header(..., alias="Authorization"),
    agency_service: AgencyService = Depends(),
):
    """Refresh the token pair using a valid refresh token."""
    return await agency_service.refresh(authorization.replace("Bearer ", ""))


@router.get("/agency", response_model=AgencyResponse)
async def get_agency_me(
    tenant: TenantContext = Depends(get_tenant_context),
    agency_service: AgencyService = Depends(),
):
    """Get the profile of the signed-in agency."""
    return await agency_service.repo.get_by_id(tenant.uid)


@router.get("/logout")
async def logout(
    tenant: TenantContext = Depends(get_tenant_context),
    agency_service: AgencyService = Depends(),
):
    """Sign out, invalidating every token issued so far."""
    await agency_service.logout(tenant.uid)
    return {"message": "Logout successful"}
