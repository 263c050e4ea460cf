# app/roster/router.py

"""
FastAPI router for the roster: clients, drivers, vehicles and agents.
Each kind exposes the same CRUD surface under its own prefix.
"""

from typing import List, Optional, Type

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from app.agencies.utils import TenantContext, get_tenant_context
from app.roster.schemas import (
    AgentCreate, AgentResponse, AgentUpdate,
    ClientCreate, ClientResponse, ClientUpdate,
    DriverCreate, DriverResponse, DriverUpdate,
    RosterKind,
    VehicleCreate, VehicleResponse, VehicleUpdate,
)
from app.roster.services import RosterService
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Roster"])


def _register(
    kind: RosterKind, prefix: str,
    create_schema: Type[BaseModel], update_schema: Type[BaseModel], response_schema: Type[BaseModel],
) -> APIRouter:
    """Build the CRUD routes for one roster kind"""
    kind_router = APIRouter(prefix=prefix)
    label = kind.value

    @kind_router.post("", response_model=response_schema, status_code=status.HTTP_201_CREATED,
                      summary=f"Create {label}")
    async def create_record(
        data: create_schema,
        tenant: TenantContext = Depends(get_tenant_context),
        service: RosterService = Depends(),
    ):
        return await service.create(tenant, kind, data)

    @kind_router.get("", response_model=List[response_schema], summary=f"List {label}s")
    async def list_records(
        search: Optional[str] = Query(None, description="Case-insensitive search term"),
        tenant: TenantContext = Depends(get_tenant_context),
        service: RosterService = Depends(),
    ):
        return await service.list(tenant, kind, search)

    @kind_router.get("/{record_id}", response_model=response_schema, summary=f"Get {label}")
    async def get_record(
        record_id: int,
        tenant: TenantContext = Depends(get_tenant_context),
        service: RosterService = Depends(),
    ):
        return await service.get(tenant, kind, record_id)

    @kind_router.patch("/{record_id}", response_model=response_schema, summary=f"Update {label}")
    async def update_record(
        record_id: int,
        data: update_schema,
        tenant: TenantContext = Depends(get_tenant_context),
        service: RosterService = Depends(),
    ):
        return await service.update(tenant, kind, record_id, data)

    @kind_router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT, summary=f"Delete {label}")
    async def delete_record(
        record_id: int,
        tenant: TenantContext = Depends(get_tenant_context),
        service: RosterService = Depends(),
    ):
        await service.delete(tenant, kind, record_id)

    return kind_router


router.include_router(
    _register(RosterKind.CLIENT, "/clients", ClientCreate, ClientUpdate, ClientResponse), tags=["Clients"]
)
router.include_router(
    _register(RosterKind.DRIVER, "/drivers", DriverCreate, DriverUpdate, DriverResponse), tags=["Drivers"]
)
router.include_router(
    _register(RosterKind.VEHICLE, "/vehicles", VehicleCreate, VehicleUpdate, VehicleResponse), tags=["Vehicles"]
)
router.include_router(
    _register(RosterKind.AGENT, "/agents", AgentCreate, AgentUpdate, AgentResponse), tags=["Agents"]
)
