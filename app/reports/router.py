### app/reports/router.py

# Third party imports
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

# Local imports
from app.agencies.utils import TenantContext, get_tenant_context
from app.reports.aggregator import GroupBy
from app.reports.schemas import (
    ExportFormat, GroupReportResponse, GroupSummaryResponse, SummaryResponse,
)
from app.reports.services import ReportService
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["reports"], prefix="/reports")


@router.get("/summary", response_model=SummaryResponse)
async def finance_summary(
    tenant: TenantContext = Depends(get_tenant_context),
    service: ReportService = Depends(),
):
    """Revenue, paid and due totals with chart series"""
    summary = await service.summary(tenant)
    return SummaryResponse.model_validate(summary)


@router.get("/groups", response_model=GroupReportResponse)
async def grouped_report(
    group_by: GroupBy = Query(GroupBy.CLIENT),
    tenant: TenantContext = Depends(get_tenant_context),
    service: ReportService = Depends(),
):
    """Bills grouped by client, agent, vehicle, driver or trip"""
    groups = await service.groups(tenant, group_by)
    return GroupReportResponse(
        group_by=group_by.value,
        groups=[GroupSummaryResponse.model_validate(g) for g in groups],
    )


@router.get("/export")
async def export_report(
    format: ExportFormat = Query(ExportFormat.CSV),
    tenant: TenantContext = Depends(get_tenant_context),
    service: ReportService = Depends(),
):
    """Download the finance report"""
    exporter = await service.export(tenant, format.value)
    return StreamingResponse(
        exporter.export(),
        media_type=exporter.media_type,
        headers={"Content-Disposition": f"attachment; filename=finance_report.{exporter.extension}"},
    )
