"""
Reporting Controllers (API Routes)
===================================

FastAPI routes for the aggregate reports. All reports are read-only.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database import get_session
from src.reporting.application import (
    ReportService,
    CompanyOverviewRow, EmployeePerformanceRow, ProjectTimelineRow,
    FinancialSummaryRow, DepartmentEfficiencyRow, CrossCompanyRow,
)
from src.reporting.infrastructure import SQLAlchemyReportRepository

report_router = APIRouter(prefix="/api/reports", tags=["Reports"])


# ========== Dependencies ==========

async def get_report_service(session: AsyncSession = Depends(get_session)) -> ReportService:
    """Get report service instance."""
    return ReportService(SQLAlchemyReportRepository(session))


# ========== Route Handlers ==========

@report_router.get(
    "/company-overview",
    response_model=List[CompanyOverviewRow],
    summary="Company overview",
    description="""
    Per company: department, employee and project counts, budget and salary
    totals, projects by status and a budget status.

    **Budget status**: `Over Budget` when salaries exceed department budgets,
    `Near Budget Limit` above 90 %, otherwise `Within Budget`.
    """
)
async def company_overview(service: ReportService = Depends(get_report_service)):
    return await service.company_overview()


@report_router.get(
    "/employee-performance",
    response_model=List[EmployeePerformanceRow],
    summary="Employee performance",
    description="""
    Per active employee: years of service, project counts and value, completion
    rate, salary ratios and a workload status.

    **Workload**: `No Projects`, `Light Load` (1), `Normal Load` (2-3),
    `High Load` (4-5), `Overloaded` (more than 5).
    """
)
async def employee_performance(service: ReportService = Depends(get_report_service)):
    return await service.employee_performance()


@report_router.get(
    "/project-timeline",
    response_model=List[ProjectTimelineRow],
    summary="Project timeline",
    description="Projects ordered by start date (latest first) with schedule status and daily cost figures."
)
async def project_timeline(
    start_from: Optional[date] = Query(None, description="Only projects starting on or after this date"),
    start_to: Optional[date] = Query(None, description="Only projects starting on or before this date"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: ReportService = Depends(get_report_service)
):
    return await service.project_timeline(start_from=start_from, start_to=start_to, limit=limit, offset=offset)


@report_router.get(
    "/financial-summary",
    response_model=List[FinancialSummaryRow],
    summary="Financial summary",
    description="""
    Per company with departments, counting active employees only.

    **Financial health** by budget margin: `Over Budget` (negative),
    `Tight Budget` (< 10 %), `Moderate Budget` (< 20 %), `Healthy Budget`.
    """
)
async def financial_summary(service: ReportService = Depends(get_report_service)):
    return await service.financial_summary()


@report_router.get(
    "/department-efficiency",
    response_model=List[DepartmentEfficiencyRow],
    summary="Department efficiency",
    description="Per department: budget utilization, project throughput, overdue projects and a performance rating."
)
async def department_efficiency(service: ReportService = Depends(get_report_service)):
    return await service.department_efficiency()


@report_router.get(
    "/cross-company-analysis",
    response_model=List[CrossCompanyRow],
    summary="Cross-company analysis",
    description="""
    Each company against the averages across all companies (active employees
    only), with salary competitiveness and competition ranks (1, 2, 2, 4).
    """
)
async def cross_company_analysis(service: ReportService = Depends(get_report_service)):
    return await service.cross_company_analysis()
