"""
Reporting Application Layer
============================

Contains:
- Services: ReportService
- DTOs: Report row models
"""

from src.reporting.application.dto import (
    CompanyOverviewRow,
    EmployeePerformanceRow,
    ProjectTimelineRow,
    FinancialSummaryRow,
    DepartmentEfficiencyRow,
    CrossCompanyRow,
    BudgetAnalysisRow,
)
from src.reporting.application.services import ReportService, IReportRepository

__all__ = [
    # DTOs
    "CompanyOverviewRow",
    "EmployeePerformanceRow",
    "ProjectTimelineRow",
    "FinancialSummaryRow",
    "DepartmentEfficiencyRow",
    "CrossCompanyRow",
    "BudgetAnalysisRow",
    # Services
    "ReportService",
    # Repository Interfaces
    "IReportRepository",
]
