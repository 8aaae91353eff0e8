"""
Reporting Application Services
===============================

Turns the raw per-level aggregates from the report repository into report
rows. All derived columns go through ReportCalculator.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import List, Optional

from src.reporting.application.dto import (
    CompanyOverviewRow, EmployeePerformanceRow, ProjectTimelineRow,
    FinancialSummaryRow, DepartmentEfficiencyRow, CrossCompanyRow,
    BudgetAnalysisRow,
)
from src.reporting.domain import ReportCalculator
from src.config import TimelineStatus
from src.core import ValidationException
from src.shared.infrastructure.logging import get_logger, log_latency

logger = get_logger(__name__)

calc = ReportCalculator


# ========== Repository Interfaces (Dependency Inversion) ==========

class IReportRepository(ABC):
    """Interface for the report queries."""

    @abstractmethod
    async def company_overview(self) -> List[dict]:
        """Per-company aggregates plus department names and positions."""

    @abstractmethod
    async def employee_performance(self) -> List[dict]:
        """Per-active-employee project aggregates."""

    @abstractmethod
    async def project_timeline(
        self,
        start_from: Optional[date] = None,
        start_to: Optional[date] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[dict]:
        """Projects with assignee context, latest start first."""

    @abstractmethod
    async def financial_summary(self) -> List[dict]:
        """Per-company totals over active employees."""

    @abstractmethod
    async def department_efficiency(self, today: date) -> List[dict]:
        """Per-department employee and project aggregates."""

    @abstractmethod
    async def company_metrics(self) -> List[dict]:
        """Per-company metrics for the cross-company comparison."""

    @abstractmethod
    async def budget_analysis(self) -> List[dict]:
        """Per-department project spend for departments with projects."""


def _count(value) -> int:
    return int(value or 0)


def _amount(value) -> float:
    return float(value or 0)


def _today() -> date:
    return datetime.now(timezone.utc).date()


# ========== Application Services ==========

class ReportService:
    """
    Service for the aggregate reports.

    A missing salary total counts as zero spend, while a missing budget
    leaves the derived differences null.
    """

    def __init__(self, report_repository: IReportRepository):
        self._repo = report_repository

    async def company_overview(self) -> List[CompanyOverviewRow]:
        with log_latency(logger, "report.company_overview"):
            rows = await self._repo.company_overview()

        report = []
        for r in rows:
            budgets = r["total_department_budgets"]
            salaries = r["total_employee_salaries"]
            report.append({
                "company_id": r["company_id"],
                "company_name": r["company_name"],
                "company_email": r["company_email"],
                "company_address": r["company_address"],
                "company_phone": r["company_phone"],
                "total_departments": _count(r["department_count"]),
                "total_employees": _count(r["employee_count"]),
                "total_projects": _count(r["project_count"]),
                "total_department_budgets": budgets,
                "total_employee_salaries": salaries,
                "total_project_budgets": r["total_project_budgets"],
                "avg_employee_salary": r["avg_employee_salary"],
                "avg_project_budget": r["avg_project_budget"],
                "active_employees": _count(r["active_employees"]),
                "completed_projects": _count(r["completed_projects"]),
                "in_progress_projects": _count(r["in_progress_projects"]),
                "planning_projects": _count(r["planning_projects"]),
                "budget_vs_salary_diff": calc.difference(budgets, _amount(salaries)),
                "budget_status": calc.budget_status(salaries, budgets, near_ratio=0.9),
                "department_names": ", ".join(r["department_names"]) or None,
                "employee_positions": ", ".join(r["employee_positions"]) or None,
            })

        return [CompanyOverviewRow(**row) for row in calc.sort_desc(report, "total_employees")]

    async def employee_performance(self) -> List[EmployeePerformanceRow]:
        today = _today()
        with log_latency(logger, "report.employee_performance"):
            rows = await self._repo.employee_performance()

        report = []
        for r in rows:
            projects = _count(r["project_count"])
            completed = _count(r["completed_projects"])
            salary = r["salary"]
            position_avg = r["avg_position_salary"]
            report.append({
                "employee_id": r["employee_id"],
                "employee_name": f"{r['first_name']} {r['last_name']}",
                "email": r["email"],
                "position": r["position"],
                "salary": salary,
                "hire_date": r["hire_date"],
                "years_of_service": calc.years_of_service(r["hire_date"], today),
                "department_name": r["department_name"],
                "department_budget": r["department_budget"],
                "company_name": r["company_name"],
                "total_projects_assigned": projects,
                "completed_projects": completed,
                "in_progress_projects": _count(r["in_progress_projects"]),
                "total_project_value": r["total_project_value"],
                "avg_project_value": r["avg_project_value"],
                "completion_rate": calc.percentage(completed, projects),
                "salary_percentage_of_dept_budget": calc.percentage(salary, r["department_budget"]),
                "project_value_to_salary_ratio": calc.safe_divide(r["total_project_value"], salary),
                "workload_status": calc.workload_status(projects),
                "avg_position_salary_in_dept": position_avg,
                "salary_diff_from_avg": calc.difference(salary, position_avg),
            })

        ordered = calc.sort_desc(report, "total_project_value", "completion_rate")
        return [EmployeePerformanceRow(**row) for row in ordered]

    async def project_timeline(
        self,
        start_from: Optional[date] = None,
        start_to: Optional[date] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[ProjectTimelineRow]:
        if start_from is not None and start_to is not None and start_from > start_to:
            raise ValidationException(
                "start_from cannot be after start_to",
                {"start_from": start_from.isoformat(), "start_to": start_to.isoformat()}
            )

        today = _today()
        with log_latency(logger, "report.project_timeline", limit=limit, offset=offset):
            rows = await self._repo.project_timeline(
                start_from=start_from, start_to=start_to, limit=limit, offset=offset
            )

        report = []
        for r in rows:
            start, end = r["start_date"], r["end_date"]
            duration = calc.days_between(start, end)
            status = calc.timeline_status(r["status"], end, today)
            burn = calc.safe_divide(r["budget"], duration)
            daily_cost = calc.safe_divide(r["employee_salary"], 365)
            report.append(ProjectTimelineRow(
                **r,
                planned_duration_days=duration,
                timeline_status=status,
                days_overdue=(today - end).days if status == TimelineStatus.OVERDUE else 0,
                daily_budget_burn=burn,
                daily_employee_cost=daily_cost,
                daily_profit_margin=calc.difference(burn, daily_cost),
                start_month=start.month if start else None,
                start_year=start.year if start else None,
                start_quarter=calc.quarter(start),
            ))
        return report

    async def financial_summary(self) -> List[FinancialSummaryRow]:
        with log_latency(logger, "report.financial_summary"):
            rows = await self._repo.financial_summary()

        report = []
        for r in rows:
            budget = r["total_department_budget"]
            costs = r["total_employee_costs"]
            projects = r["total_project_budgets"]
            departments = _count(r["department_count"])
            employees = _count(r["employee_count"])
            project_count = _count(r["project_count"])
            completed_value = _amount(r["completed_budget"])
            surplus = calc.difference(budget, _amount(costs))

            report.append({
                "company_id": r["company_id"],
                "company_name": r["company_name"],
                "total_department_budget": budget,
                "total_employee_costs": costs,
                "total_project_budgets": projects,
                "department_count": departments,
                "employee_count": employees,
                "project_count": project_count,
                "avg_department_budget": calc.safe_divide(budget, departments),
                "avg_employee_salary": calc.safe_divide(costs, employees),
                "avg_project_budget": calc.safe_divide(projects, project_count),
                "budget_surplus_deficit": surplus,
                "budget_efficiency_percentage": calc.percentage(surplus, budget),
                "project_to_salary_ratio": calc.safe_divide(projects, costs),
                "completed_project_value": completed_value,
                "in_progress_project_value": _amount(r["in_progress_budget"]),
                "planning_project_value": _amount(r["planning_budget"]),
                "completion_value_percentage": calc.percentage(completed_value, projects),
                "financial_health_status": calc.financial_health(surplus, budget),
            })

        ordered = calc.sort_desc(report, "total_department_budget")
        return [FinancialSummaryRow(**row) for row in ordered]

    async def department_efficiency(self) -> List[DepartmentEfficiencyRow]:
        today = _today()
        with log_latency(logger, "report.department_efficiency"):
            rows = await self._repo.department_efficiency(today)

        report = []
        for r in rows:
            budget = r["department_budget"]
            salary = r["total_salary_cost"]
            employees = _count(r["employee_count"])
            projects = _count(r["project_count"])
            completed = _count(r["completed_projects"])
            utilization = calc.safe_divide(salary, budget)
            completion_rate = calc.percentage(completed, projects)

            report.append({
                "department_id": r["department_id"],
                "department_name": r["department_name"],
                "department_budget": budget,
                "manager_name": r["manager_name"],
                "company_name": r["company_name"],
                "total_employees": employees,
                "active_employees": _count(r["active_employees"]),
                "total_projects": projects,
                "total_salary_cost": salary,
                "total_project_value": r["total_project_value"],
                "avg_employee_salary": r["avg_employee_salary"],
                "avg_project_budget": r["avg_project_budget"],
                "remaining_budget": calc.difference(budget, _amount(salary)),
                "budget_utilization_percentage": utilization * 100 if utilization is not None else None,
                "projects_per_employee": calc.safe_divide(projects, employees),
                "project_value_per_salary_dollar": calc.safe_divide(r["total_project_value"], salary),
                "completed_projects": completed,
                "in_progress_projects": _count(r["in_progress_projects"]),
                "planning_projects": _count(r["planning_projects"]),
                "project_completion_rate": completion_rate,
                "overdue_projects": _count(r["overdue_projects"]),
                "budget_utilization_status": calc.utilization_status(utilization),
                "performance_rating": calc.performance_rating(projects, completion_rate),
            })

        ordered = calc.sort_desc(report, "project_completion_rate", "budget_utilization_percentage")
        return [DepartmentEfficiencyRow(**row) for row in ordered]

    async def cross_company_analysis(self) -> List[CrossCompanyRow]:
        """Compare every company with the averages across all companies."""
        with log_latency(logger, "report.cross_company_analysis"):
            rows = await self._repo.company_metrics()

        metrics = []
        for r in rows:
            metrics.append({
                "id": r["id"],
                "name": r["name"],
                "dept_count": _count(r["dept_count"]),
                "emp_count": _count(r["emp_count"]),
                "project_count": _count(r["project_count"]),
                "total_budget": r["total_budget"],
                "total_salaries": r["total_salaries"],
                "total_project_value": r["total_project_value"],
                "avg_salary": r["avg_salary"],
                "completed_projects": _count(r["completed_projects"]),
            })

        averages = {
            "avg_dept_count": calc.mean(m["dept_count"] for m in metrics),
            "avg_emp_count": calc.mean(m["emp_count"] for m in metrics),
            "avg_project_count": calc.mean(m["project_count"] for m in metrics),
            "avg_total_budget": calc.mean(m["total_budget"] for m in metrics),
            "avg_total_salaries": calc.mean(m["total_salaries"] for m in metrics),
            "industry_avg_salary": calc.mean(m["avg_salary"] for m in metrics),
        }

        for m in metrics:
            m.update(averages)
            m["dept_count_vs_avg"] = calc.difference(m["dept_count"], averages["avg_dept_count"])
            m["emp_count_vs_avg"] = calc.difference(m["emp_count"], averages["avg_emp_count"])
            m["salary_vs_industry_avg"] = calc.difference(m["avg_salary"], averages["industry_avg_salary"])
            m["budget_per_employee"] = calc.safe_divide(m["total_budget"], m["emp_count"])
            m["project_value_per_employee"] = calc.safe_divide(m["total_project_value"], m["emp_count"])
            m["completion_rate"] = calc.percentage(m["completed_projects"], m["project_count"])
            m["salary_competitiveness"] = calc.salary_competitiveness(
                m["avg_salary"], averages["industry_avg_salary"]
            )

        for field, rank_field in (
            ("total_project_value", "project_value_rank"),
            ("avg_salary", "avg_salary_rank"),
            ("completion_rate", "completion_rate_rank"),
        ):
            ranks = calc.competition_rank([m[field] for m in metrics])
            for m, rank in zip(metrics, ranks):
                m[rank_field] = rank

        ordered = calc.sort_desc(metrics, "total_project_value")
        return [CrossCompanyRow(**m) for m in ordered]

    async def budget_analysis(self) -> List[BudgetAnalysisRow]:
        with log_latency(logger, "report.budget_analysis"):
            rows = await self._repo.budget_analysis()

        report = []
        for r in rows:
            department_budget = r["department_budget"]
            project_budget = r["total_project_budget"]
            employees = _count(r["employee_count"])
            report.append({
                "company_name": r["company_name"],
                "department_name": r["department_name"],
                "department_budget": department_budget,
                "total_projects": _count(r["project_count"]),
                "total_project_budget": project_budget,
                "avg_project_budget": r["avg_project_budget"],
                "completed_budget": _amount(r["completed_budget"]),
                "in_progress_budget": _amount(r["in_progress_budget"]),
                "planning_budget": _amount(r["planning_budget"]),
                "remaining_dept_budget": calc.difference(department_budget, _amount(r["total_employee_cost"])),
                "total_employee_cost": r["total_employee_cost"],
                "employee_count": employees,
                "budget_per_employee": calc.safe_divide(project_budget, employees),
                "budget_status": calc.budget_status(project_budget, department_budget, near_ratio=0.8),
            })

        ordered = calc.sort_desc(report, "total_project_budget")
        return [BudgetAnalysisRow(**row) for row in ordered]
