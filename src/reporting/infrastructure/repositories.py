"""
Reporting Infrastructure Repositories
======================================

Read-only queries behind the reports.

Every aggregate is computed in its own grouped subquery at the level it
belongs to (projects, employees, departments) and only then joined to the
row it describes. Joining the raw tables first would multiply salaries by
the number of projects and budgets by the number of employees.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import and_, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import ProjectStatus, CLOSED_PROJECT_STATUSES
from src.organization.infrastructure.models import CompanyModel, DepartmentModel, EmployeeModel
from src.projects.infrastructure.models import ProjectModel
from src.reporting.application import IReportRepository

TRACKED_STATUSES = (ProjectStatus.COMPLETED, ProjectStatus.IN_PROGRESS, ProjectStatus.PLANNING)


def _plain(row) -> dict:
    # Driver aggregates (AVG/SUM) can come back as Decimal
    return {k: float(v) if isinstance(v, Decimal) else v for k, v in row._mapping.items()}


def project_stats(level: str, active_only: bool = False, today: Optional[date] = None):
    """
    Project aggregates keyed by employee, department or company.

    ``active_only`` restricts to projects held by active employees. When
    ``today`` is given, an ``overdue_projects`` count is included.
    """
    key = {
        "employee": EmployeeModel.id,
        "department": EmployeeModel.department_id,
        "company": DepartmentModel.company_id,
    }[level]

    columns = [
        key.label("group_key"),
        func.count(ProjectModel.id).label("project_count"),
        func.sum(ProjectModel.budget).label("project_budget"),
        func.avg(ProjectModel.budget).label("avg_project_budget"),
    ]
    for status in TRACKED_STATUSES:
        columns.append(
            func.count(case((ProjectModel.status == status, ProjectModel.id))).label(f"{status}_projects")
        )
        columns.append(
            func.sum(case((ProjectModel.status == status, ProjectModel.budget), else_=0)).label(f"{status}_budget")
        )
    if today is not None:
        overdue = and_(ProjectModel.end_date < today, ProjectModel.status.not_in(CLOSED_PROJECT_STATUSES))
        columns.append(func.count(case((overdue, ProjectModel.id))).label("overdue_projects"))

    stmt = select(*columns).select_from(ProjectModel).join(
        EmployeeModel, ProjectModel.assigned_employee_id == EmployeeModel.id
    )
    if level == "company":
        stmt = stmt.join(DepartmentModel, EmployeeModel.department_id == DepartmentModel.id)
    if active_only:
        stmt = stmt.where(EmployeeModel.is_active.is_(True))
    return stmt.group_by(key).subquery(f"{level}_project_stats")


def employee_stats(level: str, active_only: bool = False):
    """Headcount and salary aggregates keyed by department or company."""
    key = {
        "department": EmployeeModel.department_id,
        "company": DepartmentModel.company_id,
    }[level]

    stmt = select(
        key.label("group_key"),
        func.count(EmployeeModel.id).label("employee_count"),
        func.count(case((EmployeeModel.is_active.is_(True), EmployeeModel.id))).label("active_employees"),
        func.sum(EmployeeModel.salary).label("total_salary"),
        func.avg(EmployeeModel.salary).label("avg_salary"),
    ).select_from(EmployeeModel)
    if level == "company":
        stmt = stmt.join(DepartmentModel, EmployeeModel.department_id == DepartmentModel.id)
    if active_only:
        stmt = stmt.where(EmployeeModel.is_active.is_(True))
    return stmt.group_by(key).subquery(f"{level}_employee_stats")


def department_stats():
    """Department count and summed budgets per company."""
    return (
        select(
            DepartmentModel.company_id.label("group_key"),
            func.count(DepartmentModel.id).label("department_count"),
            func.sum(DepartmentModel.budget).label("total_budget"),
        )
        .group_by(DepartmentModel.company_id)
        .subquery("company_department_stats")
    )


def _status_columns(stats, prefix: str = "") -> list:
    columns = []
    for status in TRACKED_STATUSES:
        columns.append(stats.c[f"{status}_projects"].label(f"{prefix}{status}_projects"))
        columns.append(stats.c[f"{status}_budget"].label(f"{prefix}{status}_budget"))
    return columns


class SQLAlchemyReportRepository(IReportRepository):
    """SQLAlchemy implementation of the report queries."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _rows(self, stmt) -> List[dict]:
        result = await self._session.execute(stmt)
        return [_plain(row) for row in result]

    async def _names_by_company(self, stmt) -> Dict[int, List[str]]:
        names: Dict[int, List[str]] = {}
        for company_id, name in (await self._session.execute(stmt)).all():
            names.setdefault(company_id, []).append(name)
        return names

    async def company_overview(self) -> List[dict]:
        depts = department_stats()
        emps = employee_stats("company")
        projs = project_stats("company")

        stmt = (
            select(
                CompanyModel.id.label("company_id"),
                CompanyModel.name.label("company_name"),
                CompanyModel.email.label("company_email"),
                CompanyModel.address.label("company_address"),
                CompanyModel.phone.label("company_phone"),
                depts.c.department_count,
                depts.c.total_budget.label("total_department_budgets"),
                emps.c.employee_count,
                emps.c.active_employees,
                emps.c.total_salary.label("total_employee_salaries"),
                emps.c.avg_salary.label("avg_employee_salary"),
                projs.c.project_count,
                projs.c.project_budget.label("total_project_budgets"),
                projs.c.avg_project_budget,
                *_status_columns(projs),
            )
            .select_from(CompanyModel)
            .outerjoin(depts, depts.c.group_key == CompanyModel.id)
            .outerjoin(emps, emps.c.group_key == CompanyModel.id)
            .outerjoin(projs, projs.c.group_key == CompanyModel.id)
            .order_by(CompanyModel.id)
        )
        rows = await self._rows(stmt)

        department_names = await self._names_by_company(
            select(DepartmentModel.company_id, DepartmentModel.name)
            .distinct()
            .order_by(DepartmentModel.company_id, DepartmentModel.name)
        )
        positions = await self._names_by_company(
            select(DepartmentModel.company_id, EmployeeModel.position)
            .join(EmployeeModel, EmployeeModel.department_id == DepartmentModel.id)
            .where(EmployeeModel.position.is_not(None))
            .distinct()
            .order_by(DepartmentModel.company_id, EmployeeModel.position)
        )
        for row in rows:
            row["department_names"] = department_names.get(row["company_id"], [])
            row["employee_positions"] = positions.get(row["company_id"], [])
        return rows

    async def employee_performance(self) -> List[dict]:
        projs = project_stats("employee")
        position_avg = (
            select(
                EmployeeModel.department_id,
                EmployeeModel.position,
                func.avg(EmployeeModel.salary).label("avg_position_salary"),
            )
            .group_by(EmployeeModel.department_id, EmployeeModel.position)
            .subquery("position_salary")
        )

        stmt = (
            select(
                EmployeeModel.id.label("employee_id"),
                EmployeeModel.first_name,
                EmployeeModel.last_name,
                EmployeeModel.email,
                EmployeeModel.position,
                EmployeeModel.salary,
                EmployeeModel.hire_date,
                DepartmentModel.name.label("department_name"),
                DepartmentModel.budget.label("department_budget"),
                CompanyModel.name.label("company_name"),
                projs.c.project_count,
                projs.c.project_budget.label("total_project_value"),
                projs.c.avg_project_budget.label("avg_project_value"),
                *_status_columns(projs),
                position_avg.c.avg_position_salary,
            )
            .select_from(EmployeeModel)
            .outerjoin(DepartmentModel, EmployeeModel.department_id == DepartmentModel.id)
            .outerjoin(CompanyModel, DepartmentModel.company_id == CompanyModel.id)
            .outerjoin(projs, projs.c.group_key == EmployeeModel.id)
            .outerjoin(
                position_avg,
                and_(
                    position_avg.c.department_id == EmployeeModel.department_id,
                    position_avg.c.position == EmployeeModel.position,
                )
            )
            .where(EmployeeModel.is_active.is_(True))
            .order_by(EmployeeModel.id)
        )
        return await self._rows(stmt)

    async def project_timeline(
        self,
        start_from: Optional[date] = None,
        start_to: Optional[date] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[dict]:
        stmt = (
            select(
                ProjectModel.id.label("project_id"),
                ProjectModel.name.label("project_name"),
                ProjectModel.description,
                ProjectModel.start_date,
                ProjectModel.end_date,
                ProjectModel.budget,
                ProjectModel.status,
                (EmployeeModel.first_name + " " + EmployeeModel.last_name).label("assigned_employee"),
                EmployeeModel.position.label("employee_position"),
                EmployeeModel.salary.label("employee_salary"),
                DepartmentModel.name.label("department_name"),
                DepartmentModel.budget.label("department_budget"),
                DepartmentModel.manager_name,
                CompanyModel.name.label("company_name"),
                CompanyModel.email.label("company_email"),
            )
            .select_from(ProjectModel)
            .outerjoin(EmployeeModel, ProjectModel.assigned_employee_id == EmployeeModel.id)
            .outerjoin(DepartmentModel, EmployeeModel.department_id == DepartmentModel.id)
            .outerjoin(CompanyModel, DepartmentModel.company_id == CompanyModel.id)
        )
        if start_from is not None:
            stmt = stmt.where(ProjectModel.start_date >= start_from)
        if start_to is not None:
            stmt = stmt.where(ProjectModel.start_date <= start_to)

        stmt = (
            stmt.order_by(
                ProjectModel.start_date.desc().nulls_last(),
                ProjectModel.budget.desc().nulls_last(),
                ProjectModel.id.desc(),
            )
            .limit(limit)
            .offset(offset)
        )
        return await self._rows(stmt)

    async def financial_summary(self) -> List[dict]:
        depts = department_stats()
        emps = employee_stats("company", active_only=True)
        projs = project_stats("company", active_only=True)

        stmt = (
            select(
                CompanyModel.id.label("company_id"),
                CompanyModel.name.label("company_name"),
                depts.c.department_count,
                depts.c.total_budget.label("total_department_budget"),
                emps.c.employee_count,
                emps.c.total_salary.label("total_employee_costs"),
                projs.c.project_count,
                projs.c.project_budget.label("total_project_budgets"),
                *_status_columns(projs),
            )
            .select_from(CompanyModel)
            .join(depts, depts.c.group_key == CompanyModel.id)
            .outerjoin(emps, emps.c.group_key == CompanyModel.id)
            .outerjoin(projs, projs.c.group_key == CompanyModel.id)
            .order_by(CompanyModel.id)
        )
        return await self._rows(stmt)

    async def department_efficiency(self, today: date) -> List[dict]:
        emps = employee_stats("department")
        projs = project_stats("department", today=today)

        stmt = (
            select(
                DepartmentModel.id.label("department_id"),
                DepartmentModel.name.label("department_name"),
                DepartmentModel.budget.label("department_budget"),
                DepartmentModel.manager_name,
                CompanyModel.name.label("company_name"),
                emps.c.employee_count,
                emps.c.active_employees,
                emps.c.total_salary.label("total_salary_cost"),
                emps.c.avg_salary.label("avg_employee_salary"),
                projs.c.project_count,
                projs.c.project_budget.label("total_project_value"),
                projs.c.avg_project_budget,
                projs.c.overdue_projects,
                *_status_columns(projs),
            )
            .select_from(DepartmentModel)
            .outerjoin(CompanyModel, DepartmentModel.company_id == CompanyModel.id)
            .outerjoin(emps, emps.c.group_key == DepartmentModel.id)
            .outerjoin(projs, projs.c.group_key == DepartmentModel.id)
            .order_by(DepartmentModel.id)
        )
        return await self._rows(stmt)

    async def company_metrics(self) -> List[dict]:
        depts = department_stats()
        emps = employee_stats("company", active_only=True)
        projs = project_stats("company", active_only=True)

        stmt = (
            select(
                CompanyModel.id,
                CompanyModel.name,
                depts.c.department_count.label("dept_count"),
                depts.c.total_budget,
                emps.c.employee_count.label("emp_count"),
                emps.c.total_salary.label("total_salaries"),
                emps.c.avg_salary,
                projs.c.project_count,
                projs.c.project_budget.label("total_project_value"),
                projs.c.completed_projects,
            )
            .select_from(CompanyModel)
            .outerjoin(depts, depts.c.group_key == CompanyModel.id)
            .outerjoin(emps, emps.c.group_key == CompanyModel.id)
            .outerjoin(projs, projs.c.group_key == CompanyModel.id)
            .order_by(CompanyModel.id)
        )
        return await self._rows(stmt)

    async def budget_analysis(self) -> List[dict]:
        emps = employee_stats("department", active_only=True)
        projs = project_stats("department", active_only=True)

        stmt = (
            select(
                CompanyModel.id.label("company_id"),
                CompanyModel.name.label("company_name"),
                DepartmentModel.id.label("department_id"),
                DepartmentModel.name.label("department_name"),
                DepartmentModel.budget.label("department_budget"),
                projs.c.project_count,
                projs.c.project_budget.label("total_project_budget"),
                projs.c.avg_project_budget,
                *_status_columns(projs),
                emps.c.employee_count,
                emps.c.total_salary.label("total_employee_cost"),
            )
            .select_from(DepartmentModel)
            .join(CompanyModel, DepartmentModel.company_id == CompanyModel.id)
            .join(projs, projs.c.group_key == DepartmentModel.id)
            .outerjoin(emps, emps.c.group_key == DepartmentModel.id)
            .order_by(DepartmentModel.id)
        )
        return await self._rows(stmt)
