"""
Organization Infrastructure Repositories
=========================================

Concrete implementations of the organization repository interfaces using
SQLAlchemy.

All statements are SQLAlchemy expressions; user input only ever reaches the
database as bound parameters.
"""

from datetime import datetime, timezone
from typing import List, Optional, Any, Tuple

from sqlalchemy import select, delete, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.organization.application import (
    ICompanyRepository, IDepartmentRepository, IEmployeeRepository,
    CompanyCreateDTO, DepartmentCreateDTO, EmployeeCreateDTO, EmployeeUpdateDTO,
    EmployeeSearchFilters,
)
from src.organization.infrastructure.models import CompanyModel, DepartmentModel, EmployeeModel
from src.core import ConflictException


def _employee_columns() -> list:
    """Public employee columns (everything except the password hash)."""
    return [
        EmployeeModel.id,
        EmployeeModel.department_id,
        EmployeeModel.first_name,
        EmployeeModel.last_name,
        EmployeeModel.email,
        EmployeeModel.phone,
        EmployeeModel.salary,
        EmployeeModel.hire_date,
        EmployeeModel.position,
        EmployeeModel.is_active,
        EmployeeModel.created_at,
        EmployeeModel.updated_at,
    ]


async def _flush(session: AsyncSession, entity: str) -> None:
    try:
        await session.flush()
    except IntegrityError as e:
        raise ConflictException(f"{entity} conflicts with an existing record") from e


class SQLAlchemyCompanyRepository(ICompanyRepository):
    """SQLAlchemy implementation of the company repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def list(self, limit: int = 100, offset: int = 0) -> List[CompanyModel]:
        stmt = (
            select(CompanyModel)
            .order_by(CompanyModel.created_at.desc(), CompanyModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, company_id: int, for_update: bool = False) -> Optional[CompanyModel]:
        stmt = select(CompanyModel).where(CompanyModel.id == company_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(CompanyModel.id).where(func.lower(CompanyModel.email) == email.lower())
        if exclude_id is not None:
            stmt = stmt.where(CompanyModel.id != exclude_id)
        result = await self._session.execute(stmt)
        return result.first() is not None

    async def create(self, dto: CompanyCreateDTO) -> CompanyModel:
        model = CompanyModel(
            name=dto.name,
            email=dto.email,
            address=dto.address,
            phone=dto.phone,
        )
        self._session.add(model)
        await _flush(self._session, "Company")
        return model

    async def update(self, model: CompanyModel, dto: CompanyCreateDTO) -> CompanyModel:
        model.name = dto.name
        model.email = dto.email
        model.address = dto.address
        model.phone = dto.phone
        model.updated_at = datetime.now(timezone.utc)
        await _flush(self._session, "Company")
        return model

    async def delete(self, company_id: int) -> None:
        await self._session.execute(delete(CompanyModel).where(CompanyModel.id == company_id))

    async def count_dependents(self, company_id: int) -> Tuple[int, int]:
        """Departments and employees that a delete of this company would cascade to."""
        departments = await self._session.scalar(
            select(func.count(DepartmentModel.id)).where(DepartmentModel.company_id == company_id)
        )
        employees = await self._session.scalar(
            select(func.count(EmployeeModel.id))
            .join(DepartmentModel, EmployeeModel.department_id == DepartmentModel.id)
            .where(DepartmentModel.company_id == company_id)
        )
        return departments or 0, employees or 0

    async def count_assigned_projects(self, company_id: int) -> int:
        from src.projects.infrastructure.models import ProjectModel

        stmt = (
            select(func.count(ProjectModel.id))
            .join(EmployeeModel, ProjectModel.assigned_employee_id == EmployeeModel.id)
            .join(DepartmentModel, EmployeeModel.department_id == DepartmentModel.id)
            .where(DepartmentModel.company_id == company_id)
        )
        return (await self._session.scalar(stmt)) or 0

    async def list_departments(self, company_id: int) -> List[dict]:
        stmt = (
            select(
                CompanyModel.id.label("company_id"),
                CompanyModel.name.label("company_name"),
                CompanyModel.email.label("company_email"),
                DepartmentModel.id.label("department_id"),
                DepartmentModel.name.label("department_name"),
                DepartmentModel.budget.label("department_budget"),
                DepartmentModel.manager_name,
            )
            .outerjoin(DepartmentModel, CompanyModel.id == DepartmentModel.company_id)
            .where(CompanyModel.id == company_id)
            .order_by(DepartmentModel.name)
        )
        result = await self._session.execute(stmt)
        return [dict(row._mapping) for row in result]


class SQLAlchemyDepartmentRepository(IDepartmentRepository):
    """SQLAlchemy implementation of the department repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def list(self, limit: int = 100, offset: int = 0) -> List[DepartmentModel]:
        stmt = (
            select(DepartmentModel)
            .order_by(DepartmentModel.created_at.desc(), DepartmentModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, department_id: int, for_update: bool = False) -> Optional[DepartmentModel]:
        stmt = select(DepartmentModel).where(DepartmentModel.id == department_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, dto: DepartmentCreateDTO) -> DepartmentModel:
        model = DepartmentModel(
            company_id=dto.company_id,
            name=dto.name,
            budget=dto.budget,
            manager_name=dto.manager_name,
        )
        self._session.add(model)
        await _flush(self._session, "Department")
        return model

    async def update(self, model: DepartmentModel, dto: DepartmentCreateDTO) -> DepartmentModel:
        model.company_id = dto.company_id
        model.name = dto.name
        model.budget = dto.budget
        model.manager_name = dto.manager_name
        model.updated_at = datetime.now(timezone.utc)
        await _flush(self._session, "Department")
        return model

    async def delete(self, department_id: int) -> None:
        await self._session.execute(delete(DepartmentModel).where(DepartmentModel.id == department_id))

    async def count_assigned_projects(self, department_id: int) -> int:
        from src.projects.infrastructure.models import ProjectModel

        stmt = (
            select(func.count(ProjectModel.id))
            .join(EmployeeModel, ProjectModel.assigned_employee_id == EmployeeModel.id)
            .where(EmployeeModel.department_id == department_id)
        )
        return (await self._session.scalar(stmt)) or 0

    async def list_employees(self, department_id: int) -> List[dict]:
        stmt = (
            select(
                DepartmentModel.id.label("department_id"),
                DepartmentModel.name.label("department_name"),
                DepartmentModel.budget.label("department_budget"),
                DepartmentModel.manager_name,
                CompanyModel.id.label("company_id"),
                CompanyModel.name.label("company_name"),
                EmployeeModel.id.label("employee_id"),
                EmployeeModel.first_name,
                EmployeeModel.last_name,
                EmployeeModel.email.label("employee_email"),
                EmployeeModel.salary,
                EmployeeModel.position,
                EmployeeModel.hire_date,
                EmployeeModel.is_active,
            )
            .outerjoin(CompanyModel, DepartmentModel.company_id == CompanyModel.id)
            .outerjoin(EmployeeModel, DepartmentModel.id == EmployeeModel.department_id)
            .where(DepartmentModel.id == department_id)
            .order_by(EmployeeModel.salary.desc().nulls_last(), EmployeeModel.id)
        )
        result = await self._session.execute(stmt)
        return [dict(row._mapping) for row in result]

    async def budget_summary(self, company_id: int) -> List[dict]:
        employee_count = func.count(EmployeeModel.id)
        stmt = (
            select(
                DepartmentModel.id,
                DepartmentModel.name,
                DepartmentModel.budget,
                DepartmentModel.manager_name,
                employee_count.label("employee_count"),
                func.avg(EmployeeModel.salary).label("avg_salary"),
                func.sum(EmployeeModel.salary).label("total_salaries"),
            )
            .outerjoin(EmployeeModel, DepartmentModel.id == EmployeeModel.department_id)
            .where(DepartmentModel.company_id == company_id)
            .group_by(
                DepartmentModel.id, DepartmentModel.name,
                DepartmentModel.budget, DepartmentModel.manager_name
            )
            .order_by(DepartmentModel.budget.desc().nulls_last(), DepartmentModel.id)
        )
        result = await self._session.execute(stmt)
        return [dict(row._mapping) for row in result]


class SQLAlchemyEmployeeRepository(IEmployeeRepository):
    """SQLAlchemy implementation of the employee repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _with_context(self, *extra: Any):
        return (
            select(
                *_employee_columns(),
                DepartmentModel.name.label("department_name"),
                CompanyModel.name.label("company_name"),
                *extra,
            )
            .select_from(EmployeeModel)
            .outerjoin(DepartmentModel, EmployeeModel.department_id == DepartmentModel.id)
            .outerjoin(CompanyModel, DepartmentModel.company_id == CompanyModel.id)
        )

    async def list(self, limit: int = 100, offset: int = 0) -> List[dict]:
        stmt = (
            self._with_context()
            .order_by(EmployeeModel.created_at.desc(), EmployeeModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return [dict(row._mapping) for row in result]

    async def get_detail(self, employee_id: int) -> Optional[dict]:
        stmt = self._with_context(
            DepartmentModel.budget.label("department_budget"),
            CompanyModel.email.label("company_email"),
        ).where(EmployeeModel.id == employee_id)
        row = (await self._session.execute(stmt)).first()
        return dict(row._mapping) if row else None

    async def get_by_id(self, employee_id: int, for_update: bool = False) -> Optional[EmployeeModel]:
        stmt = select(EmployeeModel).where(EmployeeModel.id == employee_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(EmployeeModel.id).where(func.lower(EmployeeModel.email) == email.lower())
        if exclude_id is not None:
            stmt = stmt.where(EmployeeModel.id != exclude_id)
        result = await self._session.execute(stmt)
        return result.first() is not None

    async def create(self, dto: EmployeeCreateDTO, password_hash: Optional[str] = None) -> EmployeeModel:
        model = EmployeeModel(
            department_id=dto.department_id,
            first_name=dto.first_name,
            last_name=dto.last_name,
            email=dto.email,
            phone=dto.phone,
            salary=dto.salary,
            position=dto.position,
            password_hash=password_hash,
        )
        if dto.hire_date is not None:
            model.hire_date = dto.hire_date
        self._session.add(model)
        await _flush(self._session, "Employee")
        return model

    async def update(
        self,
        model: EmployeeModel,
        dto: EmployeeUpdateDTO,
        password_hash: Optional[str] = None
    ) -> EmployeeModel:
        model.department_id = dto.department_id
        model.first_name = dto.first_name
        model.last_name = dto.last_name
        model.email = dto.email
        model.phone = dto.phone
        model.salary = dto.salary
        model.position = dto.position
        model.is_active = dto.is_active
        if dto.hire_date is not None:
            model.hire_date = dto.hire_date
        if password_hash is not None:
            model.password_hash = password_hash
        model.updated_at = datetime.now(timezone.utc)
        await _flush(self._session, "Employee")
        return model

    async def delete(self, employee_id: int) -> None:
        await self._session.execute(delete(EmployeeModel).where(EmployeeModel.id == employee_id))

    async def count_assigned_projects(self, employee_id: int) -> int:
        from src.projects.infrastructure.models import ProjectModel

        stmt = select(func.count(ProjectModel.id)).where(ProjectModel.assigned_employee_id == employee_id)
        return (await self._session.scalar(stmt)) or 0

    async def search(self, filters: EmployeeSearchFilters) -> List[dict]:
        stmt = self._with_context()

        if filters.name:
            stmt = stmt.where(or_(
                EmployeeModel.first_name.icontains(filters.name, autoescape=True),
                EmployeeModel.last_name.icontains(filters.name, autoescape=True),
            ))
        if filters.position:
            stmt = stmt.where(EmployeeModel.position.icontains(filters.position, autoescape=True))
        if filters.min_salary is not None:
            stmt = stmt.where(EmployeeModel.salary >= filters.min_salary)
        if filters.max_salary is not None:
            stmt = stmt.where(EmployeeModel.salary <= filters.max_salary)
        if filters.department_id is not None:
            stmt = stmt.where(EmployeeModel.department_id == filters.department_id)
        if filters.company_id is not None:
            stmt = stmt.where(DepartmentModel.company_id == filters.company_id)

        stmt = stmt.order_by(EmployeeModel.salary.desc().nulls_last(), EmployeeModel.id)
        result = await self._session.execute(stmt)
        return [dict(row._mapping) for row in result]

    async def salary_stats(self, department_id: int) -> Optional[dict]:
        """Aggregates over active employees, plus their salaries for the deviation."""
        header = (
            await self._session.execute(
                select(
                    DepartmentModel.name.label("department_name"),
                    DepartmentModel.budget.label("department_budget"),
                    CompanyModel.name.label("company_name"),
                )
                .outerjoin(CompanyModel, DepartmentModel.company_id == CompanyModel.id)
                .where(DepartmentModel.id == department_id)
            )
        ).first()
        if header is None:
            return None

        active = (EmployeeModel.department_id == department_id) & EmployeeModel.is_active.is_(True)
        aggregates = (
            await self._session.execute(
                select(
                    func.count(EmployeeModel.id).label("total_employees"),
                    func.avg(EmployeeModel.salary).label("average_salary"),
                    func.min(EmployeeModel.salary).label("min_salary"),
                    func.max(EmployeeModel.salary).label("max_salary"),
                    func.sum(EmployeeModel.salary).label("total_salary_cost"),
                ).where(active)
            )
        ).one()
        salaries = (
            await self._session.execute(
                select(EmployeeModel.salary).where(active, EmployeeModel.salary.is_not(None))
            )
        ).scalars().all()

        return {
            **dict(header._mapping),
            **dict(aggregates._mapping),
            "salaries": [float(s) for s in salaries],
        }
