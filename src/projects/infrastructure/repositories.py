"""
Projects Infrastructure Repositories
=====================================

SQLAlchemy implementation of the project repository.
"""

from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.projects.application import IProjectRepository, ProjectCreateDTO
from src.projects.infrastructure.models import ProjectModel
from src.organization.infrastructure.models import CompanyModel, DepartmentModel, EmployeeModel
from src.config import CLOSED_PROJECT_STATUSES
from src.core import ConflictException


def _project_columns() -> list:
    return [
        ProjectModel.id,
        ProjectModel.name,
        ProjectModel.description,
        ProjectModel.start_date,
        ProjectModel.end_date,
        ProjectModel.budget,
        ProjectModel.status,
        ProjectModel.assigned_employee_id,
        ProjectModel.created_at,
        ProjectModel.updated_at,
    ]


def _employee_name():
    return (EmployeeModel.first_name + " " + EmployeeModel.last_name)


class SQLAlchemyProjectRepository(IProjectRepository):
    """SQLAlchemy implementation of project repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _with_context(self, *columns):
        return (
            select(*columns)
            .select_from(ProjectModel)
            .outerjoin(EmployeeModel, ProjectModel.assigned_employee_id == EmployeeModel.id)
            .outerjoin(DepartmentModel, EmployeeModel.department_id == DepartmentModel.id)
            .outerjoin(CompanyModel, DepartmentModel.company_id == CompanyModel.id)
        )

    def _listing(self):
        return self._with_context(
            *_project_columns(),
            _employee_name().label("assigned_employee_name"),
            EmployeeModel.email.label("employee_email"),
            EmployeeModel.position.label("employee_position"),
            DepartmentModel.name.label("department_name"),
            CompanyModel.name.label("company_name"),
        )

    async def _flush(self) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise ConflictException("Project conflicts with existing data") from e

    async def list(self, limit: int = 100, offset: int = 0) -> List[dict]:
        stmt = (
            self._listing()
            .order_by(ProjectModel.created_at.desc(), ProjectModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return [dict(row._mapping) for row in result]

    async def get_detail(self, project_id: int) -> Optional[dict]:
        row = (await self._session.execute(self._listing().where(ProjectModel.id == project_id))).first()
        return dict(row._mapping) if row else None

    async def get_by_id(self, project_id: int, for_update: bool = False) -> Optional[ProjectModel]:
        stmt = select(ProjectModel).where(ProjectModel.id == project_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, dto: ProjectCreateDTO) -> ProjectModel:
        model = ProjectModel(
            name=dto.name,
            description=dto.description,
            start_date=dto.start_date,
            end_date=dto.end_date,
            budget=dto.budget,
            status=dto.status,
            assigned_employee_id=dto.assigned_employee_id,
        )
        self._session.add(model)
        await self._flush()
        return model

    async def update(self, model: ProjectModel, dto: ProjectCreateDTO) -> ProjectModel:
        model.name = dto.name
        model.description = dto.description
        model.start_date = dto.start_date
        model.end_date = dto.end_date
        model.budget = dto.budget
        model.status = dto.status
        model.assigned_employee_id = dto.assigned_employee_id
        model.updated_at = datetime.now(timezone.utc)
        await self._flush()
        return model

    async def assign(self, model: ProjectModel, employee_id: int) -> ProjectModel:
        model.assigned_employee_id = employee_id
        model.updated_at = datetime.now(timezone.utc)
        await self._flush()
        return model

    async def delete(self, project_id: int) -> None:
        await self._session.execute(delete(ProjectModel).where(ProjectModel.id == project_id))

    async def count_open_for_employee(self, employee_id: int, exclude_project_id: Optional[int] = None) -> int:
        stmt = select(func.count(ProjectModel.id)).where(
            ProjectModel.assigned_employee_id == employee_id,
            ProjectModel.status.not_in(CLOSED_PROJECT_STATUSES),
        )
        if exclude_project_id is not None:
            stmt = stmt.where(ProjectModel.id != exclude_project_id)
        return (await self._session.scalar(stmt)) or 0

    async def status_summary(self, status: str) -> dict:
        """Aggregates for one status plus the distinct departments and companies involved."""
        aggregates = (
            await self._session.execute(
                self._with_context(
                    func.count(ProjectModel.id).label("project_count"),
                    func.sum(ProjectModel.budget).label("total_budget"),
                    func.avg(ProjectModel.budget).label("average_budget"),
                    func.min(ProjectModel.start_date).label("earliest_start"),
                    func.max(ProjectModel.end_date).label("latest_end"),
                    func.count(EmployeeModel.department_id.distinct()).label("departments_involved"),
                    func.count(DepartmentModel.company_id.distinct()).label("companies_involved"),
                ).where(ProjectModel.status == status)
            )
        ).one()

        department_names = (
            await self._session.execute(
                self._with_context(DepartmentModel.name)
                .where(ProjectModel.status == status, DepartmentModel.name.is_not(None))
                .distinct()
                .order_by(DepartmentModel.name)
            )
        ).scalars().all()
        company_names = (
            await self._session.execute(
                self._with_context(CompanyModel.name)
                .where(ProjectModel.status == status, CompanyModel.name.is_not(None))
                .distinct()
                .order_by(CompanyModel.name)
            )
        ).scalars().all()

        return {
            **dict(aggregates._mapping),
            "department_names": list(department_names),
            "company_names": list(company_names),
        }

    async def list_overdue(self, today: date) -> List[dict]:
        stmt = (
            self._with_context(
                ProjectModel.id,
                ProjectModel.name,
                ProjectModel.description,
                ProjectModel.start_date,
                ProjectModel.end_date,
                ProjectModel.budget,
                ProjectModel.status,
                _employee_name().label("assigned_employee"),
                EmployeeModel.email.label("employee_email"),
                DepartmentModel.name.label("department_name"),
                CompanyModel.name.label("company_name"),
            )
            .where(
                ProjectModel.end_date < today,
                ProjectModel.status.not_in(CLOSED_PROJECT_STATUSES),
            )
            .order_by(ProjectModel.end_date.asc(), ProjectModel.id)
        )
        result = await self._session.execute(stmt)
        return [dict(row._mapping) for row in result]
