"""
Projects Application Services
==============================

Coordinates the project entity rules with persistence.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import List, Optional, Any

from src.projects.application.dto import (
    ProjectCreateDTO, ProjectUpdateDTO, ProjectResponse, ProjectListItem,
    ProjectDetailResponse, ProjectAssignResponse, ProjectStatusSummary,
    OverdueProject, ProjectDeleteResponse,
)
from src.projects.domain import Project
from src.config import VALID_PROJECT_STATUSES, settings
from src.core import (
    ResourceNotFoundException, ValidationException,
    ConflictException, DomainException,
)
from src.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


# ========== Repository Interfaces (Dependency Inversion) ==========

class IProjectRepository(ABC):
    """Interface for project data access."""

    @abstractmethod
    async def list(self, limit: int = 100, offset: int = 0) -> List[dict]:
        """List projects with assignee context, newest first."""

    @abstractmethod
    async def get_detail(self, project_id: int) -> Optional[dict]:
        """Get one project with assignee context."""

    @abstractmethod
    async def get_by_id(self, project_id: int, for_update: bool = False) -> Optional[Any]:
        """Get project model by ID."""

    @abstractmethod
    async def create(self, dto: ProjectCreateDTO) -> Any:
        """Insert a project."""

    @abstractmethod
    async def update(self, model: Any, dto: ProjectCreateDTO) -> Any:
        """Overwrite a project."""

    @abstractmethod
    async def assign(self, model: Any, employee_id: int) -> Any:
        """Point a project at an employee."""

    @abstractmethod
    async def delete(self, project_id: int) -> None:
        """Delete a project."""

    @abstractmethod
    async def count_open_for_employee(self, employee_id: int, exclude_project_id: Optional[int] = None) -> int:
        """Count an employee's projects that are neither completed nor cancelled."""

    @abstractmethod
    async def status_summary(self, status: str) -> dict:
        """Aggregates over the projects in one status."""

    @abstractmethod
    async def list_overdue(self, today: date) -> List[dict]:
        """Open projects whose end date is before today."""


class IEmployeeLookup(ABC):
    """The part of employee data access that projects depend on."""

    @abstractmethod
    async def get_by_id(self, employee_id: int, for_update: bool = False) -> Optional[Any]:
        """Get employee by ID."""


def _to_entity(model: Any) -> Project:
    return Project(
        id=model.id,
        name=model.name,
        status=model.status,
        start_date=model.start_date,
        end_date=model.end_date,
        budget=model.budget,
        assigned_employee_id=model.assigned_employee_id,
    )


def _today() -> date:
    return datetime.now(timezone.utc).date()


# ========== Application Services ==========

class ProjectService:
    """
    Service for project CRUD, assignment and status views.

    Status changes go through the Project entity so the transition table is
    enforced in one place.
    """

    def __init__(
        self,
        project_repository: IProjectRepository,
        employee_lookup: IEmployeeLookup,
        max_active_projects: Optional[int] = None
    ):
        self._repo = project_repository
        self._employees = employee_lookup
        if max_active_projects is None:
            max_active_projects = settings.max_active_projects_per_employee
        self._max_active = max_active_projects

    async def _require_assignable(
        self,
        employee_id: int,
        project: Project,
        field: str = "assigned_employee_id"
    ) -> None:
        """
        Check that an employee may take a project.

        Unknown employees are a validation error. Inactive employees, and
        employees already holding the open-project limit, are conflicts; the
        limit only applies when the project itself is open.
        """
        employee = await self._employees.get_by_id(employee_id)
        if employee is None:
            raise ValidationException(
                f"Employee {employee_id} does not exist",
                {"field": field, "value": employee_id}
            )
        if not employee.is_active:
            raise ConflictException(f"Employee {employee_id} is not active")
        if not project.is_open:
            return

        open_projects = await self._repo.count_open_for_employee(employee_id, exclude_project_id=project.id)
        if open_projects >= self._max_active:
            raise ConflictException(
                f"Employee {employee_id} already has {open_projects} open projects "
                f"(limit {self._max_active})",
                {"open_projects": open_projects, "limit": self._max_active}
            )

    async def list_projects(self, limit: int = 100, offset: int = 0) -> List[ProjectListItem]:
        rows = await self._repo.list(limit=limit, offset=offset)
        return [ProjectListItem.model_validate(r) for r in rows]

    async def get_project(self, project_id: int) -> ProjectDetailResponse:
        row = await self._repo.get_detail(project_id)
        if row is None:
            raise ResourceNotFoundException("Project", project_id)
        return ProjectDetailResponse.model_validate(row)

    async def create_project(self, dto: ProjectCreateDTO) -> ProjectResponse:
        # Raises on a bad schedule, budget or status
        entity = Project(
            name=dto.name,
            status=dto.status,
            start_date=dto.start_date,
            end_date=dto.end_date,
            budget=dto.budget,
            assigned_employee_id=dto.assigned_employee_id,
        )
        if dto.assigned_employee_id is not None:
            await self._require_assignable(dto.assigned_employee_id, entity)

        project = await self._repo.create(dto)
        logger.info("Project created", extra={"project_id": project.id, "status": dto.status})
        return ProjectResponse.model_validate(project)

    async def update_project(self, project_id: int, dto: ProjectUpdateDTO) -> ProjectResponse:
        model = await self._repo.get_by_id(project_id, for_update=True)
        if model is None:
            raise ResourceNotFoundException("Project", project_id)

        entity = _to_entity(model)
        entity.change_status(dto.status)
        Project.validate_schedule(dto.start_date, dto.end_date)
        if dto.assigned_employee_id is not None and dto.assigned_employee_id != model.assigned_employee_id:
            await self._require_assignable(dto.assigned_employee_id, entity)

        previous_status = model.status
        model = await self._repo.update(model, dto)
        logger.info(
            "Project updated",
            extra={"project_id": project_id, "from_status": previous_status, "to_status": dto.status}
        )
        return ProjectResponse.model_validate(model)

    async def delete_project(self, project_id: int) -> ProjectDeleteResponse:
        model = await self._repo.get_by_id(project_id, for_update=True)
        if model is None:
            raise ResourceNotFoundException("Project", project_id)
        if not _to_entity(model).can_be_deleted:
            raise DomainException(
                f"Project {project_id} is in progress; put it on hold or cancel it before deleting",
                {"status": model.status}
            )

        snapshot = ProjectResponse.model_validate(model)
        await self._repo.delete(project_id)
        logger.info("Project deleted", extra={"project_id": project_id, "status": snapshot.status})
        return ProjectDeleteResponse(message="Project deleted successfully", deleted=snapshot)

    async def assign_project(self, project_id: int, employee_id: int) -> ProjectAssignResponse:
        """
        Assign a project to an employee.

        The project row is locked for the duration of the checks. Inactive
        employees and employees already at the open-project limit are refused.
        """
        model = await self._repo.get_by_id(project_id, for_update=True)
        if model is None:
            raise ResourceNotFoundException("Project", project_id)

        await self._require_assignable(employee_id, _to_entity(model), field="employee_id")

        model = await self._repo.assign(model, employee_id)
        logger.info("Project assigned", extra={"project_id": project_id, "employee_id": employee_id})
        return ProjectAssignResponse(
            message="Project assigned successfully",
            project=ProjectResponse.model_validate(model)
        )

    async def get_status_summary(self, status: str) -> ProjectStatusSummary:
        if status not in VALID_PROJECT_STATUSES:
            raise ValidationException(
                f"Unknown project status '{status}'",
                {"allowed": list(VALID_PROJECT_STATUSES)}
            )

        summary = await self._repo.status_summary(status)
        if not summary["project_count"]:
            return ProjectStatusSummary(status=status)

        return ProjectStatusSummary(
            status=status,
            project_count=summary["project_count"],
            total_budget=summary["total_budget"],
            average_budget=summary["average_budget"],
            earliest_start=summary["earliest_start"],
            latest_end=summary["latest_end"],
            departments_involved=summary["departments_involved"],
            companies_involved=summary["companies_involved"],
            company_names=", ".join(summary["company_names"]) or None,
            department_names=", ".join(summary["department_names"]) or None,
        )

    async def list_overdue(self, today: Optional[date] = None) -> List[OverdueProject]:
        today = today or _today()
        overdue = []
        for row in await self._repo.list_overdue(today):
            entity = Project(
                id=row["id"],
                name=row["name"],
                status=row["status"],
                start_date=row["start_date"],
                end_date=row["end_date"],
                budget=row["budget"],
            )
            if entity.is_overdue(today):
                overdue.append(OverdueProject(**row, days_overdue=entity.days_overdue(today)))
        return overdue
