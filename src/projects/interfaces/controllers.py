"""
Projects Controllers (API Routes)
==================================

FastAPI routes for projects.

Fixed paths (/overdue, /budget-analysis, /status/...) are declared before
/{project_id} so they are not captured by it.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database import get_session
from src.projects.application import (
    ProjectService,
    ProjectCreateDTO, ProjectUpdateDTO, ProjectAssignDTO,
    ProjectResponse, ProjectListItem, ProjectDetailResponse,
    ProjectAssignResponse, ProjectStatusSummary, OverdueProject,
    ProjectDeleteResponse,
)
from src.projects.infrastructure import SQLAlchemyProjectRepository
from src.organization.infrastructure import SQLAlchemyEmployeeRepository
from src.reporting.application import ReportService, BudgetAnalysisRow
from src.reporting.interfaces import get_report_service

router = APIRouter(prefix="/api/projects", tags=["Projects"])


PROJECT_CREATE_EXAMPLE = {
    "name": "E-commerce Platform",
    "description": "Build new e-commerce platform",
    "start_date": "2024-01-01",
    "end_date": "2024-06-30",
    "budget": 150000.00,
    "status": "in_progress",
    "assigned_employee_id": 1
}


# ========== Dependencies ==========

async def get_project_service(session: AsyncSession = Depends(get_session)) -> ProjectService:
    """Get project service instance."""
    return ProjectService(
        SQLAlchemyProjectRepository(session),
        SQLAlchemyEmployeeRepository(session)
    )


# ========== Route Handlers ==========

@router.get("", response_model=List[ProjectListItem], summary="List projects")
async def list_projects(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: ProjectService = Depends(get_project_service)
):
    return await service.list_projects(limit=limit, offset=offset)


@router.get(
    "/overdue",
    response_model=List[OverdueProject],
    summary="Overdue projects",
    description="Open projects (not completed or cancelled) whose end date is before today (UTC), oldest first."
)
async def list_overdue(service: ProjectService = Depends(get_project_service)):
    return await service.list_overdue()


@router.get(
    "/budget-analysis",
    response_model=List[BudgetAnalysisRow],
    summary="Project budget analysis",
    description="""
    Per department with projects held by active employees: project budgets by
    status, employee cost and a budget status.

    **Budget status**: `Over Budget` when project budgets exceed the department
    budget, `Near Budget Limit` above 80 %, otherwise `Within Budget`.
    """
)
async def budget_analysis(service: ReportService = Depends(get_report_service)):
    return await service.budget_analysis()


@router.get(
    "/status/{project_status}/summary",
    response_model=ProjectStatusSummary,
    summary="Summary of projects in one status",
    description="Unknown statuses are rejected with 422; a status with no projects returns zero counts."
)
async def status_summary(project_status: str, service: ProjectService = Depends(get_project_service)):
    return await service.get_status_summary(project_status)


@router.get("/{project_id}", response_model=ProjectDetailResponse, summary="Get a project")
async def get_project(project_id: int, service: ProjectService = Depends(get_project_service)):
    return await service.get_project(project_id)


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project",
    description="""
    Creates a project. `end_date` may not precede `start_date`, `budget` may
    not be negative and the assigned employee must exist.

    **Status**: `planning`, `in_progress`, `on_hold`, `completed`, `cancelled`
    """,
    responses={201: {"content": {"application/json": {"example": {"id": 1, **PROJECT_CREATE_EXAMPLE}}}}}
)
async def create_project(
    dto: ProjectCreateDTO,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service)
):
    project = await service.create_project(dto)
    await session.commit()
    return project


@router.put(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Replace a project",
    description="""
    Status changes must follow the project lifecycle (409 otherwise):

    - `planning` -> `in_progress`, `on_hold`, `cancelled`
    - `in_progress` -> `on_hold`, `completed`, `cancelled`
    - `on_hold` -> `in_progress`, `cancelled`
    - `completed` and `cancelled` are final
    """
)
async def update_project(
    project_id: int,
    dto: ProjectUpdateDTO,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service)
):
    project = await service.update_project(project_id, dto)
    await session.commit()
    return project


@router.delete(
    "/{project_id}",
    response_model=ProjectDeleteResponse,
    summary="Delete a project",
    description="Projects in progress cannot be deleted (409)."
)
async def delete_project(
    project_id: int,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service)
):
    result = await service.delete_project(project_id)
    await session.commit()
    return result


@router.post(
    "/{project_id}/assign",
    response_model=ProjectAssignResponse,
    summary="Assign a project to an employee",
    description="""
    - 404 when the project does not exist
    - 422 when the employee does not exist
    - 409 when the employee is inactive or already holds the maximum number of open projects
    """
)
async def assign_project(
    project_id: int,
    body: ProjectAssignDTO,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service)
):
    result = await service.assign_project(project_id, body.employee_id)
    await session.commit()
    return result
