"""
Projects Application Layer
===========================

Contains:
- Services: ProjectService
- DTOs: Request validation and response models
"""

from src.projects.application.dto import (
    ProjectCreateDTO,
    ProjectUpdateDTO,
    ProjectAssignDTO,
    ProjectResponse,
    ProjectListItem,
    ProjectDetailResponse,
    ProjectAssignResponse,
    ProjectStatusSummary,
    OverdueProject,
    ProjectDeleteResponse,
)
from src.projects.application.services import (
    ProjectService,
    IProjectRepository,
    IEmployeeLookup,
)

__all__ = [
    # DTOs
    "ProjectCreateDTO",
    "ProjectUpdateDTO",
    "ProjectAssignDTO",
    "ProjectResponse",
    "ProjectListItem",
    "ProjectDetailResponse",
    "ProjectAssignResponse",
    "ProjectStatusSummary",
    "OverdueProject",
    "ProjectDeleteResponse",
    # Services
    "ProjectService",
    # Repository Interfaces
    "IProjectRepository",
    "IEmployeeLookup",
]
