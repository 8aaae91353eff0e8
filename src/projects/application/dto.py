"""
Projects Application DTOs
==========================

Data Transfer Objects for the projects API.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.config import VALID_PROJECT_STATUSES, ProjectStatus


class ProjectCreateDTO(BaseModel):
    """DTO for creating a project."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[float] = Field(None, ge=0)
    status: str = Field(default=ProjectStatus.PLANNING, description="One of the project statuses")
    assigned_employee_id: Optional[int] = Field(None, gt=0)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in VALID_PROJECT_STATUSES:
            raise ValueError(f"status must be one of {VALID_PROJECT_STATUSES}")
        return v

    @model_validator(mode="after")
    def validate_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class ProjectUpdateDTO(ProjectCreateDTO):
    """DTO for replacing a project (PUT semantics)."""


class ProjectAssignDTO(BaseModel):
    """Body of the assign endpoint."""
    employee_id: int = Field(..., gt=0)


class ProjectResponse(BaseModel):
    """Response model for a project row."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[float] = None
    status: str
    assigned_employee_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class ProjectListItem(ProjectResponse):
    """Project with its assignee and the assignee's department and company."""
    assigned_employee_name: Optional[str] = None
    employee_email: Optional[str] = None
    department_name: Optional[str] = None
    company_name: Optional[str] = None


class ProjectDetailResponse(ProjectListItem):
    employee_position: Optional[str] = None


class ProjectAssignResponse(BaseModel):
    message: str
    project: ProjectResponse


class ProjectStatusSummary(BaseModel):
    """Aggregates over every project in one status."""
    status: str
    project_count: int = 0
    total_budget: Optional[float] = None
    average_budget: Optional[float] = None
    earliest_start: Optional[date] = None
    latest_end: Optional[date] = None
    departments_involved: int = 0
    companies_involved: int = 0
    company_names: Optional[str] = Field(None, description="Comma separated, alphabetical")
    department_names: Optional[str] = Field(None, description="Comma separated, alphabetical")


class OverdueProject(BaseModel):
    """A project past its end date that is still open."""
    id: int
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: date
    budget: Optional[float] = None
    status: str
    days_overdue: int
    assigned_employee: Optional[str] = None
    employee_email: Optional[str] = None
    department_name: Optional[str] = None
    company_name: Optional[str] = None


class ProjectDeleteResponse(BaseModel):
    message: str
    deleted: ProjectResponse
