"""
Organization Application DTOs
==============================

Data Transfer Objects for the companies, departments and employees API.

These Pydantic models handle serialization/deserialization and validation
for API requests and responses.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.config import MAX_SALARY, MAX_PASSWORD_BYTES

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str


# ========== Companies ==========

class CompanyCreateDTO(BaseModel):
    """DTO for creating a company."""
    name: str = Field(..., min_length=1, max_length=255, description="Company name")
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN, description="Unique contact email")
    address: Optional[str] = Field(None, description="Postal address")
    phone: Optional[str] = Field(None, max_length=20, description="Phone number")


class CompanyUpdateDTO(CompanyCreateDTO):
    """DTO for replacing a company (PUT semantics: every field is written)."""


class CompanyResponse(BaseModel):
    """Response model for a company row."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    address: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CompanyDepartmentRow(BaseModel):
    """One company/department pair (department fields are null for an empty company)."""
    company_id: int
    company_name: str
    company_email: str
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    department_budget: Optional[float] = None
    manager_name: Optional[str] = None


class CompanyDeleteResponse(BaseModel):
    """Response for a company delete, including what the cascade removed."""
    message: str
    deleted: CompanyResponse
    departments_removed: int = Field(..., description="Departments deleted by the cascade")
    employees_removed: int = Field(..., description="Employees deleted by the cascade")


# ========== Departments ==========

class DepartmentCreateDTO(BaseModel):
    """DTO for creating a department."""
    company_id: int = Field(..., gt=0, description="Owning company")
    name: str = Field(..., min_length=1, max_length=255)
    budget: Optional[float] = Field(None, ge=0, description="Annual budget")
    manager_name: Optional[str] = Field(None, max_length=255)


class DepartmentUpdateDTO(DepartmentCreateDTO):
    """DTO for replacing a department."""


class DepartmentResponse(BaseModel):
    """Response model for a department row."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: Optional[int] = None
    name: str
    budget: Optional[float] = None
    manager_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class DepartmentDeleteResponse(BaseModel):
    """Response for a department delete."""
    message: str
    deleted: DepartmentResponse


class DepartmentEmployeeRow(BaseModel):
    """A department joined with its company and one of its employees."""
    department_id: int
    department_name: str
    department_budget: Optional[float] = None
    manager_name: Optional[str] = None
    company_id: Optional[int] = None
    company_name: Optional[str] = None
    employee_id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    employee_email: Optional[str] = None
    salary: Optional[float] = None
    position: Optional[str] = None
    hire_date: Optional[date] = None
    is_active: Optional[bool] = None


class DepartmentBudgetSummary(BaseModel):
    """Budget figures for one department of a company."""
    id: int
    name: str
    budget: Optional[float] = None
    manager_name: Optional[str] = None
    employee_count: int
    avg_salary: Optional[float] = None
    total_salaries: Optional[float] = None
    budget_per_employee: Optional[float] = Field(None, description="Null when the department has no employees")


# ========== Employees ==========

class EmployeeCreateDTO(BaseModel):
    """DTO for creating an employee."""
    department_id: int = Field(..., gt=0)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, max_length=20)
    salary: Optional[float] = Field(None, ge=0, le=MAX_SALARY)
    position: Optional[str] = Field(None, max_length=100)
    hire_date: Optional[date] = Field(None, description="Defaults to today")
    password: Optional[str] = Field(
        None,
        min_length=8,
        max_length=72,
        description="Stored as a bcrypt hash, never returned"
    )

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: Optional[str]) -> Optional[str]:
        # bcrypt only accepts 72 bytes, not 72 characters
        if v is not None and len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
        return v


class EmployeeUpdateDTO(EmployeeCreateDTO):
    """DTO for replacing an employee. A null password keeps the current one."""
    is_active: bool = True


class EmployeeResponse(BaseModel):
    """Response model for an employee row."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    department_id: Optional[int] = None
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    salary: Optional[float] = None
    hire_date: Optional[date] = None
    position: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class EmployeeListItem(EmployeeResponse):
    """Employee with the names of its department and company."""
    department_name: Optional[str] = None
    company_name: Optional[str] = None


class EmployeeDetailResponse(EmployeeListItem):
    """Employee with department and company context."""
    department_budget: Optional[float] = None
    company_email: Optional[str] = None


class EmployeeSearchResult(BaseModel):
    """Row returned by the employee search."""
    id: int
    first_name: str
    last_name: str
    email: str
    position: Optional[str] = None
    salary: Optional[float] = None
    hire_date: Optional[date] = None
    is_active: bool
    department_name: Optional[str] = None
    company_name: Optional[str] = None


class EmployeeSearchFilters(BaseModel):
    """Filters accepted by the employee search."""
    name: Optional[str] = None
    position: Optional[str] = None
    min_salary: Optional[float] = None
    max_salary: Optional[float] = None
    department_id: Optional[int] = None
    company_id: Optional[int] = None


class SalaryStatsResponse(BaseModel):
    """Salary statistics over the active employees of a department."""
    department_name: str
    department_budget: Optional[float] = None
    company_name: Optional[str] = None
    total_employees: int
    average_salary: Optional[float] = None
    min_salary: Optional[float] = None
    max_salary: Optional[float] = None
    total_salary_cost: Optional[float] = None
    salary_deviation: Optional[float] = Field(None, description="Sample standard deviation")
    remaining_budget: Optional[float] = None
