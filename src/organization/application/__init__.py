"""
Organization Application Layer
===============================

Contains:
- Services: Existence/conflict checks and response shaping
- DTOs: Request validation and response models

Depends on repository interfaces, not on concrete infrastructure.
"""

from src.organization.application.dto import (
    MessageResponse,
    CompanyCreateDTO,
    CompanyUpdateDTO,
    CompanyResponse,
    CompanyDepartmentRow,
    CompanyDeleteResponse,
    DepartmentCreateDTO,
    DepartmentUpdateDTO,
    DepartmentResponse,
    DepartmentDeleteResponse,
    DepartmentEmployeeRow,
    DepartmentBudgetSummary,
    EmployeeCreateDTO,
    EmployeeUpdateDTO,
    EmployeeResponse,
    EmployeeListItem,
    EmployeeDetailResponse,
    EmployeeSearchResult,
    EmployeeSearchFilters,
    SalaryStatsResponse,
)
from src.organization.application.services import (
    CompanyService,
    DepartmentService,
    EmployeeService,
    ICompanyRepository,
    IDepartmentRepository,
    IEmployeeRepository,
)

__all__ = [
    # DTOs
    "MessageResponse",
    "CompanyCreateDTO",
    "CompanyUpdateDTO",
    "CompanyResponse",
    "CompanyDepartmentRow",
    "CompanyDeleteResponse",
    "DepartmentCreateDTO",
    "DepartmentUpdateDTO",
    "DepartmentResponse",
    "DepartmentDeleteResponse",
    "DepartmentEmployeeRow",
    "DepartmentBudgetSummary",
    "EmployeeCreateDTO",
    "EmployeeUpdateDTO",
    "EmployeeResponse",
    "EmployeeListItem",
    "EmployeeDetailResponse",
    "EmployeeSearchResult",
    "EmployeeSearchFilters",
    "SalaryStatsResponse",
    # Services
    "CompanyService",
    "DepartmentService",
    "EmployeeService",
    # Repository Interfaces
    "ICompanyRepository",
    "IDepartmentRepository",
    "IEmployeeRepository",
]
