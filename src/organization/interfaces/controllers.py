"""
Organization Controllers (API Routes)
======================================

FastAPI routes for companies, departments and employees.

Controllers are thin - they delegate to application services and commit
the session after a successful write.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database import get_session
from src.organization.application import (
    CompanyService, DepartmentService, EmployeeService,
    CompanyCreateDTO, CompanyUpdateDTO, CompanyResponse, CompanyDepartmentRow, CompanyDeleteResponse,
    DepartmentCreateDTO, DepartmentUpdateDTO, DepartmentResponse, DepartmentDeleteResponse,
    DepartmentEmployeeRow, DepartmentBudgetSummary,
    EmployeeCreateDTO, EmployeeUpdateDTO, EmployeeResponse, EmployeeListItem,
    EmployeeDetailResponse, EmployeeSearchResult, EmployeeSearchFilters,
    SalaryStatsResponse, MessageResponse,
)
from src.organization.infrastructure import (
    SQLAlchemyCompanyRepository,
    SQLAlchemyDepartmentRepository,
    SQLAlchemyEmployeeRepository,
)

company_router = APIRouter(prefix="/api/companies", tags=["Companies"])
department_router = APIRouter(prefix="/api/departments", tags=["Departments"])
employee_router = APIRouter(prefix="/api/employees", tags=["Employees"])


# ========== Example payloads for Swagger ==========

COMPANY_CREATE_EXAMPLE = {
    "name": "Tech Solutions Inc",
    "email": "contact@techsolutions.com",
    "address": "123 Tech Street, Silicon Valley, CA",
    "phone": "555-0101"
}

EMPLOYEE_CREATE_EXAMPLE = {
    "department_id": 1,
    "first_name": "John",
    "last_name": "Doe",
    "email": "john.doe@techsolutions.com",
    "phone": "555-1001",
    "salary": 85000.00,
    "position": "Senior Developer",
    "password": "change-me-please"
}


# ========== Dependencies ==========

async def get_company_service(session: AsyncSession = Depends(get_session)) -> CompanyService:
    """Get company service instance."""
    return CompanyService(SQLAlchemyCompanyRepository(session))


async def get_department_service(session: AsyncSession = Depends(get_session)) -> DepartmentService:
    """Get department service instance."""
    return DepartmentService(
        SQLAlchemyDepartmentRepository(session),
        SQLAlchemyCompanyRepository(session)
    )


async def get_employee_service(session: AsyncSession = Depends(get_session)) -> EmployeeService:
    """Get employee service instance."""
    return EmployeeService(
        SQLAlchemyEmployeeRepository(session),
        SQLAlchemyDepartmentRepository(session)
    )


# ========== Companies ==========

@company_router.get("", response_model=List[CompanyResponse], summary="List companies")
async def list_companies(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: CompanyService = Depends(get_company_service)
):
    return await service.list_companies(limit=limit, offset=offset)


@company_router.get("/{company_id}", response_model=CompanyResponse, summary="Get a company")
async def get_company(company_id: int, service: CompanyService = Depends(get_company_service)):
    return await service.get_company(company_id)


@company_router.post(
    "",
    response_model=CompanyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a company",
    description="Creates a company. The email must be unique (409 otherwise).",
    responses={201: {"content": {"application/json": {"example": {"id": 1, **COMPANY_CREATE_EXAMPLE}}}}}
)
async def create_company(
    dto: CompanyCreateDTO,
    session: AsyncSession = Depends(get_session),
    service: CompanyService = Depends(get_company_service)
):
    company = await service.create_company(dto)
    await session.commit()
    return company


@company_router.put("/{company_id}", response_model=CompanyResponse, summary="Replace a company")
async def update_company(
    company_id: int,
    dto: CompanyUpdateDTO,
    session: AsyncSession = Depends(get_session),
    service: CompanyService = Depends(get_company_service)
):
    company = await service.update_company(company_id, dto)
    await session.commit()
    return company


@company_router.delete(
    "/{company_id}",
    response_model=CompanyDeleteResponse,
    summary="Delete a company",
    description="""
    Deletes a company together with its departments and their employees.

    Refused with 409 while any of those employees still has projects assigned.
    The response reports how many departments and employees were removed.
    """
)
async def delete_company(
    company_id: int,
    session: AsyncSession = Depends(get_session),
    service: CompanyService = Depends(get_company_service)
):
    result = await service.delete_company(company_id)
    await session.commit()
    return result


@company_router.get(
    "/{company_id}/departments",
    response_model=List[CompanyDepartmentRow],
    summary="Company with its departments"
)
async def get_company_departments(company_id: int, service: CompanyService = Depends(get_company_service)):
    return await service.get_company_departments(company_id)


# ========== Departments ==========

@department_router.get("", response_model=List[DepartmentResponse], summary="List departments")
async def list_departments(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: DepartmentService = Depends(get_department_service)
):
    return await service.list_departments(limit=limit, offset=offset)


@department_router.get(
    "/company/{company_id}/budget-summary",
    response_model=List[DepartmentBudgetSummary],
    summary="Department budgets of a company"
)
async def get_budget_summary(company_id: int, service: DepartmentService = Depends(get_department_service)):
    return await service.get_budget_summary(company_id)


@department_router.get("/{department_id}", response_model=DepartmentResponse, summary="Get a department")
async def get_department(department_id: int, service: DepartmentService = Depends(get_department_service)):
    return await service.get_department(department_id)


@department_router.post(
    "",
    response_model=DepartmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a department",
    description="The referenced company must exist (422 otherwise)."
)
async def create_department(
    dto: DepartmentCreateDTO,
    session: AsyncSession = Depends(get_session),
    service: DepartmentService = Depends(get_department_service)
):
    department = await service.create_department(dto)
    await session.commit()
    return department


@department_router.put("/{department_id}", response_model=DepartmentResponse, summary="Replace a department")
async def update_department(
    department_id: int,
    dto: DepartmentUpdateDTO,
    session: AsyncSession = Depends(get_session),
    service: DepartmentService = Depends(get_department_service)
):
    department = await service.update_department(department_id, dto)
    await session.commit()
    return department


@department_router.delete("/{department_id}", response_model=DepartmentDeleteResponse, summary="Delete a department")
async def delete_department(
    department_id: int,
    session: AsyncSession = Depends(get_session),
    service: DepartmentService = Depends(get_department_service)
):
    result = await service.delete_department(department_id)
    await session.commit()
    return result


@department_router.get(
    "/{department_id}/employees",
    response_model=List[DepartmentEmployeeRow],
    summary="Department with its employees",
    description="One row per employee, highest salary first."
)
async def get_department_employees(
    department_id: int,
    service: DepartmentService = Depends(get_department_service)
):
    return await service.get_department_employees(department_id)


# ========== Employees ==========

@employee_router.get("", response_model=List[EmployeeListItem], summary="List employees")
async def list_employees(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: EmployeeService = Depends(get_employee_service)
):
    return await service.list_employees(limit=limit, offset=offset)


@employee_router.get(
    "/search",
    response_model=List[EmployeeSearchResult],
    summary="Search employees",
    description="""
    All filters are optional and combined with AND.

    - `name`: case-insensitive match on first or last name
    - `position`: case-insensitive substring
    - `min_salary` / `max_salary`: inclusive bounds (min must not exceed max)
    - `department_id` / `company_id`: exact match
    """
)
async def search_employees(
    name: Optional[str] = Query(None, max_length=100),
    position: Optional[str] = Query(None, max_length=100),
    min_salary: Optional[float] = Query(None, ge=0),
    max_salary: Optional[float] = Query(None, ge=0),
    department_id: Optional[int] = Query(None, gt=0),
    company_id: Optional[int] = Query(None, gt=0),
    service: EmployeeService = Depends(get_employee_service)
):
    filters = EmployeeSearchFilters(
        name=name,
        position=position,
        min_salary=min_salary,
        max_salary=max_salary,
        department_id=department_id,
        company_id=company_id,
    )
    return await service.search_employees(filters)


@employee_router.get(
    "/department/{department_id}/salary-stats",
    response_model=SalaryStatsResponse,
    summary="Salary statistics for a department"
)
async def get_salary_stats(department_id: int, service: EmployeeService = Depends(get_employee_service)):
    return await service.get_salary_stats(department_id)


@employee_router.get("/{employee_id}", response_model=EmployeeDetailResponse, summary="Get an employee")
async def get_employee(employee_id: int, service: EmployeeService = Depends(get_employee_service)):
    return await service.get_employee(employee_id)


@employee_router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an employee",
    description="""
    Creates an employee in an existing department (422 otherwise).

    The optional `password` is stored as a bcrypt hash and never returned.
    """,
    responses={201: {"content": {"application/json": {"example": {
        "id": 1, **{k: v for k, v in EMPLOYEE_CREATE_EXAMPLE.items() if k != "password"}
    }}}}}
)
async def create_employee(
    dto: EmployeeCreateDTO,
    session: AsyncSession = Depends(get_session),
    service: EmployeeService = Depends(get_employee_service)
):
    employee = await service.create_employee(dto)
    await session.commit()
    return employee


@employee_router.put("/{employee_id}", response_model=EmployeeResponse, summary="Replace an employee")
async def update_employee(
    employee_id: int,
    dto: EmployeeUpdateDTO,
    session: AsyncSession = Depends(get_session),
    service: EmployeeService = Depends(get_employee_service)
):
    employee = await service.update_employee(employee_id, dto)
    await session.commit()
    return employee


@employee_router.delete("/{employee_id}", response_model=MessageResponse, summary="Delete an employee")
async def delete_employee(
    employee_id: int,
    session: AsyncSession = Depends(get_session),
    service: EmployeeService = Depends(get_employee_service)
):
    result = await service.delete_employee(employee_id)
    await session.commit()
    return result
