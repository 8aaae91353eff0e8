"""
Organization Application Services
==================================

Application services for companies, departments and employees.

Services own the existence and conflict checks that must happen before a
write; repositories only translate to SQL. Route handlers commit.
"""

import statistics
from abc import ABC, abstractmethod
from typing import List, Optional, Any, Tuple

from src.organization.application.dto import (
    CompanyCreateDTO, CompanyResponse, CompanyDepartmentRow, CompanyDeleteResponse,
    DepartmentCreateDTO, DepartmentResponse, DepartmentDeleteResponse,
    DepartmentEmployeeRow, DepartmentBudgetSummary,
    EmployeeCreateDTO, EmployeeUpdateDTO, EmployeeResponse, EmployeeListItem,
    EmployeeDetailResponse, EmployeeSearchResult, EmployeeSearchFilters,
    SalaryStatsResponse, MessageResponse,
)
from src.core import ResourceNotFoundException, ValidationException, ConflictException
from src.shared.infrastructure.logging import get_logger
from src.shared.infrastructure.security import hash_password

logger = get_logger(__name__)


# ========== Repository Interfaces (Dependency Inversion) ==========

class ICompanyRepository(ABC):
    """Interface for company data access."""

    @abstractmethod
    async def list(self, limit: int = 100, offset: int = 0) -> List[Any]:
        """List companies, newest first."""

    @abstractmethod
    async def get_by_id(self, company_id: int, for_update: bool = False) -> Optional[Any]:
        """Get company by ID, optionally locking the row."""

    @abstractmethod
    async def exists_by_email(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether another company uses this email."""

    @abstractmethod
    async def create(self, dto: CompanyCreateDTO) -> Any:
        """Insert a company."""

    @abstractmethod
    async def update(self, model: Any, dto: CompanyCreateDTO) -> Any:
        """Overwrite a company."""

    @abstractmethod
    async def delete(self, company_id: int) -> None:
        """Delete a company (cascades to departments and employees)."""

    @abstractmethod
    async def count_dependents(self, company_id: int) -> Tuple[int, int]:
        """Count departments and employees under a company."""

    @abstractmethod
    async def count_assigned_projects(self, company_id: int) -> int:
        """Count projects assigned to employees of a company."""

    @abstractmethod
    async def list_departments(self, company_id: int) -> List[dict]:
        """Company fields joined with each of its departments."""


class IDepartmentRepository(ABC):
    """Interface for department data access."""

    @abstractmethod
    async def list(self, limit: int = 100, offset: int = 0) -> List[Any]:
        """List departments, newest first."""

    @abstractmethod
    async def get_by_id(self, department_id: int, for_update: bool = False) -> Optional[Any]:
        """Get department by ID, optionally locking the row."""

    @abstractmethod
    async def create(self, dto: DepartmentCreateDTO) -> Any:
        """Insert a department."""

    @abstractmethod
    async def update(self, model: Any, dto: DepartmentCreateDTO) -> Any:
        """Overwrite a department."""

    @abstractmethod
    async def delete(self, department_id: int) -> None:
        """Delete a department (cascades to employees)."""

    @abstractmethod
    async def count_assigned_projects(self, department_id: int) -> int:
        """Count projects assigned to employees of a department."""

    @abstractmethod
    async def list_employees(self, department_id: int) -> List[dict]:
        """Department and company fields joined with each employee."""

    @abstractmethod
    async def budget_summary(self, company_id: int) -> List[dict]:
        """Per-department headcount and salary totals for a company."""


class IEmployeeRepository(ABC):
    """Interface for employee data access."""

    @abstractmethod
    async def list(self, limit: int = 100, offset: int = 0) -> List[dict]:
        """List employees with department and company names."""

    @abstractmethod
    async def get_detail(self, employee_id: int) -> Optional[dict]:
        """Get one employee with department and company context."""

    @abstractmethod
    async def get_by_id(self, employee_id: int, for_update: bool = False) -> Optional[Any]:
        """Get employee model by ID."""

    @abstractmethod
    async def exists_by_email(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether another employee uses this email."""

    @abstractmethod
    async def create(self, dto: EmployeeCreateDTO, password_hash: Optional[str] = None) -> Any:
        """Insert an employee."""

    @abstractmethod
    async def update(self, model: Any, dto: EmployeeUpdateDTO, password_hash: Optional[str] = None) -> Any:
        """Overwrite an employee."""

    @abstractmethod
    async def delete(self, employee_id: int) -> None:
        """Delete an employee."""

    @abstractmethod
    async def count_assigned_projects(self, employee_id: int) -> int:
        """Count projects assigned to an employee."""

    @abstractmethod
    async def search(self, filters: EmployeeSearchFilters) -> List[dict]:
        """Search employees."""

    @abstractmethod
    async def salary_stats(self, department_id: int) -> Optional[dict]:
        """Salary aggregates for the active employees of a department."""


# ========== Application Services ==========

class CompanyService:
    """Service for company CRUD."""

    def __init__(self, company_repository: ICompanyRepository):
        self._repo = company_repository

    async def list_companies(self, limit: int = 100, offset: int = 0) -> List[CompanyResponse]:
        companies = await self._repo.list(limit=limit, offset=offset)
        return [CompanyResponse.model_validate(c) for c in companies]

    async def get_company(self, company_id: int) -> CompanyResponse:
        company = await self._repo.get_by_id(company_id)
        if company is None:
            raise ResourceNotFoundException("Company", company_id)
        return CompanyResponse.model_validate(company)

    async def create_company(self, dto: CompanyCreateDTO) -> CompanyResponse:
        if await self._repo.exists_by_email(dto.email):
            raise ConflictException(f"A company with email '{dto.email}' already exists")

        company = await self._repo.create(dto)
        logger.info("Company created", extra={"company_id": company.id})
        return CompanyResponse.model_validate(company)

    async def update_company(self, company_id: int, dto: CompanyCreateDTO) -> CompanyResponse:
        company = await self._repo.get_by_id(company_id, for_update=True)
        if company is None:
            raise ResourceNotFoundException("Company", company_id)
        if await self._repo.exists_by_email(dto.email, exclude_id=company_id):
            raise ConflictException(f"A company with email '{dto.email}' already exists")

        company = await self._repo.update(company, dto)
        logger.info("Company updated", extra={"company_id": company_id})
        return CompanyResponse.model_validate(company)

    async def delete_company(self, company_id: int) -> CompanyDeleteResponse:
        """
        Delete a company and everything beneath it.

        Refused while any employee of the company still has projects, since
        projects do not cascade.
        """
        company = await self._repo.get_by_id(company_id, for_update=True)
        if company is None:
            raise ResourceNotFoundException("Company", company_id)

        assigned = await self._repo.count_assigned_projects(company_id)
        if assigned:
            raise ConflictException(
                f"Company {company_id} has {assigned} project(s) assigned to its employees; "
                "reassign or delete them first"
            )

        snapshot = CompanyResponse.model_validate(company)
        departments, employees = await self._repo.count_dependents(company_id)
        await self._repo.delete(company_id)

        logger.warning(
            "Company deleted with cascade",
            extra={
                "company_id": company_id,
                "departments_removed": departments,
                "employees_removed": employees,
            }
        )
        return CompanyDeleteResponse(
            message="Company deleted successfully",
            deleted=snapshot,
            departments_removed=departments,
            employees_removed=employees,
        )

    async def get_company_departments(self, company_id: int) -> List[CompanyDepartmentRow]:
        rows = await self._repo.list_departments(company_id)
        if not rows:
            raise ResourceNotFoundException("Company", company_id)
        return [CompanyDepartmentRow.model_validate(r) for r in rows]


class DepartmentService:
    """Service for department CRUD and budget views."""

    def __init__(
        self,
        department_repository: IDepartmentRepository,
        company_repository: ICompanyRepository
    ):
        self._repo = department_repository
        self._company_repo = company_repository

    async def _require_company(self, company_id: int) -> None:
        if await self._company_repo.get_by_id(company_id) is None:
            raise ValidationException(
                f"Company {company_id} does not exist",
                {"field": "company_id", "value": company_id}
            )

    async def list_departments(self, limit: int = 100, offset: int = 0) -> List[DepartmentResponse]:
        departments = await self._repo.list(limit=limit, offset=offset)
        return [DepartmentResponse.model_validate(d) for d in departments]

    async def get_department(self, department_id: int) -> DepartmentResponse:
        department = await self._repo.get_by_id(department_id)
        if department is None:
            raise ResourceNotFoundException("Department", department_id)
        return DepartmentResponse.model_validate(department)

    async def create_department(self, dto: DepartmentCreateDTO) -> DepartmentResponse:
        await self._require_company(dto.company_id)
        department = await self._repo.create(dto)
        logger.info(
            "Department created",
            extra={"department_id": department.id, "company_id": dto.company_id}
        )
        return DepartmentResponse.model_validate(department)

    async def update_department(self, department_id: int, dto: DepartmentCreateDTO) -> DepartmentResponse:
        department = await self._repo.get_by_id(department_id, for_update=True)
        if department is None:
            raise ResourceNotFoundException("Department", department_id)
        if dto.company_id != department.company_id:
            await self._require_company(dto.company_id)

        department = await self._repo.update(department, dto)
        logger.info("Department updated", extra={"department_id": department_id})
        return DepartmentResponse.model_validate(department)

    async def delete_department(self, department_id: int) -> DepartmentDeleteResponse:
        department = await self._repo.get_by_id(department_id, for_update=True)
        if department is None:
            raise ResourceNotFoundException("Department", department_id)

        assigned = await self._repo.count_assigned_projects(department_id)
        if assigned:
            raise ConflictException(
                f"Department {department_id} has {assigned} project(s) assigned to its employees; "
                "reassign or delete them first"
            )

        snapshot = DepartmentResponse.model_validate(department)
        await self._repo.delete(department_id)
        logger.info("Department deleted", extra={"department_id": department_id})
        return DepartmentDeleteResponse(message="Department deleted successfully", deleted=snapshot)

    async def get_department_employees(self, department_id: int) -> List[DepartmentEmployeeRow]:
        rows = await self._repo.list_employees(department_id)
        if not rows:
            raise ResourceNotFoundException("Department", department_id)
        return [DepartmentEmployeeRow.model_validate(r) for r in rows]

    async def get_budget_summary(self, company_id: int) -> List[DepartmentBudgetSummary]:
        if await self._company_repo.get_by_id(company_id) is None:
            raise ResourceNotFoundException("Company", company_id)

        summaries = []
        for row in await self._repo.budget_summary(company_id):
            count = row["employee_count"] or 0
            budget = row["budget"]
            summaries.append(DepartmentBudgetSummary(
                id=row["id"],
                name=row["name"],
                budget=budget,
                manager_name=row["manager_name"],
                employee_count=count,
                avg_salary=row["avg_salary"],
                total_salaries=row["total_salaries"],
                budget_per_employee=float(budget) / count if budget is not None and count else None,
            ))
        return summaries


class EmployeeService:
    """Service for employee CRUD, search and salary statistics."""

    def __init__(
        self,
        employee_repository: IEmployeeRepository,
        department_repository: IDepartmentRepository
    ):
        self._repo = employee_repository
        self._department_repo = department_repository

    async def _require_department(self, department_id: int) -> None:
        if await self._department_repo.get_by_id(department_id) is None:
            raise ValidationException(
                f"Department {department_id} does not exist",
                {"field": "department_id", "value": department_id}
            )

    async def list_employees(self, limit: int = 100, offset: int = 0) -> List[EmployeeListItem]:
        rows = await self._repo.list(limit=limit, offset=offset)
        return [EmployeeListItem.model_validate(r) for r in rows]

    async def get_employee(self, employee_id: int) -> EmployeeDetailResponse:
        row = await self._repo.get_detail(employee_id)
        if row is None:
            raise ResourceNotFoundException("Employee", employee_id)
        return EmployeeDetailResponse.model_validate(row)

    async def create_employee(self, dto: EmployeeCreateDTO) -> EmployeeResponse:
        await self._require_department(dto.department_id)
        if await self._repo.exists_by_email(dto.email):
            raise ConflictException(f"An employee with email '{dto.email}' already exists")

        password_hash = await hash_password(dto.password) if dto.password else None
        employee = await self._repo.create(dto, password_hash=password_hash)
        logger.info(
            "Employee created",
            extra={"employee_id": employee.id, "department_id": dto.department_id}
        )
        return EmployeeResponse.model_validate(employee)

    async def update_employee(self, employee_id: int, dto: EmployeeUpdateDTO) -> EmployeeResponse:
        employee = await self._repo.get_by_id(employee_id, for_update=True)
        if employee is None:
            raise ResourceNotFoundException("Employee", employee_id)
        if dto.department_id != employee.department_id:
            await self._require_department(dto.department_id)
        if await self._repo.exists_by_email(dto.email, exclude_id=employee_id):
            raise ConflictException(f"An employee with email '{dto.email}' already exists")

        password_hash = await hash_password(dto.password) if dto.password else None
        employee = await self._repo.update(employee, dto, password_hash=password_hash)
        logger.info(
            "Employee updated",
            extra={"employee_id": employee_id, "password_changed": password_hash is not None}
        )
        return EmployeeResponse.model_validate(employee)

    async def delete_employee(self, employee_id: int) -> MessageResponse:
        employee = await self._repo.get_by_id(employee_id, for_update=True)
        if employee is None:
            raise ResourceNotFoundException("Employee", employee_id)

        assigned = await self._repo.count_assigned_projects(employee_id)
        if assigned:
            raise ConflictException(
                f"Employee {employee_id} still has {assigned} assigned project(s)"
            )

        await self._repo.delete(employee_id)
        logger.info("Employee deleted", extra={"employee_id": employee_id})
        return MessageResponse(message="Employee deleted successfully")

    async def search_employees(self, filters: EmployeeSearchFilters) -> List[EmployeeSearchResult]:
        if (
            filters.min_salary is not None
            and filters.max_salary is not None
            and filters.min_salary > filters.max_salary
        ):
            raise ValidationException(
                "min_salary cannot be greater than max_salary",
                {"min_salary": filters.min_salary, "max_salary": filters.max_salary}
            )

        rows = await self._repo.search(filters)
        return [EmployeeSearchResult.model_validate(r) for r in rows]

    async def get_salary_stats(self, department_id: int) -> SalaryStatsResponse:
        stats = await self._repo.salary_stats(department_id)
        if stats is None:
            raise ResourceNotFoundException("Department", department_id)

        salaries = stats.pop("salaries")
        budget = stats["department_budget"]
        total = stats["total_salary_cost"]

        return SalaryStatsResponse(
            **stats,
            salary_deviation=statistics.stdev(salaries) if len(salaries) > 1 else None,
            remaining_budget=float(budget) - float(total or 0) if budget is not None else None,
        )
