"""
Sample Data Seeding
===================

Loads the sample organization tree from YAML and inserts it.

The file nests projects under the employee they are assigned to, employees
under their department and departments under their company, so no ids
appear in it.
"""

from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import ProjectStatus
from src.core import ConfigurationException
from src.organization.infrastructure.models import CompanyModel, DepartmentModel, EmployeeModel
from src.projects.infrastructure.models import ProjectModel
from src.shared.infrastructure.logging import get_logger
from src.shared.infrastructure.security import hash_password

logger = get_logger(__name__)


class SeedProject(BaseModel):
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[float] = Field(None, ge=0)
    status: str = ProjectStatus.PLANNING


class SeedEmployee(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    salary: Optional[float] = Field(None, ge=0)
    position: Optional[str] = None
    hire_date: Optional[date] = None
    is_active: bool = True
    password: Optional[str] = None
    projects: List[SeedProject] = Field(default_factory=list)


class SeedDepartment(BaseModel):
    name: str
    budget: Optional[float] = Field(None, ge=0)
    manager_name: Optional[str] = None
    employees: List[SeedEmployee] = Field(default_factory=list)


class SeedCompany(BaseModel):
    name: str
    email: str
    address: Optional[str] = None
    phone: Optional[str] = None
    departments: List[SeedDepartment] = Field(default_factory=list)


class SeedData(BaseModel):
    companies: List[SeedCompany] = Field(default_factory=list)


def load_seed_file(path: Union[str, Path]) -> SeedData:
    """
    Read and validate a seed file.

    Raises:
        ConfigurationException: if the file is missing or malformed
    """
    seed_file = Path(path)
    if not seed_file.exists():
        raise ConfigurationException(f"Seed file not found: {seed_file}")

    with open(seed_file, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationException(f"Seed file is not valid YAML: {e}") from e

    try:
        return SeedData.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationException(f"Seed file does not match the expected layout: {e}") from e


async def seed_database(session: AsyncSession, data: SeedData) -> Dict[str, int]:
    """
    Insert the seed tree. The caller commits.

    Returns:
        Number of rows inserted per table
    """
    counts = {"companies": 0, "departments": 0, "employees": 0, "projects": 0}

    for company in data.companies:
        company_row = CompanyModel(
            name=company.name, email=company.email, address=company.address, phone=company.phone
        )
        session.add(company_row)
        await session.flush()
        counts["companies"] += 1

        for department in company.departments:
            department_row = DepartmentModel(
                company_id=company_row.id,
                name=department.name,
                budget=department.budget,
                manager_name=department.manager_name,
            )
            session.add(department_row)
            await session.flush()
            counts["departments"] += 1

            for employee in department.employees:
                employee_row = EmployeeModel(
                    department_id=department_row.id,
                    first_name=employee.first_name,
                    last_name=employee.last_name,
                    email=employee.email,
                    phone=employee.phone,
                    salary=employee.salary,
                    position=employee.position,
                    is_active=employee.is_active,
                    password_hash=await hash_password(employee.password) if employee.password else None,
                )
                if employee.hire_date is not None:
                    employee_row.hire_date = employee.hire_date
                session.add(employee_row)
                await session.flush()
                counts["employees"] += 1

                for project in employee.projects:
                    session.add(ProjectModel(
                        assigned_employee_id=employee_row.id,
                        **project.model_dump(),
                    ))
                    counts["projects"] += 1

    await session.flush()
    logger.info("Seed data inserted", extra=counts)
    return counts
