"""
Organization Infrastructure Layer
==================================

- Models: SQLAlchemy ORM models
- Repositories: Data access layer
"""

from src.organization.infrastructure.models import CompanyModel, DepartmentModel, EmployeeModel
from src.organization.infrastructure.repositories import (
    SQLAlchemyCompanyRepository,
    SQLAlchemyDepartmentRepository,
    SQLAlchemyEmployeeRepository,
)

__all__ = [
    "CompanyModel",
    "DepartmentModel",
    "EmployeeModel",
    "SQLAlchemyCompanyRepository",
    "SQLAlchemyDepartmentRepository",
    "SQLAlchemyEmployeeRepository",
]
