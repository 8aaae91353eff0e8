"""
Organization Interfaces Layer
==============================

FastAPI route handlers for companies, departments and employees.
"""

from src.organization.interfaces.controllers import company_router, department_router, employee_router

__all__ = ["company_router", "department_router", "employee_router"]
