"""
Organization Module
===================

Bounded context for the company -> department -> employee hierarchy.

Responsibilities:
- CRUD for companies, departments and employees
- Company and department drill-down views
- Employee search and department salary statistics
- Refusing deletes that would cascade into employees who still hold projects
"""

__version__ = "1.0.0"
