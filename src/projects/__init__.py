"""
Projects Module
===============

Bounded context for projects and their assignment to employees.

Responsibilities:
- CRUD for projects with schedule and budget validation
- Enforcing the project status lifecycle
- Assignment with active-employee and workload checks
- Status summaries and the overdue list
"""

__version__ = "1.0.0"
