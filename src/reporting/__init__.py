"""
Reporting Module
================

Bounded context for read-only aggregate reports across companies,
departments, employees and projects.

Every aggregate is computed at its own level before joining, so totals are
never inflated by join fan-out.
"""

__version__ = "1.0.0"
