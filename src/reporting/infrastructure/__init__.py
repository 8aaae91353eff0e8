"""
Reporting Infrastructure Layer
===============================

- Repositories: read-only aggregate queries
"""

from src.reporting.infrastructure.repositories import SQLAlchemyReportRepository

__all__ = ["SQLAlchemyReportRepository"]
