"""
Projects Infrastructure Layer
==============================

- Models: SQLAlchemy ORM model
- Repositories: Data access layer
"""

from src.projects.infrastructure.models import ProjectModel
from src.projects.infrastructure.repositories import SQLAlchemyProjectRepository

__all__ = [
    "ProjectModel",
    "SQLAlchemyProjectRepository",
]
