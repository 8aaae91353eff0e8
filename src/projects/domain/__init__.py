"""
Projects Domain Layer
=====================

Contains:
- Entities: Project with its status lifecycle and schedule rules

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from src.projects.domain.entities import Project, ALLOWED_TRANSITIONS

__all__ = [
    "Project",
    "ALLOWED_TRANSITIONS",
]
