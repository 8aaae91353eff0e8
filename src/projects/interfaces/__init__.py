"""
Projects Interfaces Layer
=========================

FastAPI route handlers for projects.
"""

from src.projects.interfaces.controllers import router as project_router

__all__ = ["project_router"]
