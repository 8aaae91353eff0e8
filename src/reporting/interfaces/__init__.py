"""
Reporting Interfaces Layer
==========================

FastAPI route handlers for the reports.
"""

from src.reporting.interfaces.controllers import report_router, get_report_service

__all__ = ["report_router", "get_report_service"]
