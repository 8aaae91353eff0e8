"""
Reporting Domain Layer
======================

Contains:
- Value Objects & Services: ReportCalculator (labels, null-safe ratios, ranks)
"""

from src.reporting.domain.value_objects import ReportCalculator

__all__ = ["ReportCalculator"]
