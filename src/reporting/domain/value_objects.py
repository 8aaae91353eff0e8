"""
Reporting Value Objects
========================

Pure functions behind the report columns: label thresholds, null-safe
arithmetic, ranking and ordering.

SQL only produces raw per-level aggregates; everything derived from them is
computed here so the rules are testable without a database.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from src.config import (
    ProjectStatus, BudgetStatus, FinancialHealth, WorkloadStatus,
    TimelineStatus, PerformanceRating, SalaryCompetitiveness,
)

Number = Optional[float]


class ReportCalculator:
    """
    Stateless helpers shared by every report.

    Arithmetic follows SQL null semantics: any missing operand gives None,
    and division by zero gives None instead of raising.
    """

    # ========== Arithmetic ==========

    @staticmethod
    def safe_divide(numerator: Number, denominator: Number) -> Number:
        if numerator is None or denominator is None or denominator == 0:
            return None
        return float(numerator) / float(denominator)

    @staticmethod
    def percentage(part: Number, whole: Number) -> Number:
        ratio = ReportCalculator.safe_divide(part, whole)
        return ratio * 100 if ratio is not None else None

    @staticmethod
    def difference(a: Number, b: Number) -> Number:
        if a is None or b is None:
            return None
        return float(a) - float(b)

    @staticmethod
    def mean(values: Iterable[Number]) -> Number:
        """Average of the non-null values, like SQL AVG."""
        present = [float(v) for v in values if v is not None]
        if not present:
            return None
        return sum(present) / len(present)

    # ========== Labels ==========

    @staticmethod
    def budget_status(spent: Number, budget: Number, near_ratio: float) -> str:
        """
        Over Budget / Near Budget Limit / Within Budget.

        ``near_ratio`` is the share of the budget above which spending counts
        as near the limit. Missing figures are treated as within budget.
        """
        if spent is None or budget is None:
            return BudgetStatus.WITHIN_BUDGET
        if spent > budget:
            return BudgetStatus.OVER_BUDGET
        if spent > budget * near_ratio:
            return BudgetStatus.NEAR_LIMIT
        return BudgetStatus.WITHIN_BUDGET

    @staticmethod
    def utilization_status(utilization: Number) -> str:
        """Label a salary-to-budget ratio."""
        if utilization is None:
            return BudgetStatus.LOW_UTILIZATION
        if utilization > 1:
            return BudgetStatus.OVER_BUDGET
        if utilization > 0.9:
            return BudgetStatus.NEAR_LIMIT
        if utilization > 0.7:
            return BudgetStatus.HIGH_UTILIZATION
        if utilization > 0.5:
            return BudgetStatus.MODERATE_UTILIZATION
        return BudgetStatus.LOW_UTILIZATION

    @staticmethod
    def financial_health(surplus: Number, total_budget: Number) -> str:
        if surplus is not None and surplus < 0:
            return FinancialHealth.OVER_BUDGET
        margin = ReportCalculator.safe_divide(surplus, total_budget)
        if margin is None:
            return FinancialHealth.HEALTHY
        if margin < 0.1:
            return FinancialHealth.TIGHT
        if margin < 0.2:
            return FinancialHealth.MODERATE
        return FinancialHealth.HEALTHY

    @staticmethod
    def workload_status(project_count: int) -> str:
        if project_count == 0:
            return WorkloadStatus.NO_PROJECTS
        if project_count > 5:
            return WorkloadStatus.OVERLOADED
        if project_count > 3:
            return WorkloadStatus.HIGH
        if project_count > 1:
            return WorkloadStatus.NORMAL
        return WorkloadStatus.LIGHT

    @staticmethod
    def performance_rating(project_count: int, completion_rate: Number) -> str:
        if project_count == 0:
            return PerformanceRating.NO_PROJECTS
        rate = completion_rate or 0
        if rate > 80:
            return PerformanceRating.HIGH
        if rate > 60:
            return PerformanceRating.GOOD
        if rate > 40:
            return PerformanceRating.AVERAGE
        return PerformanceRating.POOR

    @staticmethod
    def salary_competitiveness(avg_salary: Number, market_avg: Number) -> str:
        if avg_salary is None or market_avg is None:
            return SalaryCompetitiveness.BELOW_MARKET
        if avg_salary > market_avg * 1.2:
            return SalaryCompetitiveness.ABOVE_MARKET
        if avg_salary > market_avg * 0.8:
            return SalaryCompetitiveness.MARKET_RATE
        return SalaryCompetitiveness.BELOW_MARKET

    @staticmethod
    def timeline_status(status: str, end_date: Optional[date], today: date) -> str:
        """
        Completed projects whose end date has passed finished early; an
        unfinished project past its end date is overdue.
        """
        if end_date is None:
            return TimelineStatus.UNKNOWN
        if status == ProjectStatus.COMPLETED:
            return TimelineStatus.COMPLETED_EARLY if end_date < today else TimelineStatus.COMPLETED_ON_TIME
        return TimelineStatus.OVERDUE if end_date < today else TimelineStatus.ON_TRACK

    # ========== Dates ==========

    @staticmethod
    def years_of_service(hire_date: Optional[date], today: date) -> Optional[int]:
        """Whole years between the hire date and today."""
        if hire_date is None:
            return None
        years = today.year - hire_date.year
        if (today.month, today.day) < (hire_date.month, hire_date.day):
            years -= 1
        return years

    @staticmethod
    def days_between(start: Optional[date], end: Optional[date]) -> Optional[int]:
        if start is None or end is None:
            return None
        return (end - start).days

    @staticmethod
    def quarter(d: Optional[date]) -> Optional[int]:
        if d is None:
            return None
        return (d.month - 1) // 3 + 1

    # ========== Ordering ==========

    @staticmethod
    def competition_rank(values: Sequence[Number]) -> List[int]:
        """
        Rank values highest first; ties share a rank and leave a gap
        (1, 2, 2, 4). Missing values rank after every present one.
        """
        def sort_key(v: Number):
            return (v is None, -(v or 0))

        ordered = sorted(values, key=sort_key)
        first_position: Dict[Any, int] = {}
        for position, value in enumerate(ordered, start=1):
            first_position.setdefault(sort_key(value), position)
        return [first_position[sort_key(v)] for v in values]

    @staticmethod
    def sort_desc(rows: List[dict], *keys: str) -> List[dict]:
        """Sort rows descending by each key in turn, nulls last."""
        result = list(rows)
        for key in reversed(keys):
            present = [r for r in result if r[key] is not None]
            missing = [r for r in result if r[key] is None]
            present.sort(key=lambda r: r[key], reverse=True)
            result = present + missing
        return result
