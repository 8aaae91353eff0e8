from datetime import date

import pytest

from src.reporting.domain import ReportCalculator as calc


@pytest.mark.parametrize("numerator,denominator,expected", [
    (10, 4, 2.5),
    (10, 0, None),
    (None, 4, None),
    (10, None, None),
])
def test_safe_divide(numerator, denominator, expected):
    assert calc.safe_divide(numerator, denominator) == expected


def test_percentage_and_difference():
    assert calc.percentage(1, 4) == 25
    assert calc.percentage(1, 0) is None
    assert calc.difference(10, 3) == 7
    assert calc.difference(None, 3) is None


def test_mean_skips_missing_values():
    assert calc.mean([1, None, 3]) == 2
    assert calc.mean([None, None]) is None
    assert calc.mean([]) is None


@pytest.mark.parametrize("spent,budget,expected", [
    (101, 100, "Over Budget"),
    (95, 100, "Near Budget Limit"),
    (90, 100, "Within Budget"),
    (None, 100, "Within Budget"),
    (50, None, "Within Budget"),
])
def test_budget_status(spent, budget, expected):
    assert calc.budget_status(spent, budget, near_ratio=0.9) == expected


def test_budget_status_near_ratio_is_configurable():
    assert calc.budget_status(85, 100, near_ratio=0.8) == "Near Budget Limit"
    assert calc.budget_status(85, 100, near_ratio=0.9) == "Within Budget"


@pytest.mark.parametrize("utilization,expected", [
    (1.2, "Over Budget"),
    (0.95, "Near Budget Limit"),
    (0.8, "High Utilization"),
    (0.6, "Moderate Utilization"),
    (0.5, "Low Utilization"),
    (None, "Low Utilization"),
])
def test_utilization_status(utilization, expected):
    assert calc.utilization_status(utilization) == expected


@pytest.mark.parametrize("surplus,budget,expected", [
    (-1, 100, "Over Budget"),
    (5, 100, "Tight Budget"),
    (15, 100, "Moderate Budget"),
    (20, 100, "Healthy Budget"),
    (None, None, "Healthy Budget"),
])
def test_financial_health(surplus, budget, expected):
    assert calc.financial_health(surplus, budget) == expected


@pytest.mark.parametrize("count,expected", [
    (0, "No Projects"),
    (1, "Light Load"),
    (3, "Normal Load"),
    (4, "High Load"),
    (6, "Overloaded"),
])
def test_workload_status(count, expected):
    assert calc.workload_status(count) == expected


@pytest.mark.parametrize("count,rate,expected", [
    (0, None, "No Projects"),
    (5, 81, "High Performance"),
    (5, 80, "Good Performance"),
    (5, 50, "Average Performance"),
    (5, 40, "Poor Performance"),
])
def test_performance_rating(count, rate, expected):
    assert calc.performance_rating(count, rate) == expected


def test_salary_competitiveness():
    assert calc.salary_competitiveness(130, 100) == "Above Market"
    assert calc.salary_competitiveness(100, 100) == "Market Rate"
    assert calc.salary_competitiveness(80, 100) == "Below Market"
    assert calc.salary_competitiveness(None, 100) == "Below Market"


def test_timeline_status():
    today = date(2024, 6, 1)
    assert calc.timeline_status("completed", date(2024, 5, 1), today) == "Completed Early"
    assert calc.timeline_status("completed", date(2024, 7, 1), today) == "Completed On Time"
    assert calc.timeline_status("in_progress", date(2024, 5, 1), today) == "Overdue"
    assert calc.timeline_status("planning", date(2024, 6, 1), today) == "On Track"
    assert calc.timeline_status("planning", None, today) == "Unknown"


def test_years_of_service_counts_whole_years():
    assert calc.years_of_service(date(2020, 6, 2), date(2024, 6, 1)) == 3
    assert calc.years_of_service(date(2020, 6, 1), date(2024, 6, 1)) == 4
    assert calc.years_of_service(None, date(2024, 6, 1)) is None


def test_days_between_and_quarter():
    assert calc.days_between(date(2024, 2, 1), date(2024, 4, 30)) == 89
    assert calc.days_between(None, date(2024, 4, 30)) is None
    assert [calc.quarter(date(2024, m, 1)) for m in (1, 4, 7, 12)] == [1, 2, 3, 4]
    assert calc.quarter(None) is None


def test_competition_rank_shares_ties_and_puts_missing_last():
    assert calc.competition_rank([10, 30, 30, None, 5]) == [3, 1, 1, 5, 4]
    assert calc.competition_rank([]) == []


def test_sort_desc_is_stable_multi_key_with_nulls_last():
    rows = [
        {"name": "a", "x": 1, "y": 5},
        {"name": "b", "x": None, "y": 9},
        {"name": "c", "x": 3, "y": 1},
        {"name": "d", "x": 1, "y": None},
        {"name": "e", "x": 1, "y": 7},
    ]

    ordered = calc.sort_desc(rows, "x", "y")

    assert [r["name"] for r in ordered] == ["c", "e", "a", "d", "b"]
