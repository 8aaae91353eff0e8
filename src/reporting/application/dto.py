"""
Reporting Application DTOs
===========================

Response models for the reports. Ratios and percentages are null wherever
their denominator is zero or missing.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class CompanyOverviewRow(BaseModel):
    """One company with department, employee and project totals."""
    company_id: int
    company_name: str
    company_email: str
    company_address: Optional[str] = None
    company_phone: Optional[str] = None
    total_departments: int
    total_employees: int
    total_projects: int
    total_department_budgets: Optional[float] = None
    total_employee_salaries: Optional[float] = None
    total_project_budgets: Optional[float] = None
    avg_employee_salary: Optional[float] = None
    avg_project_budget: Optional[float] = None
    active_employees: int
    completed_projects: int
    in_progress_projects: int
    planning_projects: int
    budget_vs_salary_diff: Optional[float] = None
    budget_status: str
    department_names: Optional[str] = None
    employee_positions: Optional[str] = None


class EmployeePerformanceRow(BaseModel):
    """One active employee with project workload and salary comparisons."""
    employee_id: int
    employee_name: str
    email: str
    position: Optional[str] = None
    salary: Optional[float] = None
    hire_date: Optional[date] = None
    years_of_service: Optional[int] = None
    department_name: Optional[str] = None
    department_budget: Optional[float] = None
    company_name: Optional[str] = None
    total_projects_assigned: int
    completed_projects: int
    in_progress_projects: int
    total_project_value: Optional[float] = None
    avg_project_value: Optional[float] = None
    completion_rate: Optional[float] = None
    salary_percentage_of_dept_budget: Optional[float] = None
    project_value_to_salary_ratio: Optional[float] = None
    workload_status: str
    avg_position_salary_in_dept: Optional[float] = None
    salary_diff_from_avg: Optional[float] = None


class ProjectTimelineRow(BaseModel):
    """One project with schedule status and daily cost figures."""
    project_id: int
    project_name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[float] = None
    status: str
    planned_duration_days: Optional[int] = None
    timeline_status: str
    days_overdue: int = Field(0, description="Days past the end date; 0 unless overdue")
    assigned_employee: Optional[str] = None
    employee_position: Optional[str] = None
    employee_salary: Optional[float] = None
    department_name: Optional[str] = None
    department_budget: Optional[float] = None
    manager_name: Optional[str] = None
    company_name: Optional[str] = None
    company_email: Optional[str] = None
    daily_budget_burn: Optional[float] = None
    daily_employee_cost: Optional[float] = None
    daily_profit_margin: Optional[float] = None
    start_month: Optional[int] = None
    start_year: Optional[int] = None
    start_quarter: Optional[int] = None


class FinancialSummaryRow(BaseModel):
    """Company finances over departments, active employees and their projects."""
    company_id: int
    company_name: str
    total_department_budget: Optional[float] = None
    total_employee_costs: Optional[float] = None
    total_project_budgets: Optional[float] = None
    department_count: int
    employee_count: int
    project_count: int
    avg_department_budget: Optional[float] = None
    avg_employee_salary: Optional[float] = None
    avg_project_budget: Optional[float] = None
    budget_surplus_deficit: Optional[float] = None
    budget_efficiency_percentage: Optional[float] = None
    project_to_salary_ratio: Optional[float] = None
    completed_project_value: float = 0
    in_progress_project_value: float = 0
    planning_project_value: float = 0
    completion_value_percentage: Optional[float] = None
    financial_health_status: str


class DepartmentEfficiencyRow(BaseModel):
    """Department utilization and project delivery figures."""
    department_id: int
    department_name: str
    department_budget: Optional[float] = None
    manager_name: Optional[str] = None
    company_name: Optional[str] = None
    total_employees: int
    active_employees: int
    total_projects: int
    total_salary_cost: Optional[float] = None
    total_project_value: Optional[float] = None
    avg_employee_salary: Optional[float] = None
    avg_project_budget: Optional[float] = None
    remaining_budget: Optional[float] = None
    budget_utilization_percentage: Optional[float] = None
    projects_per_employee: Optional[float] = None
    project_value_per_salary_dollar: Optional[float] = None
    completed_projects: int
    in_progress_projects: int
    planning_projects: int
    project_completion_rate: Optional[float] = None
    overdue_projects: int
    budget_utilization_status: str
    performance_rating: str


class CrossCompanyRow(BaseModel):
    """A company's metrics against the averages across all companies."""
    id: int
    name: str
    dept_count: int
    emp_count: int
    project_count: int
    total_budget: Optional[float] = None
    total_salaries: Optional[float] = None
    total_project_value: Optional[float] = None
    avg_salary: Optional[float] = None
    completed_projects: int
    avg_dept_count: Optional[float] = None
    avg_emp_count: Optional[float] = None
    avg_project_count: Optional[float] = None
    avg_total_budget: Optional[float] = None
    avg_total_salaries: Optional[float] = None
    industry_avg_salary: Optional[float] = None
    dept_count_vs_avg: Optional[float] = None
    emp_count_vs_avg: Optional[float] = None
    salary_vs_industry_avg: Optional[float] = None
    budget_per_employee: Optional[float] = None
    project_value_per_employee: Optional[float] = None
    completion_rate: Optional[float] = None
    salary_competitiveness: str
    project_value_rank: int
    avg_salary_rank: int
    completion_rate_rank: int


class BudgetAnalysisRow(BaseModel):
    """Project spend of one department against its budget."""
    company_name: str
    department_name: str
    department_budget: Optional[float] = None
    total_projects: int
    total_project_budget: Optional[float] = None
    avg_project_budget: Optional[float] = None
    completed_budget: float = 0
    in_progress_budget: float = 0
    planning_budget: float = 0
    remaining_dept_budget: Optional[float] = None
    total_employee_cost: Optional[float] = None
    employee_count: int
    budget_per_employee: Optional[float] = None
    budget_status: str
