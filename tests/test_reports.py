import pytest


def _by(rows, key):
    return {r[key]: r for r in rows}


async def test_company_overview(seeded_client):
    response = await seeded_client.get("/api/reports/company-overview")

    assert response.status_code == 200
    rows = response.json()
    assert [r["company_name"] for r in rows] == ["Tech Corp", "Innovation Ltd"]

    tech = rows[0]
    assert tech["total_departments"] == 2
    assert tech["total_employees"] == 3
    assert tech["total_projects"] == 3
    assert tech["total_department_budgets"] == 700000
    assert tech["total_employee_salaries"] == 220000
    assert tech["total_project_budgets"] == 175000
    assert tech["budget_vs_salary_diff"] == 480000
    assert tech["budget_status"] == "Within Budget"
    assert tech["completed_projects"] == 1
    assert tech["in_progress_projects"] == 1
    assert tech["planning_projects"] == 1
    assert tech["department_names"] == "Engineering, Marketing"
    assert tech["employee_positions"] == "Marketing Specialist, Senior Developer, Software Engineer"


async def test_company_overview_keeps_empty_companies(client):
    await client.post("/api/companies", json={"name": "Empty Co", "email": "empty@co.io"})

    rows = (await client.get("/api/reports/company-overview")).json()

    assert rows[0]["total_departments"] == 0
    assert rows[0]["total_employees"] == 0
    assert rows[0]["total_department_budgets"] is None
    assert rows[0]["budget_vs_salary_diff"] is None
    assert rows[0]["department_names"] is None


async def test_employee_performance(seeded_client):
    rows = (await seeded_client.get("/api/reports/employee-performance")).json()

    assert [r["employee_name"] for r in rows] == [
        "Lisa Garcia", "Mike Wilson", "Sarah Davis", "David Martinez", "Tom Anderson"
    ]
    sarah = _by(rows, "employee_name")["Sarah Davis"]
    assert sarah["completion_rate"] == 100
    assert sarah["workload_status"] == "Light Load"
    assert sarah["salary_percentage_of_dept_budget"] == pytest.approx(17)
    assert sarah["project_value_to_salary_ratio"] == pytest.approx(50000 / 85000)
    assert sarah["salary_diff_from_avg"] == 0
    assert sarah["years_of_service"] == 0


async def test_project_timeline_filters_by_start(seeded_client):
    response = await seeded_client.get(
        "/api/reports/project-timeline",
        params={"start_from": "2024-02-01", "start_to": "2024-03-31"},
    )

    assert response.status_code == 200
    rows = response.json()
    assert [r["project_name"] for r in rows] == ["Market Research", "Website Redesign"]

    website = rows[1]
    assert website["planned_duration_days"] == 89
    assert website["timeline_status"] == "Completed Early"
    assert website["days_overdue"] == 0
    assert website["start_quarter"] == 1
    assert website["daily_employee_cost"] == pytest.approx(85000 / 365)
    assert rows[0]["timeline_status"] == "Overdue"
    assert rows[0]["days_overdue"] > 0


async def test_project_timeline_pagination(seeded_client):
    rows = (await seeded_client.get("/api/reports/project-timeline", params={"limit": 2, "offset": 1})).json()
    assert [r["project_name"] for r in rows] == ["Market Research", "Website Redesign"]


async def test_project_timeline_rejects_inverted_range(seeded_client):
    response = await seeded_client.get(
        "/api/reports/project-timeline",
        params={"start_from": "2024-05-01", "start_to": "2024-01-01"},
    )
    assert response.status_code == 422


async def test_financial_summary(seeded_client):
    rows = (await seeded_client.get("/api/reports/financial-summary")).json()

    assert [r["company_name"] for r in rows] == ["Tech Corp", "Innovation Ltd"]
    tech = rows[0]
    assert tech["total_department_budget"] == 700000
    assert tech["total_employee_costs"] == 220000
    assert tech["budget_surplus_deficit"] == 480000
    assert tech["budget_efficiency_percentage"] == pytest.approx(480000 / 700000 * 100)
    assert tech["completed_project_value"] == 50000
    assert tech["in_progress_project_value"] == 100000
    assert tech["planning_project_value"] == 25000
    assert tech["financial_health_status"] == "Healthy Budget"


async def test_department_efficiency(seeded_client):
    rows = (await seeded_client.get("/api/reports/department-efficiency")).json()

    assert rows[0]["department_name"] == "Engineering"
    engineering = rows[0]
    assert engineering["total_employees"] == 2
    assert engineering["total_projects"] == 2
    assert engineering["project_completion_rate"] == 50
    assert engineering["performance_rating"] == "Average Performance"
    assert engineering["budget_utilization_percentage"] == pytest.approx(32)
    assert engineering["budget_utilization_status"] == "Low Utilization"
    assert engineering["projects_per_employee"] == 1
    assert engineering["remaining_budget"] == 340000
    # The in-progress project ended in 2024; the completed one is not overdue
    assert engineering["overdue_projects"] == 1

    research = _by(rows, "department_name")["Research"]
    assert research["performance_rating"] == "Poor Performance"


async def test_cross_company_analysis(seeded_client):
    rows = (await seeded_client.get("/api/reports/cross-company-analysis")).json()

    assert [r["name"] for r in rows] == ["Innovation Ltd", "Tech Corp"]
    innovation, tech = rows
    assert innovation["project_value_rank"] == 1
    assert tech["project_value_rank"] == 2
    assert innovation["avg_salary_rank"] == 1
    assert tech["completion_rate_rank"] == 1
    assert tech["avg_emp_count"] == 2.5
    assert tech["emp_count_vs_avg"] == 0.5
    assert tech["industry_avg_salary"] == pytest.approx((220000 / 3 + 77500) / 2)
    assert tech["salary_competitiveness"] == "Market Rate"


async def test_budget_analysis(seeded_client):
    rows = (await seeded_client.get("/api/projects/budget-analysis")).json()

    assert [r["department_name"] for r in rows] == ["Research", "Engineering", "Sales", "Marketing"]
    engineering = rows[1]
    assert engineering["company_name"] == "Tech Corp"
    assert engineering["total_projects"] == 2
    assert engineering["total_project_budget"] == 150000
    assert engineering["completed_budget"] == 50000
    assert engineering["in_progress_budget"] == 100000
    assert engineering["planning_budget"] == 0
    assert engineering["total_employee_cost"] == 160000
    assert engineering["remaining_dept_budget"] == 340000
    assert engineering["budget_per_employee"] == 75000
    assert engineering["budget_status"] == "Within Budget"


async def test_budget_analysis_flags_near_limit(client):
    company = (await client.post("/api/companies", json={"name": "C", "email": "c@c.io"})).json()
    department = (await client.post(
        "/api/departments", json={"company_id": company["id"], "name": "D", "budget": 1000}
    )).json()
    employee = (await client.post(
        "/api/employees",
        json={"department_id": department["id"], "first_name": "A", "last_name": "B", "email": "a@b.io"},
    )).json()
    await client.post(
        "/api/projects", json={"name": "P", "budget": 850, "assigned_employee_id": employee["id"]}
    )

    rows = (await client.get("/api/projects/budget-analysis")).json()

    assert rows[0]["budget_status"] == "Near Budget Limit"


async def test_reports_are_empty_without_data(client):
    for path in (
        "/api/reports/company-overview",
        "/api/reports/employee-performance",
        "/api/reports/project-timeline",
        "/api/reports/financial-summary",
        "/api/reports/department-efficiency",
        "/api/reports/cross-company-analysis",
    ):
        response = await client.get(path)
        assert response.status_code == 200, path
        assert response.json() == []
