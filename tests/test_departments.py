from factories import create_company, create_department, create_employee, create_project


async def test_create_then_get_returns_the_row(client):
    company = await create_company(client)
    created = await create_department(client, company["id"], name="Research", budget=300000)

    response = await client.get(f"/api/departments/{created['id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Research"
    assert body["budget"] == 300000
    assert body["company_id"] == company["id"]


async def test_create_for_unknown_company_is_422(client):
    response = await client.post("/api/departments", json={"company_id": 999, "name": "Ghost"})

    assert response.status_code == 422
    assert "Company 999" in response.json()["detail"]


async def test_create_rejects_negative_budget(client):
    company = await create_company(client)
    response = await client.post(
        "/api/departments", json={"company_id": company["id"], "name": "X", "budget": -1}
    )
    assert response.status_code == 422


async def test_update_and_missing_department(client):
    company = await create_company(client)
    department = await create_department(client, company["id"])

    response = await client.put(
        f"/api/departments/{department['id']}",
        json={"company_id": company["id"], "name": "Platform", "budget": 1000, "manager_name": "Bo"},
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Platform"
    assert response.json()["manager_name"] == "Bo"

    response = await client.put(
        "/api/departments/999", json={"company_id": company["id"], "name": "X"}
    )
    assert response.status_code == 404


async def test_update_moving_to_unknown_company_is_422(client):
    company = await create_company(client)
    department = await create_department(client, company["id"])

    response = await client.put(
        f"/api/departments/{department['id']}", json={"company_id": 4242, "name": "X"}
    )

    assert response.status_code == 422


async def test_delete_returns_deleted_row_and_cascades(client):
    company = await create_company(client)
    department = await create_department(client, company["id"])
    employee = await create_employee(client, department["id"])

    response = await client.delete(f"/api/departments/{department['id']}")

    assert response.status_code == 200
    assert response.json()["deleted"]["id"] == department["id"]
    assert (await client.get(f"/api/departments/{department['id']}")).status_code == 404
    assert (await client.get(f"/api/employees/{employee['id']}")).status_code == 404


async def test_delete_refused_while_employees_hold_projects(client):
    company = await create_company(client)
    department = await create_department(client, company["id"])
    employee = await create_employee(client, department["id"])
    await create_project(client, assigned_employee_id=employee["id"])

    response = await client.delete(f"/api/departments/{department['id']}")

    assert response.status_code == 409


async def test_department_employees_ordered_by_salary(client):
    company = await create_company(client, name="Tech Corp")
    department = await create_department(client, company["id"], name="Engineering")
    await create_employee(client, department["id"], first_name="Low", salary=40000)
    await create_employee(client, department["id"], first_name="None", salary=None)
    await create_employee(client, department["id"], first_name="High", salary=90000)

    response = await client.get(f"/api/departments/{department['id']}/employees")

    assert response.status_code == 200
    rows = response.json()
    assert [r["first_name"] for r in rows] == ["High", "Low", "None"]
    assert rows[0]["company_name"] == "Tech Corp"
    assert rows[0]["department_name"] == "Engineering"


async def test_department_employees_for_missing_department_is_404(client):
    response = await client.get("/api/departments/31337/employees")
    assert response.status_code == 404


async def test_budget_summary(client):
    company = await create_company(client)
    big = await create_department(client, company["id"], name="Big", budget=200000)
    await create_department(client, company["id"], name="Empty", budget=50000)
    await create_employee(client, big["id"], salary=60000)
    await create_employee(client, big["id"], salary=40000)

    response = await client.get(f"/api/departments/company/{company['id']}/budget-summary")

    assert response.status_code == 200
    rows = response.json()
    assert [r["name"] for r in rows] == ["Big", "Empty"]
    assert rows[0]["employee_count"] == 2
    assert rows[0]["avg_salary"] == 50000
    assert rows[0]["total_salaries"] == 100000
    assert rows[0]["budget_per_employee"] == 100000
    assert rows[1]["employee_count"] == 0
    assert rows[1]["budget_per_employee"] is None


async def test_budget_summary_for_missing_company_is_404(client):
    response = await client.get("/api/departments/company/555/budget-summary")
    assert response.status_code == 404
