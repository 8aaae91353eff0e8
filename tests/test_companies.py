from factories import create_company, create_department, create_employee, create_project, unique_email


async def test_create_then_get_returns_the_row(client):
    created = await create_company(client, name="Tech Corp", address="1 Main St")

    response = await client.get(f"/api/companies/{created['id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Tech Corp"
    assert body["address"] == "1 Main St"
    assert body["email"] == created["email"]


async def test_list_is_newest_first_and_paginated(client):
    first = await create_company(client, name="First")
    second = await create_company(client, name="Second")

    response = await client.get("/api/companies")
    assert [c["id"] for c in response.json()] == [second["id"], first["id"]]

    response = await client.get("/api/companies", params={"limit": 1, "offset": 1})
    assert [c["id"] for c in response.json()] == [first["id"]]


async def test_get_missing_company_is_404_with_error_envelope(client):
    response = await client.get("/api/companies/999", headers={"X-Correlation-ID": "abc-123"})

    assert response.status_code == 404
    body = response.json()
    assert body["detail"] == "Company with id '999' not found"
    assert body["correlation_id"] == "abc-123"
    assert "timestamp" in body
    assert response.headers["X-Correlation-ID"] == "abc-123"


async def test_create_rejects_invalid_email(client):
    response = await client.post("/api/companies", json={"name": "Bad", "email": "not-an-email"})
    assert response.status_code == 422


async def test_create_rejects_missing_name(client):
    response = await client.post("/api/companies", json={"email": unique_email()})
    assert response.status_code == 422


async def test_duplicate_email_is_conflict(client):
    email = unique_email("dup")
    await create_company(client, email=email)

    response = await client.post("/api/companies", json={"name": "Again", "email": email.upper()})

    assert response.status_code == 409


async def test_update_replaces_fields(client):
    company = await create_company(client)

    response = await client.put(
        f"/api/companies/{company['id']}",
        json={"name": "Renamed", "email": company["email"], "phone": None},
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"
    assert response.json()["phone"] is None


async def test_update_missing_company_is_404(client):
    response = await client.put("/api/companies/42", json={"name": "X", "email": unique_email()})
    assert response.status_code == 404


async def test_update_to_another_companys_email_is_conflict(client):
    taken = await create_company(client)
    company = await create_company(client)

    response = await client.put(
        f"/api/companies/{company['id']}",
        json={"name": "X", "email": taken["email"]},
    )

    assert response.status_code == 409


async def test_delete_cascades_and_reports_counts(client):
    company = await create_company(client)
    department = await create_department(client, company["id"])
    await create_department(client, company["id"], name="Sales")
    employee = await create_employee(client, department["id"])

    response = await client.delete(f"/api/companies/{company['id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["departments_removed"] == 2
    assert body["employees_removed"] == 1
    assert body["deleted"]["id"] == company["id"]

    assert (await client.get(f"/api/companies/{company['id']}")).status_code == 404
    assert (await client.get(f"/api/departments/{department['id']}")).status_code == 404
    assert (await client.get(f"/api/employees/{employee['id']}")).status_code == 404


async def test_delete_refused_while_employees_hold_projects(client):
    company = await create_company(client)
    department = await create_department(client, company["id"])
    employee = await create_employee(client, department["id"])
    await create_project(client, assigned_employee_id=employee["id"])

    response = await client.delete(f"/api/companies/{company['id']}")

    assert response.status_code == 409
    assert (await client.get(f"/api/companies/{company['id']}")).status_code == 200


async def test_delete_missing_company_is_404(client):
    response = await client.delete("/api/companies/12345")
    assert response.status_code == 404


async def test_company_departments_lists_each_department(client):
    company = await create_company(client, name="Tech Corp")
    await create_department(client, company["id"], name="Marketing", budget=200000)
    await create_department(client, company["id"], name="Engineering", budget=500000)

    response = await client.get(f"/api/companies/{company['id']}/departments")

    assert response.status_code == 200
    rows = response.json()
    assert [r["department_name"] for r in rows] == ["Engineering", "Marketing"]
    assert all(r["company_name"] == "Tech Corp" for r in rows)
    assert rows[0]["department_budget"] == 500000


async def test_company_without_departments_returns_single_row(client):
    company = await create_company(client)

    response = await client.get(f"/api/companies/{company['id']}/departments")

    rows = response.json()
    assert len(rows) == 1
    assert rows[0]["department_id"] is None


async def test_company_departments_for_missing_company_is_404(client):
    response = await client.get("/api/companies/77/departments")
    assert response.status_code == 404
