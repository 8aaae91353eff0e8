from factories import create_company, create_department, create_employee, create_hierarchy, create_project


def _update_payload(project: dict, **overrides) -> dict:
    payload = {
        "name": project["name"],
        "description": project["description"],
        "start_date": project["start_date"],
        "end_date": project["end_date"],
        "budget": project["budget"],
        "status": project["status"],
        "assigned_employee_id": project["assigned_employee_id"],
    }
    payload.update(overrides)
    return payload


async def test_create_then_get_includes_assignee_context(client):
    company = await create_company(client, name="Tech Corp")
    department = await create_department(client, company["id"], name="Engineering")
    employee = await create_employee(client, department["id"], first_name="Mike", last_name="Wilson",
                                     position="Software Engineer")
    project = await create_project(client, name="Mobile App", assigned_employee_id=employee["id"])

    response = await client.get(f"/api/projects/{project['id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Mobile App"
    assert body["status"] == "planning"
    assert body["assigned_employee_name"] == "Mike Wilson"
    assert body["employee_position"] == "Software Engineer"
    assert body["department_name"] == "Engineering"
    assert body["company_name"] == "Tech Corp"


async def test_unassigned_project_has_null_context(client):
    project = await create_project(client)

    rows = (await client.get("/api/projects")).json()

    assert rows[0]["id"] == project["id"]
    assert rows[0]["assigned_employee_name"] is None
    assert rows[0]["company_name"] is None


async def test_get_missing_project_is_404(client):
    response = await client.get("/api/projects/999")
    assert response.status_code == 404


async def test_create_validation(client):
    base = {"name": "P", "start_date": "2030-02-01"}

    response = await client.post("/api/projects", json={**base, "end_date": "2030-01-01"})
    assert response.status_code == 422

    response = await client.post("/api/projects", json={**base, "status": "finished"})
    assert response.status_code == 422

    response = await client.post("/api/projects", json={**base, "budget": -1})
    assert response.status_code == 422

    response = await client.post("/api/projects", json={**base, "assigned_employee_id": 999})
    assert response.status_code == 422
    assert "Employee 999" in response.json()["detail"]


async def test_same_day_start_and_end_is_allowed(client):
    project = await create_project(client, start_date="2030-01-01", end_date="2030-01-01")
    assert project["end_date"] == "2030-01-01"


async def test_status_follows_lifecycle(client):
    project = await create_project(client)

    response = await client.put(f"/api/projects/{project['id']}", json=_update_payload(project, status="completed"))
    assert response.status_code == 409

    response = await client.put(f"/api/projects/{project['id']}", json=_update_payload(project, status="in_progress"))
    assert response.status_code == 200
    assert response.json()["status"] == "in_progress"

    response = await client.put(f"/api/projects/{project['id']}", json=_update_payload(project, status="completed"))
    assert response.status_code == 200

    response = await client.put(f"/api/projects/{project['id']}", json=_update_payload(project, status="planning"))
    assert response.status_code == 409


async def test_update_keeping_status_changes_other_fields(client):
    project = await create_project(client)

    response = await client.put(
        f"/api/projects/{project['id']}",
        json=_update_payload(project, name="Renamed", budget=12345),
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"
    assert response.json()["budget"] == 12345


async def test_update_missing_project_is_404(client):
    response = await client.put("/api/projects/999", json={"name": "X"})
    assert response.status_code == 404


async def test_delete_in_progress_is_refused(client):
    project = await create_project(client, status="in_progress")

    response = await client.delete(f"/api/projects/{project['id']}")

    assert response.status_code == 409
    assert (await client.get(f"/api/projects/{project['id']}")).status_code == 200


async def test_delete_returns_snapshot(client):
    project = await create_project(client, name="Old")

    response = await client.delete(f"/api/projects/{project['id']}")

    assert response.status_code == 200
    assert response.json()["deleted"]["name"] == "Old"
    assert (await client.get(f"/api/projects/{project['id']}")).status_code == 404


async def test_assign_project(client):
    _, _, employee = await create_hierarchy(client)
    project = await create_project(client)

    response = await client.post(f"/api/projects/{project['id']}/assign", json={"employee_id": employee["id"]})

    assert response.status_code == 200
    assert response.json()["project"]["assigned_employee_id"] == employee["id"]


async def test_assign_errors(client):
    _, department, employee = await create_hierarchy(client)
    project = await create_project(client)

    response = await client.post("/api/projects/999/assign", json={"employee_id": employee["id"]})
    assert response.status_code == 404

    response = await client.post(f"/api/projects/{project['id']}/assign", json={"employee_id": 999})
    assert response.status_code == 422

    await client.put(
        f"/api/employees/{employee['id']}",
        json={
            "department_id": department["id"],
            "first_name": "Jo",
            "last_name": "Smith",
            "email": employee["email"],
            "is_active": False,
        },
    )
    response = await client.post(f"/api/projects/{project['id']}/assign", json={"employee_id": employee["id"]})
    assert response.status_code == 409


async def test_assign_refused_at_open_project_limit(client):
    _, _, employee = await create_hierarchy(client)
    for _ in range(5):
        await create_project(client, assigned_employee_id=employee["id"])
    await create_project(client, assigned_employee_id=employee["id"], status="completed")
    extra = await create_project(client)

    response = await client.post(f"/api/projects/{extra['id']}/assign", json={"employee_id": employee["id"]})

    assert response.status_code == 409
    assert "limit 5" in response.json()["detail"]


async def test_reassigning_to_current_employee_ignores_the_project_itself(client):
    _, _, employee = await create_hierarchy(client)
    projects = [await create_project(client, assigned_employee_id=employee["id"]) for _ in range(5)]

    response = await client.post(
        f"/api/projects/{projects[0]['id']}/assign", json={"employee_id": employee["id"]}
    )

    assert response.status_code == 200


async def test_status_summary(client):
    company = await create_company(client, name="Beta")
    department = await create_department(client, company["id"], name="Ops")
    other = await create_department(client, company["id"], name="Dev")
    first = await create_employee(client, department["id"])
    second = await create_employee(client, other["id"])
    await create_project(client, budget=100, start_date="2030-01-01", end_date="2030-02-01",
                         assigned_employee_id=first["id"])
    await create_project(client, budget=300, start_date="2029-06-01", end_date="2031-01-01",
                         assigned_employee_id=second["id"])
    await create_project(client, budget=999, status="completed")

    response = await client.get("/api/projects/status/planning/summary")

    assert response.status_code == 200
    summary = response.json()
    assert summary["project_count"] == 2
    assert summary["total_budget"] == 400
    assert summary["average_budget"] == 200
    assert summary["earliest_start"] == "2029-06-01"
    assert summary["latest_end"] == "2031-01-01"
    assert summary["departments_involved"] == 2
    assert summary["companies_involved"] == 1
    assert summary["department_names"] == "Dev, Ops"
    assert summary["company_names"] == "Beta"


async def test_status_summary_for_empty_status(client):
    response = await client.get("/api/projects/status/on_hold/summary")

    assert response.status_code == 200
    summary = response.json()
    assert summary["project_count"] == 0
    assert summary["total_budget"] is None
    assert summary["department_names"] is None


async def test_status_summary_rejects_unknown_status(client):
    response = await client.get("/api/projects/status/finished/summary")
    assert response.status_code == 422


async def test_overdue_lists_open_projects_past_their_end(client):
    _, _, employee = await create_hierarchy(client)
    late = await create_project(client, name="Late", start_date="2020-01-01", end_date="2020-02-01",
                                assigned_employee_id=employee["id"])
    await create_project(client, name="Done", start_date="2020-01-01", end_date="2020-02-01",
                         status="completed")
    await create_project(client, name="Dropped", start_date="2020-01-01", end_date="2020-02-01",
                         status="cancelled")
    await create_project(client, name="Future")

    response = await client.get("/api/projects/overdue")

    assert response.status_code == 200
    rows = response.json()
    assert [r["id"] for r in rows] == [late["id"]]
    assert rows[0]["days_overdue"] > 0
    assert rows[0]["assigned_employee"] == "Jo Smith"


async def _deactivate(client, department: dict, employee: dict) -> None:
    response = await client.put(
        f"/api/employees/{employee['id']}",
        json={
            "department_id": department["id"],
            "first_name": employee["first_name"],
            "last_name": employee["last_name"],
            "email": employee["email"],
            "is_active": False,
        },
    )
    assert response.status_code == 200


async def test_create_refuses_employee_at_open_project_limit(client):
    _, _, employee = await create_hierarchy(client)
    for _ in range(5):
        await create_project(client, assigned_employee_id=employee["id"])

    response = await client.post(
        "/api/projects", json={"name": "Sixth", "assigned_employee_id": employee["id"]}
    )
    assert response.status_code == 409
    assert "limit 5" in response.json()["detail"]

    # Closed projects do not add to the open workload
    await create_project(client, assigned_employee_id=employee["id"], status="completed")


async def test_create_refuses_inactive_employee(client):
    _, department, employee = await create_hierarchy(client)
    await _deactivate(client, department, employee)

    response = await client.post(
        "/api/projects", json={"name": "P", "assigned_employee_id": employee["id"]}
    )

    assert response.status_code == 409


async def test_update_refuses_inactive_or_saturated_assignee(client):
    _, department, busy = await create_hierarchy(client)
    for _ in range(5):
        await create_project(client, assigned_employee_id=busy["id"])
    idle = await create_employee(client, department["id"])
    project = await create_project(client)

    response = await client.put(
        f"/api/projects/{project['id']}", json=_update_payload(project, assigned_employee_id=busy["id"])
    )
    assert response.status_code == 409

    await _deactivate(client, department, idle)
    response = await client.put(
        f"/api/projects/{project['id']}", json=_update_payload(project, assigned_employee_id=idle["id"])
    )
    assert response.status_code == 409

    response = await client.put(
        f"/api/projects/{project['id']}", json=_update_payload(project, assigned_employee_id=999)
    )
    assert response.status_code == 422


async def test_update_keeping_assignee_skips_assignment_checks(client):
    _, department, employee = await create_hierarchy(client)
    project = await create_project(client, assigned_employee_id=employee["id"])
    await _deactivate(client, department, employee)

    response = await client.put(
        f"/api/projects/{project['id']}", json=_update_payload(project, name="Renamed")
    )

    assert response.status_code == 200
    assert response.json()["assigned_employee_id"] == employee["id"]
