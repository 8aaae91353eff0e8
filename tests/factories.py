"""Helpers that create rows through the API and return the JSON body."""

import itertools

from httpx import AsyncClient

_sequence = itertools.count(1)


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}{next(_sequence)}@example.com"


async def create_company(client: AsyncClient, **overrides) -> dict:
    payload = {"name": "Acme", "email": unique_email("company"), "phone": "555-0100"}
    payload.update(overrides)
    response = await client.post("/api/companies", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def create_department(client: AsyncClient, company_id: int, **overrides) -> dict:
    payload = {"company_id": company_id, "name": "Engineering", "budget": 100000, "manager_name": "Ann"}
    payload.update(overrides)
    response = await client.post("/api/departments", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def create_employee(client: AsyncClient, department_id: int, **overrides) -> dict:
    payload = {
        "department_id": department_id,
        "first_name": "Jo",
        "last_name": "Smith",
        "email": unique_email("employee"),
        "salary": 50000,
        "position": "Engineer",
    }
    payload.update(overrides)
    response = await client.post("/api/employees", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def create_project(client: AsyncClient, **overrides) -> dict:
    payload = {
        "name": "Project",
        "start_date": "2030-01-01",
        "end_date": "2030-06-30",
        "budget": 10000,
        "status": "planning",
    }
    payload.update(overrides)
    response = await client.post("/api/projects", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def create_hierarchy(client: AsyncClient) -> tuple:
    """One company with one department and one employee."""
    company = await create_company(client)
    department = await create_department(client, company["id"])
    employee = await create_employee(client, department["id"])
    return company, department, employee
