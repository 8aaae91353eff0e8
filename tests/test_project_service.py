from datetime import date, datetime
from types import SimpleNamespace

import pytest

from src.core import ConflictException
from src.projects.application import ProjectCreateDTO, ProjectService, IEmployeeLookup, IProjectRepository


class FakeEmployees(IEmployeeLookup):
    def __init__(self, *employees):
        self._employees = {e.id: e for e in employees}

    async def get_by_id(self, employee_id, for_update=False):
        return self._employees.get(employee_id)


class FakeProjects(IProjectRepository):
    def __init__(self, open_count=0, overdue=None):
        self.open_count = open_count
        self.overdue = overdue or []
        self.created = []

    async def list(self, limit=100, offset=0):
        return []

    async def get_detail(self, project_id):
        return None

    async def get_by_id(self, project_id, for_update=False):
        return None

    async def create(self, dto):
        self.created.append(dto)
        stamp = datetime(2024, 1, 1)
        return SimpleNamespace(id=len(self.created), created_at=stamp, updated_at=stamp, **dto.model_dump())

    async def update(self, model, dto):
        return model

    async def assign(self, model, employee_id):
        return model

    async def delete(self, project_id):
        return None

    async def count_open_for_employee(self, employee_id, exclude_project_id=None):
        return self.open_count

    async def status_summary(self, status):
        return {"project_count": 0}

    async def list_overdue(self, today):
        return self.overdue


ACTIVE = SimpleNamespace(id=1, is_active=True)


async def test_explicit_zero_limit_is_respected():
    service = ProjectService(FakeProjects(open_count=0), FakeEmployees(ACTIVE), max_active_projects=0)

    with pytest.raises(ConflictException):
        await service.create_project(ProjectCreateDTO(name="P", assigned_employee_id=1))


async def test_limit_defaults_to_settings():
    service = ProjectService(FakeProjects(open_count=4), FakeEmployees(ACTIVE))

    project = await service.create_project(ProjectCreateDTO(name="P", assigned_employee_id=1))

    assert project.assigned_employee_id == 1


async def test_overdue_days_come_from_the_entity():
    row = {
        "id": 7,
        "name": "Late",
        "description": None,
        "start_date": date(2024, 1, 1),
        "end_date": date(2024, 5, 22),
        "budget": 100.0,
        "status": "on_hold",
        "assigned_employee": None,
        "employee_email": None,
        "department_name": None,
        "company_name": None,
    }
    service = ProjectService(FakeProjects(overdue=[row]), FakeEmployees())

    overdue = await service.list_overdue(today=date(2024, 6, 1))

    assert [(p.id, p.days_overdue) for p in overdue] == [(7, 10)]
