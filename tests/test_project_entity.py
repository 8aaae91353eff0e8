from datetime import date

import pytest

from src.core import InvalidStatusTransitionException, ValidationException
from src.projects.domain import Project, ALLOWED_TRANSITIONS


def test_defaults_to_planning():
    project = Project(name="P")
    assert project.status == "planning"
    assert project.is_open


def test_rejects_unknown_status():
    with pytest.raises(ValidationException):
        Project(name="P", status="finished")


def test_rejects_end_before_start():
    with pytest.raises(ValidationException):
        Project(name="P", start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))


def test_rejects_negative_budget():
    with pytest.raises(ValidationException):
        Project(name="P", budget=-0.01)


@pytest.mark.parametrize("current,new", [
    ("planning", "in_progress"),
    ("planning", "cancelled"),
    ("in_progress", "completed"),
    ("on_hold", "in_progress"),
    ("completed", "completed"),
])
def test_allowed_transitions(current, new):
    project = Project(name="P", status=current)
    project.change_status(new)
    assert project.status == new


@pytest.mark.parametrize("current,new", [
    ("planning", "completed"),
    ("on_hold", "completed"),
    ("completed", "in_progress"),
    ("cancelled", "planning"),
])
def test_forbidden_transitions(current, new):
    project = Project(name="P", status=current)
    with pytest.raises(InvalidStatusTransitionException):
        project.change_status(new)
    assert project.status == current


def test_closed_statuses_are_terminal():
    assert ALLOWED_TRANSITIONS["completed"] == frozenset()
    assert ALLOWED_TRANSITIONS["cancelled"] == frozenset()


def test_in_progress_cannot_be_deleted():
    assert not Project(name="P", status="in_progress").can_be_deleted
    assert Project(name="P", status="on_hold").can_be_deleted


def test_overdue_only_while_open():
    today = date(2024, 6, 1)
    late = Project(name="P", status="in_progress", end_date=date(2024, 5, 22))
    done = Project(name="P", status="completed", end_date=date(2024, 5, 22))
    undated = Project(name="P")

    assert late.is_overdue(today)
    assert late.days_overdue(today) == 10
    assert not done.is_overdue(today)
    assert done.days_overdue(today) == 0
    assert not undated.is_overdue(today)
    assert not late.is_overdue(date(2024, 5, 22))
