"""
Projects Domain Entities
=========================

Pure Python domain entity for projects.

The entity owns the status lifecycle and the schedule rules; it knows
nothing about the database or HTTP.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Dict, FrozenSet

from src.config import ProjectStatus, VALID_PROJECT_STATUSES, CLOSED_PROJECT_STATUSES
from src.core import InvalidStatusTransitionException, ValidationException


# Allowed moves out of each status; completed and cancelled are terminal
ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    ProjectStatus.PLANNING: frozenset({
        ProjectStatus.IN_PROGRESS, ProjectStatus.ON_HOLD, ProjectStatus.CANCELLED
    }),
    ProjectStatus.IN_PROGRESS: frozenset({
        ProjectStatus.ON_HOLD, ProjectStatus.COMPLETED, ProjectStatus.CANCELLED
    }),
    ProjectStatus.ON_HOLD: frozenset({
        ProjectStatus.IN_PROGRESS, ProjectStatus.CANCELLED
    }),
    ProjectStatus.COMPLETED: frozenset(),
    ProjectStatus.CANCELLED: frozenset(),
}


@dataclass
class Project:
    """
    Project entity.

    Holds the attributes that business rules look at. Persistence-only
    fields (timestamps, description) stay on the ORM model.
    """

    name: str
    status: str = ProjectStatus.PLANNING
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[float] = None
    assigned_employee_id: Optional[int] = None
    id: Optional[int] = None

    def __post_init__(self):
        """Validate project on initialization."""
        if self.status not in VALID_PROJECT_STATUSES:
            raise ValidationException(
                f"Unknown project status '{self.status}'",
                {"field": "status", "allowed": list(VALID_PROJECT_STATUSES)}
            )
        self.validate_schedule(self.start_date, self.end_date)
        if self.budget is not None and self.budget < 0:
            raise ValidationException("budget cannot be negative", {"field": "budget"})

    @staticmethod
    def validate_schedule(start_date: Optional[date], end_date: Optional[date]) -> None:
        """Raise when the project would end before it starts."""
        if start_date is not None and end_date is not None and end_date < start_date:
            raise ValidationException(
                "end_date cannot be before start_date",
                {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()}
            )

    @property
    def is_open(self) -> bool:
        """Open projects count towards an employee's workload."""
        return self.status not in CLOSED_PROJECT_STATUSES

    @property
    def can_be_deleted(self) -> bool:
        return self.status != ProjectStatus.IN_PROGRESS

    def can_transition_to(self, new_status: str) -> bool:
        if new_status == self.status:
            return True
        return new_status in ALLOWED_TRANSITIONS.get(self.status, frozenset())

    def change_status(self, new_status: str) -> None:
        """
        Move the project to a new status.

        Raises:
            InvalidStatusTransitionException: if the move is not allowed
        """
        if not self.can_transition_to(new_status):
            raise InvalidStatusTransitionException(self.status, new_status)
        self.status = new_status

    def is_overdue(self, today: date) -> bool:
        """Past its end date and still open."""
        return self.end_date is not None and self.end_date < today and self.is_open

    def days_overdue(self, today: date) -> int:
        if not self.is_overdue(today):
            return 0
        return (today - self.end_date).days
