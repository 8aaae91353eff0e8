"""
Projects Infrastructure Models
===============================

SQLAlchemy ORM model for projects.

The assigned employee reference has no cascade: an employee cannot be
removed while projects still point at them.
"""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import String, DateTime, Date, Integer, Numeric, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database import Base
from src.config import ProjectStatus


class ProjectModel(Base):
    """
    Database model for Project.

    Maps to the 'projects' table.
    """
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    budget: Mapped[Optional[float]] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default=ProjectStatus.PLANNING)

    assigned_employee_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("employees.id"),
        nullable=True,
        index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
