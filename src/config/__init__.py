"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator, model_validator
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="org-directory-api", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database_url: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy URL (async driver); overrides the DB_* parts"
    )
    db_host: str = Field(default="localhost", description="PostgreSQL host")
    db_port: int = Field(default=5432, description="PostgreSQL port", ge=1, le=65535)
    db_name: str = Field(default="company_db", description="PostgreSQL database name")
    db_user: str = Field(default="postgres", description="PostgreSQL user")
    db_password: Optional[str] = Field(default=None, description="PostgreSQL password")

    db_pool_size: int = Field(default=20, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=0, description="Max overflow connections", ge=0)
    db_pool_timeout: float = Field(
        default=2.0,
        description="Seconds to wait for a pooled connection",
        gt=0
    )
    db_pool_recycle: int = Field(
        default=30,
        description="Seconds before an idle connection is recycled",
        ge=1
    )
    auto_create_tables: bool = Field(
        default=True,
        description="Create missing tables during startup"
    )
    seed_file_path: Path = Field(
        default=Path("seed_data.yaml"),
        description="Path to the YAML sample dataset"
    )

    # ========== Business Rules ==========
    bcrypt_rounds: int = Field(default=10, description="bcrypt cost factor", ge=4, le=16)
    max_active_projects_per_employee: int = Field(
        default=5,
        description="Open projects an employee may hold before assignment is refused",
        ge=1
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    cors_allow_credentials: bool = Field(
        default=False,
        description="Send credentialed CORS responses; needs explicit origins, not *"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "test", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @model_validator(mode="after")
    def validate_cors(self) -> "Settings":
        if self.cors_allow_credentials and "*" in self.cors_origins:
            raise ValueError("cors_allow_credentials requires explicit cors_origins, not *")
        return self

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @property
    def sqlalchemy_url(self) -> str:
        """Connection URL, built from the DB_* parts when DATABASE_URL is unset."""
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        ).render_as_string(hide_password=False)


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class ProjectStatus(str):
    """Project lifecycle statuses."""
    PLANNING = "planning"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BudgetStatus(str):
    """Budget consumption labels used by the reports."""
    OVER_BUDGET = "Over Budget"
    NEAR_LIMIT = "Near Budget Limit"
    WITHIN_BUDGET = "Within Budget"
    HIGH_UTILIZATION = "High Utilization"
    MODERATE_UTILIZATION = "Moderate Utilization"
    LOW_UTILIZATION = "Low Utilization"


class FinancialHealth(str):
    """Company-level financial health labels."""
    OVER_BUDGET = "Over Budget"
    TIGHT = "Tight Budget"
    MODERATE = "Moderate Budget"
    HEALTHY = "Healthy Budget"


class WorkloadStatus(str):
    """Employee workload labels, by assigned project count."""
    NO_PROJECTS = "No Projects"
    LIGHT = "Light Load"
    NORMAL = "Normal Load"
    HIGH = "High Load"
    OVERLOADED = "Overloaded"


class TimelineStatus(str):
    """Project timeline labels."""
    COMPLETED_EARLY = "Completed Early"
    COMPLETED_ON_TIME = "Completed On Time"
    OVERDUE = "Overdue"
    ON_TRACK = "On Track"
    UNKNOWN = "Unknown"


class PerformanceRating(str):
    """Department performance labels, by project completion rate."""
    NO_PROJECTS = "No Projects"
    HIGH = "High Performance"
    GOOD = "Good Performance"
    AVERAGE = "Average Performance"
    POOR = "Poor Performance"


class SalaryCompetitiveness(str):
    """Company average salary compared with the cross-company average."""
    ABOVE_MARKET = "Above Market"
    MARKET_RATE = "Market Rate"
    BELOW_MARKET = "Below Market"


# ========== Lists for validation ==========

VALID_PROJECT_STATUSES = [
    ProjectStatus.PLANNING, ProjectStatus.IN_PROGRESS, ProjectStatus.ON_HOLD,
    ProjectStatus.COMPLETED, ProjectStatus.CANCELLED
]
CLOSED_PROJECT_STATUSES = [ProjectStatus.COMPLETED, ProjectStatus.CANCELLED]

MAX_SALARY = 10_000_000
MAX_PASSWORD_BYTES = 72
