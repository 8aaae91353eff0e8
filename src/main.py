"""
Organization Directory API - Main Application
==============================================

REST API over companies, departments, employees and projects, with a set of
cross-entity aggregate reports.

Modules:
- Organization: Companies, departments and employees
- Projects: Project lifecycle and assignment
- Reporting: Read-only aggregate reports

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities and value objects
- Infrastructure: Database models and repositories
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

# Configuration
from src.config import settings

# Infrastructure
from src.infrastructure.database import init_database, close_database, create_tables, check_database

# Module Routers
from src.organization.interfaces import company_router, department_router, employee_router
from src.projects.interfaces import project_router
from src.reporting.interfaces import report_router

# Shared
from src.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    register_exception_handlers,
)
from src.shared.infrastructure.logging import setup_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Initialize database engine
    3. Create missing tables (when enabled)

    SHUTDOWN:
    1. Dispose of the connection pool
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting Organization Directory API", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    init_database()

    if settings.auto_create_tables:
        logger.info("Creating database tables")
        try:
            await create_tables()
        except (SQLAlchemyError, OSError) as e:
            # The server still starts; database-backed routes fail until it is reachable
            logger.warning(f"Database not available - running in degraded mode: {e}")

    logger.info("Organization Directory API started")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down Organization Directory API")
    await close_database()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Organization Directory API",
    description="""
    ## Companies, departments, employees and projects

    ---

    ### Resources

    - `/api/companies` - Companies and their departments
    - `/api/departments` - Departments, their employees and budget summaries
    - `/api/employees` - Employees, search and department salary statistics
    - `/api/projects` - Projects, status lifecycle, assignment, overdue list and budget analysis

    ### Reports

    - `GET /api/reports/company-overview`
    - `GET /api/reports/employee-performance`
    - `GET /api/reports/project-timeline`
    - `GET /api/reports/financial-summary`
    - `GET /api/reports/department-efficiency`
    - `GET /api/reports/cross-company-analysis`

    ---

    ### Errors

    Every error body carries `detail`, `correlation_id` and `timestamp`.
    Missing resources return 404, invalid input 422 and conflicting writes 409.
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# === Custom Middleware (last added runs first) ===
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)
register_exception_handlers(app)

# === Include Module Routers ===
app.include_router(company_router)
app.include_router(department_router)
app.include_router(employee_router)
app.include_router(project_router)
app.include_router(report_router)


# === Health Check Endpoint ===

@app.get("/health", tags=["Health"], responses={
    200: {
        "description": "Service health",
        "content": {
            "application/json": {
                "example": {
                    "status": "healthy",
                    "version": "1.0.0",
                    "environment": "development",
                    "checks": {"database": "connected"}
                }
            }
        }
    }
})
async def health_check():
    """
    Health check endpoint for load balancers and orchestrators.

    Reports "degraded" when the database cannot be reached.
    """
    database_ok = await check_database()
    return {
        "status": "healthy" if database_ok else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": {"database": "connected" if database_ok else "unavailable"}
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Organization Directory API",
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "companies": "/api/companies",
            "departments": "/api/departments",
            "employees": "/api/employees",
            "projects": "/api/projects",
            "reports": "/api/reports"
        }
    }


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower()
    )
