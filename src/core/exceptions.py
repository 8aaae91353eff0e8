"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

These exceptions define domain-specific errors that can be caught and handled
appropriately at the application boundaries. The HTTP status each one maps to
is decided in ``src.shared.api.middleware``.
"""

from typing import Optional, Any


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""


class RepositoryException(ApplicationException):
    """Base exception for repository/data access errors."""


class ValidationException(ApplicationException):
    """Exception for validation errors."""


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[Any] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id is not None:
            message += f" with id '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class ConflictException(ApplicationException):
    """Exception when a write collides with existing data."""


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class InvalidStatusTransitionException(DomainException):
    """Exception raised when a project status change is not allowed."""

    def __init__(
        self,
        current_status: str,
        new_status: str,
        details: Optional[dict] = None
    ):
        self.current_status = current_status
        self.new_status = new_status
        super().__init__(
            f"Cannot move project from '{current_status}' to '{new_status}'",
            details or {"current_status": current_status, "new_status": new_status}
        )
