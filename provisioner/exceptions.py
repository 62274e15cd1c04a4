"""
=======================================
Exception hierarchy for the provisioner.
=======================================

Every failure of a lifecycle operation is raised as a ProvisionerError
subclass carrying the underlying driver error and its message. Nothing is
retried; earlier side effects are not undone except where noted in
provisioner.database_resource.

Hierarchy:
    ProvisionerError
    ├── InvalidIdentifierError   db_name rejected before connecting
    ├── DatabaseConnectionError  cannot reach or authenticate to the server
    ├── CreateUserError          CREATE USER failed
    ├── CreateDatabaseError      CREATE DATABASE failed
    ├── DeleteError              DROP DATABASE (or DROP ROLE) failed
    ├── ReadError                refresh failed for a reason other than absence
    ├── OidLookupError           catalog query failed
    └── DatabaseNotFoundError    catalog has no row for the database
"""

from typing import Any, Dict, Optional


class ProvisionerError(Exception):
    """Base exception for provisioning operations.

    Attributes:
        message: Human readable message including the driver message
        original_error: The wrapped driver exception, if any
        details: Extra context (database name, role name...)
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.original_error = original_error
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception to a dictionary for CLI output."""
        return {
            'error': type(self).__name__,
            'message': self.message,
            'details': self.details
        }


class InvalidIdentifierError(ProvisionerError):
    """Raised when a database name is not an accepted identifier."""


class DatabaseConnectionError(ProvisionerError):
    """Raised when the administrative connection cannot be opened."""


class CreateUserError(ProvisionerError):
    """Raised when the owner role cannot be created."""


class CreateDatabaseError(ProvisionerError):
    """Raised when the database cannot be created."""


class DeleteError(ProvisionerError):
    """Raised when the database (or its owner role) cannot be dropped."""


class ReadError(ProvisionerError):
    """Raised when refreshing a database fails for a reason other than absence."""


class OidLookupError(ProvisionerError):
    """Raised when the pg_database catalog query fails."""


class DatabaseNotFoundError(ProvisionerError):
    """Raised when pg_database has no row for the requested database."""
