"""
===================================================
Provisioner package for per-application databases.
===================================================

Creates and drops isolated PostgreSQL databases, each owned by a dedicated
generated role, on a shared server.

Modules:
    connection: One short-lived administrative connection per operation
    database_resource: Create/read/update/delete of the database resource
    exceptions: ProvisionerError hierarchy

Example:
    >>> from models import ConnectionParams
    >>> from provisioner import DatabaseResourceManager
    >>>
    >>> manager = DatabaseResourceManager()
    >>> resource = manager.create(ConnectionParams('localhost', 5432, 'root', '12345'), 'test_db')
"""

__version__ = "0.1.0"
__all__ = [
    'DatabaseResourceManager',
    'get_oid',
    'admin_connection',
    'execute_ddl',
    'ProvisionerError',
    'InvalidIdentifierError',
    'DatabaseConnectionError',
    'CreateUserError',
    'CreateDatabaseError',
    'DeleteError',
    'ReadError',
    'OidLookupError',
    'DatabaseNotFoundError',
]

from .connection import admin_connection, execute_ddl
from .database_resource import DatabaseResourceManager, get_oid
from .exceptions import (
    CreateDatabaseError,
    CreateUserError,
    DatabaseConnectionError,
    DatabaseNotFoundError,
    DeleteError,
    InvalidIdentifierError,
    OidLookupError,
    ProvisionerError,
    ReadError,
)
