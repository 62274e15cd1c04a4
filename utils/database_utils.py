"""
==================================================
Database connectivity utilities for PostgreSQL.
==================================================

Provides availability checks and post-provisioning verification helpers
used by the CLI ``verify`` command and the integration tests.

Key Features:
    - Server availability checking and waiting with retries
    - Database and role existence checks against pg_catalog
    - Database owner lookup
    - Owner access check: connect with the generated credentials and
      create a table in the provisioned database

Example:
    >>> from models import ConnectionParams
    >>> from utils.database_utils import wait_for_database, verify_database_exists
    >>>
    >>> params = ConnectionParams('localhost', 5432, 'root', '12345')
    >>> wait_for_database(params, max_retries=5)
    >>> verify_database_exists(params, 'test_db')
"""

import logging
import time
from typing import Optional, Tuple

import psycopg2
from psycopg2 import OperationalError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from models import ADMIN_DATABASE, ConnectionParams, DatabaseResource
from provisioner.connection import admin_connection, execute_ddl
from provisioner.exceptions import ProvisionerError
from sql.ddl import create_table_sql, drop_table_sql, fold_identifier
from sql.query_builder import (
    check_database_exists_sql,
    check_role_exists_sql,
    database_owner_sql,
)

logger = logging.getLogger(__name__)

ACCESS_CHECK_TABLE = 'pgmulti_access_check'


class DatabaseUnavailableError(Exception):
    """Exception raised when the server does not become available in time."""
    pass


def check_database_available(
    params: ConnectionParams,
    database: str = ADMIN_DATABASE,
    timeout: int = 5
) -> bool:
    """
    Check if a PostgreSQL database accepts connections.

    Args:
        params: Connection parameters
        database: Database name (defaults to 'postgres')
        timeout: Connection timeout in seconds

    Returns:
        True if database is available, False otherwise

    Example:
        >>> if check_database_available(params):
        ...     print("PostgreSQL is ready")
    """
    try:
        conn = psycopg2.connect(
            host=params.hostname,
            port=params.port,
            user=params.admin_username,
            password=params.admin_password,
            dbname=database,
            connect_timeout=timeout
        )
        conn.close()
        return True
    except OperationalError as e:
        logger.debug(f"Database not available: {e}")
        return False


def wait_for_database(
    params: ConnectionParams,
    database: str = ADMIN_DATABASE,
    max_retries: int = 10,
    retry_delay: int = 2,
    timeout: int = 5
) -> bool:
    """
    Wait for a PostgreSQL database to become available with retries.

    Args:
        params: Connection parameters
        database: Database name (defaults to 'postgres')
        max_retries: Maximum number of retry attempts
        retry_delay: Delay between retries in seconds
        timeout: Connection timeout per attempt in seconds

    Returns:
        True once the database is available

    Raises:
        DatabaseUnavailableError: If database never becomes available

    Example:
        >>> wait_for_database(params, max_retries=5, retry_delay=3)
    """
    target = f"{params.hostname}:{params.port}/{database}"
    logger.info(f"Waiting for PostgreSQL at {target}...")

    for attempt in range(1, max_retries + 1):
        if check_database_available(params, database, timeout):
            logger.info(f"✅ PostgreSQL is available (attempt {attempt}/{max_retries})")
            return True

        if attempt < max_retries:
            logger.warning(
                f"⏳ PostgreSQL not available yet (attempt {attempt}/{max_retries}), "
                f"retrying in {retry_delay}s..."
            )
            time.sleep(retry_delay)

    error_msg = f"PostgreSQL at {target} did not become available after {max_retries} attempts"
    logger.error(f"❌ {error_msg}")
    raise DatabaseUnavailableError(error_msg)


def verify_database_exists(params: ConnectionParams, database_name: str) -> bool:
    """
    Verify if a specific database exists (exact name match).

    Args:
        params: Administrative connection parameters
        database_name: Name of database to check

    Returns:
        True if database exists, False otherwise

    Raises:
        DatabaseConnectionError: If the server cannot be reached
        SQLAlchemyError: If the catalog query fails
    """
    with admin_connection(params) as conn:
        result = conn.execute(text(check_database_exists_sql()), {"db_name": database_name})
        return result.fetchone() is not None


def verify_role_exists(params: ConnectionParams, role_name: str) -> bool:
    """
    Verify if a role exists.

    Args:
        params: Administrative connection parameters
        role_name: Name of the role to check

    Returns:
        True if the role exists, False otherwise
    """
    with admin_connection(params) as conn:
        result = conn.execute(text(check_role_exists_sql()), {"role_name": role_name})
        return result.fetchone() is not None


def get_database_owner(params: ConnectionParams, database_name: str) -> Optional[str]:
    """
    Get the owner role name of a database.

    Args:
        params: Administrative connection parameters
        database_name: Name of the database

    Returns:
        Owner role name, or None if the database does not exist
    """
    with admin_connection(params) as conn:
        result = conn.execute(text(database_owner_sql()), {"db_name": database_name})
        row = result.fetchone()
        return row[0] if row is not None else None


def verify_owner_access(
    params: ConnectionParams,
    resource: DatabaseResource,
    table_name: str = ACCESS_CHECK_TABLE,
    keep_table: bool = False
) -> Tuple[bool, str]:
    """
    Verify the generated owner can log in to its database and create a table.

    Args:
        params: Administrative connection parameters (host and port are reused)
        resource: Provisioned resource carrying the owner credentials
        table_name: Table to create as proof of access
        keep_table: If False, drop the table again after creating it

    Returns:
        Tuple of (success: bool, message: str)

    Example:
        >>> success, message = verify_owner_access(params, resource)
        >>> if not success:
        ...     print(f"❌ {message}")
    """
    if not resource.db_username or not resource.db_password:
        return False, f"Resource {resource.db_name} carries no owner credentials"

    owner_params = ConnectionParams(
        hostname=params.hostname,
        port=params.port,
        admin_username=resource.db_username,
        admin_password=resource.db_password
    )

    try:
        with admin_connection(owner_params, database=fold_identifier(resource.db_name)) as conn:
            execute_ddl(conn, create_table_sql(table_name))
            if not keep_table:
                execute_ddl(conn, drop_table_sql(table_name))
    except (ProvisionerError, SQLAlchemyError, psycopg2.Error) as e:
        logger.error(f"Owner access check failed for {resource.db_name}: {e}")
        return False, f"Owner {resource.db_username} cannot use {resource.db_name}: {e}"

    message = f"Owner {resource.db_username} created table {table_name} in {resource.db_name}"
    logger.info(f"✅ {message}")
    return True, message
