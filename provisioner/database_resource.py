"""
==================================================
Lifecycle management for provisioned databases.
==================================================

Implements the four operations the orchestration engine calls on a
``pgmulti_db`` resource. Each operation opens a single administrative
connection to the server's ``postgres`` database and releases it before
returning.

Operations:
    create: Generate owner credentials, CREATE USER, CREATE DATABASE, resolve OID
    read:   Refresh the OID; None when the database no longer exists
    update: No-op (db_name changes force replacement, nothing else is mutable)
    delete: DROP DATABASE, and DROP ROLE of the owner when configured

Cleanup policies (see core.config.ProvisioningConfig):
    rollback_role_on_failure: When CREATE DATABASE fails, drop the role that
        was just created before raising. Enabled by default.
    drop_owner_on_delete: After DROP DATABASE, also drop the owner role.
        Disabled by default, so the role outlives its database.

Database names are folded to lowercase before they reach DDL or the OID
lookup, as PostgreSQL folds unquoted identifiers, so names differing only
in case always address the same database. The resource keeps db_name as
planned.

Example:
    >>> from models import ConnectionParams
    >>> from provisioner import DatabaseResourceManager
    >>>
    >>> manager = DatabaseResourceManager()
    >>> params = ConnectionParams('localhost', 5432, 'root', '12345')
    >>>
    >>> resource = manager.create(params, 'test_db')
    >>> resource = manager.read(params, resource)
    >>> manager.delete(params, resource)
"""

import logging
from typing import Optional, Tuple

import psycopg2
from sqlalchemy import Connection, text
from sqlalchemy.exc import SQLAlchemyError

from core.config import ProvisioningConfig, config
from credentials.generator import CredentialGenerator, default_generator
from models import ConnectionParams, DatabaseResource
from provisioner.connection import admin_connection, execute_ddl
from provisioner.exceptions import (
    CreateDatabaseError,
    CreateUserError,
    DatabaseConnectionError,
    DatabaseNotFoundError,
    DeleteError,
    InvalidIdentifierError,
    OidLookupError,
    ReadError,
)
from sql.ddl import (
    create_database_sql,
    create_user_sql,
    drop_database_sql,
    drop_role_sql,
    fold_identifier,
    is_valid_identifier,
)
from sql.query_builder import database_oid_sql

logger = logging.getLogger(__name__)

DRIVER_ERRORS = (SQLAlchemyError, psycopg2.Error)


def get_oid(conn: Connection, db_name: str) -> int:
    """Resolve the OID of a database by case-insensitive name.

    Args:
        conn: Open administrative connection
        db_name: Database name (bound as a parameter, never interpolated)

    Returns:
        The database OID from pg_catalog.pg_database

    Raises:
        DatabaseNotFoundError: If no database has that name
        OidLookupError: If the catalog query fails
    """
    try:
        result = conn.execute(text(database_oid_sql()), {'db_name': db_name})
        row = result.fetchone()
    except DRIVER_ERRORS as e:
        logger.error(f"Failed to get OID of database {db_name}: {e}")
        raise OidLookupError(
            f"Failed to get DB oid: {e}",
            original_error=e,
            details={'db_name': db_name}
        ) from e

    if row is None:
        raise DatabaseNotFoundError(
            f"Database {db_name} not found in pg_catalog.pg_database",
            details={'db_name': db_name}
        )

    return int(row[0])


def _ensure_identifier(name: str, kind: str) -> None:
    if not is_valid_identifier(name):
        raise InvalidIdentifierError(
            f"Invalid {kind} {name!r}: expected a letter or underscore followed by "
            f"letters, digits, '_' or '$', at most 63 bytes",
            details={kind.replace(' ', '_'): name}
        )


class DatabaseResourceManager:
    """Create, read, update and delete provisioned databases.

    Attributes:
        settings: ProvisioningConfig with DDL options and cleanup policies
        generator: CredentialGenerator used for owner role names and passwords
    """

    def __init__(
        self,
        settings: Optional[ProvisioningConfig] = None,
        generator: Optional[CredentialGenerator] = None
    ):
        """Initialize the manager.

        Args:
            settings: Provisioning settings (defaults to config.provisioning)
            generator: Credential generator (defaults to the process-wide one)
        """
        self.settings = settings or config.provisioning
        self.generator = generator or default_generator

    def _connect(self, params: ConnectionParams):
        return admin_connection(params, connect_timeout=self.settings.connect_timeout)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, params: ConnectionParams, db_name: str) -> DatabaseResource:
        """Provision a database owned by a freshly generated role.

        Args:
            params: Administrative connection parameters
            db_name: Name of the database to create

        Returns:
            DatabaseResource with generated credentials and the new OID

        Raises:
            InvalidIdentifierError: If db_name is not an accepted identifier
            DatabaseConnectionError: If the server cannot be reached
            CreateUserError: If CREATE USER fails
            CreateDatabaseError: If CREATE DATABASE fails
            OidLookupError: If the OID of the new database cannot be read
        """
        _ensure_identifier(db_name, 'database name')
        target = fold_identifier(db_name)
        logger.info(f"Creating database {target} on {params.hostname}:{params.port}")

        with self._connect(params) as conn:
            username, password = self._create_user(conn)
            self._create_database(conn, target, username)
            db_oid = get_oid(conn, target)

        logger.info(f"✅ Created database {target} (oid {db_oid}) owned by {username}")
        return DatabaseResource(
            db_name=db_name,
            db_username=username,
            db_password=password,
            db_oid=db_oid
        )

    def _create_user(self, conn: Connection) -> Tuple[str, str]:
        username = self.generator.generate_name()
        password = self.generator.generate_password()

        logger.debug(create_user_sql(username, '***'))
        try:
            execute_ddl(conn, create_user_sql(username, password))
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to create user {username}: {e}")
            raise CreateUserError(
                f"failed to create user: {e}",
                original_error=e,
                details={'db_username': username}
            ) from e

        logger.info(f"Created owner role {username}")
        return username, password

    def _create_database(self, conn: Connection, db_name: str, username: str) -> None:
        ddl = create_database_sql(
            database_name=db_name,
            owner=username,
            encoding=self.settings.encoding,
            lc_collate=self.settings.lc_collate,
            lc_ctype=self.settings.lc_ctype,
            tablespace=self.settings.tablespace,
            connection_limit=self.settings.connection_limit
        )
        logger.debug(ddl)

        try:
            execute_ddl(conn, ddl)
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to create database {db_name}: {e}")
            details = {'db_name': db_name, 'db_username': username}
            if not self._rollback_role(conn, username):
                details['orphaned_role'] = username
            raise CreateDatabaseError(
                f"failed to create database: {e}",
                original_error=e,
                details=details
            ) from e

    def _rollback_role(self, conn: Connection, username: str) -> bool:
        """Drop the role created for a database that could not be created.

        Returns:
            True if the role was dropped, False if it was left behind
        """
        if not self.settings.rollback_role_on_failure:
            logger.warning(f"⚠️  Leaving role {username} behind (rollback disabled)")
            return False

        try:
            execute_ddl(conn, drop_role_sql(username))
        except DRIVER_ERRORS as e:
            logger.warning(f"⚠️  Failed to drop role {username} after failed database creation: {e}")
            return False

        logger.info(f"Dropped role {username} after failed database creation")
        return True

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read(
        self,
        params: ConnectionParams,
        resource: DatabaseResource
    ) -> Optional[DatabaseResource]:
        """Refresh the OID of a provisioned database.

        Args:
            params: Administrative connection parameters
            resource: Prior state of the resource

        Returns:
            The resource with a refreshed OID, or None if the database is gone

        Raises:
            ReadError: If the server cannot be reached or the lookup fails
        """
        logger.info(f"Reading database {resource.db_name}")

        try:
            with self._connect(params) as conn:
                db_oid = get_oid(conn, fold_identifier(resource.db_name))
        except DatabaseNotFoundError:
            logger.warning(f"⚠️  Database {resource.db_name} no longer exists")
            return None
        except (DatabaseConnectionError, OidLookupError) as e:
            raise ReadError(
                f"failed to read database {resource.db_name}: {e.message}",
                original_error=e,
                details={'db_name': resource.db_name}
            ) from e

        if resource.db_oid is not None and resource.db_oid != db_oid:
            logger.warning(
                f"⚠️  Database {resource.db_name} OID changed from {resource.db_oid} to {db_oid}"
            )

        return resource.with_oid(db_oid)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update(
        self,
        params: ConnectionParams,
        prior: DatabaseResource,
        desired: Optional[DatabaseResource] = None
    ) -> DatabaseResource:
        """Apply an in-place update, which has nothing to change.

        db_name changes are handled by the engine as replacement and every
        other attribute is generated, so the prior state is returned as-is
        and no connection is opened.
        """
        logger.debug(f"Update of database {prior.db_name} has no attributes to change")
        return prior

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, params: ConnectionParams, resource: DatabaseResource) -> None:
        """Drop a provisioned database.

        The owner role is dropped too only when drop_owner_on_delete is set.

        Args:
            params: Administrative connection parameters
            resource: Prior state of the resource

        Raises:
            InvalidIdentifierError: If db_name is not an accepted identifier
            DatabaseConnectionError: If the server cannot be reached
            DeleteError: If DROP DATABASE or DROP ROLE fails
        """
        _ensure_identifier(resource.db_name, 'database name')
        drop_owner = self.settings.drop_owner_on_delete and bool(resource.db_username)
        if drop_owner:
            _ensure_identifier(resource.db_username, 'role name')

        logger.info(f"Dropping database {resource.db_name}")

        with self._connect(params) as conn:
            self._drop(conn, drop_database_sql(fold_identifier(resource.db_name)), 'database', resource)
            if drop_owner:
                self._drop(conn, drop_role_sql(resource.db_username), 'role', resource)

        logger.info(f"✅ Dropped database {resource.db_name}")

    def _drop(self, conn: Connection, ddl: str, kind: str, resource: DatabaseResource) -> None:
        logger.debug(ddl)
        try:
            execute_ddl(conn, ddl)
        except DRIVER_ERRORS as e:
            logger.error(f"Failed to drop {kind} for {resource.db_name}: {e}")
            raise DeleteError(
                f"failed to drop {kind}: {e}",
                original_error=e,
                details={'db_name': resource.db_name, 'db_username': resource.db_username}
            ) from e

        if kind == 'role':
            logger.info(f"Dropped owner role {resource.db_username}")
