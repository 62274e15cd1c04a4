"""
=============================================
Administrative connection handling.
=============================================

Each lifecycle operation opens exactly one connection to the server's
``postgres`` database, uses it for a few sequential statements and releases
it before returning, whether the operation succeeded or not. Engines are
built with NullPool so closing the connection really closes the socket.

DDL is executed on the raw psycopg2 connection in AUTOCOMMIT mode since
CREATE/DROP DATABASE cannot run inside a transaction block.

Example:
    >>> from models import ConnectionParams
    >>> from provisioner.connection import admin_connection, execute_ddl
    >>>
    >>> params = ConnectionParams('localhost', 5432, 'root', '12345')
    >>> with admin_connection(params) as conn:
    ...     execute_ddl(conn, 'DROP DATABASE "old_db";')
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from sqlalchemy import Connection, Engine, create_engine
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from models import ADMIN_DATABASE, ConnectionParams
from provisioner.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)


def create_admin_engine(
    params: ConnectionParams,
    database: str = ADMIN_DATABASE,
    connect_timeout: Optional[int] = None
) -> Engine:
    """Create a non-pooling SQLAlchemy engine for the given server.

    Args:
        params: Administrative connection parameters
        database: Database to connect to (default 'postgres')
        connect_timeout: Optional connect timeout in seconds

    Returns:
        SQLAlchemy Engine in AUTOCOMMIT mode using NullPool
    """
    connection_url = URL.create(
        drivername='postgresql+psycopg2',
        username=params.admin_username,
        password=params.admin_password,
        host=params.hostname,
        port=params.port,
        database=database
    )

    connect_args = {}
    if connect_timeout is not None:
        connect_args['connect_timeout'] = connect_timeout

    return create_engine(
        connection_url,
        poolclass=NullPool,
        isolation_level='AUTOCOMMIT',
        connect_args=connect_args,
        echo=False
    )


@contextmanager
def admin_connection(
    params: ConnectionParams,
    database: str = ADMIN_DATABASE,
    connect_timeout: Optional[int] = None
) -> Iterator[Connection]:
    """Open one connection for the duration of a ``with`` block.

    The connection is closed and the engine disposed on every exit path.

    Args:
        params: Connection parameters
        database: Database to connect to (default 'postgres')
        connect_timeout: Optional connect timeout in seconds

    Yields:
        An open SQLAlchemy Connection

    Raises:
        DatabaseConnectionError: If the server cannot be reached or rejects the login
    """
    conn_str = params.get_connection_string(database=database, hide_password=True)
    logger.debug(f"Connecting to PostgreSQL server at {conn_str}")

    engine = create_admin_engine(params, database=database, connect_timeout=connect_timeout)
    try:
        try:
            conn = engine.connect()
        except SQLAlchemyError as e:
            logger.error(f"Failed to connect to PostgreSQL server at {conn_str}: {e}")
            raise DatabaseConnectionError(
                f"Failed to connect to PostgreSQL server at {conn_str}: {e}",
                original_error=e,
                details={'host': params.hostname, 'port': params.port, 'database': database}
            ) from e

        try:
            yield conn
        finally:
            conn.close()
    finally:
        engine.dispose()


def execute_ddl(conn: Connection, statement: str) -> None:
    """Execute a DDL statement on the raw driver connection in AUTOCOMMIT.

    Driver errors (psycopg2.Error) propagate to the caller.
    """
    raw_conn = conn.connection.driver_connection
    raw_conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)

    with raw_conn.cursor() as cursor:
        cursor.execute(statement)
