"""
=====================================
Catalog queries for database lookups.
=====================================

Queries against pg_catalog used to resolve provisioned databases. Unlike
the DDL in sql.ddl, these take the database name as a bound parameter
(``:db_name``) and are executed through ``sqlalchemy.text``.

Example:
    >>> from sqlalchemy import text
    >>> from sql.query_builder import database_oid_sql
    >>>
    >>> result = conn.execute(text(database_oid_sql()), {'db_name': 'app_db'})
"""


def database_oid_sql() -> str:
    """
    Generate SQL resolving a database OID by case-insensitive name.

    When several databases differ only in case, the exact match wins and at
    most one row is returned.

    Returns:
        SQL query returning one int4 ``oid`` column, or no rows
    """
    return (
        "SELECT oid::int4 FROM pg_catalog.pg_database "
        "WHERE lower(datname) = lower(:db_name) "
        "ORDER BY datname = :db_name DESC, oid "
        "LIMIT 1"
    )


def check_database_exists_sql() -> str:
    """
    Generate SQL to check if a database exists.

    Returns:
        SQL query that returns 1 if database exists, nothing if not
    """
    return "SELECT 1 FROM pg_catalog.pg_database WHERE datname = :db_name"


def check_role_exists_sql() -> str:
    """
    Generate SQL to check if a role exists.

    Returns:
        SQL query that returns 1 if the role exists, nothing if not
    """
    return "SELECT 1 FROM pg_catalog.pg_roles WHERE rolname = :role_name"


def database_owner_sql() -> str:
    """
    Generate SQL returning the owner role name of a database.

    Returns:
        SQL query returning one ``owner`` column, or no rows
    """
    return (
        "SELECT pg_catalog.pg_get_userbyid(datdba) AS owner "
        "FROM pg_catalog.pg_database WHERE datname = :db_name"
    )
