"""
==================================================================
Data Definition Language (DDL) utilities for database provisioning.
==================================================================

Provides pure functions generating the PostgreSQL statements used to
provision and tear down per-application databases and their owner roles.

Identifiers are always double-quoted and literals single-quoted with
embedded quotes doubled, so the generated text is safe to execute as-is
for any name that passes ``is_valid_identifier``.

Functions:
    is_valid_identifier: Check a name against the accepted identifier pattern
    fold_identifier: Fold a name to lowercase like an unquoted identifier
    quote_identifier: Quote an identifier for interpolation into DDL
    quote_literal: Quote a string literal for interpolation into DDL
    create_user_sql: Generate CREATE USER statement
    create_database_sql: Generate CREATE DATABASE statement
    drop_database_sql: Generate DROP DATABASE statement
    drop_role_sql: Generate DROP ROLE statement
    create_table_sql: Generate a minimal CREATE TABLE statement
    drop_table_sql: Generate DROP TABLE statement

Example:
    >>> from sql.ddl import create_user_sql, create_database_sql
    >>>
    >>> create_user_sql('qwertyui', 'Secret-123!~')
    'CREATE USER "qwertyui" WITH PASSWORD \\'Secret-123!~\\' CREATEDB;'
    >>>
    >>> ddl = create_database_sql('app_db', owner='qwertyui')
"""

import re

# PostgreSQL truncates identifiers longer than NAMEDATALEN - 1 bytes
MAX_IDENTIFIER_BYTES = 63

_IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_$]*$')


def is_valid_identifier(name: str) -> bool:
    """Check whether a name is accepted as a database or role identifier.

    Accepted names start with a letter or underscore, contain only letters,
    digits, underscores and dollar signs, and are at most 63 bytes long.

    Args:
        name: Candidate identifier

    Returns:
        True if the name is accepted
    """
    if not isinstance(name, str) or not name:
        return False
    if len(name.encode('utf-8')) > MAX_IDENTIFIER_BYTES:
        return False
    return _IDENTIFIER_PATTERN.match(name) is not None


def fold_identifier(name: str) -> str:
    """Fold a name to lowercase the way PostgreSQL folds unquoted identifiers.

    Names are folded before quoting so the database written by DDL and the
    one matched by the case-insensitive OID lookup are always the same.

    Example:
        >>> fold_identifier('MyDB')
        'mydb'
    """
    return name.lower()


def quote_identifier(identifier: str) -> str:
    """Quote an identifier, doubling any embedded double quotes.

    Example:
        >>> quote_identifier('app_db')
        '"app_db"'
    """
    escaped = identifier.replace('"', '""')
    return f'"{escaped}"'


def quote_literal(value: str) -> str:
    """Quote a string literal the way PostgreSQL's quote_literal() does.

    Single quotes are doubled; a value containing backslashes is emitted as
    an escape string (E'...') with the backslashes doubled.

    Example:
        >>> quote_literal("it's")
        "'it''s'"
    """
    escaped = value.replace("'", "''")
    if '\\' in escaped:
        return "E'" + escaped.replace('\\', '\\\\') + "'"
    return f"'{escaped}'"


def create_user_sql(
    username: str,
    password: str,
    createdb: bool = True
) -> str:
    """Generate CREATE USER statement.

    Args:
        username: Role name to create
        password: Role password
        createdb: If True, grant the CREATEDB attribute

    Returns:
        SQL CREATE USER statement
    """
    sql = f"CREATE USER {quote_identifier(username)} WITH PASSWORD {quote_literal(password)}"

    if createdb:
        sql += " CREATEDB"

    return sql + ";"


def create_database_sql(
    database_name: str,
    owner: str,
    encoding: str = 'UTF8',
    lc_collate: str = 'en_US.utf8',
    lc_ctype: str = 'en_US.utf8',
    tablespace: str = 'pg_default',
    connection_limit: int = -1
) -> str:
    """
    Generate CREATE DATABASE statement.

    Note: This returns the SQL string. Database creation requires special
    connection handling (AUTOCOMMIT isolation) which must be done separately.

    Args:
        database_name: Name of the database to create
        owner: Role that will own the database
        encoding: Character encoding
        lc_collate: Collation order
        lc_ctype: Character classification
        tablespace: Default tablespace of the database
        connection_limit: Maximum concurrent connections (-1 for no limit)

    Returns:
        SQL CREATE DATABASE statement

    Example:
        >>> print(create_database_sql('app_db', owner='qwertyui'))
        CREATE DATABASE "app_db"
            WITH OWNER = "qwertyui"
                 ENCODING = 'UTF8'
                 LC_COLLATE = 'en_US.utf8'
                 LC_CTYPE = 'en_US.utf8'
                 TABLESPACE = "pg_default"
                 CONNECTION LIMIT = -1;
    """
    return f"""CREATE DATABASE {quote_identifier(database_name)}
    WITH OWNER = {quote_identifier(owner)}
         ENCODING = {quote_literal(encoding)}
         LC_COLLATE = {quote_literal(lc_collate)}
         LC_CTYPE = {quote_literal(lc_ctype)}
         TABLESPACE = {quote_identifier(tablespace)}
         CONNECTION LIMIT = {int(connection_limit)};"""


def drop_database_sql(
    database_name: str,
    if_exists: bool = False,
    force: bool = False
) -> str:
    """
    Generate DROP DATABASE statement.

    Args:
        database_name: Name of the database to drop
        if_exists: Add IF EXISTS clause
        force: Add WITH (FORCE) clause (PostgreSQL 13+)

    Returns:
        SQL DROP DATABASE statement
    """
    sql_parts = ["DROP DATABASE"]

    if if_exists:
        sql_parts.append("IF EXISTS")

    sql_parts.append(quote_identifier(database_name))

    if force:
        sql_parts.append("WITH (FORCE)")

    return " ".join(sql_parts) + ";"


def drop_role_sql(role_name: str, if_exists: bool = True) -> str:
    """Generate DROP ROLE statement.

    Example:
        >>> drop_role_sql('qwertyui')
        'DROP ROLE IF EXISTS "qwertyui";'
    """
    sql = "DROP ROLE"

    if if_exists:
        sql += " IF EXISTS"

    return sql + f" {quote_identifier(role_name)};"


def create_table_sql(table_name: str) -> str:
    """Generate a single-column CREATE TABLE statement.

    Used to prove that an owner role can create objects in its database.
    """
    return f"CREATE TABLE {quote_identifier(table_name)} (id int8 PRIMARY KEY);"


def drop_table_sql(table_name: str, if_exists: bool = True) -> str:
    """
    Generate DROP TABLE statement.

    Args:
        table_name: Table name (in the connection's default schema)
        if_exists: Add IF EXISTS clause

    Returns:
        SQL DROP TABLE statement
    """
    sql = "DROP TABLE"

    if if_exists:
        sql += " IF EXISTS"

    return sql + f" {quote_identifier(table_name)};"
