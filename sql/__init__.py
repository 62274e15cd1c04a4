"""
=========================================
SQL utilities package for provisioning.
=========================================

This package provides pure SQL construction functions organized by
statement type:
    - ddl.py: CREATE/DROP statements for roles and databases, plus
      identifier validation and quoting
    - query_builder.py: Parameterized pg_catalog lookups

Example:
    >>> from sql.ddl import create_database_sql, drop_database_sql
    >>> from sql.query_builder import database_oid_sql
    >>>
    >>> ddl = create_database_sql('app_db', owner='qwertyui')
"""

__version__ = "0.1.0"
__all__ = [
    # DDL functions
    'is_valid_identifier', 'fold_identifier', 'quote_identifier', 'quote_literal',
    'create_user_sql', 'create_database_sql', 'drop_database_sql',
    'drop_role_sql', 'create_table_sql', 'drop_table_sql',
    # Catalog queries
    'database_oid_sql', 'check_database_exists_sql',
    'check_role_exists_sql', 'database_owner_sql'
]

from .ddl import (
    create_database_sql,
    create_table_sql,
    create_user_sql,
    drop_database_sql,
    drop_role_sql,
    drop_table_sql,
    fold_identifier,
    is_valid_identifier,
    quote_identifier,
    quote_literal,
)
from .query_builder import (
    check_database_exists_sql,
    check_role_exists_sql,
    database_oid_sql,
    database_owner_sql,
)
