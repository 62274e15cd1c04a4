"""
=====================================
Pytest suite for sql/query_builder.py
=====================================

How to Execute:
---------------
All tests:          python -m pytest tests/tests_sql/test_query_builder.py -v
"""

from pytest import mark
from sqlalchemy import text

from sql.query_builder import (
    check_database_exists_sql,
    check_role_exists_sql,
    database_oid_sql,
    database_owner_sql,
)


@mark.unit
def test_database_oid_sql_is_case_insensitive_and_bound():
    sql = database_oid_sql()

    assert sql.startswith("SELECT oid::int4 FROM pg_catalog.pg_database")
    assert "lower(datname) = lower(:db_name)" in sql


@mark.unit
def test_catalog_queries_use_bind_parameters():
    assert set(text(database_oid_sql())._bindparams) == {'db_name'}
    assert set(text(check_database_exists_sql())._bindparams) == {'db_name'}
    assert set(text(database_owner_sql())._bindparams) == {'db_name'}
    assert set(text(check_role_exists_sql())._bindparams) == {'role_name'}


@mark.unit
def test_oid_cast_is_not_mistaken_for_bind_parameter():
    # "::int4" must stay a cast, not become a bind named "int4"
    assert 'int4' not in text(database_oid_sql())._bindparams


@mark.unit
def test_database_oid_sql_returns_single_row_preferring_exact_name():
    sql = database_oid_sql()

    assert "ORDER BY datname = :db_name DESC" in sql
    assert sql.endswith("LIMIT 1")
