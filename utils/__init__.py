"""
==========================
Utility Functions Package.
==========================

Reusable helpers for server availability and post-provisioning checks.

Modules:
    database_utils: PostgreSQL connectivity and verification helpers
"""

__version__ = "0.1.0"
__all__ = [
    'DatabaseUnavailableError',
    'check_database_available',
    'wait_for_database',
    'verify_database_exists',
    'verify_role_exists',
    'get_database_owner',
    'verify_owner_access'
]

from .database_utils import (
    DatabaseUnavailableError,
    check_database_available,
    get_database_owner,
    verify_database_exists,
    verify_owner_access,
    verify_role_exists,
    wait_for_database,
)
