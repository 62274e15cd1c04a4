"""
Shared pytest configuration and fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path to enable importing project modules
# This allows tests to import from 'provisioner', 'core', 'sql', etc. without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests - isolated function-level tests")
    config.addinivalue_line("markers", "integration: Integration tests - require a live PostgreSQL server")
    config.addinivalue_line("markers", "smoke: Smoke tests - basic functionality checks")
    config.addinivalue_line("markers", "edge_case: Edge case tests - boundary conditions")


@pytest.fixture
def admin_params():
    """Administrative connection parameters used by unit tests."""
    from models import ConnectionParams

    return ConnectionParams(
        hostname='localhost',
        port=5432,
        admin_username='root',
        admin_password='12345'
    )


@pytest.fixture
def planned_attributes():
    """Planned attribute map for a create operation."""
    return {
        'hostname': 'localhost',
        'port': 5432,
        'master_username': 'root',
        'master_password': '12345',
        'db_name': 'test_db'
    }
