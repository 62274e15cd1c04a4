"""
========================================
Resource models for pgmulti
========================================

Data models shared by the provisioner, the utilities and the CLI.

Modules:
    resource_models: Connection parameters, the database resource and its
        attribute schema

Example:
    >>> from models import ConnectionParams, DatabaseResource
    >>>
    >>> params = ConnectionParams('localhost', 5432, 'root', '12345')
    >>> resource = DatabaseResource(db_name='test_db')
"""

__version__ = "0.1.0"
__all__ = [
    'ADMIN_DATABASE',
    'AttributeSpec',
    'ConnectionParams',
    'DatabaseResource',
    'DB_RESOURCE_SCHEMA',
    'InvalidAttributesError',
    'RESOURCE_DESCRIPTION',
    'RESOURCE_TYPE_NAME',
    'redact_attributes',
    'requires_replacement',
    'validate_attributes',
]

from .resource_models import (
    ADMIN_DATABASE,
    DB_RESOURCE_SCHEMA,
    RESOURCE_DESCRIPTION,
    RESOURCE_TYPE_NAME,
    AttributeSpec,
    ConnectionParams,
    DatabaseResource,
    InvalidAttributesError,
    redact_attributes,
    requires_replacement,
    validate_attributes,
)
