"""
===========================
Credential generation package.
===========================

Modules:
    generator: Random role names and passwords for database owners
"""

__version__ = "0.1.0"
__all__ = [
    'CredentialGenerator',
    'default_generator',
    'generate_name',
    'generate_password',
    'NAME_CHARSET',
    'PASSWORD_CHARSET',
    'NAME_LENGTH',
    'PASSWORD_LENGTH'
]

from .generator import (
    NAME_CHARSET,
    NAME_LENGTH,
    PASSWORD_CHARSET,
    PASSWORD_LENGTH,
    CredentialGenerator,
    default_generator,
    generate_name,
    generate_password,
)
