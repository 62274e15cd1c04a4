"""
=========================================
Random credential generation for owner roles.
=========================================

Produces the role names and passwords given to every provisioned database.
Both are embedded directly in DDL text, so the character sets are fixed:

    - Names: 8 lowercase ASCII letters (always a valid unquoted identifier)
    - Passwords: 12 characters from letters, digits and ``!$()-_~``
      (no quote or backslash can ever appear)

The random source is injected so tests can pass a seeded ``random.Random``.
The module-level default generator is seeded once from the current time.

Example:
    >>> import random
    >>> from credentials.generator import CredentialGenerator
    >>>
    >>> generator = CredentialGenerator(random.Random(42))
    >>> name = generator.generate_name()
    >>> password = generator.generate_password()
"""

import random
import string
import time
from typing import Optional

NAME_CHARSET = string.ascii_lowercase
PASSWORD_CHARSET = string.ascii_lowercase + string.ascii_uppercase + string.digits + '!$()-_~'

NAME_LENGTH = 8
PASSWORD_LENGTH = 12


class CredentialGenerator:
    """Generate owner role names and passwords from a random source.

    Attributes:
        rng: random.Random-compatible instance providing ``choice()``
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random(time.time_ns())

    def _string_with_charset(self, length: int, charset: str) -> str:
        return ''.join(self.rng.choice(charset) for _ in range(length))

    def generate_name(self) -> str:
        """Generate a role name of 8 lowercase letters."""
        return self._string_with_charset(NAME_LENGTH, NAME_CHARSET)

    def generate_password(self) -> str:
        """Generate a 12 character password from the password charset."""
        return self._string_with_charset(PASSWORD_LENGTH, PASSWORD_CHARSET)


# Process-wide generator, seeded once at import
default_generator = CredentialGenerator()


def generate_name() -> str:
    """Generate a role name using the process-wide generator."""
    return default_generator.generate_name()


def generate_password() -> str:
    """Generate a password using the process-wide generator."""
    return default_generator.generate_password()
