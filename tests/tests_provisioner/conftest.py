"""
Shared fixtures and mocking helpers for provisioner tests.

Key fixtures:
- patch_create_engine: patches create_engine in provisioner.connection.
- seeded_generator: CredentialGenerator with a fixed seed.
- manager_factory: builds a DatabaseResourceManager with overridable settings.
"""

import random
from unittest.mock import patch

import pytest


@pytest.fixture
def patch_create_engine():
    """
    Patch sqlalchemy.create_engine as used by provisioner.connection.
    Tests set return_value to a FakeEngine.
    """
    with patch("provisioner.connection.create_engine") as mock_create_engine:
        yield mock_create_engine


@pytest.fixture
def seeded_generator():
    """Credential generator producing the same sequence on every run."""
    from credentials.generator import CredentialGenerator

    return CredentialGenerator(random.Random(1234))


@pytest.fixture
def expected_credentials():
    """The first (username, password) pair drawn from the seeded generator."""
    from credentials.generator import CredentialGenerator

    generator = CredentialGenerator(random.Random(1234))
    return generator.generate_name(), generator.generate_password()


@pytest.fixture
def manager_factory(seeded_generator):
    """
    Factory that creates a DatabaseResourceManager with default settings.
    Keyword overrides are applied to ProvisioningConfig.
    """
    from core.config import ProvisioningConfig
    from provisioner.database_resource import DatabaseResourceManager

    def factory(**overrides):
        return DatabaseResourceManager(
            settings=ProvisioningConfig(**overrides),
            generator=seeded_generator
        )

    return factory
