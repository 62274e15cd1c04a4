"""
==========================================
Configuration management for pgmulti.
==========================================

Loads all configuration from environment variables (.env file) and provides
a centralized Config singleton for application-wide access.

The configuration covers two concerns:
- The default administrative connection used by the CLI and integration tests
- Provisioning policy: database encoding/collation, tablespace, connection
  limit, and the cleanup policies applied on failure and on delete

Example:
    >>> from core.config import config
    >>>
    >>> # Default admin connection
    >>> print(f"Host: {config.db_host}, Port: {config.db_port}")
    >>>
    >>> # Provisioning policy
    >>> print(config.provisioning.lc_collate)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment.

    Accepts 1/true/yes/on (case-insensitive) as True; anything else is False.
    """
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return None
    return int(value)


@dataclass
class AdminConnectionConfig:
    """Default administrative connection settings.

    Attributes:
        host: PostgreSQL server hostname or IP address
        port: PostgreSQL server port number
        user: Administrative (master) username
        password: Administrative (master) password
    """

    host: str
    port: int
    user: str
    password: str

    def get_connection_params(self) -> dict:
        """Get connection parameters as a resource attribute dictionary.

        Returns:
            Dictionary with keys: hostname, port, master_username, master_password
        """
        return {
            'hostname': self.host,
            'port': self.port,
            'master_username': self.user,
            'master_password': self.password
        }


@dataclass
class ProvisioningConfig:
    """Settings applied when databases are created and deleted.

    Attributes:
        encoding: Character encoding of created databases
        lc_collate: Collation order of created databases
        lc_ctype: Character classification of created databases
        tablespace: Tablespace for created databases
        connection_limit: Connection limit (-1 means unlimited)
        connect_timeout: Optional connect timeout in seconds (None uses driver default)
        rollback_role_on_failure: Drop the generated role if CREATE DATABASE fails
        drop_owner_on_delete: Drop the owning role after DROP DATABASE
    """

    encoding: str = 'UTF8'
    lc_collate: str = 'en_US.utf8'
    lc_ctype: str = 'en_US.utf8'
    tablespace: str = 'pg_default'
    connection_limit: int = -1
    connect_timeout: Optional[int] = None
    rollback_role_on_failure: bool = True
    drop_owner_on_delete: bool = False


class Config:
    """Centralized configuration manager.

    Provides access to all configuration settings loaded from environment
    variables (.env file).

    Attributes:
        db: AdminConnectionConfig with the default admin connection
        provisioning: ProvisioningConfig with database creation settings
        log_level: Default logging level name
        log_file: Optional path of a log file (console only when unset)

    Example:
        >>> config = Config()
        >>> print(f"Connecting to {config.db_host}:{config.db_port}")
    """

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.db = AdminConnectionConfig(
            host=os.getenv('PGMULTI_HOST', 'localhost'),
            port=int(os.getenv('PGMULTI_PORT', '5432')),
            user=os.getenv('PGMULTI_MASTER_USERNAME', 'postgres'),
            password=os.getenv('PGMULTI_MASTER_PASSWORD', '')
        )

        self.provisioning = ProvisioningConfig(
            encoding=os.getenv('PGMULTI_ENCODING', 'UTF8'),
            lc_collate=os.getenv('PGMULTI_LC_COLLATE', 'en_US.utf8'),
            lc_ctype=os.getenv('PGMULTI_LC_CTYPE', 'en_US.utf8'),
            tablespace=os.getenv('PGMULTI_TABLESPACE', 'pg_default'),
            connection_limit=int(os.getenv('PGMULTI_CONNECTION_LIMIT', '-1')),
            connect_timeout=_env_optional_int('PGMULTI_CONNECT_TIMEOUT'),
            rollback_role_on_failure=_env_bool('PGMULTI_ROLLBACK_ROLE_ON_FAILURE', True),
            drop_owner_on_delete=_env_bool('PGMULTI_DROP_OWNER_ON_DELETE', False)
        )

        self.log_level = os.getenv('PGMULTI_LOG_LEVEL', 'INFO')
        self.log_file = os.getenv('PGMULTI_LOG_FILE') or None

    @property
    def db_host(self) -> str:
        """Get database server hostname."""
        return self.db.host

    @property
    def db_port(self) -> int:
        """Get database server port number."""
        return self.db.port

    @property
    def db_user(self) -> str:
        """Get administrative username."""
        return self.db.user

    @property
    def db_password(self) -> str:
        """Get administrative password."""
        return self.db.password

    def get_connection_params(self) -> dict:
        """Get the default admin connection as resource attributes.

        Returns:
            Dictionary with keys: hostname, port, master_username, master_password

        Example:
            >>> config = Config()
            >>> attrs = {**config.get_connection_params(), 'db_name': 'app_db'}
        """
        return self.db.get_connection_params()


# Global configuration instance
config = Config()
