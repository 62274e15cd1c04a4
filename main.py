"""
=========================================================
Command-line entry point for the pgmulti provider.
=========================================================

Thin CLI through which an orchestration engine (or an operator) drives the
``pgmulti_db`` resource. Attributes are exchanged as JSON objects using the
resource's attribute names:

    inputs:  hostname, port, master_username, master_password, db_name
    outputs: db_username, db_password, id

Usage:
    # Provision a database
    echo '{"hostname": "localhost", "port": 5432, "master_username": "root",
           "master_password": "12345", "db_name": "test_db"}' | python main.py create

    # Refresh / update / destroy, passing the prior state
    python main.py read --attrs-file state.json
    python main.py update --attrs-file planned.json --prior "$(cat state.json)"
    python main.py delete --attrs-file state.json

    # Check the owner can use its database
    python main.py verify --attrs-file state.json

    # Print provider metadata and the resource schema
    python main.py schema

Exit Codes:
    0: Success
    1: Provisioning error
    2: Invalid input
    130: User interrupt (Ctrl+C)
"""

import argparse
import json
import sys
from typing import Any, Dict, Mapping, Optional

from core.config import config
from core.logger import get_logger, setup_logging
from models import (
    DB_RESOURCE_SCHEMA,
    RESOURCE_DESCRIPTION,
    RESOURCE_TYPE_NAME,
    ConnectionParams,
    DatabaseResource,
    InvalidAttributesError,
    redact_attributes,
    requires_replacement,
)
from provisioner import DatabaseResourceManager, ProvisionerError
from sql.ddl import fold_identifier
from utils.database_utils import verify_database_exists, verify_owner_access

logger = get_logger(__name__)

PROVIDER_NAME = 'pgmulti'
PROVIDER_VERSION = '0.1'


class PgmultiProvider:
    """
    Provider facade mapping attribute maps onto DatabaseResourceManager calls.

    Attributes:
        manager: DatabaseResourceManager performing the SQL work

    Example:
        >>> provider = PgmultiProvider()
        >>> state = provider.create({
        ...     'hostname': 'localhost', 'port': 5432,
        ...     'master_username': 'root', 'master_password': '12345',
        ...     'db_name': 'test_db'
        ... })
        >>> state['id']
    """

    def __init__(self, manager: Optional[DatabaseResourceManager] = None):
        self.manager = manager or DatabaseResourceManager()

    @property
    def type_name(self) -> str:
        return f"{PROVIDER_NAME}_{RESOURCE_TYPE_NAME}"

    def metadata(self) -> Dict[str, Any]:
        """Provider name, version and the resource types it serves."""
        return {
            'name': PROVIDER_NAME,
            'version': PROVIDER_VERSION,
            'resources': [self.type_name],
            'data_sources': []
        }

    def schema(self) -> Dict[str, Any]:
        """Schema of the database resource."""
        return {
            'type_name': self.type_name,
            'description': RESOURCE_DESCRIPTION,
            'attributes': {name: spec.to_dict() for name, spec in DB_RESOURCE_SCHEMA.items()}
        }

    def create(self, attrs: Mapping[str, Any]) -> Dict[str, Any]:
        """Create the database described by the planned attributes."""
        params = ConnectionParams.from_attributes(attrs)
        planned = DatabaseResource.from_attributes(attrs)
        logger.debug(f"Create {self.type_name}: {redact_attributes(attrs)}")

        resource = self.manager.create(params, planned.db_name)
        return resource.to_attributes(params)

    def read(self, attrs: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Refresh prior state; None means the database no longer exists."""
        params = ConnectionParams.from_attributes(attrs)
        prior = DatabaseResource.from_attributes(attrs)

        resource = self.manager.read(params, prior)
        if resource is None:
            return None
        return resource.to_attributes(params)

    def update(
        self,
        attrs: Mapping[str, Any],
        prior_attrs: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """Apply planned attributes without touching the database.

        Computed attributes are carried over from the prior state when given,
        otherwise from ``attrs`` itself.

        Raises:
            InvalidAttributesError: If the change requires replacement
        """
        if prior_attrs is not None and requires_replacement(prior_attrs, attrs):
            raise InvalidAttributesError(
                ["'db_name' cannot be updated in place; the resource must be replaced"]
            )

        params = ConnectionParams.from_attributes(attrs)
        prior = DatabaseResource.from_attributes(prior_attrs if prior_attrs is not None else attrs)

        resource = self.manager.update(params, prior, DatabaseResource.from_attributes(attrs))
        return resource.to_attributes(params)

    def delete(self, attrs: Mapping[str, Any]) -> None:
        """Drop the database recorded in the prior state."""
        params = ConnectionParams.from_attributes(attrs)
        self.manager.delete(params, DatabaseResource.from_attributes(attrs))

    def verify(self, attrs: Mapping[str, Any]) -> Dict[str, Any]:
        """Check the database exists and its owner can create a table in it."""
        params = ConnectionParams.from_attributes(attrs)
        resource = DatabaseResource.from_attributes(attrs)

        exists = verify_database_exists(params, fold_identifier(resource.db_name))
        if not exists:
            return {'exists': False, 'owner_access': False,
                    'message': f"Database {resource.db_name} does not exist"}

        success, message = verify_owner_access(params, resource)
        return {'exists': True, 'owner_access': success, 'message': message}


def _load_attributes(raw: Optional[str], path: Optional[str]) -> Dict[str, Any]:
    if path:
        try:
            with open(path, encoding='utf-8') as f:
                raw = f.read()
        except OSError as e:
            raise InvalidAttributesError([f"cannot read attributes file {path}: {e.strerror}"])
    elif raw is None:
        raw = sys.stdin.read()

    try:
        attrs = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidAttributesError([f"attributes are not valid JSON: {e}"])

    if not isinstance(attrs, dict):
        raise InvalidAttributesError(["attributes must be a JSON object"])
    return attrs


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def main(argv: Optional[list] = None, provider: Optional[PgmultiProvider] = None) -> int:
    """
    Command-line interface for the pgmulti provider.

    Args:
        argv: Argument list (defaults to sys.argv[1:])
        provider: Provider instance (built on demand)

    Returns:
        Process exit code
    """
    parser = argparse.ArgumentParser(
        prog=PROVIDER_NAME,
        description="pgmulti - provision isolated PostgreSQL databases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create a database (attributes on stdin)
  python main.py create < planned.json

  # Refresh prior state
  python main.py read --attrs-file state.json

  # Destroy
  python main.py delete --attrs-file state.json
        """
    )

    parser.add_argument(
        'operation',
        choices=['create', 'read', 'update', 'delete', 'verify', 'schema'],
        help='Resource operation to run'
    )
    parser.add_argument(
        '--attrs',
        type=str,
        default=None,
        help='Resource attributes as a JSON object (default: read from stdin)'
    )
    parser.add_argument(
        '--attrs-file',
        type=str,
        default=None,
        help='Path to a JSON file holding the resource attributes'
    )
    parser.add_argument(
        '--prior',
        type=str,
        default=None,
        help='Prior state as a JSON object (update only)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging (DEBUG level)'
    )

    args = parser.parse_args(argv)

    setup_logging(
        log_level='DEBUG' if args.verbose else config.log_level,
        log_file=config.log_file
    )

    try:
        provider = provider or PgmultiProvider()

        if args.operation == 'schema':
            _emit({'provider': provider.metadata(), 'resource': provider.schema()})
            return 0

        attrs = _load_attributes(args.attrs, args.attrs_file)

        if args.operation == 'create':
            _emit(provider.create(attrs))
        elif args.operation == 'read':
            _emit(provider.read(attrs))
        elif args.operation == 'update':
            prior = _load_attributes(args.prior, None) if args.prior is not None else None
            _emit(provider.update(attrs, prior))
        elif args.operation == 'delete':
            provider.delete(attrs)
            _emit(None)
        elif args.operation == 'verify':
            result = provider.verify(attrs)
            _emit(result)
            return 0 if result['owner_access'] else 1

        return 0

    except InvalidAttributesError as e:
        logger.error(f"❌ {e}")
        _emit({'error': type(e).__name__, 'message': str(e), 'details': {'errors': e.errors}})
        return 2
    except ProvisionerError as e:
        logger.error(f"❌ {args.operation} failed: {e.message}")
        _emit(e.to_dict())
        return 1
    except KeyboardInterrupt:
        logger.warning("⚠️  Operation interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"❌ Unexpected error: {e}", exc_info=True)
        _emit({'error': type(e).__name__, 'message': str(e), 'details': {}})
        return 1


if __name__ == '__main__':
    sys.exit(main())
