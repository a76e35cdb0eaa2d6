"""Schema registry mapping display groups to raw field keys."""

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union
import logging

import jsonschema
import yaml

from .errors import SchemaUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).parent / 'resources' / 'metadata_schema.yaml'

# Display order of groups, independent of the order in the resource
GROUP_NAMES = ('Device', 'Shooting', 'Image', 'Rights')
TIMESTAMP_ENTRY = 'TimestampKey'

_FIELD_LIST = {
    'type': 'array',
    'items': {'type': 'string', 'minLength': 1},
}

RESOURCE_SCHEMA = {
    'type': 'object',
    'properties': {
        **{name: _FIELD_LIST for name in GROUP_NAMES},
        TIMESTAMP_ENTRY: {'type': ['string', 'null']},
    },
    'required': [*GROUP_NAMES, TIMESTAMP_ENTRY],
    'additionalProperties': False,
}


@dataclass(frozen=True)
class SchemaGroup:
    """A named, ordered bundle of raw field keys."""

    name: str
    keys: Tuple[str, ...]


class SchemaRegistry:
    """Immutable view of the loaded field-group schema."""

    def __init__(self, groups: Tuple[SchemaGroup, ...], timestamp_key: Optional[str]):
        self._groups = tuple(groups)
        self._timestamp_key = timestamp_key

    @property
    def groups(self) -> Tuple[SchemaGroup, ...]:
        return self._groups

    @property
    def timestamp_key(self) -> Optional[str]:
        return self._timestamp_key

    def all_keys(self) -> Tuple[str, ...]:
        """Every field key named by any group, in display order."""
        return tuple(key for group in self._groups for key in group.keys)

    @classmethod
    def from_dict(cls, document) -> 'SchemaRegistry':
        """Build a registry from an already parsed resource document.

        Raises:
            SchemaUnavailableError: If the document does not match the
                expected five-entry layout
        """
        try:
            jsonschema.validate(instance=document, schema=RESOURCE_SCHEMA)
        except jsonschema.ValidationError as e:
            raise SchemaUnavailableError(f"Invalid metadata schema: {e.message}") from e

        groups = tuple(
            SchemaGroup(name=name, keys=tuple(document[name]))
            for name in GROUP_NAMES
        )
        return cls(groups, document[TIMESTAMP_ENTRY])

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> 'SchemaRegistry':
        """Load the schema resource from disk.

        Args:
            path: Resource path (defaults to the bundled schema)

        Returns:
            Loaded registry

        Raises:
            SchemaUnavailableError: If the resource is missing, unreadable,
                or malformed
        """
        schema_path = Path(path) if path else DEFAULT_SCHEMA_PATH

        try:
            with open(schema_path, 'r', encoding='utf-8') as f:
                document = yaml.safe_load(f)
        except OSError as e:
            raise SchemaUnavailableError(
                f"Metadata schema not readable: {schema_path} ({e})"
            ) from e
        except yaml.YAMLError as e:
            raise SchemaUnavailableError(
                f"Metadata schema is not valid YAML: {schema_path} ({e})"
            ) from e

        registry = cls.from_dict(document)
        logger.info(
            f"Metadata schema loaded from {schema_path}: "
            f"{len(registry.all_keys())} fields in {len(registry.groups)} groups"
        )
        return registry


_registry: Optional[SchemaRegistry] = None
_registry_lock = threading.Lock()


def initialize_registry(path: Optional[Union[str, Path]] = None) -> SchemaRegistry:
    """Load and publish the process-wide registry.

    Only the first successful call loads anything; later calls return the
    published instance. Failed loads are not cached.

    Raises:
        SchemaUnavailableError: If the resource cannot be loaded
    """
    global _registry

    with _registry_lock:
        if _registry is None:
            _registry = SchemaRegistry.load(path)
        elif path is not None:
            logger.debug(f"Metadata schema already initialized, ignoring {path}")
        return _registry


def get_registry() -> SchemaRegistry:
    """Return the process-wide registry, loading the bundled schema on first use.

    Raises:
        SchemaUnavailableError: If the resource cannot be loaded
    """
    registry = _registry
    if registry is not None:
        return registry
    return initialize_registry()
