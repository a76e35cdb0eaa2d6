"""Schema-driven image metadata extraction and editing."""

from .errors import (
    MetadataError,
    NonFiniteValueError,
    SchemaUnavailableError,
    UnsupportedFieldTypeError
)
from .extractor import MetadataExtractor, extract_metadata
from .field_formatter import FieldFormatter, format_field
from .models import GeoCoordinate, MetadataSnapshot
from .mutator import MetadataMutator
from .rational import Rational, approximate
from .schema_registry import (
    SchemaGroup,
    SchemaRegistry,
    get_registry,
    initialize_registry
)

__all__ = [
    'MetadataError',
    'NonFiniteValueError',
    'SchemaUnavailableError',
    'UnsupportedFieldTypeError',
    'MetadataExtractor',
    'extract_metadata',
    'FieldFormatter',
    'format_field',
    'GeoCoordinate',
    'MetadataSnapshot',
    'MetadataMutator',
    'Rational',
    'approximate',
    'SchemaGroup',
    'SchemaRegistry',
    'get_registry',
    'initialize_registry'
]
