"""Unit tests for schema registry."""

import dataclasses

import pytest

from src.metadata import schema_registry
from src.metadata.errors import SchemaUnavailableError
from src.metadata.schema_registry import (
    GROUP_NAMES,
    SchemaGroup,
    SchemaRegistry,
    get_registry,
    initialize_registry
)

VALID_SCHEMA = """\
Rights: [Artist]
Device: [Make, Model]
Image: [PixelWidth]
Shooting: [FNumber, ExposureTime]
TimestampKey: DateTimeOriginal
"""


@pytest.fixture
def schema_file(tmp_path):
    """Write a schema resource and return its path."""
    def write(content: str):
        path = tmp_path / "schema.yaml"
        path.write_text(content, encoding='utf-8')
        return path
    return write


@pytest.fixture
def fresh_registry(monkeypatch):
    """Reset the process-wide registry for the duration of a test."""
    monkeypatch.setattr(schema_registry, '_registry', None)


class TestSchemaRegistry:
    """Test cases for SchemaRegistry class."""

    def test_load_bundled_schema(self):
        """Test the bundled resource loads with all four groups."""
        registry = SchemaRegistry.load()

        assert tuple(g.name for g in registry.groups) == GROUP_NAMES
        assert registry.timestamp_key == 'DateTimeOriginal'
        assert 'ExposureTime' in registry.groups[1].keys
        assert 'Location' in registry.all_keys()

    def test_group_order_is_fixed(self, schema_file):
        """Test groups come out in display order, not resource order."""
        registry = SchemaRegistry.load(schema_file(VALID_SCHEMA))

        assert [g.name for g in registry.groups] == ['Device', 'Shooting', 'Image', 'Rights']
        assert registry.groups[1] == SchemaGroup('Shooting', ('FNumber', 'ExposureTime'))
        assert registry.all_keys() == (
            'Make', 'Model', 'FNumber', 'ExposureTime', 'PixelWidth', 'Artist'
        )

    def test_null_timestamp_key(self, schema_file):
        """Test a null timestamp entry yields no timestamp key."""
        content = VALID_SCHEMA.replace('TimestampKey: DateTimeOriginal', 'TimestampKey: null')
        registry = SchemaRegistry.load(schema_file(content))

        assert registry.timestamp_key is None

    def test_missing_file(self, tmp_path):
        """Test a missing resource raises SchemaUnavailableError."""
        with pytest.raises(SchemaUnavailableError):
            SchemaRegistry.load(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, schema_file):
        """Test a YAML syntax error raises SchemaUnavailableError."""
        with pytest.raises(SchemaUnavailableError):
            SchemaRegistry.load(schema_file("Device: [Make, Model\n"))

    @pytest.mark.parametrize('content', [
        "",
        "- just\n- a list\n",
        VALID_SCHEMA.replace('Rights: [Artist]\n', ''),
        VALID_SCHEMA.replace('TimestampKey: DateTimeOriginal\n', ''),
        VALID_SCHEMA + "Extra: [Foo]\n",
        VALID_SCHEMA.replace('[Make, Model]', '[Make, 42]'),
        VALID_SCHEMA.replace('[Artist]', 'Artist'),
        VALID_SCHEMA.replace('TimestampKey: DateTimeOriginal', 'TimestampKey: [a]'),
    ])
    def test_malformed_schema(self, schema_file, content):
        """Test documents not matching the five-entry layout are rejected."""
        with pytest.raises(SchemaUnavailableError):
            SchemaRegistry.load(schema_file(content))

    def test_from_dict(self):
        """Test building a registry from a parsed document."""
        registry = SchemaRegistry.from_dict({
            'Device': ['Make'],
            'Shooting': [],
            'Image': [],
            'Rights': ['Copyright'],
            'TimestampKey': 'DateTimeOriginal'
        })

        assert registry.groups[0].keys == ('Make',)
        assert registry.groups[1].keys == ()

    def test_groups_are_immutable(self):
        """Test loaded groups cannot be modified."""
        registry = SchemaRegistry.load()

        assert isinstance(registry.groups, tuple)
        with pytest.raises(dataclasses.FrozenInstanceError):
            registry.groups[0].name = 'Changed'


class TestProcessWideRegistry:
    """Test cases for the cached process-wide registry."""

    def test_initialize_once(self, fresh_registry):
        """Test the registry is loaded once and then shared."""
        first = initialize_registry()
        second = initialize_registry()

        assert first is second
        assert get_registry() is first

    def test_get_registry_lazy_load(self, fresh_registry):
        """Test get_registry loads the bundled schema on first use."""
        registry = get_registry()

        assert registry.timestamp_key == 'DateTimeOriginal'
        assert get_registry() is registry

    def test_failure_not_cached(self, fresh_registry, tmp_path):
        """Test a failed load can be retried."""
        with pytest.raises(SchemaUnavailableError):
            initialize_registry(tmp_path / "missing.yaml")

        assert schema_registry._registry is None
        assert initialize_registry().timestamp_key == 'DateTimeOriginal'

    def test_path_ignored_after_initialization(self, fresh_registry, schema_file):
        """Test a later path does not replace the published registry."""
        first = initialize_registry()
        second = initialize_registry(schema_file(VALID_SCHEMA))

        assert second is first
