"""Pytest configuration and shared fixtures."""

import pytest
import tempfile
from datetime import datetime
from pathlib import Path

from src.metadata import MetadataExtractor, MetadataMutator, SchemaRegistry

FIXED_NOW = datetime(2025, 1, 2, 3, 4, 5)
FIXED_NOW_STR = '2025:01:02 03:04:05'


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config():
    """Provide a sample configuration for testing."""
    return {
        'schema': {
            'path': ''
        },
        'display': {
            'exposure_max_denominator': 10000,
            'sequence_separator': ''
        },
        'mutation': {
            'software': 'TestSoftware'
        },
        'logging': {
            'level': 'DEBUG',
            'file': '',
            'console_output': False
        }
    }


@pytest.fixture(scope='session')
def registry():
    """Registry loaded from the bundled schema resource."""
    return SchemaRegistry.load()


@pytest.fixture
def extractor(registry):
    return MetadataExtractor(registry)


@pytest.fixture
def mutator(registry):
    """Mutator with a fixed clock and software identifier."""
    return MetadataMutator(registry, software='TestSoftware', clock=lambda: FIXED_NOW)


@pytest.fixture
def sample_raw():
    """Provide a raw property map as an iPhone photo would decode."""
    return {
        'PixelWidth': 4032,
        'PixelHeight': 3024,
        'Orientation': 6,
        'CustomTopLevel': 'keep-me',
        '{Exif}': {
            'ExposureTime': 0.004,
            'FNumber': 2.8,
            'ISOSpeedRatings': [100],
            'FocalLength': 4.25,
            'FocalLenIn35mmFilm': 26,
            'LensModel': 'iPhone 15 back camera',
            'DateTimeOriginal': '2024:03:25 14:05:09',
            'SubjectArea': [2013, 1511, 2217, 1330],
            'UnknownTag': 'x'
        },
        '{TIFF}': {
            'Make': 'Apple',
            'Model': 'iPhone 15',
            'Software': '17.4',
            'DateTime': '2024:03:25 14:05:09'
        },
        '{GPS}': {
            'Latitude': 37.7,
            'LatitudeRef': 'S',
            'Longitude': 122.4,
            'LongitudeRef': 'W'
        }
    }


@pytest.fixture
def stamp_time():
    """The DateTime value the fixed-clock mutator stamps into {TIFF}."""
    return FIXED_NOW_STR
