"""Adapters between image files and raw metadata maps."""

from .pillow_reader import read_raw_metadata

__all__ = [
    'read_raw_metadata'
]
