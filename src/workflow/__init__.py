"""Metadata editing workflow."""

from .metadata_editor import MetadataEditor, INTENTS

__all__ = [
    'MetadataEditor',
    'INTENTS'
]
