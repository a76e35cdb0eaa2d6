"""Editor workflow wiring the metadata components from configuration."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from ..adapters import read_raw_metadata
from ..metadata import (
    FieldFormatter,
    GeoCoordinate,
    MetadataExtractor,
    MetadataMutator,
    MetadataSnapshot,
    initialize_registry
)
from ..metadata.field_formatter import DEFAULT_MAX_DENOMINATOR
from ..metadata.mutator import DEFAULT_SOFTWARE

logger = logging.getLogger(__name__)

# Edit intents accepted by MetadataEditor.apply()
INTENTS = (
    'set-date', 'delete-date', 'set-gps', 'delete-gps', 'strip',
    'set-field', 'delete-field'
)


class MetadataEditor:
    """Load raw metadata, inspect it, and apply edit intents."""

    def __init__(self, config: Dict):
        """Initialize editor components.

        Args:
            config: Configuration dictionary

        Raises:
            SchemaUnavailableError: If the metadata schema cannot be loaded
        """
        self.config = config

        schema_path = config.get('schema', {}).get('path') or None
        self.registry = initialize_registry(schema_path)

        display_config = config.get('display', {})
        self.formatter = FieldFormatter(
            max_denominator=int(display_config.get('exposure_max_denominator', DEFAULT_MAX_DENOMINATOR)),
            sequence_separator=display_config.get('sequence_separator') or ""
        )

        mutation_config = config.get('mutation', {})
        self.extractor = MetadataExtractor(self.registry, self.formatter)
        self.mutator = MetadataMutator(
            self.registry,
            software=mutation_config.get('software') or DEFAULT_SOFTWARE
        )

        logger.info("Metadata editor initialized")

    @staticmethod
    def load(source: Path) -> Dict[str, Any]:
        """Load a raw metadata map from a JSON dump or an image file.

        Args:
            source: Path ending in .json, or any image Pillow can open

        Returns:
            Raw property map
        """
        source = Path(source)
        if source.suffix.lower() == '.json':
            with open(source, 'r', encoding='utf-8') as f:
                raw = json.load(f)
            if not isinstance(raw, dict):
                raise ValueError(f"Raw metadata dump must be a JSON object: {source}")
            logger.info(f"Loaded raw metadata dump: {source}")
            return raw

        raw = read_raw_metadata(source)
        logger.info(f"Read metadata from image: {source}")
        return raw

    @staticmethod
    def save(raw: Dict[str, Any], output: Optional[Path] = None) -> str:
        """Serialize a raw metadata map as JSON.

        Args:
            raw: Raw property map
            output: Destination file (None = return only)

        Returns:
            JSON text
        """
        text = json.dumps(raw, indent=2, ensure_ascii=False, default=str)
        if output:
            output = Path(output)
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(text + "\n", encoding='utf-8')
            logger.info(f"Wrote raw metadata to: {output}")
        return text

    def inspect(self, raw: Dict[str, Any]) -> Optional[MetadataSnapshot]:
        """Build the display snapshot for a raw map."""
        return self.extractor.extract(raw)

    def apply(
        self,
        raw: Dict[str, Any],
        intent: str,
        date: Optional[datetime] = None,
        coordinate: Optional[GeoCoordinate] = None,
        field: Optional[str] = None,
        value: Any = None
    ) -> Dict[str, Any]:
        """Apply one edit intent.

        Args:
            raw: Raw property map
            intent: One of INTENTS
            date: New timestamp for 'set-date'
            coordinate: New location for 'set-gps'
            field: Field key for 'set-field' and 'delete-field'
            value: New field value for 'set-field'

        Returns:
            Edited raw property map

        Raises:
            ValueError: If the intent is unknown, its argument is missing, or
                a field edit targets the timestamp or location
        """
        if intent == 'set-date':
            if date is None:
                raise ValueError("set-date requires a date")
            return self.mutator.set_timestamp(raw, date)
        elif intent == 'delete-date':
            return self.mutator.delete_timestamp(raw)
        elif intent == 'set-gps':
            if coordinate is None:
                raise ValueError("set-gps requires a coordinate")
            return self.mutator.set_gps(raw, coordinate)
        elif intent == 'delete-gps':
            return self.mutator.delete_gps(raw)
        elif intent == 'strip':
            return self.mutator.strip_all_except_orientation(raw)
        elif intent == 'set-field':
            if not field or value is None:
                raise ValueError("set-field requires a field and a value")
            return self.mutator.write_fields(raw, {field: value})
        elif intent == 'delete-field':
            if not field:
                raise ValueError("delete-field requires a field")
            return self.mutator.write_fields(raw, {field: None})

        raise ValueError(f"Unknown edit intent: {intent}")
