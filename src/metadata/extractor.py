"""Build grouped, display-ready snapshots from raw property maps."""

import copy
from collections.abc import Mapping
from typing import Any, List, Optional, Tuple
import logging

from . import keys
from .date_format import to_display_date
from .errors import MetadataError, SchemaUnavailableError
from .field_formatter import FieldFormatter
from .models import GeoCoordinate, GroupedMetadata, MetadataSnapshot, RawMetadataMap
from .schema_registry import SchemaRegistry, get_registry

logger = logging.getLogger(__name__)

_MISSING = object()


def _sub_map(raw: Mapping, namespace: str) -> Mapping:
    value = raw.get(namespace)
    return value if isinstance(value, Mapping) else {}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class MetadataExtractor:
    """Turn a raw property map into a MetadataSnapshot."""

    def __init__(
        self,
        registry: Optional[SchemaRegistry] = None,
        formatter: Optional[FieldFormatter] = None
    ):
        """Initialize extractor.

        Args:
            registry: Schema registry (defaults to the process-wide one,
                resolved on each extraction until it loads)
            formatter: Field formatter (defaults to standard settings)
        """
        self._registry = registry
        self.formatter = formatter or FieldFormatter()

    def _resolve_registry(self) -> Optional[SchemaRegistry]:
        if self._registry is not None:
            return self._registry
        try:
            return get_registry()
        except SchemaUnavailableError as e:
            logger.error(f"Cannot extract metadata without a schema: {e}")
            return None

    def extract(self, raw: RawMetadataMap) -> Optional[MetadataSnapshot]:
        """Extract a snapshot from a raw property map.

        Args:
            raw: Raw property map (not modified)

        Returns:
            MetadataSnapshot, or None if the schema could not be loaded
        """
        registry = self._resolve_registry()
        if registry is None:
            return None

        coordinate = self.extract_coordinate(raw)
        grouped = self._build_groups(raw, registry, coordinate)
        timestamp = self.extract_timestamp(raw, registry.timestamp_key)

        logger.debug(
            f"Extracted {sum(len(fields) for _, fields in grouped)} fields "
            f"in {len(grouped)} groups (timestamp: {timestamp is not None}, "
            f"coordinate: {coordinate is not None})"
        )

        return MetadataSnapshot(
            grouped_metadata=grouped,
            timestamp=timestamp,
            coordinate=coordinate,
            raw=copy.deepcopy(dict(raw))
        )

    @staticmethod
    def lookup(raw: Mapping, key: str) -> Any:
        """Find a field at the top level, then in {Exif}, then in {TIFF}.

        Returns:
            The first match, or a private sentinel when absent
        """
        for source in (raw, _sub_map(raw, keys.EXIF_DICT), _sub_map(raw, keys.TIFF_DICT)):
            if key in source:
                return source[key]
        return _MISSING

    def _build_groups(
        self,
        raw: Mapping,
        registry: SchemaRegistry,
        coordinate: Optional[GeoCoordinate]
    ) -> GroupedMetadata:
        grouped: List[Tuple[str, Tuple[Tuple[str, str], ...]]] = []

        for group in registry.groups:
            fields: List[Tuple[str, str]] = []

            for key in group.keys:
                if key == keys.LOCATION:
                    if coordinate is not None:
                        fields.append((key, self.formatter.format_coordinate(coordinate)))
                    continue

                value = self.lookup(raw, key)
                if value is _MISSING:
                    continue

                try:
                    fields.append((key, self.formatter.format(key, value)))
                except MetadataError as e:
                    # Field-local failure, the rest of the snapshot is kept
                    logger.debug(f"Skipping field {key}: {e}")

            if fields:
                grouped.append((group.name, tuple(fields)))

        return tuple(grouped)

    @staticmethod
    def extract_timestamp(raw: Mapping, timestamp_key: Optional[str]) -> Optional[str]:
        """Read the timestamp from {Exif} and reformat it for display."""
        if not timestamp_key:
            return None

        value = _sub_map(raw, keys.EXIF_DICT).get(timestamp_key)
        if value is None:
            return None
        if not isinstance(value, str):
            logger.debug(f"Ignoring non-string timestamp {timestamp_key}: {type(value).__name__}")
            return None

        return to_display_date(value)

    @staticmethod
    def extract_coordinate(raw: Mapping) -> Optional[GeoCoordinate]:
        """Decode the {GPS} sub-map into a signed coordinate.

        Returns:
            GeoCoordinate, or None unless all four components are present
            and correctly typed
        """
        gps = _sub_map(raw, keys.GPS_DICT)
        latitude = gps.get(keys.GPS_LATITUDE)
        latitude_ref = gps.get(keys.GPS_LATITUDE_REF)
        longitude = gps.get(keys.GPS_LONGITUDE)
        longitude_ref = gps.get(keys.GPS_LONGITUDE_REF)

        if not (_is_number(latitude) and _is_number(longitude)):
            return None
        if not (isinstance(latitude_ref, str) and isinstance(longitude_ref, str)):
            return None

        signed_latitude = -latitude if latitude_ref.strip().upper() == 'S' else latitude
        signed_longitude = longitude if longitude_ref.strip().upper() == 'E' else -longitude

        try:
            return GeoCoordinate(float(signed_latitude), float(signed_longitude))
        except ValueError as e:
            logger.debug(f"Ignoring out-of-range GPS data: {e}")
            return None


def extract_metadata(raw: RawMetadataMap) -> Optional[MetadataSnapshot]:
    """Extract a snapshot using the process-wide schema registry."""
    return MetadataExtractor().extract(raw)
