"""Non-destructive edits of raw property maps.

Every operation returns a new map. Keys an operation does not target are
carried over untouched, apart from the Software and DateTime entries of the
{TIFF} sub-map, which are re-stamped whenever an edit is applied.
"""

import copy
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Dict, Optional
import logging

from . import keys
from .date_format import format_exif_datetime
from .errors import SchemaUnavailableError
from .models import GeoCoordinate, RawMetadataMap
from .schema_registry import SchemaRegistry, get_registry

logger = logging.getLogger(__name__)

DEFAULT_SOFTWARE = 'PhotoMetaEditor'


def _copy(raw: Mapping) -> Dict[str, Any]:
    return copy.deepcopy(dict(raw))


def _editable_sub_map(props: Dict[str, Any], namespace: str) -> Dict[str, Any]:
    """Return a writable sub-map of props, replacing absent or non-mapping values."""
    current = props.get(namespace)
    sub_map = dict(current) if isinstance(current, Mapping) else {}
    props[namespace] = sub_map
    return sub_map


def _write_entry(props: Dict[str, Any], namespace: str, key: str, value: Any) -> bool:
    """Set (or, for None, delete) props[namespace][key]; True if it changed."""
    current = props.get(namespace)
    present = isinstance(current, Mapping) and key in current

    if value is None:
        if not present:
            return False
        del _editable_sub_map(props, namespace)[key]
        return True

    if present and current[key] == value:
        return False
    _editable_sub_map(props, namespace)[key] = copy.deepcopy(value)
    return True


def make_gps_dict(coordinate: GeoCoordinate) -> Dict[str, Any]:
    """Build a {GPS} sub-map of magnitudes and hemisphere references."""
    return {
        keys.GPS_LATITUDE_REF: 'S' if coordinate.latitude < 0 else 'N',
        keys.GPS_LATITUDE: abs(coordinate.latitude),
        keys.GPS_LONGITUDE_REF: 'W' if coordinate.longitude < 0 else 'E',
        keys.GPS_LONGITUDE: abs(coordinate.longitude),
    }


class MetadataMutator:
    """Produce edited copies of raw property maps."""

    def __init__(
        self,
        registry: Optional[SchemaRegistry] = None,
        software: str = DEFAULT_SOFTWARE,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """Initialize mutator.

        Args:
            registry: Schema registry providing the timestamp key (defaults
                to the process-wide one)
            software: Identifier stamped into {TIFF}.Software
            clock: Returns the current time for {TIFF}.DateTime
        """
        self._registry = registry
        self.software = software
        self.clock = clock or datetime.now

    def _timestamp_key(self) -> Optional[str]:
        registry = self._registry
        if registry is None:
            try:
                registry = get_registry()
            except SchemaUnavailableError as e:
                logger.warning(f"Metadata schema unavailable: {e}")
                return None
        return registry.timestamp_key

    def stamp_tiff(self, raw: RawMetadataMap) -> RawMetadataMap:
        """Set the software identifier and modification time in {TIFF}."""
        props = _copy(raw)
        tiff = _editable_sub_map(props, keys.TIFF_DICT)
        tiff[keys.SOFTWARE] = self.software
        tiff[keys.DATE_TIME] = format_exif_datetime(self.clock())
        return props

    def set_timestamp(self, raw: RawMetadataMap, date: datetime) -> RawMetadataMap:
        """Write the capture timestamp into {Exif}."""
        timestamp_key = self._timestamp_key()
        if not timestamp_key:
            logger.warning("Timestamp edit skipped, no timestamp key available")
            return _copy(raw)

        props = _copy(raw)
        exif = _editable_sub_map(props, keys.EXIF_DICT)
        exif[timestamp_key] = format_exif_datetime(date)
        logger.debug(f"Set {timestamp_key} to {exif[timestamp_key]}")
        return self.stamp_tiff(props)

    def delete_timestamp(self, raw: RawMetadataMap) -> RawMetadataMap:
        """Remove the capture timestamp from {Exif}, if there is one."""
        timestamp_key = self._timestamp_key()
        if not timestamp_key:
            logger.warning("Timestamp edit skipped, no timestamp key available")
            return _copy(raw)

        exif = raw.get(keys.EXIF_DICT)
        if not isinstance(exif, Mapping) or timestamp_key not in exif:
            return _copy(raw)

        props = _copy(raw)
        del _editable_sub_map(props, keys.EXIF_DICT)[timestamp_key]
        logger.debug(f"Deleted {timestamp_key}")
        return self.stamp_tiff(props)

    def set_gps(self, raw: RawMetadataMap, coordinate: GeoCoordinate) -> RawMetadataMap:
        """Replace the whole {GPS} sub-map with one derived from coordinate."""
        props = _copy(raw)
        props[keys.GPS_DICT] = make_gps_dict(coordinate)
        logger.debug(f"Set GPS to {coordinate.latitude}, {coordinate.longitude}")
        return self.stamp_tiff(props)

    def delete_gps(self, raw: RawMetadataMap) -> RawMetadataMap:
        """Remove the {GPS} sub-map, if there is one."""
        if keys.GPS_DICT not in raw:
            return _copy(raw)

        props = _copy(raw)
        del props[keys.GPS_DICT]
        logger.debug("Deleted GPS")
        return self.stamp_tiff(props)

    def strip_all_except_orientation(self, raw: RawMetadataMap) -> RawMetadataMap:
        """Discard every field except the top-level orientation."""
        props: Dict[str, Any] = {}
        if keys.ORIENTATION in raw:
            props[keys.ORIENTATION] = copy.deepcopy(raw[keys.ORIENTATION])
        logger.debug(f"Stripped {len(raw) - len(props)} top-level entries")
        return self.stamp_tiff(props)

    def write_fields(self, raw: RawMetadataMap, updates: Mapping) -> RawMetadataMap:
        """Apply a batch of plain field edits.

        TIFF keys (Make, Model, Artist, ...) are written to {TIFF}, everything
        else to {Exif}. Artist and Copyright are mirrored into {IPTC}
        (By-line, CopyrightNotice). A value of None deletes the field and its
        mirrors.

        Args:
            raw: Raw property map
            updates: Field key to new value (or None)

        Returns:
            Edited copy, stamped only if at least one field changed

        Raises:
            ValueError: If the batch targets the timestamp or location, which
                have dedicated operations
        """
        reserved = {keys.LOCATION}
        timestamp_key = self._timestamp_key()
        if timestamp_key:
            reserved.add(timestamp_key)

        rejected = sorted(reserved.intersection(updates))
        if rejected:
            raise ValueError(f"Use the dedicated edit operations for: {', '.join(rejected)}")

        props = _copy(raw)
        changed = 0

        for key, value in updates.items():
            namespace = keys.TIFF_DICT if key in keys.TIFF_KEYS else keys.EXIF_DICT
            targets = ((namespace, key),) + keys.SYNCED_FIELDS.get(key, ())
            for target_namespace, target_key in targets:
                if _write_entry(props, target_namespace, target_key, value):
                    changed += 1

        if not changed:
            return props

        logger.debug(f"Wrote {changed} field(s)")
        return self.stamp_tiff(props)
