"""Value types produced by the metadata extractor."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

# Raw property map as produced by an image-property decoder
RawMetadataMap = Dict[str, Any]

# ((group name, ((field key, display string), ...)), ...)
GroupedMetadata = Tuple[Tuple[str, Tuple[Tuple[str, str], ...]], ...]


@dataclass(frozen=True)
class GeoCoordinate:
    """Signed decimal-degree coordinate (south and west are negative)."""

    latitude: float
    longitude: float

    def __post_init__(self):
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(f"Coordinate must be finite: {self.latitude}, {self.longitude}")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")


@dataclass(frozen=True)
class MetadataSnapshot:
    """Grouped, display-ready view of a raw property map."""

    grouped_metadata: GroupedMetadata
    timestamp: Optional[str] = None
    coordinate: Optional[GeoCoordinate] = None
    raw: RawMetadataMap = field(default_factory=dict, compare=False)

    def group(self, name: str) -> Optional[Tuple[Tuple[str, str], ...]]:
        """Return the fields of one group, or None if it was omitted."""
        for group_name, fields in self.grouped_metadata:
            if group_name == name:
                return fields
        return None

    def as_dict(self) -> Dict[str, Any]:
        """Plain-dict rendering, e.g. for JSON output."""
        return {
            'groups': {name: dict(fields) for name, fields in self.grouped_metadata},
            'timestamp': self.timestamp,
            'coordinate': (
                {'latitude': self.coordinate.latitude, 'longitude': self.coordinate.longitude}
                if self.coordinate else None
            ),
        }
