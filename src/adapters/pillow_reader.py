"""Read an image file's properties into a raw metadata map using Pillow."""

from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging

from PIL import ExifTags, Image

from ..metadata import keys

logger = logging.getLogger(__name__)

TAGS = ExifTags.TAGS
GPS_TAGS = ExifTags.GPSTAGS

# EXIF tag names that differ from the property-map field names
EXIF_NAME_MAP = {
    'PhotographicSensitivity': 'ISOSpeedRatings',
    'FocalLengthIn35mmFilm': keys.FOCAL_LENGTH_35MM,
}

# IFD0 tags that belong in {TIFF}; the rest of IFD0 is structural
TIFF_TAG_NAMES = {
    'Make', 'Model', 'Software', 'DateTime', 'Artist', 'Copyright',
    'XResolution', 'YResolution', 'ResolutionUnit', 'ImageDescription',
}


def to_plain(value: Any) -> Any:
    """Convert a Pillow tag value into a raw-map scalar.

    Rationals become floats, bytes become stripped strings, tuples of
    integers become lists. Anything else is returned unchanged.
    """
    if hasattr(value, 'numerator') and hasattr(value, 'denominator') and not isinstance(value, int):
        if not value.denominator:
            return None
        return float(value)

    if isinstance(value, bytes):
        return value.decode('utf-8', errors='ignore').strip('\x00 ').strip() or None

    if isinstance(value, str):
        return value.strip('\x00').strip()

    if isinstance(value, tuple):
        items = [to_plain(v) for v in value]
        if len(items) == 1:
            return items[0]
        return items

    return value


def dms_to_degrees(value: Any) -> Optional[float]:
    """Convert a GPS (degrees, minutes, seconds) triple to decimal degrees."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)

    parts = to_plain(value)
    if not isinstance(parts, list) or len(parts) != 3:
        return None
    if any(p is None or not isinstance(p, (int, float)) for p in parts):
        return None

    degrees, minutes, seconds = parts
    return degrees + minutes / 60.0 + seconds / 3600.0


def _gps_sub_map(gps_ifd: Dict[int, Any]) -> Dict[str, Any]:
    named = {GPS_TAGS.get(tag, str(tag)): value for tag, value in gps_ifd.items()}
    gps: Dict[str, Any] = {}

    for name, field_key in (('GPSLatitude', keys.GPS_LATITUDE), ('GPSLongitude', keys.GPS_LONGITUDE)):
        if name in named:
            degrees = dms_to_degrees(named[name])
            if degrees is not None:
                gps[field_key] = degrees

    for name, field_key in (('GPSLatitudeRef', keys.GPS_LATITUDE_REF),
                            ('GPSLongitudeRef', keys.GPS_LONGITUDE_REF)):
        ref = to_plain(named.get(name))
        if isinstance(ref, str) and ref:
            gps[field_key] = ref

    return gps


def read_raw_metadata(image_path: Union[str, Path]) -> Dict[str, Any]:
    """Decode an image file's properties into a raw metadata map.

    Args:
        image_path: Path to the image file

    Returns:
        Raw property map with top-level, {TIFF}, {Exif} and {GPS} entries

    Raises:
        FileNotFoundError: If the file does not exist
        PIL.UnidentifiedImageError: If Pillow cannot open the file
    """
    image_path = Path(image_path)

    with Image.open(image_path) as img:
        raw: Dict[str, Any] = {
            keys.PIXEL_WIDTH: img.width,
            keys.PIXEL_HEIGHT: img.height,
        }
        exif = img.getexif()

        tiff: Dict[str, Any] = {}
        for tag, value in exif.items():
            name = TAGS.get(tag)
            if name == keys.ORIENTATION:
                raw[keys.ORIENTATION] = to_plain(value)
            elif name in TIFF_TAG_NAMES:
                plain = to_plain(value)
                if plain is not None:
                    tiff[name] = plain
        if tiff:
            raw[keys.TIFF_DICT] = tiff

        exif_ifd = exif.get_ifd(ExifTags.IFD.Exif)
        if exif_ifd:
            exif_map: Dict[str, Any] = {}
            for tag, value in exif_ifd.items():
                name = TAGS.get(tag)
                if not name or name == 'MakerNote':
                    continue
                plain = to_plain(value)
                if plain is not None:
                    exif_map[EXIF_NAME_MAP.get(name, name)] = plain
            raw[keys.EXIF_DICT] = exif_map

        gps_ifd = exif.get_ifd(ExifTags.IFD.GPSInfo)
        if gps_ifd:
            gps = _gps_sub_map(gps_ifd)
            if gps:
                raw[keys.GPS_DICT] = gps

    logger.debug(f"Read {len(raw)} top-level properties from {image_path.name}")
    return raw
