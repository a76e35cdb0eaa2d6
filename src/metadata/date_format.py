"""Fixed date encodings for persisted and displayed timestamps.

Both formats must stay stable across versions: previously written files
carry timestamps in the machine encoding and are re-read by later releases.
"""

from datetime import datetime
from typing import Optional

# Persisted value, e.g. "2024:03:25 14:05:09"
EXIF_DATETIME_FORMAT = '%Y:%m:%d %H:%M:%S'

# Display value, e.g. "2024.03.25"
DISPLAY_DATE_FORMAT = '%Y.%m.%d'


def parse_exif_datetime(date_str: str) -> Optional[datetime]:
    """Parse a timestamp in the machine encoding.

    Args:
        date_str: Raw timestamp string

    Returns:
        Parsed datetime, or None if the string does not match
    """
    try:
        return datetime.strptime(date_str.strip(), EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


def format_exif_datetime(value: datetime) -> str:
    """Encode a datetime for persisting into a raw map."""
    return value.strftime(EXIF_DATETIME_FORMAT)


def to_display_date(date_str: str) -> str:
    """Reformat a machine-encoded timestamp as a display date.

    Unparseable input is returned unchanged.
    """
    parsed = parse_exif_datetime(date_str)
    if parsed is None:
        return date_str
    return parsed.strftime(DISPLAY_DATE_FORMAT)
