"""Display formatting for individual raw metadata fields."""

from typing import Any

from . import keys
from .errors import UnsupportedFieldTypeError
from .models import GeoCoordinate
from .rational import approximate

DEFAULT_MAX_DENOMINATOR = 10000


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid raw metadata integer
    return isinstance(value, int) and not isinstance(value, bool)


class FieldFormatter:
    """Render raw field values as display strings."""

    def __init__(
        self,
        max_denominator: int = DEFAULT_MAX_DENOMINATOR,
        sequence_separator: str = ""
    ):
        """Initialize formatter.

        Args:
            max_denominator: Denominator bound for exposure-time fractions
            sequence_separator: Joiner for integer sequences; the empty
                default keeps the legacy concatenated display
        """
        if max_denominator < 1:
            raise ValueError(f"max_denominator must be >= 1, got {max_denominator}")
        self.max_denominator = max_denominator
        self.sequence_separator = sequence_separator

    def format(self, field_key: str, value: Any) -> str:
        """Format one raw field value for display.

        Args:
            field_key: Raw field key (e.g. 'ExposureTime')
            value: Raw value

        Returns:
            Display string including unit symbols

        Raises:
            UnsupportedFieldTypeError: If the value shape is not supported
            NonFiniteValueError: If an exposure time is NaN or infinite
        """
        rendered = self.format_value(field_key, value)
        return self.apply_symbol(field_key, rendered)

    def format_value(self, field_key: str, value: Any) -> str:
        """Type-dispatched rendering without unit symbols."""
        if _is_int(value):
            return str(value)

        if isinstance(value, float):
            if field_key == keys.EXPOSURE_TIME:
                rational = approximate(value, self.max_denominator)
                if rational.numerator < rational.denominator:
                    return f"{rational.numerator}/{rational.denominator}"
            return str(value)

        if isinstance(value, str):
            return value

        if isinstance(value, (list, tuple)) and all(_is_int(v) for v in value):
            return self.sequence_separator.join(str(v) for v in value)

        raise UnsupportedFieldTypeError(field_key, value)

    @staticmethod
    def apply_symbol(field_key: str, value: str) -> str:
        """Add the unit symbol belonging to a field."""
        if field_key == keys.EXPOSURE_TIME:
            return value + "s"
        if field_key == keys.F_NUMBER:
            return "f/" + value
        if field_key in (keys.FOCAL_LENGTH_35MM, keys.FOCAL_LENGTH):
            return value + "mm"
        return value

    @staticmethod
    def format_coordinate(coordinate: GeoCoordinate) -> str:
        """Render a coordinate as 'lat, lon' with four decimals."""
        return f"{coordinate.latitude:.4f}, {coordinate.longitude:.4f}"


_default_formatter = FieldFormatter()


def format_field(field_key: str, value: Any) -> str:
    """Format a field with the default formatter settings."""
    return _default_formatter.format(field_key, value)
