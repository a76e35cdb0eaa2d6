"""Exception classes for metadata extraction and formatting."""


class MetadataError(Exception):
    """Base exception for all metadata errors."""

    def __init__(self, message: str = ""):
        """Initialize the exception.

        Args:
            message: Descriptive error message
        """
        self.message = message
        super().__init__(message)


class SchemaUnavailableError(MetadataError):
    """Raised when the field-group schema cannot be located or parsed.

    Without a schema no grouping is possible, so this is the only failure
    that affects a whole snapshot rather than a single field.
    """
    pass


class UnsupportedFieldTypeError(MetadataError):
    """Raised when a raw field value has a shape the formatter cannot render."""

    def __init__(self, field_key: str, value):
        self.field_key = field_key
        self.value_type = type(value).__name__
        super().__init__(
            f"Unsupported value type for {field_key}: {self.value_type}"
        )


class NonFiniteValueError(MetadataError):
    """Raised when a rational approximation is requested for NaN or infinity."""
    pass
