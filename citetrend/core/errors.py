"""Errors raised by the citation series core."""


class SeriesError(ValueError):
    """Base class for malformed citation series input."""


class InvalidRange(SeriesError):
    """The year range for a publication cannot be built."""


class MissingField(SeriesError):
    """A required field is absent on an input row."""

    def __init__(self, field: str, row_hint: str = ""):
        self.field = field
        message = f"Required field '{field}' is missing"
        if row_hint:
            message += f" ({row_hint})"
        super().__init__(message)


class DuplicateObservation(SeriesError):
    """Two observations were recorded for the same publication-year."""
