"""
UCDF Errors
============
Exception hierarchy raised by the parser, value decoder and converters.

Every parse failure aborts the whole parse: the caller receives exactly one
exception describing the first problem encountered. Serialization never
raises.
"""

from __future__ import annotations


class UCDFError(Exception):
    """Base class for all UCDF errors."""

    kind: str = "ucdf_error"

    def __init__(self, message: str, fragment: str | None = None) -> None:
        self.message = message
        self.fragment = fragment
        super().__init__(message)


class ParseError(UCDFError, ValueError):
    """Raised when a UCDF string (or a typed value) cannot be parsed."""

    kind = "parse_error"

    def __init__(
        self,
        message: str,
        fragment: str | None = None,
        position: int | None = None,
    ) -> None:
        self.position = position
        super().__init__(message, fragment)

    def __str__(self) -> str:
        # position may be filled in after construction by the parser
        if self.position is None:
            return self.message
        return f"{self.message} (at offset {self.position})"


class MissingTypeSectionError(ParseError):
    kind = "missing_type_section"

    def __init__(self) -> None:
        super().__init__("Missing required type section (t=...)")


class InvalidSourceTypeError(ParseError):
    kind = "invalid_source_type"

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid source type: {value!r}", value)


class InvalidAccessModeError(ParseError):
    kind = "invalid_access_mode"

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Invalid access mode: {value!r} (expected r, w, rw or wr)", value
        )


class InvalidFieldFormatError(ParseError):
    kind = "invalid_field_format"

    def __init__(self, item: str) -> None:
        super().__init__(f"Invalid field format: {item!r} (expected name:dtype)", item)


class InvalidEndpointFormatError(ParseError):
    kind = "invalid_endpoint_format"

    def __init__(self, item: str) -> None:
        super().__init__(
            f"Invalid endpoint format: {item!r} (expected path:method)", item
        )


class UnknownSectionPrefixError(ParseError):
    kind = "unknown_section_prefix"

    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown section prefix: {key!r}", key)


class InvalidFormatError(ParseError):
    """Tokenizer-level failure: bad quoting, empty key, missing '='."""

    kind = "invalid_format"


class InvalidValueError(ParseError):
    """A raw value could not be converted to its declared type."""

    kind = "invalid_value"

    def __init__(self, value: str, dtype: str) -> None:
        self.dtype = dtype
        super().__init__(f"Failed to parse {value!r} as {dtype}", value)


class ConversionError(UCDFError, ValueError):
    """Raised by the format converters for unsupported or malformed input."""

    kind = "conversion_error"
