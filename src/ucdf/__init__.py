"""
ucdf – Unified Compact Data Format
===================================
Describe a data source (file, database, REST API, message stream, IoT feed)
in a single line: its type, connection parameters, structure, access mode
and metadata.

A UCDF string is a ``;``-separated list of ``key=value`` sections::

    t=file.csv;c.path=/data/users.csv;s.fields=id:int,name:str;a=r;m.desc=Users

Quick Start::

    from ucdf import AccessMode, DocumentBuilder, parse, serialize

    # Parse
    doc = parse("t=db.postgresql;c.host=localhost;c.port=5432;a=rw")
    doc.source_type.subtype          # 'postgresql'
    doc.connection["port"]           # '5432'

    # Build
    doc = (
        DocumentBuilder.stream("kafka")
        .with_connection("brokers", "broker1:9092,broker2:9092")
        .with_format("json")
        .with_fields("event_id:str", "timestamp:datetime")
        .read_only()
        .build()
    )

    # Serialize
    serialize(doc)
    # t=stream.kafka;c.brokers="broker1:9092,broker2:9092";s.format=json;s.fields=...;a=r
"""

__version__ = "0.1.0"

# Errors
from .errors import (
    UCDFError,
    ParseError,
    MissingTypeSectionError,
    InvalidSourceTypeError,
    InvalidAccessModeError,
    InvalidFieldFormatError,
    InvalidEndpointFormatError,
    UnknownSectionPrefixError,
    InvalidFormatError,
    InvalidValueError,
    ConversionError,
)

# Core models
from .models.values import (
    DataType,
    TypedValue,
    AnyValue,
    StringValue,
    IntegerValue,
    FloatValue,
    BooleanValue,
    JsonValue,
    DateValue,
    DateTimeValue,
    CustomValue,
    parse_value,
)
from .models.structure import (
    Field,
    Endpoint,
    FieldList,
    EndpointList,
    FormatEntry,
    CustomEntry,
    StructureEntry,
)
from .models.document import (
    AccessMode,
    SourceType,
    ConnectionParams,
    Metadata,
    Document,
)

# Parser / serializer
from .parser.assembler import parse, from_str, Parser
from .writer.serializer import serialize, to_string

# Builder
from .builder.document_builder import DocumentBuilder

# Validator
from .validator.conformance import (
    DocumentValidator,
    ValidationResult,
    ValidationIssue,
    Severity,
)

__all__ = [
    # Errors
    "UCDFError",
    "ParseError",
    "MissingTypeSectionError",
    "InvalidSourceTypeError",
    "InvalidAccessModeError",
    "InvalidFieldFormatError",
    "InvalidEndpointFormatError",
    "UnknownSectionPrefixError",
    "InvalidFormatError",
    "InvalidValueError",
    "ConversionError",
    # Models
    "DataType",
    "TypedValue",
    "AnyValue",
    "StringValue",
    "IntegerValue",
    "FloatValue",
    "BooleanValue",
    "JsonValue",
    "DateValue",
    "DateTimeValue",
    "CustomValue",
    "parse_value",
    "Field",
    "Endpoint",
    "FieldList",
    "EndpointList",
    "FormatEntry",
    "CustomEntry",
    "StructureEntry",
    "AccessMode",
    "SourceType",
    "ConnectionParams",
    "Metadata",
    "Document",
    # Parsing
    "parse",
    "from_str",
    "Parser",
    "serialize",
    "to_string",
    # Builder
    "DocumentBuilder",
    # Validation
    "DocumentValidator",
    "ValidationResult",
    "ValidationIssue",
    "Severity",
]
