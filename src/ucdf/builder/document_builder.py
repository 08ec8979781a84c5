"""
Document Builder
=================
Fluent builder API for constructing UCDF documents.

Provides factory methods for the common source categories and a chainable
builder for connection parameters, structure, access mode and metadata.

Example::

    from ucdf.builder.document_builder import DocumentBuilder

    doc = (
        DocumentBuilder.db("postgresql")
        .with_connection("host", "db.prod")
        .with_connection("db", "sales")
        .with_fields("id:int", "amount:float", "date:date")
        .read_only()
        .with_metadata("desc", "Sales ledger")
        .build()
    )
"""

from __future__ import annotations

from ..models.document import AccessMode, Document, SourceType
from ..models.structure import Endpoint, Field


class DocumentBuilder:
    """
    Fluent builder for Document objects.

    Typically instantiated via the factory class methods (e.g.
    ``DocumentBuilder.file("csv")``). Every call to :meth:`build` returns a
    new, independent Document.
    """

    def __init__(self, source_type: SourceType | str) -> None:
        self._doc = Document.create(source_type)

    # ------------------------------------------------------------------
    # Factory methods per source category
    # ------------------------------------------------------------------

    @classmethod
    def file(cls, subtype: str | None = None) -> "DocumentBuilder":
        """Files on disk or object storage (csv, parquet, json...)."""
        return cls(SourceType(category="file", subtype=subtype))

    @classmethod
    def db(cls, subtype: str | None = None) -> "DocumentBuilder":
        """Databases (postgresql, mysql, mongodb...)."""
        return cls(SourceType(category="db", subtype=subtype))

    @classmethod
    def api(cls, subtype: str | None = "rest") -> "DocumentBuilder":
        """Remote APIs; REST unless told otherwise."""
        return cls(SourceType(category="api", subtype=subtype))

    @classmethod
    def stream(cls, subtype: str | None = None) -> "DocumentBuilder":
        """Message streams (kafka, rabbitmq, kinesis...)."""
        return cls(SourceType(category="stream", subtype=subtype))

    @classmethod
    def iot(cls, subtype: str | None = None) -> "DocumentBuilder":
        """Device and sensor feeds (mqtt, coap...)."""
        return cls(SourceType(category="iot", subtype=subtype))

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def with_connection(self, key: str, value: str) -> "DocumentBuilder":
        self._doc.add_connection(key, value)
        return self

    def with_connections(self, **params: str) -> "DocumentBuilder":
        """Several connection parameters at once, e.g. ``host=..., port=...``."""
        for key, value in params.items():
            self._doc.add_connection(key, value)
        return self

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def with_fields(self, *fields: Field | str) -> "DocumentBuilder":
        """Field objects or ``name:dtype`` strings. Replaces earlier fields."""
        self._doc.add_fields(fields)
        return self

    def with_field(self, name: str, dtype: str) -> "DocumentBuilder":
        """Append a single field to the current field list."""
        self._doc.add_fields([*self._doc.field_list(), Field(name=name, dtype=dtype)])
        return self

    def with_endpoints(self, *endpoints: Endpoint | str) -> "DocumentBuilder":
        self._doc.add_endpoints(endpoints)
        return self

    def with_endpoint(self, path: str, method: str = "GET") -> "DocumentBuilder":
        self._doc.add_endpoints(
            [*self._doc.endpoint_list(), Endpoint(path=path, method=method)]
        )
        return self

    def with_format(self, format: str) -> "DocumentBuilder":
        self._doc.add_format(format)
        return self

    def with_structure(self, key: str, value: str) -> "DocumentBuilder":
        """Structure entry under ``s.<key>``; reserved keys are decoded like the parser does."""
        self._doc.add_custom_structure(key, value)
        return self

    # ------------------------------------------------------------------
    # Access mode
    # ------------------------------------------------------------------

    def with_access(self, mode: AccessMode | str) -> "DocumentBuilder":
        self._doc.set_access_mode(mode)
        return self

    def read_only(self) -> "DocumentBuilder":
        return self.with_access(AccessMode.READ)

    def write_only(self) -> "DocumentBuilder":
        return self.with_access(AccessMode.WRITE)

    def read_write(self) -> "DocumentBuilder":
        return self.with_access(AccessMode.READ_WRITE)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def with_metadata(self, key: str, value: str) -> "DocumentBuilder":
        self._doc.add_metadata(key, value)
        return self

    def describe(self, desc: str) -> "DocumentBuilder":
        """Shorthand for ``m.desc``."""
        return self.with_metadata("desc", desc)

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self) -> Document:
        """Construct and return the Document."""
        return self._doc.model_copy(deep=True)
