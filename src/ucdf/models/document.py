"""
UCDF Document – Core Model
===========================
In-memory representation of one UCDF string.

A Document always carries exactly one :class:`SourceType`; connection
parameters, structure entries, the access mode and metadata are optional.
Every ``add_*`` / ``set_*`` method mutates the document in place and returns
it, so calls can be chained on one instance. The matching ``with_*`` methods
leave the receiver untouched and return a modified copy.

Example::

    from ucdf import AccessMode, Document

    doc = (
        Document.create("db.postgresql")
        .with_connection("host", "localhost")
        .with_connection("port", "5432")
        .with_fields(["id:int", "name:str"])
        .with_access_mode(AccessMode.READ_WRITE)
    )
    print(doc)  # t=db.postgresql;c.host=localhost;c.port=5432;s.fields=id:int,name:str;a=rw
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict
from pydantic import Field as ModelField

from ..errors import InvalidAccessModeError, InvalidSourceTypeError
from .structure import (
    CustomEntry,
    Endpoint,
    EndpointList,
    Field,
    FieldList,
    FormatEntry,
    StructureEntry,
)

# Both maps are plain string-to-string mappings. Their iteration order is
# incidental and carries no meaning.
ConnectionParams = dict[str, str]
Metadata = dict[str, str]

# A category or subtype token: non-empty, no dot, and nothing that would end
# or quote the t= unit when written back out.
SOURCE_TOKEN_PATTERN = r'^[^.;"]+$'
_SOURCE_TOKEN_RE = re.compile(SOURCE_TOKEN_PATTERN)


class AccessMode(str, Enum):
    """How a data source may be used (``a=`` section)."""
    READ = "r"
    WRITE = "w"
    READ_WRITE = "rw"

    @classmethod
    def parse(cls, text: str) -> "AccessMode":
        """Accepts ``r``, ``w``, ``rw`` and ``wr``."""
        if text == "wr":
            return cls.READ_WRITE
        try:
            return cls(text)
        except ValueError:
            raise InvalidAccessModeError(text) from None

    @property
    def label(self) -> str:
        return _ACCESS_LABELS[self]

    def __str__(self) -> str:
        return self.value


_ACCESS_LABELS = {
    AccessMode.READ: "Read-only",
    AccessMode.WRITE: "Write-only",
    AccessMode.READ_WRITE: "Read-write",
}


class SourceType(BaseModel):
    """Kind of data source, ``category`` or ``category.subtype``."""
    model_config = ConfigDict(frozen=True)

    category: str = ModelField(
        ..., pattern=SOURCE_TOKEN_PATTERN, description="e.g. file, db, api, stream"
    )
    subtype: str | None = ModelField(
        None, pattern=SOURCE_TOKEN_PATTERN, description="e.g. csv, postgresql, rest"
    )

    @classmethod
    def parse(cls, text: str) -> "SourceType":
        parts = text.split(".")
        if len(parts) > 2 or not all(_SOURCE_TOKEN_RE.match(p) for p in parts):
            raise InvalidSourceTypeError(text)
        if len(parts) == 1:
            return cls(category=parts[0])
        return cls(category=parts[0], subtype=parts[1])

    def __str__(self) -> str:
        if self.subtype is None:
            return self.category
        return f"{self.category}.{self.subtype}"


def _as_fields(items: Iterable[Field | str]) -> list[Field]:
    return [i if isinstance(i, Field) else Field.parse(i) for i in items]


def _as_endpoints(items: Iterable[Endpoint | str]) -> list[Endpoint]:
    return [i if isinstance(i, Endpoint) else Endpoint.parse(i) for i in items]


class Document(BaseModel):
    """
    A fully assembled UCDF data source description.

    ``structure`` is keyed by sub-key: ``fields``, ``endpoints``, ``format``
    or any custom name. Writing an entry under an existing key replaces it.
    """

    source_type: SourceType
    connection: ConnectionParams = ModelField(default_factory=dict)
    structure: dict[str, StructureEntry] = ModelField(default_factory=dict)
    access_mode: AccessMode | None = None
    metadata: Metadata = ModelField(default_factory=dict)

    @classmethod
    def create(cls, source_type: SourceType | str) -> "Document":
        """Empty document seeded with its required source type."""
        if isinstance(source_type, str):
            source_type = SourceType.parse(source_type)
        return cls(source_type=source_type)

    @classmethod
    def parse(cls, text: str, *, raw_escapes: bool = False) -> "Document":
        from ..parser.assembler import parse

        return parse(text, raw_escapes=raw_escapes)

    # ------------------------------------------------------------------
    # In-place mutators
    # ------------------------------------------------------------------

    def _put_structure(self, key: str, entry: StructureEntry) -> "Document":
        self.structure[key] = entry
        return self

    def add_connection(self, key: str, value: str) -> "Document":
        self.connection[key] = value
        return self

    def add_fields(self, fields: Iterable[Field | str]) -> "Document":
        """Replace the ``fields`` entry. Items may be Field objects or ``name:dtype`` text."""
        return self._put_structure("fields", FieldList(fields=_as_fields(fields)))

    def add_endpoints(self, endpoints: Iterable[Endpoint | str]) -> "Document":
        return self._put_structure(
            "endpoints", EndpointList(endpoints=_as_endpoints(endpoints))
        )

    def add_format(self, format: str) -> "Document":
        return self._put_structure("format", FormatEntry(format=format))

    def add_custom_structure(self, key: str, value: str) -> "Document":
        """
        Store raw structure text under ``key``. The reserved sub-keys
        ``fields``, ``endpoints`` and ``format`` are decoded into their own
        entry kinds, so the document reads back the same after serializing.
        """
        from ..parser.sections import RESERVED_STRUCTURE_KEYS, parse_structure

        if key in RESERVED_STRUCTURE_KEYS:
            return self._put_structure(key, parse_structure(key, value))
        return self._put_structure(key, CustomEntry(key=key, value=value))

    def set_access_mode(self, mode: AccessMode | str) -> "Document":
        if not isinstance(mode, AccessMode):
            mode = AccessMode.parse(mode)
        self.access_mode = mode
        return self

    def add_metadata(self, key: str, value: str) -> "Document":
        self.metadata[key] = value
        return self

    # ------------------------------------------------------------------
    # Value-style variants
    # ------------------------------------------------------------------

    def _copy(self) -> "Document":
        return self.model_copy(deep=True)

    def with_connection(self, key: str, value: str) -> "Document":
        return self._copy().add_connection(key, value)

    def with_fields(self, fields: Iterable[Field | str]) -> "Document":
        return self._copy().add_fields(fields)

    def with_endpoints(self, endpoints: Iterable[Endpoint | str]) -> "Document":
        return self._copy().add_endpoints(endpoints)

    def with_format(self, format: str) -> "Document":
        return self._copy().add_format(format)

    def with_custom_structure(self, key: str, value: str) -> "Document":
        return self._copy().add_custom_structure(key, value)

    def with_access_mode(self, mode: AccessMode | str) -> "Document":
        return self._copy().set_access_mode(mode)

    def with_metadata(self, key: str, value: str) -> "Document":
        return self._copy().add_metadata(key, value)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def field_list(self) -> list[Field]:
        """Fields declared under ``s.fields``, or an empty list."""
        entry = self.structure.get("fields")
        return list(entry.fields) if isinstance(entry, FieldList) else []

    def endpoint_list(self) -> list[Endpoint]:
        entry = self.structure.get("endpoints")
        return list(entry.endpoints) if isinstance(entry, EndpointList) else []

    def data_format(self) -> str | None:
        entry = self.structure.get("format")
        return entry.format if isinstance(entry, FormatEntry) else None

    def to_string(self) -> str:
        from ..writer.serializer import serialize

        return serialize(self)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return (
            f"Document(source_type={str(self.source_type)!r}, "
            f"connection={len(self.connection)}, structure={sorted(self.structure)}, "
            f"access_mode={self.access_mode.value if self.access_mode else None!r}, "
            f"metadata={len(self.metadata)})"
        )
