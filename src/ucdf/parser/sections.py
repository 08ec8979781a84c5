"""
UCDF Sections
==============
Classifies one ``key=value`` unit into one of the five section kinds.

Precedence, by key:

====================  ==========================================
``t``                 Type – ``category[.subtype]``
``c.<name>``          Connection parameter, value verbatim
``s.<sub>``           Structure – fields, endpoints, format, custom
``a``                 Access mode – ``r``, ``w``, ``rw`` / ``wr``
``m.<name>``          Metadata, value verbatim
====================  ==========================================

Any other key is rejected.
"""

from __future__ import annotations

import logging
from typing import Annotated, Literal, Union

from pydantic import BaseModel
from pydantic import Field as ModelField

from ..errors import UnknownSectionPrefixError
from ..models.document import AccessMode, SourceType
from ..models.structure import (
    CustomEntry,
    Endpoint,
    EndpointList,
    Field,
    FieldList,
    FormatEntry,
    StructureEntry,
)

logger = logging.getLogger(__name__)

TYPE_KEY = "t"
ACCESS_KEY = "a"
CONNECTION_PREFIX = "c."
STRUCTURE_PREFIX = "s."
META_PREFIX = "m."

ITEM_SEPARATOR = ","

FIELDS_KEY = "fields"
ENDPOINTS_KEY = "endpoints"
FORMAT_KEY = "format"
RESERVED_STRUCTURE_KEYS = frozenset((FIELDS_KEY, ENDPOINTS_KEY, FORMAT_KEY))


class TypeSection(BaseModel):
    kind: Literal["type"] = "type"
    source_type: SourceType


class ConnectionSection(BaseModel):
    kind: Literal["connection"] = "connection"
    key: str
    value: str


class StructureSection(BaseModel):
    kind: Literal["structure"] = "structure"
    key: str
    entry: StructureEntry


class AccessSection(BaseModel):
    kind: Literal["access"] = "access"
    mode: AccessMode


class MetaSection(BaseModel):
    kind: Literal["meta"] = "meta"
    key: str
    value: str


Section = Annotated[
    Union[TypeSection, ConnectionSection, StructureSection, AccessSection, MetaSection],
    ModelField(discriminator="kind"),
]


def parse_field_list(text: str) -> list[Field]:
    """Comma-separated ``name:dtype`` items, in input order."""
    if not text:
        return []
    return [Field.parse(item) for item in text.split(ITEM_SEPARATOR)]


def parse_endpoint_list(text: str) -> list[Endpoint]:
    """Comma-separated ``path:method`` items, in input order."""
    if not text:
        return []
    return [Endpoint.parse(item) for item in text.split(ITEM_SEPARATOR)]


def parse_structure(sub_key: str, value: str) -> StructureEntry:
    if sub_key == FIELDS_KEY:
        return FieldList(fields=parse_field_list(value))
    if sub_key == ENDPOINTS_KEY:
        return EndpointList(endpoints=parse_endpoint_list(value))
    if sub_key == FORMAT_KEY:
        return FormatEntry(format=value)
    return CustomEntry(key=sub_key, value=value)


def parse_section(key: str, value: str) -> Section:
    """
    Classify one unit. Raises a :class:`~ucdf.errors.ParseError` subclass when
    the key is unknown or the value is malformed for its section kind.
    """
    if key == TYPE_KEY:
        section: Section = TypeSection(source_type=SourceType.parse(value))
    elif key.startswith(CONNECTION_PREFIX):
        section = ConnectionSection(key=key[len(CONNECTION_PREFIX):], value=value)
    elif key.startswith(STRUCTURE_PREFIX):
        sub_key = key[len(STRUCTURE_PREFIX):]
        section = StructureSection(key=sub_key, entry=parse_structure(sub_key, value))
    elif key == ACCESS_KEY:
        section = AccessSection(mode=AccessMode.parse(value))
    elif key.startswith(META_PREFIX):
        section = MetaSection(key=key[len(META_PREFIX):], value=value)
    else:
        raise UnknownSectionPrefixError(key)
    logger.debug("classified %r as %s section", key, section.kind)
    return section
