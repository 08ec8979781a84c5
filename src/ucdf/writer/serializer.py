"""
UCDF Serializer
================
Renders a :class:`~ucdf.models.document.Document` back to the one-line form.

Sections are written in a fixed order: type, connection, structure, access,
metadata. Connection and metadata values holding any of ``; = , :`` are
wrapped in double quotes; values holding ``"`` or ``\\`` are quoted too, with
those characters (and newline, CR, tab) written as backslash escapes so the
parser decodes them back to the original text.

Entries within the connection, structure and metadata maps are written in
the maps' iteration order, which is not part of the contract.
"""

from __future__ import annotations

from ..models.document import Document
from ..parser.grammar import UNIT_SEPARATOR
from ..parser.sections import (
    ACCESS_KEY,
    CONNECTION_PREFIX,
    META_PREFIX,
    STRUCTURE_PREFIX,
    TYPE_KEY,
)

# Characters that force a connection/metadata value into quotes.
QUOTE_TRIGGERS = frozenset(';=,:')
# Characters that cannot appear bare in any value without breaking re-parsing.
ESCAPE_TRIGGERS = frozenset('"\\')
# Raw structure text is only quoted when it would otherwise not parse back.
STRUCTURE_QUOTE_TRIGGERS = frozenset(';"\\')

_ESCAPE_TABLE = str.maketrans({
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
})


def quote(value: str) -> str:
    """Wrap ``value`` in double quotes, escaping what the parser decodes."""
    return '"' + value.translate(_ESCAPE_TABLE) + '"'


def format_value(value: str) -> str:
    """Quoting decision for connection and metadata values."""
    if any(ch in QUOTE_TRIGGERS or ch in ESCAPE_TRIGGERS for ch in value):
        return quote(value)
    return value


def format_structure_value(raw: str) -> str:
    if any(ch in STRUCTURE_QUOTE_TRIGGERS for ch in raw):
        return quote(raw)
    return raw


def serialize(doc: Document) -> str:
    """Render ``doc``; never raises."""
    parts = [f"{TYPE_KEY}={doc.source_type}"]

    for key, value in doc.connection.items():
        parts.append(f"{CONNECTION_PREFIX}{key}={format_value(value)}")

    for key, entry in doc.structure.items():
        parts.append(f"{STRUCTURE_PREFIX}{key}={format_structure_value(entry.render())}")

    if doc.access_mode is not None:
        parts.append(f"{ACCESS_KEY}={doc.access_mode.value}")

    for key, value in doc.metadata.items():
        parts.append(f"{META_PREFIX}{key}={format_value(value)}")

    return UNIT_SEPARATOR.join(p for p in parts if p)


to_string = serialize
