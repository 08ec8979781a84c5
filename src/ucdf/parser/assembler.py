"""
UCDF Parser
============
Entry point turning a UCDF string into a :class:`~ucdf.models.document.Document`.

Units are scanned and classified in order of appearance, then folded into
one document:

* the first ``t=`` section seeds the document; later ones are ignored;
* repeated ``c.*`` / ``m.*`` keys keep the last value;
* a repeated structure key keeps the last entry (no merging);
* a repeated ``a=`` keeps the last mode.

Any failure aborts the parse; no partial document is returned.

Example::

    from ucdf import parse

    doc = parse("t=file.csv;c.path=/data/users.csv;s.fields=id:int,name:str;a=r")
    doc.source_type.subtype       # 'csv'
    doc.connection["path"]        # '/data/users.csv'
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..errors import MissingTypeSectionError, ParseError
from ..models.document import Document
from .grammar import iter_units
from .sections import (
    AccessSection,
    ConnectionSection,
    MetaSection,
    Section,
    StructureSection,
    TypeSection,
    parse_section,
)

logger = logging.getLogger(__name__)


def parse_sections(text: str, *, raw_escapes: bool = False) -> list[Section]:
    """Scan and classify every unit of ``text``."""
    sections: list[Section] = []
    for unit in iter_units(text, decode_escapes=not raw_escapes):
        try:
            sections.append(parse_section(unit.key, unit.value))
        except ParseError as exc:
            if exc.position is None:
                exc.position = unit.position
            raise
    return sections


def assemble(sections: Iterable[Section]) -> Document:
    """Fold classified sections into one Document."""
    sections = list(sections)
    type_sections = [s for s in sections if isinstance(s, TypeSection)]
    if not type_sections:
        raise MissingTypeSectionError()
    if len(type_sections) > 1:
        logger.warning(
            "%d type sections found; keeping the first (%s)",
            len(type_sections),
            type_sections[0].source_type,
        )

    doc = Document(source_type=type_sections[0].source_type)
    for section in sections:
        if isinstance(section, TypeSection):
            continue
        if isinstance(section, ConnectionSection):
            doc.add_connection(section.key, section.value)
        elif isinstance(section, StructureSection):
            doc._put_structure(section.key, section.entry)
        elif isinstance(section, AccessSection):
            doc.set_access_mode(section.mode)
        elif isinstance(section, MetaSection):
            doc.add_metadata(section.key, section.value)
    logger.debug("assembled %r", doc)
    return doc


def parse(text: str, *, raw_escapes: bool = False) -> Document:
    """
    Parse a UCDF string.

    ``raw_escapes`` keeps backslash escapes inside quoted values exactly as
    written instead of decoding them.
    """
    return assemble(parse_sections(text, raw_escapes=raw_escapes))


from_str = parse


class Parser:
    """Reusable parser holding its options."""

    def __init__(self, raw_escapes: bool = False) -> None:
        self.raw_escapes = raw_escapes

    def parse(self, text: str) -> Document:
        return parse(text, raw_escapes=self.raw_escapes)
