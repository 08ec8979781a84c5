"""
Structure Entries – Model
==========================
Schema information attached to a Document under ``s.<key>`` sections.

A structure entry is one of four closed variants, discriminated by ``kind``:

* :class:`FieldList`    – ``s.fields=id:int,name:str``
* :class:`EndpointList` – ``s.endpoints=/users:GET,/users:POST``
* :class:`FormatEntry`  – ``s.format=json``
* :class:`CustomEntry`  – any other sub-key, kept verbatim
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict
from pydantic import Field as ModelField

from ..errors import InvalidEndpointFormatError, InvalidFieldFormatError
from .values import AnyValue, parse_value


def _split_pair(item: str) -> tuple[str, str] | None:
    parts = item.split(":")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


class Field(BaseModel):
    """
    A named, typed column of a data source.

    Text form is ``name:dtype``. ``value`` exists for programmatic use only
    and is never rendered in a field list.
    """
    model_config = ConfigDict(frozen=True)

    name: str = ModelField(..., description="Field name")
    dtype: str = ModelField(..., description="Type tag, e.g. int, str, datetime")
    value: AnyValue | None = ModelField(None, description="Optional typed value")

    @classmethod
    def parse(cls, item: str) -> "Field":
        """Parse one ``name:dtype`` item; exactly one ':' with non-empty halves."""
        pair = _split_pair(item)
        if pair is None:
            raise InvalidFieldFormatError(item)
        return cls(name=pair[0], dtype=pair[1])

    def with_value(self, raw: str) -> "Field":
        """Return a copy carrying ``raw`` decoded against this field's dtype."""
        return self.model_copy(update={"value": parse_value(raw, self.dtype)})

    def __str__(self) -> str:
        return f"{self.name}:{self.dtype}"


class Endpoint(BaseModel):
    """An API operation exposed by a data source, ``path:method``."""
    model_config = ConfigDict(frozen=True)

    path: str
    method: str

    @classmethod
    def parse(cls, item: str) -> "Endpoint":
        pair = _split_pair(item)
        if pair is None:
            raise InvalidEndpointFormatError(item)
        return cls(path=pair[0], method=pair[1])

    def __str__(self) -> str:
        return f"{self.path}:{self.method}"


class FieldList(BaseModel):
    kind: Literal["fields"] = "fields"
    fields: list[Field] = ModelField(default_factory=list)

    def render(self) -> str:
        return ",".join(str(f) for f in self.fields)


class EndpointList(BaseModel):
    kind: Literal["endpoints"] = "endpoints"
    endpoints: list[Endpoint] = ModelField(default_factory=list)

    def render(self) -> str:
        return ",".join(str(e) for e in self.endpoints)


class FormatEntry(BaseModel):
    kind: Literal["format"] = "format"
    format: str

    def render(self) -> str:
        return self.format


class CustomEntry(BaseModel):
    """Structure information under a sub-key the notation does not interpret."""
    kind: Literal["custom"] = "custom"
    key: str
    value: str

    def render(self) -> str:
        return self.value


StructureEntry = Annotated[
    Union[FieldList, EndpointList, FormatEntry, CustomEntry],
    ModelField(discriminator="kind"),
]
