"""
Typed Values – Model
=====================
Scalar values attached to fields for programmatic use.

A value is never read from or written to the one-line notation; it is decoded
from a raw string against an explicit type tag (``str``, ``int``, ``float``,
``bool``, ``json``, ``date``, ``datetime``). Unrecognized tags produce a
:class:`CustomValue` that keeps the tag and the raw text.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ..errors import InvalidValueError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")


class DataType(str, Enum):
    """Built-in type tags recognized in field declarations and values."""
    STRING = "str"
    INTEGER = "int"
    FLOAT = "float"
    BOOLEAN = "bool"
    JSON = "json"
    DATE = "date"
    DATETIME = "datetime"

    @classmethod
    def is_builtin(cls, tag: str) -> bool:
        return tag in _BUILTIN_TAGS


_BUILTIN_TAGS = frozenset(t.value for t in DataType)


class TypedValue(BaseModel):
    """
    Common base of the typed value variants.

    The variant set is closed: use :data:`AnyValue` wherever a value of any
    kind is accepted, and :meth:`parse` to decode a raw string.
    """
    model_config = ConfigDict(frozen=True)

    kind: str

    @property
    def type_tag(self) -> str:
        """The type tag this value was decoded with."""
        return self.kind

    @classmethod
    def parse(cls, raw: str, dtype: str) -> "AnyValue":
        return parse_value(raw, dtype)


class StringValue(TypedValue):
    kind: Literal["str"] = "str"
    value: str

    def __str__(self) -> str:
        return self.value


class IntegerValue(TypedValue):
    kind: Literal["int"] = "int"
    value: int = Field(..., ge=INT64_MIN, le=INT64_MAX, description="64-bit signed integer")

    def __str__(self) -> str:
        return str(self.value)


class FloatValue(TypedValue):
    kind: Literal["float"] = "float"
    value: float

    def __str__(self) -> str:
        return str(self.value)


class BooleanValue(TypedValue):
    kind: Literal["bool"] = "bool"
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


class JsonValue(TypedValue):
    """JSON document kept as its raw text; it is not decoded."""
    kind: Literal["json"] = "json"
    value: str

    def __str__(self) -> str:
        return self.value


class DateValue(TypedValue):
    """ISO-8601 date, kept as text."""
    kind: Literal["date"] = "date"
    value: str

    def __str__(self) -> str:
        return self.value


class DateTimeValue(TypedValue):
    """ISO-8601 timestamp, kept as text."""
    kind: Literal["datetime"] = "datetime"
    value: str

    def __str__(self) -> str:
        return self.value


class CustomValue(TypedValue):
    """Value declared with a type tag outside the built-in set."""
    kind: Literal["custom"] = "custom"
    custom_type: str
    value: str

    @property
    def type_tag(self) -> str:
        return self.custom_type

    def __str__(self) -> str:
        return self.value


AnyValue = Annotated[
    Union[
        StringValue,
        IntegerValue,
        FloatValue,
        BooleanValue,
        JsonValue,
        DateValue,
        DateTimeValue,
        CustomValue,
    ],
    Field(discriminator="kind"),
]


def _parse_int(raw: str) -> IntegerValue:
    if not _INT_RE.fullmatch(raw):
        raise InvalidValueError(raw, "integer")
    number = int(raw)
    if not INT64_MIN <= number <= INT64_MAX:
        raise InvalidValueError(raw, "integer")
    return IntegerValue(value=number)


def _parse_float(raw: str) -> FloatValue:
    # float() tolerates surrounding whitespace and digit separators; the
    # notation does not.
    if raw != raw.strip() or "_" in raw:
        raise InvalidValueError(raw, "float")
    try:
        return FloatValue(value=float(raw))
    except ValueError:
        raise InvalidValueError(raw, "float") from None


def _parse_bool(raw: str) -> BooleanValue:
    if raw == "true":
        return BooleanValue(value=True)
    if raw == "false":
        return BooleanValue(value=False)
    raise InvalidValueError(raw, "boolean")


_TEXT_KINDS: dict[str, type[TypedValue]] = {
    DataType.STRING.value: StringValue,
    DataType.JSON.value: JsonValue,
    DataType.DATE.value: DateValue,
    DataType.DATETIME.value: DateTimeValue,
}


def parse_value(raw: str, dtype: str) -> AnyValue:
    """
    Decode ``raw`` according to the type tag ``dtype``.

    ``int``, ``float`` and ``bool`` are converted and raise
    :class:`~ucdf.errors.InvalidValueError` on failure. ``str``, ``json``,
    ``date`` and ``datetime`` keep the text as is. Any other tag yields a
    :class:`CustomValue`.
    """
    if dtype == DataType.INTEGER.value:
        return _parse_int(raw)
    if dtype == DataType.FLOAT.value:
        return _parse_float(raw)
    if dtype == DataType.BOOLEAN.value:
        return _parse_bool(raw)
    text_kind = _TEXT_KINDS.get(dtype)
    if text_kind is not None:
        return text_kind(value=raw)
    return CustomValue(custom_type=dtype, value=raw)
