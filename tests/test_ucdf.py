"""
Test Suite for ucdf
====================
Tests for the data model, tokenizer, section parser, document assembly,
serializer and the fluent construction API.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ucdf import (
    AccessMode,
    BooleanValue,
    CustomEntry,
    CustomValue,
    DateTimeValue,
    Document,
    DocumentBuilder,
    Endpoint,
    EndpointList,
    Field,
    FieldList,
    FloatValue,
    FormatEntry,
    IntegerValue,
    InvalidAccessModeError,
    InvalidEndpointFormatError,
    InvalidFieldFormatError,
    InvalidFormatError,
    InvalidSourceTypeError,
    InvalidValueError,
    JsonValue,
    MissingTypeSectionError,
    ParseError,
    Parser,
    SourceType,
    StringValue,
    TypedValue,
    UnknownSectionPrefixError,
    parse,
    parse_value,
    serialize,
)
from ucdf.parser.grammar import scan_quoted, split_units
from ucdf.parser.sections import (
    AccessSection,
    ConnectionSection,
    MetaSection,
    StructureSection,
    TypeSection,
    parse_section,
)


# ===========================================================================
# Fixtures
# ===========================================================================


@pytest.fixture
def csv_text() -> str:
    return (
        "t=file.csv;c.path=/data/users.csv;s.fields=id:int,name:str,email:str;"
        "a=r;m.desc=User data"
    )


@pytest.fixture
def postgres_doc() -> Document:
    return (
        DocumentBuilder.db("postgresql")
        .with_connection("host", "localhost")
        .with_connection("port", "5432")
        .with_connection("user", "postgres")
        .with_fields("id:int", "name:str")
        .read_write()
        .with_metadata("desc", "Test database")
        .build()
    )


def _parts(text: str) -> set[str]:
    return set(text.split(";"))


# ===========================================================================
# Model Tests
# ===========================================================================


class TestSourceType:

    def test_category_only(self) -> None:
        st = SourceType.parse("file")
        assert st.category == "file"
        assert st.subtype is None
        assert str(st) == "file"

    def test_category_and_subtype(self) -> None:
        st = SourceType.parse("db.postgresql")
        assert st == SourceType(category="db", subtype="postgresql")
        assert str(st) == "db.postgresql"

    @pytest.mark.parametrize("text", ["a.b.c", "", ".csv", "file.", "a..b"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(InvalidSourceTypeError):
            SourceType.parse(text)


class TestAccessMode:

    @pytest.mark.parametrize("text,mode", [
        ("r", AccessMode.READ),
        ("w", AccessMode.WRITE),
        ("rw", AccessMode.READ_WRITE),
        ("wr", AccessMode.READ_WRITE),
    ])
    def test_parse(self, text: str, mode: AccessMode) -> None:
        assert AccessMode.parse(text) is mode

    def test_text_form(self) -> None:
        assert str(AccessMode.READ_WRITE) == "rw"
        assert AccessMode.READ.label == "Read-only"

    @pytest.mark.parametrize("text", ["", "x", "RW", "rwx", "read"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(InvalidAccessModeError):
            AccessMode.parse(text)


class TestFieldAndEndpoint:

    def test_field_parse(self) -> None:
        f = Field.parse("id:int")
        assert f.name == "id"
        assert f.dtype == "int"
        assert f.value is None
        assert str(f) == "id:int"

    @pytest.mark.parametrize("item", ["id", "id:int:extra", ":int", "id:", ""])
    def test_field_parse_invalid(self, item: str) -> None:
        with pytest.raises(InvalidFieldFormatError):
            Field.parse(item)

    def test_field_with_value(self) -> None:
        f = Field(name="count", dtype="int").with_value("42")
        assert f.value == IntegerValue(value=42)
        assert str(f) == "count:int"

    def test_field_with_value_keeps_original(self) -> None:
        original = Field(name="count", dtype="int")
        original.with_value("1")
        assert original.value is None

    def test_endpoint_parse(self) -> None:
        e = Endpoint.parse("/users/{id}:DELETE")
        assert e.path == "/users/{id}"
        assert e.method == "DELETE"
        assert str(e) == "/users/{id}:DELETE"

    @pytest.mark.parametrize("item", ["/users", "http://x:GET", ":GET"])
    def test_endpoint_parse_invalid(self, item: str) -> None:
        with pytest.raises(InvalidEndpointFormatError):
            Endpoint.parse(item)


class TestTypedValue:

    def test_string(self) -> None:
        assert parse_value("hello", "str") == StringValue(value="hello")

    @pytest.mark.parametrize("raw,expected", [
        ("42", 42),
        ("-7", -7),
        ("+3", 3),
        ("9223372036854775807", 2**63 - 1),
        ("-9223372036854775808", -(2**63)),
    ])
    def test_integer(self, raw: str, expected: int) -> None:
        assert parse_value(raw, "int") == IntegerValue(value=expected)

    @pytest.mark.parametrize("raw", ["4.2", " 42", "1_000", "abc", "", "9223372036854775808"])
    def test_integer_invalid(self, raw: str) -> None:
        with pytest.raises(InvalidValueError):
            parse_value(raw, "int")

    def test_float(self) -> None:
        assert parse_value("3.14", "float") == FloatValue(value=3.14)
        assert parse_value("1e3", "float").value == 1000.0

    @pytest.mark.parametrize("raw", ["abc", "1_0.5", " 1.5", ""])
    def test_float_invalid(self, raw: str) -> None:
        with pytest.raises(InvalidValueError):
            parse_value(raw, "float")

    def test_boolean(self) -> None:
        assert parse_value("true", "bool") == BooleanValue(value=True)
        assert parse_value("false", "bool") == BooleanValue(value=False)
        assert str(BooleanValue(value=True)) == "true"

    @pytest.mark.parametrize("raw", ["True", "1", "yes", ""])
    def test_boolean_invalid(self, raw: str) -> None:
        with pytest.raises(InvalidValueError):
            parse_value(raw, "bool")

    def test_text_kinds_keep_raw(self) -> None:
        assert parse_value('{"a": 1}', "json") == JsonValue(value='{"a": 1}')
        assert parse_value("2024-01-15", "date").value == "2024-01-15"
        assert parse_value("2024-01-15T12:00:00Z", "datetime") == DateTimeValue(
            value="2024-01-15T12:00:00Z"
        )

    def test_unknown_tag_is_custom(self) -> None:
        v = parse_value("550e8400", "uuid")
        assert v == CustomValue(custom_type="uuid", value="550e8400")
        assert v.type_tag == "uuid"
        assert str(v) == "550e8400"

    def test_type_tag(self) -> None:
        assert parse_value("1", "int").type_tag == "int"
        assert parse_value("x", "str").type_tag == "str"

    def test_classmethod_entry_point(self) -> None:
        assert TypedValue.parse("12", "int") == IntegerValue(value=12)

    def test_invalid_value_is_parse_error(self) -> None:
        with pytest.raises(ParseError):
            parse_value("nope", "int")


# ===========================================================================
# Tokenizer Tests
# ===========================================================================


class TestGrammar:

    def test_split_units(self) -> None:
        units = split_units("t=file.csv;c.path=/x")
        assert [(u.key, u.value) for u in units] == [("t", "file.csv"), ("c.path", "/x")]
        assert units[1].position == 11

    def test_empty_units_dropped(self) -> None:
        units = split_units(";;t=x;;c.a=1;")
        assert [(u.key, u.value) for u in units] == [("t", "x"), ("c.a", "1")]

    def test_unquoted_value_keeps_equals(self) -> None:
        units = split_units("c.params=limit=100")
        assert units[0].value == "limit=100"

    def test_empty_value(self) -> None:
        assert split_units("c.a=")[0].value == ""
        assert split_units('c.a=""')[0].value == ""

    def test_quoted_value_with_delimiters(self) -> None:
        units = split_units('c.a="x;y=z,w:v";m.b=1')
        assert [(u.key, u.value) for u in units] == [("c.a", "x;y=z,w:v"), ("m.b", "1")]

    def test_escapes_decoded(self) -> None:
        value, end = scan_quoted(r'"a\"b\\c\nd\te\rf"', 0)
        assert value == 'a"b\\c\nd\te\rf'
        assert end == 18

    def test_escapes_raw(self) -> None:
        value, _ = scan_quoted(r'"Line 1\nLine 2"', 0, decode=False)
        assert value == r"Line 1\nLine 2"

    def test_escaped_quote_does_not_end_value(self) -> None:
        units = split_units(r'c.a="say \"hi\"; bye";m.b=1')
        assert units[0].value == 'say "hi"; bye'

    @pytest.mark.parametrize("text", [
        "no separator here",
        "=value",
        "t=x;;=y",
        'c.a="unterminated',
        'c.a="closed"trailing',
        r'c.a="bad \q escape"',
        'c.a="ends with backslash\\',
    ])
    def test_invalid_format(self, text: str) -> None:
        with pytest.raises(InvalidFormatError):
            split_units(text)

    def test_error_carries_position(self) -> None:
        with pytest.raises(InvalidFormatError) as exc_info:
            split_units('t=x;c.a="open')
        assert exc_info.value.position == 8
        assert str(exc_info.value).endswith("(at offset 8)")


# ===========================================================================
# Section Parser Tests
# ===========================================================================


class TestSections:

    def test_type(self) -> None:
        s = parse_section("t", "db.mysql")
        assert isinstance(s, TypeSection)
        assert s.source_type == SourceType(category="db", subtype="mysql")

    def test_connection(self) -> None:
        s = parse_section("c.auth.token", "xyz")
        assert s == ConnectionSection(key="auth.token", value="xyz")

    def test_structure_fields(self) -> None:
        s = parse_section("s.fields", "id:int,name:str")
        assert isinstance(s, StructureSection)
        assert s.key == "fields"
        assert s.entry == FieldList(fields=[Field(name="id", dtype="int"), Field(name="name", dtype="str")])

    def test_structure_endpoints(self) -> None:
        s = parse_section("s.endpoints", "/users:GET,/users:POST")
        assert s.entry == EndpointList(endpoints=[
            Endpoint(path="/users", method="GET"),
            Endpoint(path="/users", method="POST"),
        ])

    def test_structure_format(self) -> None:
        assert parse_section("s.format", "json").entry == FormatEntry(format="json")

    def test_structure_custom(self) -> None:
        s = parse_section("s.schema", "v2:strict")
        assert s.key == "schema"
        assert s.entry == CustomEntry(key="schema", value="v2:strict")

    def test_empty_field_list(self) -> None:
        assert parse_section("s.fields", "").entry == FieldList(fields=[])

    def test_malformed_field_item(self) -> None:
        with pytest.raises(InvalidFieldFormatError):
            parse_section("s.fields", "id:int,name")

    def test_malformed_endpoint_item(self) -> None:
        with pytest.raises(InvalidEndpointFormatError):
            parse_section("s.endpoints", "/users:GET,/users")

    def test_access(self) -> None:
        assert parse_section("a", "wr") == AccessSection(mode=AccessMode.READ_WRITE)

    def test_meta(self) -> None:
        assert parse_section("m.owner", "team-data") == MetaSection(key="owner", value="team-data")

    @pytest.mark.parametrize("key", ["z.foo", "type", "c", "s", "m", "A", "T", "x"])
    def test_unknown_prefix(self, key: str) -> None:
        with pytest.raises(UnknownSectionPrefixError):
            parse_section(key, "bar")


# ===========================================================================
# Parser Tests
# ===========================================================================


class TestParse:

    def test_csv_file(self, csv_text: str) -> None:
        doc = parse(csv_text)
        assert doc.source_type.category == "file"
        assert doc.source_type.subtype == "csv"
        assert doc.connection == {"path": "/data/users.csv"}
        assert doc.access_mode == AccessMode.READ
        assert doc.metadata == {"desc": "User data"}
        assert [(f.name, f.dtype) for f in doc.field_list()] == [
            ("id", "int"), ("name", "str"), ("email", "str"),
        ]

    def test_postgresql(self) -> None:
        doc = parse(
            "t=db.postgresql;c.host=db.prod;c.user=readonly;c.db=sales;"
            "s.fields=id:int,amount:float,date:date;a=r"
        )
        assert doc.source_type == SourceType(category="db", subtype="postgresql")
        assert doc.connection == {"host": "db.prod", "user": "readonly", "db": "sales"}
        assert doc.field_list()[1] == Field(name="amount", dtype="float")

    def test_quoted_values(self) -> None:
        doc = parse(
            't=file.csv;c.path="/data/My Documents/file.csv";'
            'm.desc="User, data; with special=chars"'
        )
        assert doc.connection["path"] == "/data/My Documents/file.csv"
        assert doc.metadata["desc"] == "User, data; with special=chars"

    def test_escapes_decoded_by_default(self) -> None:
        doc = parse(r't=file.csv;m.desc="Line 1\nLine 2"')
        assert doc.metadata["desc"] == "Line 1\nLine 2"

    def test_raw_escapes(self) -> None:
        doc = parse(r't=file.csv;m.desc="Line 1\nLine 2"', raw_escapes=True)
        assert doc.metadata["desc"] == "Line 1\\nLine 2"

    def test_unquoted_delimiters_in_value(self) -> None:
        doc = parse("t=stream.kafka;c.brokers=server1:9092,server2:9092;s.format=json")
        assert doc.connection["brokers"] == "server1:9092,server2:9092"
        assert doc.data_format() == "json"

    def test_complex_structure(self) -> None:
        doc = parse(
            "t=stream.kafka;c.brokers=a:1;s.format=json;"
            "s.fields=id:str,timestamp:datetime,data:json;a=r"
        )
        assert isinstance(doc.structure["format"], FormatEntry)
        assert isinstance(doc.structure["fields"], FieldList)
        assert [f.dtype for f in doc.field_list()] == ["str", "datetime", "json"]

    def test_endpoints(self) -> None:
        doc = parse("t=api.rest;s.endpoints=/users:GET,/users/{id}:PUT")
        assert doc.endpoint_list() == [
            Endpoint(path="/users", method="GET"),
            Endpoint(path="/users/{id}", method="PUT"),
        ]

    def test_custom_structure(self) -> None:
        doc = parse("t=file.parquet;s.partition=year,month")
        assert doc.structure["partition"] == CustomEntry(key="partition", value="year,month")

    def test_type_only(self) -> None:
        doc = parse("t=iot")
        assert doc == Document(source_type=SourceType(category="iot"))
        assert doc.access_mode is None

    def test_missing_type(self) -> None:
        with pytest.raises(MissingTypeSectionError):
            parse("c.path=/x")

    def test_empty_input_missing_type(self) -> None:
        with pytest.raises(MissingTypeSectionError):
            parse("")

    def test_last_write_wins_connection(self) -> None:
        doc = parse("t=file.csv;c.path=/a;c.path=/b")
        assert doc.connection == {"path": "/b"}

    def test_last_write_wins_metadata_and_access(self) -> None:
        doc = parse("t=x;m.k=1;a=r;m.k=2;a=w")
        assert doc.metadata == {"k": "2"}
        assert doc.access_mode == AccessMode.WRITE

    def test_repeated_structure_replaced(self) -> None:
        doc = parse("t=x;s.fields=a:int,b:int;s.fields=c:str")
        assert doc.field_list() == [Field(name="c", dtype="str")]

    def test_first_type_wins(self) -> None:
        doc = parse("t=file.csv;c.a=1;t=db.mysql")
        assert str(doc.source_type) == "file.csv"
        assert doc.connection == {"a": "1"}

    def test_empty_unit_tolerance(self) -> None:
        assert parse("t=file.csv;;") == parse("t=file.csv")
        assert parse(";t=file.csv") == parse("t=file.csv")

    def test_access_mode_normalization(self) -> None:
        assert parse("t=x;a=wr").access_mode == AccessMode.READ_WRITE
        assert parse("t=x;a=rw").access_mode == AccessMode.READ_WRITE
        assert "a=rw" in _parts(serialize(parse("t=x;a=wr")))

    def test_unknown_prefix(self) -> None:
        with pytest.raises(UnknownSectionPrefixError):
            parse("t=x;z.foo=bar")

    def test_invalid_access_mode(self) -> None:
        with pytest.raises(InvalidAccessModeError) as exc_info:
            parse("t=file.csv;a=invalid")
        assert exc_info.value.position == 11
        assert exc_info.value.kind == "invalid_access_mode"

    def test_late_position_in_message(self) -> None:
        with pytest.raises(UnknownSectionPrefixError) as exc_info:
            parse("t=x;z.foo=bar")
        assert exc_info.value.position == 4
        assert str(exc_info.value) == "Unknown section prefix: 'z.foo' (at offset 4)"
        assert exc_info.value.message == "Unknown section prefix: 'z.foo'"

    def test_debug_log_omits_values(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="ucdf")
        parse("t=db.postgresql;c.user=admin;c.password=hunter2")
        assert "c.password" in caplog.text
        assert "hunter2" not in caplog.text

    def test_invalid_source_type_aborts(self) -> None:
        with pytest.raises(InvalidSourceTypeError):
            parse("t=a.b.c;c.x=1")

    def test_malformed_field_aborts(self) -> None:
        with pytest.raises(InvalidFieldFormatError):
            parse("t=file.csv;s.fields=id:int,name")

    def test_malformed_input(self) -> None:
        with pytest.raises(InvalidFormatError):
            parse("not a valid ucdf string")

    def test_errors_are_value_errors(self) -> None:
        with pytest.raises(ValueError):
            parse("c.path=/x")

    def test_whitespace_is_significant(self) -> None:
        with pytest.raises(UnknownSectionPrefixError):
            parse("t=x; c.a=1")

    def test_parser_object(self) -> None:
        p = Parser(raw_escapes=True)
        assert p.parse(r't=x;c.a="\t"').connection["a"] == "\\t"
        assert Parser().parse(r't=x;c.a="\t"').connection["a"] == "\t"

    def test_document_parse(self, csv_text: str) -> None:
        assert Document.parse(csv_text) == parse(csv_text)


# ===========================================================================
# Serializer Tests
# ===========================================================================


class TestSerialize:

    def test_type_only(self) -> None:
        assert serialize(Document.create("file.csv")) == "t=file.csv"

    def test_section_order(self, postgres_doc: Document) -> None:
        out = serialize(postgres_doc)
        parts = out.split(";")
        assert parts[0] == "t=db.postgresql"
        kinds = [p.split("=", 1)[0].split(".")[0] for p in parts]
        assert kinds == ["t", "c", "c", "c", "s", "a", "m"]

    def test_emitted_pairs(self, postgres_doc: Document) -> None:
        assert _parts(serialize(postgres_doc)) == {
            "t=db.postgresql",
            "c.host=localhost",
            "c.port=5432",
            "c.user=postgres",
            "s.fields=id:int,name:str",
            "a=rw",
            "m.desc=Test database",
        }

    def test_access_omitted_when_unset(self) -> None:
        assert "a=" not in serialize(Document.create("x").with_metadata("k", "v"))

    @pytest.mark.parametrize("value", ["a;b", "a=b", "a,b", "a:b"])
    def test_special_characters_quoted(self, value: str) -> None:
        doc = Document.create("x").with_connection("k", value).with_metadata("k", value)
        out = serialize(doc)
        assert f'c.k="{value}"' in out
        assert f'm.k="{value}"' in out

    def test_quote_round_trip(self) -> None:
        doc = Document.create("x").with_connection("x", "a,b;c=d")
        out = serialize(doc)
        assert out == 't=x;c.x="a,b;c=d"'
        assert parse(out).connection["x"] == "a,b;c=d"

    def test_plain_value_bare(self) -> None:
        out = serialize(Document.create("x").with_connection("path", "/data/My Documents"))
        assert out == "t=x;c.path=/data/My Documents"

    def test_embedded_quote_escaped(self) -> None:
        doc = Document.create("x").with_metadata("q", 'say "hi"')
        out = serialize(doc)
        assert out == r't=x;m.q="say \"hi\""'
        assert parse(out).metadata["q"] == 'say "hi"'

    def test_backslash_and_control_characters_escaped(self) -> None:
        doc = Document.create("x").with_metadata("v", "a\\b:c\nd\te")
        out = serialize(doc)
        assert out == r't=x;m.v="a\\b:c\nd\te"'
        assert parse(out).metadata["v"] == "a\\b:c\nd\te"

    def test_structure_rendering(self) -> None:
        doc = (
            Document.create("api.rest")
            .with_endpoints(["/users:GET", "/users:POST"])
            .with_format("json")
            .with_custom_structure("version", "v2")
        )
        assert _parts(serialize(doc)) == {
            "t=api.rest",
            "s.endpoints=/users:GET,/users:POST",
            "s.format=json",
            "s.version=v2",
        }

    def test_custom_structure_verbatim(self) -> None:
        doc = Document.create("x").with_custom_structure("partition", "year:int,month:int")
        assert serialize(doc) == "t=x;s.partition=year:int,month:int"

    def test_custom_structure_with_separator_still_parses(self) -> None:
        doc = Document.create("x").with_custom_structure("sql", "select 1; select 2")
        out = serialize(doc)
        assert parse(out).structure["sql"] == CustomEntry(key="sql", value="select 1; select 2")

    def test_field_values_not_rendered(self) -> None:
        doc = Document.create("x").with_fields([Field(name="n", dtype="int").with_value("5")])
        assert serialize(doc) == "t=x;s.fields=n:int"

    def test_str_and_to_string(self, postgres_doc: Document) -> None:
        assert str(postgres_doc) == serialize(postgres_doc)
        assert postgres_doc.to_string() == serialize(postgres_doc)


class TestRoundTrip:

    def test_plain_document(self, postgres_doc: Document) -> None:
        assert parse(serialize(postgres_doc)) == postgres_doc

    def test_parsed_text(self, csv_text: str) -> None:
        doc = parse(csv_text)
        assert parse(serialize(doc)) == doc

    def test_special_characters(self) -> None:
        doc = (
            Document.create("stream.kafka")
            .with_connection("brokers", "h1:9092,h2:9092")
            .with_connection("path", "/a b")
            .with_connection("q", 'say "hi"')
            .with_connection("dir", "C:\\tmp\\x")
            .with_connection("multi", "a;b\nc\td")
            .with_connection("empty", "")
            .with_metadata("desc", "x=y")
            .with_access_mode(AccessMode.READ)
        )
        assert parse(serialize(doc)) == doc

    def test_map_order_is_irrelevant(self) -> None:
        a = Document.create("x").with_connection("a", "1").with_connection("b", "2")
        b = Document.create("x").with_connection("b", "2").with_connection("a", "1")
        assert a == b
        assert parse(serialize(a)) == parse(serialize(b))


# ===========================================================================
# Fluent API Tests
# ===========================================================================


class TestDocumentMutators:

    def test_add_returns_self(self) -> None:
        doc = Document.create("file.csv")
        assert doc.add_connection("path", "/x") is doc
        assert doc.add_fields(["id:int"]) is doc
        assert doc.add_endpoints([]) is doc
        assert doc.add_format("csv") is doc
        assert doc.add_custom_structure("k", "v") is doc
        assert doc.set_access_mode(AccessMode.READ) is doc
        assert doc.add_metadata("k", "v") is doc
        assert doc.connection == {"path": "/x"}
        assert set(doc.structure) == {"fields", "endpoints", "format", "k"}

    def test_with_returns_copy(self) -> None:
        base = Document.create("file.csv")
        derived = (
            base.with_connection("path", "/x")
            .with_fields([Field(name="id", dtype="int")])
            .with_access_mode("r")
            .with_metadata("k", "v")
        )
        assert base.connection == {}
        assert base.structure == {}
        assert base.access_mode is None
        assert derived.connection == {"path": "/x"}
        assert derived.access_mode == AccessMode.READ

    def test_with_does_not_share_collections(self) -> None:
        base = Document.create("x").with_connection("a", "1")
        derived = base.with_connection("b", "2")
        derived.add_connection("c", "3")
        assert base.connection == {"a": "1"}

    def test_add_fields_replaces(self) -> None:
        doc = Document.create("x").add_fields(["a:int"]).add_fields(["b:str"])
        assert doc.field_list() == [Field(name="b", dtype="str")]

    def test_add_fields_rejects_bad_text(self) -> None:
        with pytest.raises(InvalidFieldFormatError):
            Document.create("x").add_fields(["broken"])

    def test_set_access_mode_from_text(self) -> None:
        assert Document.create("x").set_access_mode("wr").access_mode == AccessMode.READ_WRITE
        with pytest.raises(InvalidAccessModeError):
            Document.create("x").set_access_mode("q")

    def test_create_requires_valid_type(self) -> None:
        with pytest.raises(InvalidSourceTypeError):
            Document.create("a.b.c")

    @pytest.mark.parametrize("key,value", [
        ("fields", "id:int,name:str"),
        ("endpoints", "/users:GET"),
        ("format", "json"),
        ("fields", ""),
    ])
    def test_custom_structure_reserved_keys(self, key: str, value: str) -> None:
        doc = Document.create("x").add_custom_structure(key, value)
        assert doc.structure[key].kind == key
        assert parse(serialize(doc)) == doc

    def test_custom_structure_reserved_key_validated(self) -> None:
        with pytest.raises(InvalidFieldFormatError):
            Document.create("x").add_custom_structure("fields", "anything")
        with pytest.raises(InvalidEndpointFormatError):
            Document.create("x").with_custom_structure("endpoints", "/users")

    @pytest.mark.parametrize("category,subtype", [
        ("file", ""),
        ("", None),
        ("file.csv", None),
        ("file", "a.b"),
        ("a;b", None),
        ("file", '"csv'),
    ])
    def test_source_type_tokens_validated(self, category: str, subtype: str | None) -> None:
        with pytest.raises(ValidationError):
            SourceType(category=category, subtype=subtype)

    @pytest.mark.parametrize("text", ["a;b", '"quoted"', "file.c;sv"])
    def test_source_type_parse_rejects_unwritable(self, text: str) -> None:
        with pytest.raises(InvalidSourceTypeError):
            SourceType.parse(text)

    def test_accessors_when_empty(self) -> None:
        doc = Document.create("x")
        assert doc.field_list() == []
        assert doc.endpoint_list() == []
        assert doc.data_format() is None

    def test_repr(self, postgres_doc: Document) -> None:
        r = repr(postgres_doc)
        assert "Document(" in r
        assert "db.postgresql" in r


class TestDocumentBuilder:

    def test_chain_all_options(self) -> None:
        doc = (
            DocumentBuilder.api()
            .with_connection("url", "https://api.example.com")
            .with_connections(**{"auth.type": "bearer", "auth.token": "xyz"})
            .with_endpoints("/users:GET", Endpoint(path="/users", method="POST"))
            .with_format("json")
            .with_structure("version", "2")
            .read_write()
            .describe("User API")
            .build()
        )
        assert str(doc.source_type) == "api.rest"
        assert doc.connection["auth.token"] == "xyz"
        assert len(doc.endpoint_list()) == 2
        assert doc.data_format() == "json"
        assert doc.structure["version"] == CustomEntry(key="version", value="2")
        assert doc.access_mode == AccessMode.READ_WRITE
        assert doc.metadata == {"desc": "User API"}

    @pytest.mark.parametrize("factory,expected", [
        (DocumentBuilder.file, "file"),
        (DocumentBuilder.db, "db"),
        (DocumentBuilder.stream, "stream"),
        (DocumentBuilder.iot, "iot"),
    ])
    def test_factories(self, factory, expected: str) -> None:
        assert serialize(factory().build()) == f"t={expected}"
        assert serialize(factory("x").build()) == f"t={expected}.x"

    def test_incremental_fields_and_endpoints(self) -> None:
        doc = (
            DocumentBuilder.api()
            .with_field("id", "int")
            .with_field("name", "str")
            .with_endpoint("/users")
            .with_endpoint("/users", "POST")
            .build()
        )
        assert [str(f) for f in doc.field_list()] == ["id:int", "name:str"]
        assert [str(e) for e in doc.endpoint_list()] == ["/users:GET", "/users:POST"]

    def test_access_shortcuts(self) -> None:
        assert DocumentBuilder.file().read_only().build().access_mode == AccessMode.READ
        assert DocumentBuilder.file().write_only().build().access_mode == AccessMode.WRITE
        assert DocumentBuilder.file().with_access("wr").build().access_mode == AccessMode.READ_WRITE

    def test_builds_are_independent(self) -> None:
        builder = DocumentBuilder.file("csv").with_connection("path", "/a")
        first = builder.build()
        first.add_connection("path", "/changed")
        second = builder.build()
        assert second.connection == {"path": "/a"}

    def test_seeded_from_text(self) -> None:
        assert DocumentBuilder("db.mysql").build().source_type.subtype == "mysql"
        with pytest.raises(InvalidSourceTypeError):
            DocumentBuilder("bad.type.here")

    def test_empty_subtype_rejected(self) -> None:
        with pytest.raises(ValueError):
            DocumentBuilder.file("")
        assert serialize(DocumentBuilder.file("csv").build()) == "t=file.csv"

    def test_with_structure_reserved_key_round_trips(self) -> None:
        doc = DocumentBuilder.api().with_structure("format", "json").build()
        assert doc.data_format() == "json"
        assert parse(serialize(doc)) == doc
