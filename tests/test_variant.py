"""Tests for the literal writer and the tag/assignment reader."""

import math

import pytest

from pyvarcfg import VariantParseError
from pyvarcfg.variant import (
    Assignment,
    Color,
    EndOfStream,
    Rect2,
    SectionTag,
    VariantStream,
    Vector2,
    Vector3,
    parse_tag_assign_eof,
    str_to_var,
    write_to_string,
)


class TestWriter:
    @pytest.mark.parametrize("value,expected", [
        (None, "null"),
        (True, "true"),
        (False, "false"),
        (0, "0"),
        (-42, "-42"),
        (1.0, "1.0"),
        (0.8, "0.8"),
        (1e20, "1e+20"),
        (float("inf"), "inf"),
        (float("-inf"), "inf_neg"),
        (float("nan"), "nan"),
        ("plain", '"plain"'),
        ('say "hi" \\o/', '"say \\"hi\\" \\\\o/"'),
        ("two\nlines", '"two\nlines"'),
        (b"\x01\xff", "PoolByteArray( 1, 255 )"),
        (b"", "PoolByteArray( )"),
        ([], "[ ]"),
        ([1, "a", [True]], '[ 1, "a", [ true ] ]'),
        ({}, "{ }"),
        ({"a": 1, 2: [None]}, '{\n"a": 1,\n2: [ null ]\n}'),
        (Vector2(1, 2.5), "Vector2( 1.0, 2.5 )"),
        (Color(1, 0, 0), "Color( 1.0, 0.0, 0.0, 1.0 )"),
    ])
    def test_literals(self, value, expected):
        assert write_to_string(value) == expected

    def test_tuple_warns_and_writes_array(self):
        with pytest.warns(UserWarning, match="load back as lists"):
            assert write_to_string((1, 2)) == "[ 1, 2 ]"

    def test_unsupported_type(self):
        with pytest.raises(TypeError, match="set"):
            write_to_string({1, 2})

    def test_tuple_dictionary_key(self):
        with pytest.raises(TypeError, match="tuple key"):
            write_to_string({(1, 2): "x"})

    def test_struct_dictionary_key(self):
        text = write_to_string({Vector2(1, 2): "x"})
        assert text == '{\nVector2( 1.0, 2.0 ): "x"\n}'
        assert str_to_var(text) == {Vector2(1, 2): "x"}


class TestLiteralParser:
    @pytest.mark.parametrize("text,expected", [
        ("null", None),
        ("nil", None),
        ("true", True),
        ("-17", -17),
        ("3.25", 3.25),
        ("-.5", -0.5),
        ("2e3", 2000.0),
        ('"a\\tb\\u00e9"', "a\tb\u00e9"),
        ("[ 1, 2, ]", [1, 2]),
        ("[]", []),
        ('{ "k": [ 1 ], 3: "v" }', {"k": [1], 3: "v"}),
        ("PoolByteArray( 0, 128 )", b"\x00\x80"),
        ("Vector3( 1, 2, 3 )", Vector3(1.0, 2.0, 3.0)),
        ("Rect2( 0, 0, 4.5, 2 )", Rect2(0.0, 0.0, 4.5, 2.0)),
        ("{ Vector2( 1, 1 ): true }", {Vector2(1.0, 1.0): True}),
    ])
    def test_values(self, text, expected):
        assert str_to_var(text) == expected

    def test_ints_stay_ints(self):
        assert type(str_to_var("7")) is int
        assert type(str_to_var("7.0")) is float

    def test_special_floats(self):
        assert str_to_var("inf") == math.inf
        assert str_to_var("inf_neg") == -math.inf
        assert math.isnan(str_to_var("nan"))

    @pytest.mark.parametrize("value", [
        "multi\nline \"quoted\" \\ text",
        {"nested": {"deep": [1, 2.5, "x", b"\x00"]}},
        [Color(0.1, 0.2, 0.3, 0.4), Vector2(-1.5, 1e-7)],
        -(2 ** 70),
    ])
    def test_writer_output_reads_back(self, value):
        assert str_to_var(write_to_string(value)) == value

    @pytest.mark.parametrize("text,message", [
        ('"open', "Unterminated string"),
        ('"\\q"', "Invalid escape"),
        ('"\\u00e"', "Malformed unicode escape"),
        ('"\\u 12 "', "Malformed unicode escape"),
        ('"\\u+1a2"', "Malformed unicode escape"),
        ('"\\u1_23"', "Malformed unicode escape"),
        ("[ 1 2 ]", 'Expected ","'),
        ("[ 1, 2", "end of file while parsing array"),
        ("{ [ 1 ]: 2 }", "cannot be a dictionary key"),
        ('{ "a" 1 }', 'Expected ":"'),
        ("Vector2( 1 )", "takes 2 arguments"),
        ("Vector2 1, 2", 'Expected "\\("'),
        ('Color( 1, "a", 0, 0 )', "Expected a number"),
        ("PoolByteArray( 256 )", "0..255"),
        ("bogus", "Unknown identifier"),
        ("1 2", "after the literal"),
        ("@", "Unexpected character"),
    ])
    def test_errors(self, text, message):
        with pytest.raises(VariantParseError, match=message):
            str_to_var(text)


class TestTagAssign:
    def read_all(self, text):
        stream = VariantStream(text)
        ret = []
        while not isinstance(r := parse_tag_assign_eof(stream), EndOfStream):
            ret.append(r)
        return ret

    def test_sequence(self):
        assert self.read_all("[a]\n\nk=1\nname = \"x\"\n\n[ b c ]\nz=[ ]\n") == [
            SectionTag("a"),
            Assignment("k", 1),
            Assignment("name", "x"),
            SectionTag("b c"),
            Assignment("z", []),
        ]

    def test_empty_input_is_end_of_stream(self):
        assert parse_tag_assign_eof(VariantStream("")) == EndOfStream()
        assert parse_tag_assign_eof(VariantStream(" \n\n\t")) == EndOfStream()

    def test_empty_tag(self):
        assert self.read_all("[]\nk=1") == [
            SectionTag(""), Assignment("k", 1)]

    def test_value_may_span_lines(self):
        stream = VariantStream('d={\n"a": 1,\n"b": "x\ny"\n}\nnext=2\n')
        assert parse_tag_assign_eof(stream) == Assignment(
            "d", {"a": 1, "b": "x\ny"})
        assert stream.line == 5
        assert parse_tag_assign_eof(stream) == Assignment("next", 2)

    def test_key_without_equals(self):
        with pytest.raises(VariantParseError, match='after key "oops"') as e:
            self.read_all("a=1\noops\nb=2\n")
        assert e.value.line == 2

    def test_empty_key(self):
        with pytest.raises(VariantParseError, match="Expected a key"):
            self.read_all("=1")

    def test_unterminated_tag(self):
        with pytest.raises(VariantParseError, match="section tag") as e:
            self.read_all("\n\n[abc\nk=1")
        assert e.value.line == 3

    def test_missing_value(self):
        with pytest.raises(VariantParseError, match="end of file") as e:
            self.read_all("k=")
        assert e.value.line == 1
