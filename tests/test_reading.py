from .base import Base, minor_items
from faithini import (
    Ini,
    Parameters,
    BlankLine,
    Comment,
    Property,
    Section,
    classify_line,
)
from faithini.exceptions_warnings import (
    DuplicateEntityError,
    IniStructureError,
    IniStructureWarning,
    MalformedLineError,
)
import pytest

round_trip_contents = [
    "",
    "\n",
    "[a]\nx=1\n",
    "  ; leading comment\n\n[ spaced ]  \n  key   =   value with trailing   \n",
    "# hash comment\n[a] ; inline\nx =\ny= \n\n\n;tail\n   \n",
    "[a]\nurl = http://example.com/?a=b\n",
    "[a]\n;\n#   \n\t\n[b]\n\tindented\t=\tvalue\n",
]


class TestClassification:

    @pytest.mark.parametrize(
        "line,expected_type",
        [
            ("", BlankLine),
            (" \t ", BlankLine),
            ("; comment", Comment),
            ("   # comment = with delimiter", Comment),
            ("[section]", Section),
            ("  [ section ] trailing", Section),
            ("key=value", Property),
            ("  key = [not a section]", Property),
            ("[a=b", Property),
        ],
    )
    def test_type(self, line, expected_type):
        assert isinstance(classify_line(line, Parameters()), expected_type)

    def test_comment_parts(self):
        comment = classify_line("  ;   some text  ", Parameters())
        assert isinstance(comment, Comment)
        assert comment.prefix == ";"
        assert comment.text == "some text"
        assert (comment.padding.left, comment.padding.inside, comment.padding.right) == (
            "  ",
            "   ",
            "  ",
        )

    def test_section_parts(self):
        section = classify_line(" [  name ]\t", Parameters())
        assert isinstance(section, Section)
        assert section.name == "name"
        assert section.padding.left == " "
        assert section.padding.inside_left == "  "
        assert section.padding.inside_right == " "
        assert section.padding.right == "\t"
        assert section.trailer == ""

    def test_property_parts(self):
        prop = classify_line("\tkey  =  value with spaces  ", Parameters())
        assert isinstance(prop, Property)
        assert prop.name == "key"
        assert prop.value == "value with spaces  "
        assert prop.delimiter == "="
        assert prop.padding.left == "\t"
        assert prop.padding.inside_left == "  "
        assert prop.padding.inside_right == "  "

    def test_first_delimiter_wins(self):
        prop = classify_line(
            "key: a=b", Parameters(option_delimiters=("=", ":"))
        )
        assert isinstance(prop, Property)
        assert (prop.name, prop.delimiter, prop.value) == ("key", ":", "a=b")

    @pytest.mark.parametrize("line", ["junk", "[unterminated", "[]", "= no key"])
    def test_malformed_strict(self, line):
        with pytest.raises(MalformedLineError) as e:
            classify_line(line, Parameters(), 7)
        assert e.value.line_number == 7

    def test_malformed_as_comment(self):
        with pytest.warns(IniStructureWarning):
            item = classify_line("  junk ", Parameters(malformed_lines="comment"))
        assert isinstance(item, Comment)
        assert item.prefix == ""
        assert item.to_string() == "  junk "


class TestReading:

    @pytest.mark.parametrize("content", round_trip_contents)
    def test_round_trip(self, content):
        assert str(Ini.from_string(content)) == content

    def test_generated_round_trip(self):
        base = Base()
        base.add_comment(left="  ", inside="\t")
        base.add_blank_line()
        base.add_section(left=" ", inside=("  ", " "), right="\t")
        base.add_property(around=(" ", "   "))
        base.add_blank_line(padding="   ")
        base.add_property(value="", left="\t")
        base.add_section()
        base.add_comment()
        base.add_property(value="with trailing whitespace  ")
        base.add_blank_line()
        base.verify(Ini.from_string(base.content))

    def test_single_section(self):
        content = "[a]\nx=1\n"
        ini = Ini.from_string(content)
        assert ini.keys() == ["a"]
        assert ini["a"].keys() == ["x"]
        assert ini["a"]["x"].value == "1"
        assert str(ini) == content

    def test_property_outside_section(self):
        with pytest.raises(IniStructureError, match="'x'") as e:
            Ini.from_string("x=1\n")
        assert e.value.line_number == 1

    def test_property_after_comments_outside_section(self):
        with pytest.raises(IniStructureError) as e:
            Ini.from_string("; comment\n\nx=1\n[a]\n")
        assert e.value.line_number == 3

    def test_malformed_line_number(self):
        with pytest.raises(MalformedLineError) as e:
            Ini.from_string("[a]\nx=1\njunk\n")
        assert e.value.line_number == 3

    def test_malformed_lines_kept(self):
        content = "[a]\njunk\nx=1\n"
        with pytest.warns(IniStructureWarning):
            ini = Ini.from_string(content, malformed_lines="comment")
        assert ini["a"]["x"].decoration[0].text == "junk"
        assert str(ini) == content

    def test_decoration_attachment(self):
        ini = Ini.from_string("; c1\n[a]\n; c2\n\nx=1\n; tail\n")
        section = ini["a"]
        assert [c.text for c in section.decoration] == ["c1"]
        assert [type(i) for i in section["x"].decoration] == [Comment, BlankLine]
        assert [c.text for c in ini.trailing] == ["tail"]

    def test_decoration_owned_once(self):
        base = Base()
        base.add_blank_line()
        base.add_comment()
        base.add_section()
        base.add_comment()
        base.add_property()
        base.add_blank_line()
        base.add_section()
        base.add_property()
        base.add_comment()
        base.add_blank_line()
        ini = Ini.from_string(base.content)
        items = minor_items(ini)
        assert len(items) == base.minor_lines
        assert len({id(item) for item in items}) == len(items)
        for section in ini:
            assert section.ini is ini
            for prop in section:
                assert prop.section is section

    def test_duplicate_section(self):
        with pytest.raises(DuplicateEntityError, match="Line 3") as e:
            Ini.from_string("[a]\nx=1\n[A]\n")
        assert e.value.key == "A"

    def test_duplicate_property(self):
        with pytest.raises(DuplicateEntityError, match="Line 3"):
            Ini.from_string("[a]\nx=1\nX=2\n")

    def test_case_insensitive(self):
        ini = Ini.from_string("[Foo]\nBar=1\n")
        assert "foo" in ini
        assert ini["FOO"]["bar"].value == "1"
        assert ini["foo"].name == "Foo"

    def test_case_sensitive(self):
        ini = Ini.from_string("[Foo]\nx=1\nX=2\n[foo]\n", case_sensitive=True)
        assert ini.keys() == ["Foo", "foo"]
        assert ini["Foo"].keys() == ["x", "X"]
        assert "FOO" not in ini

    def test_line_endings(self):
        ini = Ini.from_string("[a]\r\nx=1\r\n\r\n; c\r")
        assert ini["a"]["x"].value == "1"
        assert str(ini) == "[a]\nx=1\n\n; c\n"
        assert ini.to_string("\r\n") == "[a]\r\nx=1\r\n\r\n; c\r\n"

    def test_missing_final_line_terminator(self):
        assert str(Ini.from_string("[a]\nx=1")) == "[a]\nx=1\n"

    def test_from_lines(self):
        ini = Ini.from_lines(["[a]", "  x = 1", ""])
        assert list(ini.iter_lines()) == ["[a]", "  x = 1", ""]

    def test_parameters_not_modified(self):
        parameters = Parameters()
        ini = Ini.from_string("[a]\n", parameters, case_sensitive=True)
        assert ini.parameters.case_sensitive
        assert not parameters.case_sensitive


class TestReadFile:

    def test_read(self, tmp_path):
        base = Base()
        base.add_section()
        base.add_comment()
        base.add_property(around=(" ", " "))
        base.verify(Ini.read(base.export(tmp_path)))

    def test_read_encoding(self, tmp_path):
        path = tmp_path / "umlaut.ini"
        path.write_bytes("[straße]\nkey = wert ä\n".encode("latin-1"))
        ini = Ini.read(path, encoding="latin-1")
        assert ini["straße"]["key"].value == "wert ä"

    def test_read_empty(self, tmp_path):
        path = tmp_path / "empty.ini"
        path.write_bytes(b"")
        ini = Ini.read(path)
        assert len(ini) == 0
        assert str(ini) == ""

    def test_read_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Ini.read(tmp_path / "missing.ini")
