"""Tests for the JSON projection."""

import json

from xmlflat.projection import to_json_dict, to_json_text
from xmlflat.shared import ProjectionConfig
from xmlflat.tree import parse


class TestJSONDict:
    """Test the nested dictionary structure."""

    def test_reserved_keys(self):
        """Test _name, _attributes and _text."""
        assert to_json_dict(parse('<a id="1">x</a>')) == {
            "_name": "a",
            "_attributes": {"id": "1"},
            "_text": "x",
        }

    def test_empty_parts_omitted(self):
        """Test that empty attributes and text are left out."""
        assert to_json_dict(parse("<a/>")) == {"_name": "a"}

    def test_single_and_repeated_children(self):
        """Test that one child maps to an object and repeats map to a list."""
        result = to_json_dict(parse("<r><i>1</i><j/><i>2</i></r>"))

        assert result == {
            "_name": "r",
            "i": [{"_name": "i", "_text": "1"}, {"_name": "i", "_text": "2"}],
            "j": {"_name": "j"},
        }
        assert list(result) == ["_name", "i", "j"]

    def test_nested_same_named_elements(self):
        """Test the projection of <a><a>x</a></a>."""
        assert to_json_dict(parse("<a><a>x</a></a>")) == {
            "_name": "a",
            "a": {"_name": "a", "_text": "x"},
        }

    def test_empty_and_self_closing_project_identically(self):
        """Test that <a></a> and <a/> give the same JSON."""
        assert to_json_text(parse("<a></a>")) == to_json_text(parse("<a/>"))


class TestJSONText:
    """Test rendered JSON text."""

    def test_round_trips_values(self):
        """Test that attribute values and leaf text survive exactly."""
        xml = '<root><item code="A&amp;B" note="x &gt; y">Tea &amp; cake</item></root>'
        data = json.loads(to_json_text(parse(xml)))

        assert data["item"]["_attributes"] == {"code": "A&B", "note": "x > y"}
        assert data["item"]["_text"] == "Tea & cake"

    def test_compact_output(self):
        """Test json_indent=None."""
        text = to_json_text(parse('<a id="1">x</a>'), ProjectionConfig(json_indent=None))
        assert text == '{"_name": "a", "_attributes": {"id": "1"}, "_text": "x"}'

    def test_default_indent(self):
        """Test the default two-space indentation."""
        assert to_json_text(parse("<a/>")) == '{\n  "_name": "a"\n}'

    def test_non_ascii_kept(self):
        """Test that non-ASCII text is written as-is by default."""
        assert "café" in to_json_text(parse("<a>café</a>"))

    def test_ensure_ascii(self):
        """Test escaped output when requested."""
        text = to_json_text(parse("<a>café</a>"), ProjectionConfig(json_ensure_ascii=True))
        assert "caf\\u00e9" in text
