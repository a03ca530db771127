"""Tests for entity decoding."""

import pytest

from xmlflat.character import PREDEFINED_ENTITIES, decode_entities


class TestDecodeEntities:
    """Test predefined entity and character reference decoding."""

    def test_predefined_entities(self):
        """Test the five predefined XML entities."""
        assert decode_entities("&lt;a&gt; &amp; &quot;b&quot; &apos;c&apos;") == "<a> & \"b\" 'c'"
        assert set(PREDEFINED_ENTITIES) == {"lt", "gt", "amp", "quot", "apos"}

    @pytest.mark.parametrize("reference, expected", [
        ("&#65;", "A"),
        ("&#x41;", "A"),
        ("&#X263A;", "☺"),
        ("&#128512;", "\U0001f600"),
    ])
    def test_numeric_references(self, reference, expected):
        """Test decimal and hexadecimal character references."""
        assert decode_entities(reference) == expected

    def test_unknown_entity_left_literal(self):
        """Test that undeclared entities are not expanded."""
        assert decode_entities("&nbsp;&copy;") == "&nbsp;&copy;"

    @pytest.mark.parametrize("reference", ["&#0;", "&#xD800;", "&#x110000;"])
    def test_invalid_code_points_left_literal(self, reference):
        """Test that references to invalid code points are kept as written."""
        assert decode_entities(reference) == reference

    def test_no_double_decoding(self):
        """Test that an escaped ampersand is decoded only once."""
        assert decode_entities("&amp;lt;") == "&lt;"

    def test_bare_ampersand(self):
        """Test that an ampersand outside a reference is kept."""
        assert decode_entities("a & b") == "a & b"
