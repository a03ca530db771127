"""Tests for the recursive-descent element parser."""

import logging

import pytest

from xmlflat.shared import (
    InvalidLeadingCharacterError,
    InvalidTagNameError,
    MaxDepthExceededError,
    MismatchedClosingTagError,
    ParseError,
    ParserConfig,
    TrailingContentError,
    UnexpectedEofError,
    UnterminatedAttributeError,
    UnterminatedSpecialConstructError,
    UnterminatedTagError,
)
from xmlflat.tree import Element, ElementParser, parse


class TestElementStructure:
    """Test the shape of parsed trees."""

    def test_simple_document(self):
        """Test a root with attributes, text and children."""
        root = parse('<order id="7"><item sku="a">Pen</item><item sku="b">Ink</item></order>')

        assert root.name == "order"
        assert root.attributes == {"id": "7"}
        assert [child.attributes["sku"] for child in root.children] == ["a", "b"]
        assert [child.text for child in root.children] == ["Pen", "Ink"]

    def test_nested_same_named_elements(self):
        """Test that a closing tag closes the innermost open element."""
        root = parse("<a><a>x</a></a>")

        assert root.name == "a"
        assert root.text == ""
        assert len(root.children) == 1
        assert root.children[0].name == "a"
        assert root.children[0].text == "x"

    def test_deeply_nested_same_names(self):
        """Test depth discipline with siblings after a nested same-named element."""
        root = parse("<a><a><a>1</a></a><b>2</b></a>")

        assert [child.name for child in root.children] == ["a", "b"]
        assert root.children[0].children[0].text == "1"
        assert root.children[1].text == "2"

    def test_empty_and_self_closing_are_equal(self):
        """Test that <a></a> and <a/> build equal elements."""
        assert parse("<a></a>") == parse("<a/>")
        assert parse("<a/>").self_closing is True
        assert parse("<a></a>").self_closing is False

    def test_comment_skipped_among_content(self):
        """Test that comments neither add children nor text."""
        root = parse("<a><!--c--><b/>t</a>")

        assert [child.name for child in root.children] == ["b"]
        assert root.text == "t"

    def test_text_runs_trimmed_and_joined(self):
        """Test that each text run is trimmed before concatenation."""
        root = parse("<a>\n  x  <b/>  y\n</a>")
        assert root.text == "xy"

    def test_inner_whitespace_preserved(self):
        """Test that whitespace inside a run is kept."""
        assert parse("<a>hello   world</a>").text == "hello   world"

    def test_whitespace_only_text_is_empty(self):
        """Test that formatting whitespace does not become text."""
        root = parse("<a>\n  <b> </b>\n</a>")
        assert root.text == ""
        assert root.children[0].text == ""

    def test_self_closing_with_attributes(self):
        """Test attribute parsing on self-closing tags."""
        assert parse('<a x="1"/>').attributes == {"x": "1"}
        assert parse('<a x="1" />').attributes == {"x": "1"}
        assert parse('<a x="/"/>').attributes == {"x": "/"}

    def test_slash_inside_value_is_not_self_closing(self):
        """Test that a '/' inside quotes does not close the tag."""
        root = parse('<a x="1/"><b/></a>')
        assert root.attributes == {"x": "1/"}
        assert len(root.children) == 1

    def test_gt_inside_attribute_value(self):
        """Test that '>' inside an attribute value does not end the tag."""
        root = parse('<a cond="x > 1">ok</a>')
        assert root.attributes == {"cond": "x > 1"}
        assert root.text == "ok"

    def test_closing_tag_with_whitespace(self):
        """Test that whitespace before '>' in a closing tag is allowed."""
        assert parse("<a>x</a  >").text == "x"

    def test_unicode_names_and_text(self):
        """Test non-ASCII tag names and text."""
        root = parse("<données><é>café ☕</é></données>")
        assert root.name == "données"
        assert root.children[0].text == "café ☕"

    def test_namespaced_names_kept_verbatim(self):
        """Test that prefixes are part of the name."""
        root = parse('<x:root xmlns:x="urn:x"><x:item/></x:root>')
        assert root.name == "x:root"
        assert root.children[0].name == "x:item"


class TestTextDecoding:
    """Test entity and CDATA handling in text."""

    def test_entities_decoded(self):
        """Test predefined entities in text."""
        assert parse("<a>&lt;b&gt; &amp; c</a>").text == "<b> & c"

    def test_entity_decoding_disabled(self):
        """Test that decoding can be turned off."""
        root = parse("<a>&lt;b&gt;</a>", ParserConfig(decode_entities=False))
        assert root.text == "&lt;b&gt;"

    def test_cdata_is_literal_text(self):
        """Test that CDATA content is added without decoding."""
        root = parse("<a>x<![CDATA[ <raw>&amp; ]]>y</a>")
        assert root.text == "x<raw>&amp;y"
        assert root.children == ()

    def test_processing_instruction_in_content(self):
        """Test that PIs inside elements are skipped."""
        root = parse("<a>1<?pi data?>2</a>")
        assert root.text == "12"


class TestProlog:
    """Test content allowed before the root element."""

    def test_full_prolog(self):
        """Test BOM, declaration, comment and DOCTYPE before the root."""
        text = (
            '\ufeff<?xml version="1.0" encoding="UTF-8"?>\n'
            "<!-- header -->\n"
            '<!DOCTYPE note [<!ELEMENT note (#PCDATA)>]>\n'
            "<note>hi</note>\n"
        )
        root = parse(text)
        assert root.name == "note"
        assert root.text == "hi"

    def test_leading_text_rejected(self):
        """Test that text before the root is rejected."""
        with pytest.raises(InvalidLeadingCharacterError, match="must start with '<'"):
            parse("hello<a/>")

    def test_cdata_in_prolog_rejected(self):
        """Test that CDATA cannot precede the root."""
        with pytest.raises(InvalidLeadingCharacterError, match="CDATA"):
            parse("<![CDATA[x]]><a/>")

    @pytest.mark.parametrize("text", ["", "   \n", "<!-- only a comment -->", "<?xml version='1.0'?>"])
    def test_no_root(self, text):
        """Test documents without a root element."""
        with pytest.raises(UnexpectedEofError, match="no root element"):
            parse(text)


class TestTrailingContent:
    """Test content after the root element."""

    def test_trailing_misc_allowed(self):
        """Test that comments, PIs and whitespace may follow the root."""
        assert parse("<a/>\n<!-- end -->\n<?pi?>\n").name == "a"

    @pytest.mark.parametrize("text", ["<a/><b/>", "<a/>text", "<a></a></a>"])
    def test_trailing_content_rejected(self, text):
        """Test that a second root or stray text is rejected."""
        with pytest.raises(TrailingContentError, match="after the root element"):
            parse(text)

    def test_strict_trailing_rejects_comments(self):
        """Test that allow_trailing_misc=False rejects trailing comments."""
        with pytest.raises(TrailingContentError):
            parse("<a/><!-- c -->", ParserConfig(allow_trailing_misc=False))
        assert parse("<a/>\n  ", ParserConfig(allow_trailing_misc=False)).name == "a"


class TestMalformedDocuments:
    """Test error reporting for malformed input."""

    def test_mismatched_closing_tag(self):
        """Test that a wrong closing name raises."""
        with pytest.raises((MismatchedClosingTagError, UnexpectedEofError)):
            parse("<a><b></a>")

    def test_mismatch_reports_position(self):
        """Test that the error points at the offending closing tag."""
        with pytest.raises(MismatchedClosingTagError) as exc_info:
            parse("<a>\n  <b></c>\n</a>")

        error = exc_info.value
        assert error.tag == "c"
        assert (error.line, error.column) == (2, 6)
        assert "expected </b> but found </c>" in str(error)

    def test_missing_closing_tag(self):
        """Test input that ends inside an element."""
        with pytest.raises(UnexpectedEofError, match="before </a>") as exc_info:
            parse("<a>text")
        assert exc_info.value.tag == "a"

    @pytest.mark.parametrize("text", ["<", "<a", '<a b="1', "<a></a"])
    def test_unterminated_tags(self, text):
        """Test tags cut off by the end of input."""
        with pytest.raises(UnterminatedTagError):
            parse(text)

    @pytest.mark.parametrize("text", ["<1a/>", "< a/>", "<a!b/>", "<-a/>", "<></>"])
    def test_invalid_tag_names(self, text):
        """Test illegal tag names."""
        with pytest.raises(InvalidTagNameError):
            parse(text)

    def test_unterminated_comment(self):
        """Test a comment without its terminator."""
        with pytest.raises(UnterminatedSpecialConstructError):
            parse("<a><!-- oops</a>")

    def test_dangling_attribute_strict(self):
        """Test that strict mode rejects attributes without values."""
        with pytest.raises(UnterminatedAttributeError):
            parse("<input checked></input>")

    def test_dangling_attribute_lenient(self):
        """Test that lenient mode drops attributes without values."""
        root = parse('<input checked type="box"/>', ParserConfig(strict_attributes=False))
        assert root.attributes == {"type": "box"}

    def test_all_errors_are_parse_errors(self):
        """Test that callers can catch the whole family."""
        for text in ["", "x", "<a>", "<a></b>", "<a/><b/>"]:
            with pytest.raises(ParseError):
                parse(text)


class TestDepthLimit:
    """Test the nesting depth guard."""

    def test_depth_within_limit(self):
        """Test a document exactly at the limit."""
        root = parse("<a><b><c/></b></a>", ParserConfig(max_depth=3))
        assert root.depth() == 3

    def test_depth_beyond_limit(self):
        """Test that nesting beyond the limit raises."""
        with pytest.raises(MaxDepthExceededError, match="deeper than 2"):
            parse("<a><b><c/></b></a>", ParserConfig(max_depth=2))

    def test_deep_document_with_default_limit(self):
        """Test that the default limit allows a few hundred levels."""
        depth = 400
        root = parse("<d>" * depth + "x" + "</d>" * depth)
        assert root.depth() == depth
        assert root.find_all("d")[-1].text == "x"

    def test_default_limit_stops_runaway_nesting(self):
        """Test that very deep input fails cleanly instead of overflowing."""
        with pytest.raises(MaxDepthExceededError):
            parse("<d>" * 2000)


class TestElementParser:
    """Test the parser object and logging."""

    def test_elements_built_counter(self):
        """Test that the parser counts the elements it builds."""
        parser = ElementParser("<a><b/><c><d/></c></a>")
        root = parser.parse_document()

        assert isinstance(root, Element)
        assert parser.elements_built == 4

    def test_parse_logs_completion(self, caplog):
        """Test that parse() logs at DEBUG with the correlation id."""
        with caplog.at_level(logging.DEBUG, logger="xmlflat.tree.builder"):
            parse("<a><b/></a>", correlation_id="req-1")

        built = [r for r in caplog.records if r.getMessage() == "Element tree built"]
        assert built
        assert built[0].correlation_id == "req-1"
        assert built[0].elements == 2
