"""Tests for special construct detection and skipping."""

import pytest

from xmlflat.character import Scanner
from xmlflat.shared import UnterminatedSpecialConstructError
from xmlflat.tokenization import ConstructKind, detect_construct, skip_construct


class TestDetectConstruct:
    """Test recognition by prefix."""

    @pytest.mark.parametrize("text, kind", [
        ("<!-- c -->", ConstructKind.COMMENT),
        ("<![CDATA[x]]>", ConstructKind.CDATA),
        ("<?xml version='1.0'?>", ConstructKind.PROCESSING_INSTRUCTION),
    ])
    def test_detects_kinds(self, text, kind):
        """Test each delimited construct."""
        assert detect_construct(Scanner(text)) is kind

    def test_element_is_not_a_construct(self):
        """Test that ordinary tags are not detected."""
        assert detect_construct(Scanner("<a>")) is None
        assert detect_construct(Scanner("text")) is None

    def test_doctype_only_when_allowed(self):
        """Test that DOCTYPE is recognized only in the prolog."""
        assert detect_construct(Scanner("<!DOCTYPE a>")) is None
        assert detect_construct(Scanner("<!DOCTYPE a>"), allow_doctype=True) is ConstructKind.DOCTYPE


class TestSkipConstruct:
    """Test consuming constructs."""

    def test_comment_content_and_position(self):
        """Test that a comment is consumed through its terminator."""
        scanner = Scanner("<!-- a > b -->rest")

        construct = skip_construct(scanner)

        assert construct.kind is ConstructKind.COMMENT
        assert construct.content == " a > b "
        assert construct.offset == 0
        assert scanner.peek() == "r"

    def test_cdata_content_is_literal(self):
        """Test that CDATA content is returned without interpretation."""
        scanner = Scanner("<![CDATA[<b>&amp;</b>]]>")
        assert skip_construct(scanner).content == "<b>&amp;</b>"
        assert scanner.at_end

    def test_processing_instruction(self):
        """Test that a PI is consumed."""
        scanner = Scanner('<?xml-stylesheet href="a.xsl"?><r/>')
        construct = skip_construct(scanner)
        assert construct.kind is ConstructKind.PROCESSING_INSTRUCTION
        assert scanner.startswith("<r/>")

    def test_doctype_with_internal_subset(self):
        """Test that '>' inside the internal subset does not end the DOCTYPE."""
        text = '<!DOCTYPE note [<!ELEMENT note (#PCDATA)> <!ENTITY w "a>b">]><note/>'
        scanner = Scanner(text)

        construct = skip_construct(scanner, allow_doctype=True)

        assert construct.kind is ConstructKind.DOCTYPE
        assert construct.content.strip().startswith("note")
        assert scanner.startswith("<note/>")

    def test_not_a_construct_leaves_position(self):
        """Test that nothing is consumed when no construct starts here."""
        scanner = Scanner("<a/>")
        assert skip_construct(scanner) is None
        assert scanner.pos == 0

    @pytest.mark.parametrize("text", [
        "<!-- never closed",
        "<![CDATA[ never closed",
        "<?pi never closed",
    ])
    def test_unterminated_constructs(self, text):
        """Test that a missing terminator raises."""
        with pytest.raises(UnterminatedSpecialConstructError, match="terminator"):
            skip_construct(Scanner(text))

    def test_unterminated_doctype(self):
        """Test that an unclosed DOCTYPE raises."""
        with pytest.raises(UnterminatedSpecialConstructError, match="DOCTYPE"):
            skip_construct(Scanner("<!DOCTYPE a [ <!ELEMENT a ANY>"), allow_doctype=True)
