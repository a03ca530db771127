"""Recursive-descent construction of the element tree.

This module turns XML source text into a single immutable Element tree. Each
opening tag is handled by one call of ElementParser._parse_element, which
returns only after the element's own closing tag has been consumed. A nested
element with the same name is handled by its own recursive call, so
``<a><a>x</a></a>`` closes the inner ``a`` first and the outer one second.
"""

from typing import List, Optional

from xmlflat.character.entities import decode_entities
from xmlflat.character.scanner import XML_WHITESPACE, Scanner
from xmlflat.shared import (
    ParserConfig,
    get_logger,
)
from xmlflat.shared.errors import (
    InvalidLeadingCharacterError,
    InvalidTagNameError,
    MaxDepthExceededError,
    MismatchedClosingTagError,
    TrailingContentError,
    UnexpectedEofError,
    UnterminatedTagError,
)
from xmlflat.tokenization import AttributeParser, ConstructKind, skip_construct
from xmlflat.tree.element import Element

BYTE_ORDER_MARK = "\ufeff"
NAME_EXTRA_START_CHARS = frozenset("_:")
NAME_EXTRA_CHARS = frozenset("_:-.")
FIRST_NON_ASCII = 0x80
PREVIEW_LENGTH = 40


def is_name_start_char(char: str) -> bool:
    """Check whether ``char`` may start a tag name."""
    return char.isalpha() or char in NAME_EXTRA_START_CHARS or ord(char) >= FIRST_NON_ASCII


def is_name_char(char: str) -> bool:
    """Check whether ``char`` may appear inside a tag name."""
    return char.isalnum() or char in NAME_EXTRA_CHARS or ord(char) >= FIRST_NON_ASCII


def _is_tag_name_end(char: str) -> bool:
    return char in XML_WHITESPACE or char == ">" or char == "/"


class ElementParser:
    """Builds an Element tree from XML text.

    One parser instance handles one document; ``elements_built`` is available
    after parse_document() for metrics.
    """

    def __init__(
        self,
        text: str,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.scanner = Scanner(text)
        self.correlation_id = correlation_id
        self.elements_built = 0
        self.logger = get_logger(__name__, correlation_id, "element_parser")

    def parse_document(self) -> Element:
        """Parse the whole document and return its root element.

        Raises:
            ParseError: any of its subclasses, describing the first problem
        """
        scanner = self.scanner
        if scanner.peek() == BYTE_ORDER_MARK:
            scanner.advance()

        self._skip_prolog()
        if scanner.at_end:
            raise scanner.error(UnexpectedEofError, "no root element found")
        if scanner.peek() != "<":
            raise scanner.error(
                InvalidLeadingCharacterError,
                f"document must start with '<', found {scanner.peek()!r}",
            )

        root = self._parse_element(depth=1)
        self._check_trailing_content(root)
        return root

    def _skip_prolog(self) -> None:
        scanner = self.scanner
        doctype_seen = False
        while True:
            scanner.skip_whitespace()
            offset = scanner.pos
            construct = skip_construct(scanner, allow_doctype=not doctype_seen)
            if construct is None:
                return
            if construct.kind is ConstructKind.CDATA:
                raise scanner.error(
                    InvalidLeadingCharacterError,
                    "CDATA section outside the root element",
                    offset=offset,
                )
            if construct.kind is ConstructKind.DOCTYPE:
                doctype_seen = True

    def _check_trailing_content(self, root: Element) -> None:
        scanner = self.scanner
        while True:
            scanner.skip_whitespace()
            if scanner.at_end:
                return
            offset = scanner.pos
            if self.config.allow_trailing_misc:
                construct = skip_construct(scanner)
                if construct is not None and construct.kind is not ConstructKind.CDATA:
                    continue
            preview = scanner.text[offset:offset + PREVIEW_LENGTH]
            raise scanner.error(
                TrailingContentError,
                f"content after the root element closed: {preview!r}",
                tag=root.name,
                offset=offset,
            )

    def _read_tag_name(self, tag_offset: int) -> str:
        scanner = self.scanner
        name = scanner.read_until(_is_tag_name_end)
        if not name:
            if scanner.at_end:
                raise scanner.error(
                    UnterminatedTagError, "input ended after '<'", offset=tag_offset
                )
            raise scanner.error(
                InvalidTagNameError, "tag name is missing", offset=tag_offset
            )
        if not is_name_start_char(name[0]) or not all(is_name_char(c) for c in name[1:]):
            raise scanner.error(
                InvalidTagNameError, f"invalid tag name {name!r}", tag=name, offset=tag_offset
            )
        return name

    def _parse_element(self, depth: int) -> Element:
        """Parse one element starting at its ``<``.

        Returns after the matching closing tag (or the ``/>`` of a
        self-closing tag) has been consumed.
        """
        scanner = self.scanner
        tag_offset = scanner.pos
        if depth > self.config.max_depth:
            raise scanner.error(
                MaxDepthExceededError,
                f"nesting deeper than {self.config.max_depth} levels",
                offset=tag_offset,
            )

        scanner.advance()
        name = self._read_tag_name(tag_offset)
        body_start, body_end = scanner.read_tag_body(tag=name)

        attr_end = body_end
        while attr_end > body_start and scanner.text[attr_end - 1] in XML_WHITESPACE:
            attr_end -= 1
        self_closing = attr_end > body_start and scanner.text[attr_end - 1] == "/"
        if self_closing:
            attr_end -= 1

        attributes = AttributeParser(
            strict=self.config.strict_attributes,
            decode=self.config.decode_entities,
            tag=name,
        ).parse(Scanner(scanner.text, body_start, attr_end))

        self.elements_built += 1
        if self_closing:
            return Element(name=name, attributes=attributes, self_closing=True)

        runs: List[str] = []
        children: List[Element] = []
        while True:
            if scanner.at_end:
                raise scanner.error(
                    UnexpectedEofError,
                    f"input ended before </{name}>",
                    tag=name,
                    offset=tag_offset,
                )

            if scanner.peek() != "<":
                run = scanner.read_until(lambda c: c == "<").strip()
                if run:
                    runs.append(decode_entities(run) if self.config.decode_entities else run)
                continue

            if scanner.peek(1) == "/":
                self._consume_closing_tag(name)
                break

            construct = skip_construct(scanner)
            if construct is not None:
                if construct.kind is ConstructKind.CDATA:
                    run = construct.content.strip()
                    if run:
                        runs.append(run)
                continue

            children.append(self._parse_element(depth + 1))

        return Element(
            name=name,
            attributes=attributes,
            text="".join(runs),
            children=tuple(children),
        )

    def _consume_closing_tag(self, expected: str) -> None:
        scanner = self.scanner
        offset = scanner.pos
        scanner.advance(2)
        found = scanner.read_until(lambda c: c in XML_WHITESPACE or c == ">")
        scanner.skip_whitespace()
        if scanner.at_end:
            raise scanner.error(
                UnterminatedTagError,
                f"closing tag </{found}> is missing '>'",
                tag=found or expected,
                offset=offset,
            )
        if scanner.peek() != ">":
            raise scanner.error(
                InvalidTagNameError,
                f"malformed closing tag for <{expected}>",
                tag=expected,
                offset=offset,
            )
        scanner.advance()
        if found != expected:
            raise scanner.error(
                MismatchedClosingTagError,
                f"expected </{expected}> but found </{found}>",
                tag=found,
                offset=offset,
            )


def parse(
    xml_text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Element:
    """Parse XML text into an Element tree.

    Args:
        xml_text: Complete XML document
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The root Element

    Raises:
        ParseError: the document is not well-formed enough to build a tree

    Examples:
        >>> root = parse('<a><a>x</a></a>')
        >>> root.children[0].text
        'x'
    """
    parser = ElementParser(xml_text, config, correlation_id)
    with parser.logger.timed("parse", {"content_length": len(xml_text)}):
        root = parser.parse_document()
    parser.logger.debug(
        "Element tree built",
        extra={"root": root.name, "elements": parser.elements_built}
    )
    return root
