"""Attribute parsing for opening tags.

The parser consumes the raw text between a tag name and the tag's closing
``>`` (a trailing ``/`` of a self-closing tag already excluded) and builds a
name to value mapping. A repeated attribute name keeps its last value.
"""

from typing import Dict, Optional

from xmlflat.character.entities import decode_entities
from xmlflat.character.scanner import QUOTE_CHARS, XML_WHITESPACE, Scanner
from xmlflat.shared.errors import UnterminatedAttributeError


def _is_name_end(char: str) -> bool:
    return char == "=" or char in XML_WHITESPACE


class AttributeParser:
    """Parses attribute lists from a bounded scanner window."""

    def __init__(
        self,
        strict: bool = True,
        decode: bool = True,
        tag: Optional[str] = None
    ) -> None:
        """Initialize the attribute parser.

        Args:
            strict: Raise UnterminatedAttributeError on a dangling attribute
                instead of dropping it
            decode: Expand predefined entities in values
            tag: Name of the tag being parsed, used in error messages
        """
        self.strict = strict
        self.decode = decode
        self.tag = tag

    def parse(self, scanner: Scanner) -> Dict[str, str]:
        """Parse every attribute in the scanner window."""
        attributes: Dict[str, str] = {}

        while True:
            scanner.skip_whitespace()
            if scanner.at_end:
                break

            name_offset = scanner.pos
            name = scanner.read_until(_is_name_end)
            scanner.skip_whitespace()

            if not name:
                self._dangling(scanner, "attribute value without a name", name_offset)
                scanner.advance()
                continue
            if scanner.peek() != "=":
                self._dangling(scanner, f"attribute '{name}' has no value", name_offset)
                # Lenient mode drops the bare name and carries on with the next one.
                continue
            scanner.advance()
            scanner.skip_whitespace()

            quote = scanner.peek()
            if quote not in QUOTE_CHARS:
                if scanner.at_end:
                    self._dangling(scanner, f"attribute '{name}' has no value", name_offset)
                    break
                self._dangling(scanner, f"value of attribute '{name}' is not quoted", name_offset)
                scanner.read_until(lambda c: c in XML_WHITESPACE)
                continue

            scanner.advance()
            value = scanner.read_until(lambda c, q=quote: c == q)
            if scanner.at_end:
                self._dangling(
                    scanner, f"value of attribute '{name}' is missing its closing quote", name_offset
                )
                break
            scanner.advance()

            attributes[name] = decode_entities(value) if self.decode else value

        return attributes

    def _dangling(self, scanner: Scanner, message: str, offset: int) -> None:
        if self.strict:
            raise scanner.error(UnterminatedAttributeError, message, tag=self.tag, offset=offset)


def parse_attributes(
    raw: str,
    strict: bool = True,
    decode: bool = True,
    tag: Optional[str] = None,
) -> Dict[str, str]:
    """Parse a standalone attribute string such as ``'id="1" lang="en"'``."""
    return AttributeParser(strict=strict, decode=decode, tag=tag).parse(Scanner(raw))
