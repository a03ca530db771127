"""Positional cursor over XML source text.

The scanner works on Python string indices, so every step moves over one
Unicode code point and a multi-byte character is never split. A scanner can be
bounded to a window of the source (``start``/``end``) while keeping absolute
offsets, which lets nested parsers such as the attribute parser report errors
at their real position in the document.
"""

from typing import Callable, Optional, Tuple, Type, TypeVar

from xmlflat.shared.errors import UnterminatedTagError, XMLFlatError

XML_WHITESPACE = frozenset(" \t\r\n")
QUOTE_CHARS = frozenset("\"'")

ErrorT = TypeVar("ErrorT", bound=XMLFlatError)


def is_xml_whitespace(char: str) -> bool:
    """Check whether a character is XML whitespace (space, tab, CR, LF)."""
    return char in XML_WHITESPACE


class Scanner:
    """Cursor over ``text[start:end]`` with absolute offsets."""

    def __init__(self, text: str, start: int = 0, end: Optional[int] = None) -> None:
        if end is None:
            end = len(text)
        if not (0 <= start <= end <= len(text)):
            raise ValueError("Scanner window out of range")
        self.text = text
        self.pos = start
        self.start = start
        self.end = end

    @property
    def at_end(self) -> bool:
        return self.pos >= self.end

    @property
    def remaining(self) -> int:
        return self.end - self.pos

    def peek(self, ahead: int = 0) -> str:
        """Return the character ``ahead`` positions away, or '' past the end."""
        index = self.pos + ahead
        if index >= self.end:
            return ""
        return self.text[index]

    def advance(self, count: int = 1) -> str:
        """Consume up to ``count`` characters and return them."""
        stop = min(self.pos + count, self.end)
        consumed = self.text[self.pos:stop]
        self.pos = stop
        return consumed

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pos, self.end)

    def read_until(self, predicate: Callable[[str], bool]) -> str:
        """Consume characters until ``predicate`` matches one.

        The matching character is not consumed. When no character matches the
        rest of the window is returned and the scanner ends up at_end.
        """
        begin = self.pos
        text = self.text
        while self.pos < self.end and not predicate(text[self.pos]):
            self.pos += 1
        return text[begin:self.pos]

    def read_through(self, terminator: str) -> Optional[str]:
        """Consume through ``terminator`` and return the text before it.

        Returns None and leaves the position unchanged if the terminator does
        not occur before the end of the window.
        """
        index = self.text.find(terminator, self.pos, self.end)
        if index == -1:
            return None
        content = self.text[self.pos:index]
        self.pos = index + len(terminator)
        return content

    def skip_whitespace(self) -> int:
        """Skip XML whitespace and return how many characters were skipped."""
        begin = self.pos
        self.read_until(lambda c: c not in XML_WHITESPACE)
        return self.pos - begin

    def read_tag_body(self, tag: Optional[str] = None) -> Tuple[int, int]:
        """Consume the rest of a tag through its closing ``>``.

        Quote characters toggle an inside-quotes state so that ``>``, ``/`` or
        ``=`` inside attribute values do not end the tag.

        Returns:
            ``(body_start, body_end)`` offsets of the text before ``>``

        Raises:
            UnterminatedTagError: input ends inside quotes or before ``>``
        """
        body_start = self.pos
        quote: Optional[str] = None
        text = self.text
        while self.pos < self.end:
            char = text[self.pos]
            if quote is not None:
                if char == quote:
                    quote = None
            elif char in QUOTE_CHARS:
                quote = char
            elif char == ">":
                body_end = self.pos
                self.pos += 1
                return body_start, body_end
            self.pos += 1

        if quote is not None:
            message = f"input ended inside a {quote} quoted attribute value"
        else:
            message = "input ended before '>'"
        raise self.error(UnterminatedTagError, message, tag=tag, offset=body_start)

    def location(self, offset: Optional[int] = None) -> Tuple[int, int]:
        """Return 1-based ``(line, column)`` for an absolute offset."""
        if offset is None:
            offset = self.pos
        offset = max(0, min(offset, len(self.text)))
        line = self.text.count("\n", 0, offset) + 1
        line_start = self.text.rfind("\n", 0, offset) + 1
        return line, offset - line_start + 1

    def error(
        self,
        error_class: Type[ErrorT],
        message: str,
        tag: Optional[str] = None,
        offset: Optional[int] = None,
    ) -> ErrorT:
        """Build an error of ``error_class`` positioned in the source text."""
        if offset is None:
            offset = self.pos
        line, column = self.location(offset)
        return error_class(message, tag=tag, offset=offset, line=line, column=column)
